from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient

from skillhub.config import Config
from skillhub.core.modules.session.store import MemorySessionStore, MongoSessionStore, SessionStore
from skillhub.core.modules.user.store import MemoryUserStore, MongoUserStore, UserStore

if TYPE_CHECKING:
    from skillhub.core.modules.access.service import AccessService
    from skillhub.core.modules.identity.service import IdentityService
    from skillhub.core.modules.session.service import SessionService
    from skillhub.core.modules.token.service import TokenService
    from skillhub.core.modules.user.service import UserService

logger = structlog.get_logger(__name__)

DEFAULT_DATABASE_NAME = "skillhub"


@dataclass
class Stores:
    """Backing stores handed to every service."""

    users: UserStore
    sessions: SessionStore

    async def on_start(self) -> None:
        await self.users.on_start()
        await self.sessions.on_start()


class Service:
    """Base class for services with direct store access."""

    def __init__(self, stores: Stores) -> None:
        self.stores = stores
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    user: UserService
    session: SessionService
    token: TokenService
    identity: IdentityService
    access: AccessService

    def __init__(self, stores: Stores) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name)
        service_configs = [
            ("user", "skillhub.core.modules.user.service", "UserService"),
            ("session", "skillhub.core.modules.session.service", "SessionService"),
            ("token", "skillhub.core.modules.token.service", "TokenService"),
            ("identity", "skillhub.core.modules.identity.service", "IdentityService"),
            ("access", "skillhub.core.modules.access.service", "AccessService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(stores)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, the store handle, and all service instances.

    Stores can be injected; otherwise they are built from config. A MongoDB
    client created here is owned by Core and closed on shutdown.
    """

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]] | None
    stores: Stores
    services: Services

    def __init__(self, config: Config, stores: Stores | None = None) -> None:
        self.config = config
        self.mongo_client = None
        self.stores = stores if stores is not None else self._create_stores(config)
        self.services = Services(self.stores)
        self.services.set_core(self)

    def _create_stores(self, config: Config) -> Stores:
        if config.use_memory_store:
            logger.warning("memory_store_enabled")
            return Stores(users=MemoryUserStore(), sessions=MemorySessionStore())

        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
        database = self.mongo_client.get_database(urlparse(config.database_url).path[1:] or DEFAULT_DATABASE_NAME)
        return Stores(users=MongoUserStore(database), sessions=MongoSessionStore(database))

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.stores.on_start()
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the MongoDB connection on shutdown."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()
            self.mongo_client = None
