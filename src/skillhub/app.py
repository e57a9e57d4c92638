from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

import structlog
from pydantic import BaseModel

from skillhub.config import Config
from skillhub.core.core import Core, Stores
from skillhub.core.modules.token.models import AuthToken, TokenIdentity
from skillhub.core.modules.user.models import User, UserView
from skillhub.core.modules.user.validators import require_fields
from skillhub.errors import DuplicateEmailError, EmailNotVerifiedError, InvalidCredentialsError, TokenError
from skillhub.utils import is_blank

logger = structlog.get_logger(__name__)

LOGIN_SUCCESSFUL = "Login successful"
USER_CREATED = "User created successfully"


class LoginResult(BaseModel):
    """Outcome of a successful login; created is True when federated login registered a new user."""

    message: str
    token: AuthToken
    created: bool = False


class App:
    """Facade for authentication flows, the entry point for the web layer."""

    def __init__(self, config: Config, stores: Stores | None = None) -> None:
        self._core = Core(config, stores)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def signup(self, first_name: str | None, last_name: str | None, email: str | None, password: str | None) -> User:
        """Register a user with a password. Does not log the user in."""
        first_name, last_name, email, password = require_fields(
            "All fields are required", first_name, last_name, email, password
        )
        return await self._core.services.user.create_user(first_name, last_name, email, password)

    async def login(self, email: str | None, password: str | None) -> LoginResult:
        """Check email and password, issue a token and record the session."""
        email, password = require_fields("Email and password are required", email, password)
        try:
            user = await self._core.services.user.authenticate(email, password)
        except InvalidCredentialsError:
            logger.info("login_failed", provider="password")
            raise
        return await self._start_session(user, LOGIN_SUCCESSFUL, created=False)

    async def federated_login(self, assertion: str | None) -> LoginResult:
        """Log in with a Google ID token, creating the user on first sight of the email."""
        (assertion,) = require_fields("Token is required", assertion)
        identity = await self._core.services.identity.verify_assertion(assertion, self._core.config.google_client_id)
        if not identity.email_verified:
            logger.info("login_failed", provider="federated", reason="email_not_verified")
            raise EmailNotVerifiedError

        user = await self._core.services.user.find_user_by_email(identity.email)
        if user is not None:
            return await self._start_session(user, LOGIN_SUCCESSFUL, created=False)

        try:
            user = await self._core.services.user.create_federated_user(identity.email, identity.name)
        except DuplicateEmailError:
            # A concurrent first login for the same email created the user first
            user = await self._core.services.user.find_user_by_email(identity.email)
            if user is None:
                raise
            logger.info("federated_user_created_concurrently", user_id=str(user.id))
            return await self._start_session(user, LOGIN_SUCCESSFUL, created=False)
        return await self._start_session(user, USER_CREATED, created=True)

    async def logout(self, token: str | None) -> None:
        """Drop the session row of the token's user if the row still holds this token.

        Tokens are self-contained, so a missing or unverifiable token leaves
        nothing to tear down and logout still succeeds.
        """
        if token is None or is_blank(token):
            return
        try:
            identity = self._core.services.token.verify(token)
        except TokenError:
            return
        await self._core.services.session.end_session(identity.id, token)

    async def authenticate(self, token: str | None) -> TokenIdentity:
        """Resolve the identity behind a bearer token (authorization check)."""
        return await self._core.services.access.ensure_authenticated(token)

    async def get_user(self, user_id: UUID) -> UserView:
        user = await self._core.services.user.get_user(user_id)
        return UserView.from_domain(user)

    async def _start_session(self, user: User, message: str, *, created: bool) -> LoginResult:
        issued = self._core.services.token.issue(user)
        await self._core.services.session.record_session(user.id, issued)
        logger.info("login_succeeded", user_id=str(user.id), created=created)
        return LoginResult(message=message, token=issued.token, created=created)
