"""Shared pytest fixtures."""

from types import SimpleNamespace

import pytest
from google.oauth2 import id_token

from skillhub.app import App
from skillhub.config import Config
from skillhub.core.core import Core, Stores
from skillhub.core.modules.session.store import MemorySessionStore
from skillhub.core.modules.user.store import MemoryUserStore

JWT_SECRET = "test-jwt-secret-0123456789abcdef0123456789"
SESSION_SECRET = "test-session-secret-0123456789abcdef01234"
GOOGLE_CLIENT_ID = "1234-test.apps.googleusercontent.com"
VALID_GOOGLE_TOKEN = "valid-google-id-token"


def make_config(**overrides) -> Config:
    values = {
        "jwt_secret": JWT_SECRET,
        "session_secret_key": SESSION_SECRET,
        "google_client_id": GOOGLE_CLIENT_ID,
        "use_memory_store": True,
    }
    values.update(overrides)
    return Config(_env_file=None, **values)


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def stores():
    """Fresh in-memory user and session stores."""
    return Stores(users=MemoryUserStore(), sessions=MemorySessionStore())


@pytest.fixture
def core(config, stores):
    return Core(config, stores)


@pytest.fixture
def app(config, stores):
    """App sharing its stores with the core fixture."""
    return App(config, stores)


@pytest.fixture
def token_service(core):
    return core.services.token


@pytest.fixture
async def registered_user(app):
    """Password account ada@example.com / correct-horse."""
    return await app.signup("Ada", "Lovelace", "ada@example.com", "correct-horse")


@pytest.fixture
def google_claims(monkeypatch):
    """Stand in for Google's ID token verification.

    Only VALID_GOOGLE_TOKEN verifies, and only for GOOGLE_CLIENT_ID. Tests
    mutate the returned dict to change what the verified token claims.
    """
    claims = {
        "iss": "https://accounts.google.com",
        "aud": GOOGLE_CLIENT_ID,
        "sub": "110169484474386276334",
        "email": "grace@example.com",
        "email_verified": True,
        "name": "Grace Hopper",
    }

    def fake_verify_oauth2_token(token, request, audience=None, clock_skew_in_seconds=0):
        if token != VALID_GOOGLE_TOKEN:
            raise ValueError("Could not verify token signature.")
        if audience != claims["aud"]:
            raise ValueError(f"Token has wrong audience {claims['aud']}, expected one of {[audience]}")
        return dict(claims)

    monkeypatch.setattr(id_token, "verify_oauth2_token", fake_verify_oauth2_token)
    return claims


class FakeCollection:
    """Records driver calls; returns canned documents or raises a queued error."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple, dict]] = []
        self.document: dict | None = None
        self.deleted_count = 1
        self.error: Exception | None = None

    async def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.error is not None:
            raise self.error

    async def find_one(self, *args, **kwargs):
        await self._record("find_one", *args, **kwargs)
        return self.document

    async def insert_one(self, *args, **kwargs):
        await self._record("insert_one", *args, **kwargs)

    async def update_one(self, *args, **kwargs):
        await self._record("update_one", *args, **kwargs)

    async def delete_one(self, *args, **kwargs):
        await self._record("delete_one", *args, **kwargs)
        return SimpleNamespace(deleted_count=self.deleted_count)

    async def create_index(self, *args, **kwargs):
        await self._record("create_index", *args, **kwargs)


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


@pytest.fixture
def fake_database():
    """Stand-in for a pymongo AsyncDatabase, for testing store-to-driver translation."""
    return FakeDatabase()
