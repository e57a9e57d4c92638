"""HTTP-level tests for the auth routes and the authorization dependency."""

from datetime import timedelta

import pytest
from conftest import VALID_GOOGLE_TOKEN, make_config
from fastapi.testclient import TestClient

from skillhub.app import App
from skillhub.core.core import Stores
from skillhub.core.modules.session.store import MemorySessionStore
from skillhub.core.modules.user.store import MemoryUserStore
from skillhub.errors import StoreError
from skillhub.utils import now
from skillhub.web.deps import extract_token
from skillhub.web.server import create_fastapi_app

SIGNUP = {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "password": "correct-horse"}
LOGIN = {"email": "ada@example.com", "password": "correct-horse"}


@pytest.fixture
def client(app, config):
    with TestClient(create_fastapi_app(app, config)) as client:
        yield client


@pytest.fixture
def token(client):
    """Bearer token for a freshly registered ada@example.com."""
    assert client.post("/api/signup", json=SIGNUP).status_code == 201
    return client.post("/api/login", json=LOGIN).json()["token"]


class TestSignup:
    def test_created(self, client):
        response = client.post("/api/signup", json=SIGNUP)
        assert response.status_code == 201
        assert response.json() == {"message": "User created successfully"}

    def test_duplicate_email(self, client):
        client.post("/api/signup", json=SIGNUP)
        response = client.post("/api/signup", json=SIGNUP)
        assert response.status_code == 400
        assert response.json() == {"message": "Email already exists", "type": "duplicate_email"}

    def test_missing_fields(self, client):
        response = client.post("/api/signup", json={"email": "ada@example.com"})
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"


class TestLogin:
    def test_success(self, client, token, token_service):
        assert token_service.verify(token).email == "ada@example.com"

    def test_response_shape(self, client):
        client.post("/api/signup", json=SIGNUP)
        response = client.post("/api/login", json=LOGIN)
        assert response.status_code == 200
        assert response.json()["message"] == "Login successful"

    @pytest.mark.parametrize(
        "credentials",
        [
            {"email": "ada@example.com", "password": "battery-staple"},
            {"email": "nobody@example.com", "password": "correct-horse"},
        ],
    )
    def test_invalid_credentials(self, client, credentials):
        client.post("/api/signup", json=SIGNUP)
        response = client.post("/api/login", json=credentials)
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials", "type": "invalid_credentials"}

    def test_missing_fields(self, client):
        response = client.post("/api/login", json={"email": "ada@example.com"})
        assert response.status_code == 400


class TestFederatedLogin:
    def test_new_user_created(self, client, google_claims):
        response = client.post("/api/federated-login", json={"token": VALID_GOOGLE_TOKEN})
        assert response.status_code == 201
        assert response.json()["message"] == "User created successfully"

    def test_existing_user(self, client, google_claims):
        client.post("/api/federated-login", json={"token": VALID_GOOGLE_TOKEN})
        response = client.post("/api/federated-login", json={"token": VALID_GOOGLE_TOKEN})
        assert response.status_code == 200
        assert response.json()["message"] == "Login successful"
        me = client.get("/api/me", headers={"Authorization": response.json()["token"]})
        assert me.json()["email"] == "grace@example.com"

    def test_email_not_verified(self, client, google_claims):
        google_claims["email_verified"] = False
        response = client.post("/api/federated-login", json={"token": VALID_GOOGLE_TOKEN})
        assert response.status_code == 400
        assert response.json()["type"] == "email_not_verified"

    def test_invalid_assertion(self, client, google_claims):
        response = client.post("/api/federated-login", json={"token": "forged-token"})
        assert response.status_code == 500
        assert response.json() == {"message": "Authentication error", "type": "invalid_assertion"}


class TestProtectedRoute:
    def test_raw_token_header(self, client, token):
        response = client.get("/api/me", headers={"Authorization": token})
        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"id", "email", "first_name", "last_name"}
        assert body["email"] == "ada@example.com"
        assert body["first_name"] == "Ada"
        assert body["last_name"] == "Lovelace"

    def test_bearer_prefix_accepted(self, client, token):
        response = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    def test_no_token(self, client):
        response = client.get("/api/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized"

    def test_invalid_token(self, client):
        response = client.get("/api/me", headers={"Authorization": "not-a-token"})
        assert response.status_code == 403
        assert response.json() == {"message": "Forbidden", "type": "access_denied"}

    def test_expired_token(self, client, token, token_service, stores):
        user = next(iter(stores.users.users.values()))
        expired = token_service.issue(user, issued_at=now() - timedelta(hours=25)).token
        response = client.get("/api/me", headers={"Authorization": expired})
        assert response.status_code == 403


class TestLogout:
    def test_logout_with_token(self, client, token, stores):
        response = client.post("/api/logout", headers={"Authorization": token})
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}
        assert stores.sessions.sessions == {}

    def test_logout_without_token(self, client):
        response = client.post("/api/logout")
        assert response.status_code == 200


class FailingUserStore(MemoryUserStore):
    async def find_by_email(self, email):
        raise StoreError("find user by email failed: connection refused to 10.0.0.7:27017")


def test_store_failure_is_500_without_details():
    config = make_config()
    app = App(config, Stores(users=FailingUserStore(), sessions=MemorySessionStore()))
    with TestClient(create_fastapi_app(app, config)) as client:
        response = client.post("/api/login", json=LOGIN)
    assert response.status_code == 500
    assert response.json() == {"message": "Database error", "type": "store_error"}


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


@pytest.mark.parametrize(
    "header,expected",
    [
        (None, None),
        ("", None),
        ("abc.def.ghi", "abc.def.ghi"),
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer   abc.def.ghi ", "abc.def.ghi"),
        ("Bearer ", None),
    ],
)
def test_extract_token(header, expected):
    assert extract_token(header) == expected

