from pydantic import field_validator
from pydantic_settings import BaseSettings

MIN_SECRET_LENGTH = 32


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = "mongodb://localhost:27017/skillhub"
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False
    jwt_secret: str  # HS256 signing key for bearer tokens, no default on purpose
    session_secret_key: str  # Starlette SessionMiddleware cookie signing key
    google_client_id: str | None = None  # OAuth client id, expected audience of Google ID tokens
    cors_origins: list[str] = []
    enforce_session_revocation: bool = False  # Require bearer tokens to match the user's current session row
    use_memory_store: bool = False  # In-process stores instead of MongoDB (development and tests)

    model_config = {
        "env_file": [".env"],
        "env_prefix": "SKILLHUB_",
        "extra": "ignore",
    }

    @field_validator("jwt_secret", "session_secret_key")
    @classmethod
    def check_secret(cls, value: str) -> str:
        value = value.strip()
        if len(value) < MIN_SECRET_LENGTH:
            raise ValueError(f"must be at least {MIN_SECRET_LENGTH} characters")
        return value
