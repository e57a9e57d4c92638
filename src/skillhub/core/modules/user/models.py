from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from skillhub.core.db import MongoModel
from skillhub.utils import now


class User(MongoModel):
    """User domain model with credentials.

    password_hash is None for accounts created through federated login.
    """

    email: str
    first_name: str
    last_name: str | None = None
    password_hash: str | None = None  # bcrypt hash
    created_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    first_name: str = Field(..., description="First name or provider display name")
    last_name: str | None = Field(None, description="Last name")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, email=user.email, first_name=user.first_name, last_name=user.last_name)
