"""Session management models."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from skillhub.core.db import MongoModel
from skillhub.utils import now


class Session(MongoModel):
    """Most recently issued bearer token for a user.

    One row per user (unique index on user_id); a new login overwrites it.
    """

    user_id: UUID
    token: str
    expires_at: datetime
    updated_at: datetime = Field(default_factory=now)
