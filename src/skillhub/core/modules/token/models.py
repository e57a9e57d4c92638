from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import BaseModel

AuthToken = NewType("AuthToken", str)


class IssuedToken(BaseModel):
    """Signed bearer token together with its expiry."""

    token: AuthToken
    expires_at: datetime


class TokenIdentity(BaseModel):
    """Identity claims recovered from a verified token."""

    id: UUID
    email: str
