from pydantic import BaseModel


class VerifiedIdentity(BaseModel):
    """Claims taken from an identity provider assertion after verification."""

    email: str
    name: str
    email_verified: bool
