from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt
import pydantic

from skillhub.core.core import Service
from skillhub.core.modules.token.models import AuthToken, IssuedToken, TokenIdentity
from skillhub.core.modules.user.models import User
from skillhub.errors import ExpiredTokenError, InvalidSignatureError, MalformedTokenError
from skillhub.utils import now

JWT_ALGORITHM = "HS256"
TOKEN_TTL = timedelta(hours=24)


class TokenService(Service):
    """Issues and verifies HS256 bearer tokens carrying {id, email}."""

    @property
    def _secret(self) -> str:
        return self.core.config.jwt_secret

    def issue(self, user: User, issued_at: datetime | None = None) -> IssuedToken:
        """Sign a token for user, valid for TOKEN_TTL from issued_at (default: now)."""
        iat = int((issued_at or now()).timestamp())
        exp = iat + int(TOKEN_TTL.total_seconds())
        payload = {
            "id": str(user.id),
            "email": user.email,
            "iat": iat,
            "exp": exp,
            "jti": uuid4().hex,  # keeps tokens issued within the same second distinct
        }
        token = jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        return IssuedToken(token=AuthToken(token), expires_at=datetime.fromtimestamp(exp, UTC))

    def verify(self, token: str) -> TokenIdentity:
        """Check signature and expiry, return the embedded identity.

        Raises:
            InvalidSignatureError: signed with a different key
            ExpiredTokenError: past its exp claim
            MalformedTokenError: anything else wrong with the token or its claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", "id", "email"]},
            )
        except jwt.InvalidSignatureError as e:
            raise InvalidSignatureError("Token signature mismatch") from e
        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError(str(e)) from e

        try:
            return TokenIdentity.model_validate({"id": payload["id"], "email": payload["email"]})
        except pydantic.ValidationError as e:
            raise MalformedTokenError("Token claims are invalid") from e
