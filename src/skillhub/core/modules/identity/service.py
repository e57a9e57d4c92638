import asyncio
from typing import Any

import structlog
from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from skillhub.core.core import Service, Stores
from skillhub.core.modules.identity.models import VerifiedIdentity
from skillhub.errors import InvalidAssertionError
from skillhub.utils import is_blank

logger = structlog.get_logger(__name__)


class IdentityService(Service):
    """Verifies Google ID tokens presented for federated login."""

    def __init__(self, stores: Stores) -> None:
        super().__init__(stores)
        # Reused transport, caches Google's signing certificates between calls
        self._request = google_requests.Request()

    async def verify_assertion(self, raw_assertion: str, expected_audience: str | None) -> VerifiedIdentity:
        """Verify signature, issuer, audience and expiry of raw_assertion.

        Any failure raises InvalidAssertionError; claims are never read from
        an assertion that did not verify.
        """
        if is_blank(raw_assertion):
            raise InvalidAssertionError
        if is_blank(expected_audience):
            logger.error("federated_login_not_configured")
            raise InvalidAssertionError

        try:
            claims: dict[str, Any] = await asyncio.to_thread(
                id_token.verify_oauth2_token, raw_assertion, self._request, expected_audience
            )
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            logger.warning("assertion_rejected", error=str(e))
            raise InvalidAssertionError from e

        email = claims.get("email")
        if not isinstance(email, str) or is_blank(email):
            logger.warning("assertion_without_email", subject=claims.get("sub"))
            raise InvalidAssertionError

        name = claims.get("name")
        return VerifiedIdentity(
            email=email,
            name=name if isinstance(name, str) and name.strip() else email,
            email_verified=claims.get("email_verified") in (True, "true"),
        )
