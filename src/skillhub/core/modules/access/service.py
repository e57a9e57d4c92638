import structlog

from skillhub.core.core import Service
from skillhub.core.modules.token.models import TokenIdentity
from skillhub.errors import ForbiddenError, TokenError, UnauthorizedError
from skillhub.utils import is_blank

logger = structlog.get_logger(__name__)


class AccessService(Service):
    async def ensure_authenticated(self, token: str | None) -> TokenIdentity:
        """Resolve the identity behind a bearer token.

        No token is UnauthorizedError. A token that fails verification, or
        that is no longer the user's current session when revocation is
        enforced, is ForbiddenError.
        """
        if token is None or is_blank(token):
            raise UnauthorizedError

        try:
            identity = self.core.services.token.verify(token)
        except TokenError as e:
            logger.info("token_rejected", reason=type(e).__name__)
            raise ForbiddenError from e

        if self.core.config.enforce_session_revocation and not await self.core.services.session.is_current(
            identity.id, token
        ):
            logger.info("token_revoked", user_id=str(identity.id))
            raise ForbiddenError

        return identity
