from uuid import UUID

import structlog

from skillhub.core.core import Service
from skillhub.core.modules.session.models import Session
from skillhub.core.modules.token.models import IssuedToken
from skillhub.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Keeps one session row per user pointing at their latest token."""

    async def record_session(self, user_id: UUID, issued: IssuedToken) -> Session:
        """Upsert the user's session row; concurrent logins are last-writer-wins."""
        session = Session(user_id=user_id, token=issued.token, expires_at=issued.expires_at)
        await self.stores.sessions.upsert(session)
        logger.debug("session_recorded", user_id=str(user_id), expires_at=issued.expires_at.isoformat())
        return session

    async def get_session(self, user_id: UUID) -> Session | None:
        return await self.stores.sessions.get_by_user(user_id)

    async def is_current(self, user_id: UUID, token: str) -> bool:
        """Check that token is the one in the user's unexpired session row."""
        session = await self.get_session(user_id)
        return session is not None and session.token == token and session.expires_at > now()

    async def end_session(self, user_id: UUID, token: str) -> bool:
        """Remove the user's session row if it belongs to token.

        A token superseded by a newer login leaves the newer row untouched.
        """
        ended = await self.stores.sessions.delete(user_id, token)
        logger.info("session_ended" if ended else "session_not_current", user_id=str(user_id))
        return ended
