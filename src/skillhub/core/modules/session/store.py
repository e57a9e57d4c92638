from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from skillhub.core.db import store_errors
from skillhub.core.modules.session.models import Session


class SessionStore(ABC):
    async def on_start(self) -> None:
        """Prepare the store (indexes, connections)."""

    @abstractmethod
    async def upsert(self, session: Session) -> None:
        """Insert the session or overwrite the existing row for the same user."""

    @abstractmethod
    async def get_by_user(self, user_id: UUID) -> Session | None: ...

    @abstractmethod
    async def delete(self, user_id: UUID, token: str) -> bool:
        """Delete the user's row only if it still holds token. Returns whether a row was removed."""


class MongoSessionStore(SessionStore):
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        with store_errors("create sessions indexes"):
            await self._collection.create_index([("user_id", 1)], unique=True)
            # Rows past their token expiry are useless, let MongoDB drop them
            await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def upsert(self, session: Session) -> None:
        with store_errors("upsert session"):
            await self._collection.update_one(
                {"user_id": session.user_id},
                {
                    "$set": {"token": session.token, "expires_at": session.expires_at, "updated_at": session.updated_at},
                    "$setOnInsert": {"_id": session.id},
                },
                upsert=True,
            )

    async def get_by_user(self, user_id: UUID) -> Session | None:
        with store_errors("get session"):
            doc = await self._collection.find_one({"user_id": user_id})
        return Session.model_validate(doc) if doc else None

    async def delete(self, user_id: UUID, token: str) -> bool:
        with store_errors("delete session"):
            result = await self._collection.delete_one({"user_id": user_id, "token": token})
        return result.deleted_count > 0


class MemorySessionStore(SessionStore):
    def __init__(self) -> None:
        self.sessions: dict[UUID, Session] = {}

    async def upsert(self, session: Session) -> None:
        existing = self.sessions.get(session.user_id)
        if existing is not None:
            session = session.model_copy(update={"id": existing.id})
        self.sessions[session.user_id] = session

    async def get_by_user(self, user_id: UUID) -> Session | None:
        return self.sessions.get(user_id)

    async def delete(self, user_id: UUID, token: str) -> bool:
        session = self.sessions.get(user_id)
        if session is None or session.token != token:
            return False
        del self.sessions[user_id]
        return True
