"""Persistence for user records.

Two implementations share the UserStore contract: MongoUserStore for
deployments and MemoryUserStore for development and tests. Both reject a
second user with the same email by raising DuplicateEmailError.
"""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from skillhub.core.db import store_errors
from skillhub.core.modules.user.models import User
from skillhub.errors import DuplicateEmailError


class UserStore(ABC):
    async def on_start(self) -> None:
        """Prepare the store (indexes, connections)."""

    @abstractmethod
    async def find_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    async def get(self, user_id: UUID) -> User | None: ...

    @abstractmethod
    async def insert(self, user: User) -> User: ...


class MongoUserStore(UserStore):
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        with store_errors("create users indexes"):
            await self._collection.create_index([("email", 1)], unique=True)

    async def find_by_email(self, email: str) -> User | None:
        with store_errors("find user by email"):
            doc = await self._collection.find_one({"email": email})
        return User.model_validate(doc) if doc else None

    async def get(self, user_id: UUID) -> User | None:
        with store_errors("get user"):
            doc = await self._collection.find_one({"_id": user_id})
        return User.model_validate(doc) if doc else None

    async def insert(self, user: User) -> User:
        with store_errors("insert user"):
            try:
                await self._collection.insert_one(user.to_mongo())
            except DuplicateKeyError as e:
                # Lost a race against a concurrent signup for the same email
                raise DuplicateEmailError from e
        return user


class MemoryUserStore(UserStore):
    def __init__(self) -> None:
        self.users: dict[UUID, User] = {}

    async def find_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    async def get(self, user_id: UUID) -> User | None:
        return self.users.get(user_id)

    async def insert(self, user: User) -> User:
        if await self.find_by_email(user.email) is not None:
            raise DuplicateEmailError
        self.users[user.id] = user
        return user
