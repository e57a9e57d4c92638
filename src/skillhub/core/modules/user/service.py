import asyncio
from functools import cache
from uuid import UUID

import bcrypt
import structlog

from skillhub.core.core import Service
from skillhub.core.modules.user.models import User
from skillhub.core.modules.user.validators import MAX_PASSWORD_BYTES, validate_email, validate_password
from skillhub.errors import DuplicateEmailError, InvalidCredentialsError, NotFoundError

logger = structlog.get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


@cache
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def _check_dummy_password(password: str) -> bool:
    return check_password(password, _dummy_hash())


class UserService(Service):
    """Registers users and checks their credentials."""

    async def get_user(self, user_id: UUID) -> User:
        user = await self.stores.users.get(user_id)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user

    async def find_user_by_email(self, email: str) -> User | None:
        return await self.stores.users.find_by_email(email)

    async def create_user(self, first_name: str, last_name: str, email: str, password: str) -> User:
        """Create user with hashed password."""
        validate_email(email)
        validate_password(password)
        if await self.find_user_by_email(email) is not None:
            raise DuplicateEmailError

        password_hash = await asyncio.to_thread(hash_password, password)
        user = User(email=email, first_name=first_name, last_name=last_name, password_hash=password_hash)
        await self.stores.users.insert(user)
        logger.info("user_created", user_id=str(user.id), provider="password")
        return user

    async def create_federated_user(self, email: str, name: str) -> User:
        """Create user without a credential, identified by a provider-verified email."""
        user = User(email=email, first_name=name)
        await self.stores.users.insert(user)
        logger.info("user_created", user_id=str(user.id), provider="federated")
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user owning email if password matches, else raise InvalidCredentialsError.

        Unknown emails and federated-only accounts still pay for one bcrypt
        check so response time does not reveal whether the email exists.
        bcrypt runs in a worker thread to keep the event loop free.
        """
        user = await self.find_user_by_email(email)
        if user is None or user.password_hash is None:
            await asyncio.to_thread(_check_dummy_password, password)
            raise InvalidCredentialsError
        if not await asyncio.to_thread(check_password, password, user.password_hash):
            raise InvalidCredentialsError
        return user
