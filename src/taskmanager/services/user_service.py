"""User store — account lookup and creation.

Learn: The auth core never touches the database. AuthService talks to
this store through three calls (get_by_username, get, create), which is
also the seam tests replace with an in-memory fake.
"""

from typing import Optional

import structlog
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.db.models import User

logger = structlog.get_logger()


class UserExistsError(Exception):
    """Raised when a username or email is already registered."""


class UserService:
    """Persistence for User rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def create(self, username: str, email: str, password_hash: str) -> User:
        """Insert a new user.

        Learn: The pre-check gives a clean error in the common case; the
        unique constraints still catch two concurrent registrations racing
        for the same name.
        """
        if await self._is_taken(username, email):
            raise UserExistsError("User already exists")

        user = User(username=username, email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info("users.create_conflict", username=username)
            raise UserExistsError("User already exists") from e
        await self.db.refresh(user)
        return user

    async def _is_taken(self, username: str, email: str) -> bool:
        result = await self.db.execute(
            select(User.id).where(or_(User.username == username, User.email == email))
        )
        return result.first() is not None
