"""Registration and login flows.

Learn: AuthService is the only place the three auth pieces meet:
- register: hash (off the event loop) → persist through the user store
- login: look up by username → verify → issue a token
- profile: resolve the user behind an already-verified token

Everything it needs comes in through the constructor, so tests can pass
a fake store and a low-cost hasher.
"""

from typing import Optional, Protocol

import structlog

from taskmanager.auth.jwt import TokenService
from taskmanager.auth.password import PasswordHasher
from taskmanager.db.models import User

logger = structlog.get_logger()


class InvalidCredentials(Exception):
    """Unknown username or wrong password. Deliberately doesn't say which."""


class UserNotFoundError(Exception):
    """A valid token names a user that no longer exists."""


class UserStore(Protocol):
    async def get(self, user_id: int) -> Optional[User]: ...
    async def get_by_username(self, username: str) -> Optional[User]: ...
    async def create(self, username: str, email: str, password_hash: str) -> User: ...


class AuthService:
    def __init__(self, users: UserStore, hasher: PasswordHasher, tokens: TokenService):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, username: str, email: str, password: str) -> User:
        """Create an account. Raises UserExistsError on a taken username/email."""
        password_hash = await self.hasher.hash_async(password)
        user = await self.users.create(
            username=username, email=email, password_hash=password_hash
        )
        logger.info("auth.registered", user_id=user.id, username=username)
        return user

    async def login(self, username: str, password: str) -> tuple[str, User]:
        """Check credentials and return (token, user).

        Learn: For an unknown username we still run one bcrypt verification
        against a throwaway hash, so both failure paths cost the same and
        response timing doesn't reveal which usernames exist. The throwaway
        hash lives on the app-wide PasswordHasher; a new AuthService is
        built per request and must not pay for it again.
        """
        user = await self.users.get_by_username(username)
        if user is None:
            await self.hasher.verify_async(password, await self.hasher.dummy_hash_async())
            logger.info("auth.login_failed", username=username, reason="unknown_user")
            raise InvalidCredentials("Invalid credentials")

        if not await self.hasher.verify_async(password, user.password_hash):
            logger.info("auth.login_failed", username=username, reason="bad_password")
            raise InvalidCredentials("Invalid credentials")

        token = self.tokens.issue(user.id)
        logger.info("auth.login", user_id=user.id)
        return token, user

    async def profile(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user
