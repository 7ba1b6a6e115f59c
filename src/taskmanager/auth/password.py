"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks. The work
factor is configurable (TASKMANAGER_BCRYPT_ROUNDS, default 12 ≈ 250ms
per hash); every +1 doubles the cost.

Hashing is deliberately slow, so async callers go through hash_async /
verify_async, which run bcrypt on a worker thread instead of the event loop.
"""

import asyncio
from typing import Optional

import bcrypt

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


class HashingFailure(Exception):
    """Raised when a password hash cannot be produced (bad cost, no entropy)."""


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Hashes and verifies passwords with a fixed bcrypt work factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash: Optional[str] = None

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt.

        Learn: bcrypt includes a random salt automatically and produces
        60-character hashes starting with "$2b$". Hashing the same password
        twice gives two different strings, both of which verify.
        """
        if not password:
            raise ValueError("Password must not be empty")
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(_encode(password), salt).decode("utf-8")
        except (ValueError, OSError) as e:
            raise HashingFailure(f"bcrypt hashing failed: {e}") from e

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against its hash.

        Never raises: an empty password or a malformed stored hash is
        simply a mismatch. bcrypt.checkpw compares in constant time.
        """
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.verify, password, password_hash)

    async def dummy_hash_async(self) -> str:
        """A throwaway hash at this hasher's cost, computed once and reused.

        Login verifies against it when the username is unknown. create_app's
        lifespan warms it so no request pays the extra hash.
        """
        if self._dummy_hash is None:
            self._dummy_hash = await self.hash_async("dummy-password-for-timing")
        return self._dummy_hash
