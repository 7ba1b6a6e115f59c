"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. A token
is three base64url segments (header.payload.signature); the payload
carries the user id ("sub") plus issued-at and expiry timestamps, and the
HMAC signature can only be produced by holders of the server secret.

Token lifecycle: Issued → Valid → Expired. There is no revocation list,
so keep TASKMANAGER_ACCESS_TOKEN_EXPIRE_MINUTES short enough that a
leaked token ages out quickly.

Verification failures are split into four TokenError subclasses so logs
and tests can tell them apart. The HTTP layer collapses all of them into
a single 401.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt


class TokenError(Exception):
    """Raised when token verification fails."""


class MalformedToken(TokenError):
    """The token cannot be parsed as a JWT with the expected claims."""


class InvalidSignature(TokenError):
    """The signature does not match (tampered payload or foreign secret)."""


class TokenExpired(TokenError):
    """The token was valid once but its expiry time has passed."""


class MissingIdentity(TokenError):
    """The payload has no usable subject (user id)."""


class SigningFailure(Exception):
    """Raised when a token cannot be signed. Internal, never the client's fault."""


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of an identity token."""

    user_id: int
    issued_at: datetime
    expires_at: datetime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_timestamp(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class TokenService:
    """Issues and verifies identity tokens with a single symmetric secret.

    Holds only read-only configuration, so one instance is shared by every
    request handler without locking.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: int = 24 * 60,
        leeway_seconds: int = 0,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(minutes=expires_minutes)
        self.leeway = leeway_seconds
        self._clock = clock or utcnow

    def issue(self, user_id: int) -> str:
        """Create a signed token for user_id, valid for the configured lifetime."""
        if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
            raise ValueError(f"user_id must be a positive integer, got {user_id!r}")
        if not self._secret:
            raise SigningFailure("Signing secret is not configured")

        issued_at = int(self._clock().timestamp())
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + int(self.lifetime.total_seconds()),
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
            raise SigningFailure(f"Could not sign token: {e}") from e

    def decode(self, token: str) -> TokenClaims:
        """Verify a token and return its claims.

        Checks run in a fixed order: structure, signature, expiry, subject.
        Expiry is checked here against the injected clock rather than by
        PyJWT, which always reads the system clock.
        """
        if not token or not isinstance(token, str):
            raise MalformedToken("Token is empty")
        if not self._secret:
            raise InvalidSignature("Signing secret is not configured")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "require": ["exp", "iat"],
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "verify_sub": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise InvalidSignature(str(e)) from e
        except jwt.InvalidTokenError as e:
            # DecodeError (bad segments/JSON) and missing exp/iat claims
            raise MalformedToken(str(e)) from e

        issued_at, expires_at = payload["iat"], payload["exp"]
        if not _is_timestamp(issued_at) or not _is_timestamp(expires_at):
            raise MalformedToken("iat and exp must be numeric timestamps")
        try:
            issued = datetime.fromtimestamp(issued_at, tz=timezone.utc)
            expires = datetime.fromtimestamp(expires_at, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            # Infinity, NaN, or a year datetime can't represent
            raise MalformedToken("iat or exp is out of range") from e

        now = self._clock().timestamp()
        if expires_at <= now - self.leeway:
            raise TokenExpired("Token has expired")

        return TokenClaims(
            user_id=self._subject(payload),
            issued_at=issued,
            expires_at=expires,
        )

    def verify(self, token: str) -> int:
        """Verify a token and return the user id it was issued for.

        Raises a TokenError subclass on failure.
        """
        return self.decode(token).user_id

    @staticmethod
    def _subject(payload: dict) -> int:
        sub = payload.get("sub")
        if not isinstance(sub, str) or not (sub.isascii() and sub.isdigit()):
            raise MissingIdentity("Token has no usable subject")
        user_id = int(sub)
        if user_id <= 0:
            raise MissingIdentity("Token has no usable subject")
        return user_id
