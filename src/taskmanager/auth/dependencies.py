"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers. get_current_user_id
is the identity boundary: it turns "Authorization: Bearer <token>" into a
user id, or stops the request with a 401 before any handler or database
code runs.

This is the one place the TokenError subclasses are collapsed. The client
only ever sees "Unauthorized"; the specific reason goes to the server log.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, HTTPException, Request

from taskmanager.auth.jwt import TokenError, TokenService
from taskmanager.auth.password import PasswordHasher

logger = structlog.get_logger()


def get_token_service(request: Request) -> TokenService:
    """The app-wide TokenService, built once in create_app()."""
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


async def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> int:
    """Extract and verify the Bearer token, returning the authenticated user id.

    The id is also stored on request.state.user_id for middleware and
    logging that run outside the handler.
    """
    token = _bearer_token(authorization)
    if token is None:
        logger.info("auth.rejected", reason="missing_bearer", path=request.url.path)
        raise _unauthorized()

    try:
        user_id = tokens.verify(token)
    except TokenError as e:
        logger.info(
            "auth.rejected",
            reason=type(e).__name__,
            error=str(e),
            path=request.url.path,
        )
        raise _unauthorized()

    request.state.user_id = user_id
    structlog.contextvars.bind_contextvars(user_id=user_id)
    return user_id
