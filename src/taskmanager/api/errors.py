"""Translation from service exceptions to HTTP responses.

Learn: Services raise plain exceptions from a small, closed set; this
module is the only place that knows their status codes. Registering the
handlers on the app keeps HTTP types out of the auth core entirely.

Internal failures (hashing, signing) are logged with full detail and
returned to the client as a bare 500. Token failures normally stop at
get_current_user_id; the handler here covers any that escape it, with
the same sub-case-free 401.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from taskmanager.auth.jwt import SigningFailure, TokenError
from taskmanager.auth.password import HashingFailure
from taskmanager.auth.service import InvalidCredentials, UserNotFoundError
from taskmanager.services.task_service import TaskNotFoundError
from taskmanager.services.user_service import UserExistsError

logger = structlog.get_logger()


async def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "request.internal_error",
        error_type=type(exc).__name__,
        error=str(exc),
        path=request.url.path,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


async def _unauthorized(request: Request, exc: TokenError) -> JSONResponse:
    logger.info("auth.rejected", reason=type(exc).__name__, path=request.url.path)
    return JSONResponse(
        status_code=401,
        content={"detail": "Unauthorized"},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _invalid_credentials(request: Request, exc: InvalidCredentials) -> JSONResponse:
    return JSONResponse(status_code=401, content={"detail": "Invalid credentials"})


async def _user_exists(request: Request, exc: UserExistsError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": "User already exists"})


async def _user_not_found(request: Request, exc: UserNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": "User not found"})


async def _task_not_found(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": "Task not found"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HashingFailure, _internal_error)
    app.add_exception_handler(SigningFailure, _internal_error)
    app.add_exception_handler(TokenError, _unauthorized)
    app.add_exception_handler(InvalidCredentials, _invalid_credentials)
    app.add_exception_handler(UserExistsError, _user_exists)
    app.add_exception_handler(UserNotFoundError, _user_not_found)
    app.add_exception_handler(TaskNotFoundError, _task_not_found)
