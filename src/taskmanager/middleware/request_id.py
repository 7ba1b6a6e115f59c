"""Request ID middleware — unique ID per request for tracing.

Learn: Every request gets a UUID, either from the incoming
X-Request-ID header (for distributed tracing) or auto-generated.
The ID is bound to structlog's contextvars so it appears in all
log entries for that request, and returned in the response header.

One "request.completed" line is logged per request with status and
duration. Headers are never logged, so bearer tokens stay out of logs.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Generate and propagate a unique request ID."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        response: Response = await call_next(request)
        logger.info(
            "request.completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
            user_id=getattr(request.state, "user_id", None),
        )
        response.headers["X-Request-ID"] = request_id
        return response
