"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Everything the auth core needs (signing secret, token lifetime,
bcrypt cost) is read from Settings here, once, and handed to the
components as constructor arguments. They are stored on app.state and
reached from routes through dependencies, never through module globals.

Lifespan creates missing tables on startup and disposes the engine on
shutdown.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskmanager import __version__
from taskmanager.api import api_router
from taskmanager.api.errors import register_exception_handlers
from taskmanager.auth.jwt import TokenService
from taskmanager.auth.password import PasswordHasher
from taskmanager.config import DEFAULT_JWT_SECRET, Settings, settings as default_settings
from taskmanager.db.engine import build_engine, build_session_factory, create_tables
from taskmanager.middleware.request_id import RequestIdMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. Startup finishes before the first request is served.
    """
    settings: Settings = app.state.settings
    logger.info(
        "taskmanager.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("taskmanager.default_jwt_secret")

    # Login for unknown usernames verifies against this
    await app.state.password_hasher.dummy_hash_async()

    if settings.auto_create_tables:
        await create_tables(app.state.engine)
        logger.info("taskmanager.tables_ready")

    yield

    logger.info("taskmanager.shutdown")
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or default_settings

    app = FastAPI(
        title="Task Manager",
        description="Personal task manager with JWT authentication",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.access_token_expire_minutes,
        leeway_seconds=settings.token_leeway_seconds,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: taskmanager.main:app)
app = create_app()
