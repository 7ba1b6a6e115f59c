"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.

The engine is built per application in create_app() and kept on app.state,
so a test app can point at a different database (or none at all).
"""

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taskmanager.config import Settings
from taskmanager.db.models import Base


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the connection pool. echo=True in debug to see SQL queries."""
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory — each request gets its own session."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
