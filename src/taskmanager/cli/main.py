"""Task Manager CLI — run the server, prepare the database.

Usage:
    taskmanager serve                      # Start the API on TASKMANAGER_HOST:PORT
    taskmanager serve --port 9000 --reload
    taskmanager init-db                    # Create missing tables and exit
"""

from __future__ import annotations

import asyncio
from typing import Optional

import click

from taskmanager.config import settings


@click.group()
def cli():
    """Task Manager — personal tasks behind JWT auth."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: TASKMANAGER_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: TASKMANAGER_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Start the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "taskmanager.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
def init_db():
    """Create any missing tables in TASKMANAGER_DATABASE_URL."""
    from taskmanager.db.engine import build_engine, create_tables

    async def _init():
        engine = build_engine(settings)
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(_init())
    click.echo(click.style("✓ Tables ready", fg="green"))


if __name__ == "__main__":
    cli()
