#!/usr/bin/env python3
"""
Main CLI entry point for the catalog backend server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from catalog import __version__
from catalog.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="catalog")
def cli() -> None:
    """Catalog CLI - run the server and manage the database."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=4000, type=int, help="Port to bind to (default: 4000)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the catalog API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info("Starting catalog API server", host=host, port=port, reload=reload)

    if log_level == "debug":
        os.environ["CATALOG_DEBUG"] = "true"
        os.environ["CATALOG_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("CATALOG_DEBUG", "false")
        os.environ.setdefault("CATALOG_LOG_LEVEL", log_level)

    try:
        # Subscriptions live in process memory, so the server always runs one worker
        uvicorn.run(
            "catalog.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("init-db")
@click.option("--database-url", default=None, help="Override CATALOG_DATABASE_URL")
def init_db(database_url: str | None) -> None:
    """Create the catalog tables.

    SQLite databases are created from the models; any other database is
    brought to the latest Alembic revision.
    """
    from catalog.database.connection import (
        create_schema,
        dispose_database,
        get_database_url,
        init_database,
        is_sqlite_url,
    )

    configure_logging()

    if database_url:
        os.environ["CATALOG_DATABASE_URL"] = database_url

    if not is_sqlite_url(database_url or get_database_url()):
        from alembic import command

        from catalog.database.cli import run_alembic

        run_alembic("upgrade head", lambda config: command.upgrade(config, "head"))
        click.echo("✓ Catalog schema migrated")
        return

    async def do_init() -> None:
        init_database(database_url, force_reinit=True)
        try:
            await create_schema()
        finally:
            await dispose_database()

    try:
        asyncio.run(do_init())
    except Exception as e:
        logger.error("Failed to create schema", error=str(e))
        click.echo(f"✗ Error creating schema: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Catalog schema ready")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
