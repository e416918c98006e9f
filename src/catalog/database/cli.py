#!/usr/bin/env python3
"""
CLI entry point for catalog database migrations.

Alembic owns the PostgreSQL schema. SQLite databases used for development
and tests get their tables from the model metadata at startup instead.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import click

from alembic import command
from alembic.config import Config
from catalog import __version__
from catalog.logging import configure_logging, get_logger

logger = get_logger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config() -> Config:
    """Alembic configuration rooted at the repository's alembic.ini."""
    alembic_ini = REPO_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(REPO_ROOT / "alembic"))
    return config


def run_alembic(action: str, fn: Callable[[Config], None]) -> None:
    """Run one Alembic command, logging the outcome and exiting non-zero on failure."""
    try:
        fn(get_alembic_config())
    except Exception as e:
        logger.error("Migration command failed", action=action, error=str(e))
        sys.exit(1)
    logger.info("Migration command finished", action=action)


@click.group()
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.version_option(version=__version__, prog_name="catalog-migrate")
def main(log_level: str) -> None:
    """Catalog database migration management."""
    configure_logging(debug=(log_level == "debug"))


@main.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade the schema to REVISION (default: head)."""
    run_alembic(f"upgrade {revision}", lambda config: command.upgrade(config, revision))


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade the schema to REVISION (default: one step back)."""
    run_alembic(f"downgrade {revision}", lambda config: command.downgrade(config, revision))


@main.command()
@click.argument("revision", default="head")
def stamp(revision: str) -> None:
    """Record REVISION as applied without running it (for pre-existing tables)."""
    run_alembic(f"stamp {revision}", lambda config: command.stamp(config, revision))


@main.command()
def current() -> None:
    """Show the revision the database is at."""
    run_alembic("current", command.current)


if __name__ == "__main__":
    main()
