"""
Tests for the catalog command line interface
"""

import sqlite3
from unittest.mock import patch

from click.testing import CliRunner

from catalog import __version__
from catalog.cli import cli
from catalog.database.cli import main as migrate


def test_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_db_creates_tables(tmp_path):
    db_path = tmp_path / "catalog.db"

    result = CliRunner().invoke(cli, ["init-db", "--database-url", f"sqlite:///{db_path}"])

    assert result.exit_code == 0, result.output
    assert "Catalog schema ready" in result.output

    with sqlite3.connect(db_path) as conn:
        tables = {
            row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
    assert {"authors", "books", "book_genres", "users"} <= tables


def test_init_db_migrates_non_sqlite_databases():
    with patch("catalog.database.cli.run_alembic") as run_alembic:
        result = CliRunner().invoke(
            cli, ["init-db", "--database-url", "postgresql://catalog:pw@localhost/catalog"]
        )

    assert result.exit_code == 0, result.output
    assert "Catalog schema migrated" in result.output
    run_alembic.assert_called_once()
    assert run_alembic.call_args.args[0] == "upgrade head"


def test_migrate_stamp_records_revision():
    with patch("catalog.database.cli.get_alembic_config"), patch(
        "catalog.database.cli.command.stamp"
    ) as stamp:
        result = CliRunner().invoke(migrate, ["stamp"])

    assert result.exit_code == 0, result.output
    stamp.assert_called_once()
    assert stamp.call_args.args[1] == "head"


def test_migrate_failure_exits_non_zero():
    with patch("catalog.database.cli.get_alembic_config"), patch(
        "catalog.database.cli.command.upgrade", side_effect=RuntimeError("boom")
    ):
        result = CliRunner().invoke(migrate, ["upgrade"])

    assert result.exit_code == 1
