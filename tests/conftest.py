"""
Shared pytest fixtures and configuration for all tests.
"""

import os

# Must be in place before catalog.config builds its settings
os.environ.setdefault("CATALOG_JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("CATALOG_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("CATALOG_DEBUG", "false")

from collections.abc import AsyncGenerator, Callable, Generator  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
import strawberry  # noqa: E402

from catalog.auth.factory import get_auth_adapter  # noqa: E402
from catalog.database.connection import (  # noqa: E402
    create_schema,
    dispose_database,
    init_database,
)
from catalog.notifications.bus import reset_notification_bus  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def fresh_notification_bus() -> Generator[None, None, None]:
    """Give every test its own process-wide bus."""
    reset_notification_bus()
    yield
    reset_notification_bus()


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Provide an empty in-memory catalog database."""
    init_database(TEST_DATABASE_URL, force_reinit=True)
    await create_schema()
    yield
    await dispose_database()


@pytest_asyncio.fixture
async def file_database(tmp_path) -> AsyncGenerator[None, None]:
    """Provide an empty file-backed database with one connection per session."""
    init_database(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}", force_reinit=True)
    await create_schema()
    yield
    await dispose_database()


@pytest.fixture
def make_info() -> Callable[..., Any]:
    """Build a mock GraphQL info object carrying request headers."""

    def _make_info(authorization: str | None = None) -> Any:
        headers = {}
        if authorization is not None:
            headers["authorization"] = authorization

        info = MagicMock(spec=strawberry.Info)
        info.context = {"request": MagicMock(headers=headers)}
        return info

    return _make_info


@pytest.fixture
def bearer_for() -> Callable[..., Any]:
    """Issue a bearer header value for a user id."""

    async def _bearer_for(user_id: Any, username: str = "alice") -> str:
        token = await get_auth_adapter().issue_token(user_id, claims={"username": username})
        return f"Bearer {token}"

    return _bearer_for


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
