"""Shared fixtures for integration tests.

Each test runs against its own SQLite database file so IDs, uniqueness and
ordering are observed from a clean store.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from user_service.api.main import create_app
from user_service.core.config import get_settings
from user_service.infrastructure.database.session import (
    _db_manager,
    close_database,
    create_tables,
)


@pytest.fixture
def database_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Point the application at a fresh SQLite database file."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'users.db'}"
    monkeypatch.setenv("DATABASE_CONFIG__DATABASE_URL", url)
    get_settings.cache_clear()
    _db_manager.reset()
    return url


@pytest.fixture
async def app(database_url: str) -> AsyncGenerator[FastAPI]:
    """Application bound to the per-test database with tables created."""
    assert get_settings().database_config.database_url == database_url
    await create_tables()
    application = create_app()
    yield application
    application.dependency_overrides.clear()
    await close_database()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client talking to the application in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as async_client:
        yield async_client


@pytest.fixture
async def client_no_raise(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client that returns 500 responses instead of re-raising faults."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as async_client:
        yield async_client
