"""Shared test fixtures.

Integration fixtures need the PostgreSQL instance named by
``REIGN_DATABASE_URL`` (cube and earthdistance must be installable). Tests
that request them are skipped when that server is not reachable.
"""

from __future__ import annotations

import socket
import subprocess
import sys
from collections.abc import AsyncGenerator
from functools import lru_cache
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession

from reign.config import get_settings
from reign.database import Database
from reign.main import create_app

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@lru_cache
def database_reachable() -> bool:
    """Whether something accepts TCP connections at the configured database address."""
    url = make_url(get_settings().database_url)
    try:
        with socket.create_connection((url.host or "localhost", url.port or 5432), timeout=1):
            return True
    except OSError:
        return False


def require_database() -> None:
    if not database_reachable():
        pytest.skip("PostgreSQL is not reachable at REIGN_DATABASE_URL")


@lru_cache
def _ensure_migrations() -> None:
    """Apply Alembic migrations once per test session. Runs synchronously."""
    subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=PROJECT_ROOT,
        check=True,
        capture_output=True,
    )


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """A migrated, emptied database with its own connection pool."""
    require_database()
    _ensure_migrations()

    settings = get_settings()
    db = Database(settings.database_url, pool_size=5, max_overflow=0)

    # Every table cascades from users.
    async with db.engine.begin() as conn:
        await conn.execute(text("TRUNCATE TABLE users CASCADE"))

    yield db
    await db.close()


@pytest_asyncio.fixture
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP test client bound to the test database."""
    app = create_app()
    app.state.db = database

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def app_client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP client without a database, for routes that never touch it."""
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for test setup and assertions."""
    async for session in database.session():
        yield session
