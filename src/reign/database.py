"""Async SQLAlchemy engine and session management.

A ``Database`` owns one engine (and therefore one connection pool). The
application creates it in the lifespan handler, stores it on
``app.state.db`` and disposes it at shutdown. Request handlers obtain a
session through the ``get_session`` dependency.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


class Database:
    """Connection pool plus session factory for one PostgreSQL database."""

    def __init__(self, url: str, pool_size: int = 20, max_overflow: int = 10) -> None:
        self.url = url
        self._engine: AsyncEngine | None = create_async_engine(
            url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            echo=False,
            connect_args={"statement_cache_size": 0},
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine instance."""
        if self._engine is None:
            msg = "Database is closed."
            raise RuntimeError(msg)
        return self._engine

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session; roll back whatever is left uncommitted on error."""
        if self._engine is None:
            msg = "Database is closed."
            raise RuntimeError(msg)
        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Dispose of the engine and its pool."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None


def get_database(request: Request) -> Database:
    """Get the Database bound to the running application."""
    db: Database | None = getattr(request.app.state, "db", None)
    if db is None:
        msg = "Database not initialized. Bind a Database to app.state.db first."
        raise RuntimeError(msg)
    return db


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session (FastAPI dependency)."""
    async for session in get_database(request).session():
        yield session
