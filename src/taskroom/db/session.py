"""Engine and session lifecycle for the API process."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taskroom.api.config import DatabaseSettings


def engine_options(settings: DatabaseSettings) -> dict[str, Any]:
    """Pool options for the configured backend.

    SQLite's async driver uses a single-connection pool that rejects sizing
    arguments, so only server databases get them.
    """
    if make_url(settings.url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": settings.pool_size,
        "max_overflow": settings.max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


class DatabaseSessionManager:
    """Owns the engine and hands out sessions.

    Sessions keep attributes loaded after commit so services can build
    responses from the rows they just wrote.
    """

    def __init__(self, settings: DatabaseSettings) -> None:
        self.engine: AsyncEngine = create_async_engine(settings.url, **engine_options(settings))
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def close(self) -> None:
        await self.engine.dispose()

    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield one session; an escaping error rolls it back."""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise


session_manager: DatabaseSessionManager | None = None


def init_db(settings: DatabaseSettings) -> DatabaseSessionManager:
    """Create the process-wide manager at startup.

    Raises:
        RuntimeError: If a manager already exists
    """
    global session_manager
    if session_manager is not None:
        raise RuntimeError("Database already initialized")
    session_manager = DatabaseSessionManager(settings)
    return session_manager


async def close_db() -> None:
    global session_manager
    if session_manager is not None:
        await session_manager.close()
        session_manager = None


def get_session_manager() -> DatabaseSessionManager:
    """Return the process-wide manager.

    Raises:
        RuntimeError: If ``init_db`` has not run
    """
    if session_manager is None:
        raise RuntimeError("Database not initialized; call init_db() at startup")
    return session_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session."""
    async for session in get_session_manager().get_session():
        yield session
