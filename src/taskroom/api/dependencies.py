"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from taskroom.cache import ProjectCache, RedisClient, get_redis
from taskroom.db.session import get_db_session

from .auth import get_current_user_id
from .config import get_cache_settings, get_sync_settings
from .services import SyncGateway
from .websocket import ConnectionManager

# Process-wide room registry
_manager: ConnectionManager | None = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency.

    Yields:
        AsyncSession for database operations
    """
    async for session in get_db_session():
        yield session


def get_cache(
    redis_client: RedisClient = Depends(get_redis),
) -> ProjectCache:
    """Project cache dependency.

    Args:
        redis_client: Redis client from DI

    Returns:
        ProjectCache instance
    """
    return ProjectCache(redis_client, get_cache_settings().user_projects_ttl)


def get_ws_manager() -> ConnectionManager:
    """Get or create the WebSocket connection manager.

    Returns:
        ConnectionManager singleton
    """
    global _manager
    if _manager is None:
        presence = None
        if get_sync_settings().mirror_presence:
            presence = ProjectCache(get_redis(), get_cache_settings().user_projects_ttl)
        _manager = ConnectionManager(presence=presence)
    return _manager


def set_ws_manager(manager: ConnectionManager | None) -> None:
    """Replace the WebSocket connection manager (for testing).

    Args:
        manager: Manager instance to use, or None to reset
    """
    global _manager
    _manager = manager


def get_gateway(
    manager: ConnectionManager = Depends(get_ws_manager),
) -> SyncGateway:
    """Sync gateway dependency.

    Args:
        manager: Connection manager from DI

    Returns:
        SyncGateway bound to the configured broadcast mode
    """
    return SyncGateway(manager, mode=get_sync_settings().broadcast_mode)


async def get_origin_connection(
    x_connection_id: Annotated[str | None, Header()] = None,
) -> str | None:
    """Socket id of the caller, skipped when broadcasting its own mutation.

    Args:
        x_connection_id: Value of the ``X-Connection-ID`` header

    Returns:
        Connection id or None
    """
    return x_connection_id or None


# Type aliases for cleaner route signatures
DBSession = Annotated[AsyncSession, Depends(get_db)]
Cache = Annotated[ProjectCache, Depends(get_cache)]
Gateway = Annotated[SyncGateway, Depends(get_gateway)]
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
OriginConnection = Annotated[str | None, Depends(get_origin_connection)]
