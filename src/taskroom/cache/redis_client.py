"""Shared Redis connection for the project cache and presence mirror."""

from __future__ import annotations

import redis.asyncio as redis
import structlog

from taskroom.api.config import CacheSettings, get_cache_settings

logger = structlog.get_logger()


class RedisClient:
    """Lazily connected ``redis.asyncio`` client.

    ``from_url`` owns its connection pool, so closing the client also
    releases the pool.
    """

    def __init__(self, settings: CacheSettings) -> None:
        self.settings = settings
        self._client: redis.Redis | None = None

    @property
    def client(self) -> redis.Redis:
        """Connected client.

        Raises:
            RuntimeError: If ``connect`` has not been awaited
        """
        if self._client is None:
            raise RuntimeError("Redis is not connected")
        return self._client

    async def connect(self) -> None:
        """Open the pool and check the server answers."""
        if self._client is not None:
            return
        client = redis.from_url(
            self.settings.redis_url,
            decode_responses=True,
            max_connections=self.settings.redis_max_connections,
        )
        await client.ping()
        self._client = client
        logger.info("redis_connected", max_connections=self.settings.redis_max_connections)

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.info("redis_disconnected")

    async def ping(self) -> bool:
        """Readiness check; never raises."""
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except redis.RedisError:
            return False


_shared: RedisClient | None = None


def get_redis() -> RedisClient:
    """Process-wide client, usable as a FastAPI dependency."""
    global _shared
    if _shared is None:
        _shared = RedisClient(get_cache_settings())
    return _shared


async def init_redis() -> RedisClient:
    """Connect the shared client during application startup."""
    client = get_redis()
    await client.connect()
    return client


async def close_redis() -> None:
    """Close and forget the shared client during shutdown."""
    global _shared
    if _shared is not None:
        await _shared.close()
        _shared = None
