"""Cache module for Redis-based caching.

Provides the async Redis client and project-specific caching operations.
"""

from .project_cache import ProjectCache
from .redis_client import RedisClient, close_redis, get_redis, init_redis

__all__ = [
    "ProjectCache",
    "RedisClient",
    "close_redis",
    "get_redis",
    "init_redis",
]
