"""Project-scoped caching operations.

Caches per-user project listings and mirrors live project-room
membership so other processes can answer presence queries.
"""

from __future__ import annotations

import json
from typing import Any
from uuid import UUID

import structlog

from .redis_client import RedisClient

logger = structlog.get_logger()


class ProjectCache:
    """Redis-backed cache for project listings and room presence."""

    USER_PROJECTS_TTL = 600  # 10 minutes

    def __init__(self, redis_client: RedisClient, user_projects_ttl: int | None = None) -> None:
        """Initialize project cache.

        Args:
            redis_client: Redis client instance
            user_projects_ttl: Override for the project listing TTL
        """
        self._redis = redis_client
        self._user_projects_ttl = user_projects_ttl or self.USER_PROJECTS_TTL

    @property
    def client(self) -> Any:
        """Get Redis client."""
        return self._redis.client

    # User Projects Methods

    async def cache_user_projects(
        self,
        user_id: str,
        projects: list[dict[str, Any]],
        ttl: int | None = None,
    ) -> None:
        """Cache the serialized project list of a user.

        Args:
            user_id: User ID
            projects: JSON-ready project summaries
            ttl: TTL in seconds (default: configured listing TTL)
        """
        key = f"user:{user_id}:projects"
        ttl = ttl or self._user_projects_ttl
        await self.client.setex(key, ttl, json.dumps(projects, default=str))

    async def get_user_projects(self, user_id: str) -> list[dict[str, Any]] | None:
        """Get the cached project list of a user.

        Args:
            user_id: User ID

        Returns:
            Project summaries or None if not cached
        """
        key = f"user:{user_id}:projects"
        data = await self.client.get(key)
        if data:
            return json.loads(data)  # type: ignore[no-any-return]
        return None

    async def invalidate_user_projects(self, *user_ids: str) -> None:
        """Drop cached project lists.

        Args:
            *user_ids: Users whose listing changed
        """
        if not user_ids:
            return
        keys = [f"user:{user_id}:projects" for user_id in user_ids]
        await self.client.delete(*keys)
        logger.debug("user_projects_invalidated", user_count=len(keys))

    # Room Presence Tracking

    async def register_room_connection(
        self,
        project_id: UUID,
        connection_id: str,
    ) -> None:
        """Record that a connection joined a project room.

        Args:
            project_id: Project UUID
            connection_id: Unique connection identifier
        """
        key = f"room:{project_id}:connections"
        await self.client.sadd(key, connection_id)
        logger.debug(
            "room_connection_registered",
            project_id=str(project_id),
            connection_id=connection_id,
        )

    async def unregister_room_connection(
        self,
        project_id: UUID,
        connection_id: str,
    ) -> None:
        """Record that a connection left a project room.

        Args:
            project_id: Project UUID
            connection_id: Unique connection identifier
        """
        key = f"room:{project_id}:connections"
        await self.client.srem(key, connection_id)
        logger.debug(
            "room_connection_unregistered",
            project_id=str(project_id),
            connection_id=connection_id,
        )
