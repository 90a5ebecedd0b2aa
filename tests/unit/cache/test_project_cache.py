"""Tests for ProjectCache."""

import json
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from taskroom.cache.project_cache import ProjectCache


class TestProjectCache:
    """Tests for ProjectCache class."""

    @pytest.fixture
    def mock_redis_client(self):
        """Create a mock Redis client."""
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=None)
        mock_client.setex = AsyncMock()
        mock_client.delete = AsyncMock()
        mock_client.sadd = AsyncMock()
        mock_client.srem = AsyncMock()
        mock_client.smembers = AsyncMock(return_value=set())

        redis = MagicMock()
        redis.client = mock_client
        return redis

    @pytest.fixture
    def cache(self, mock_redis_client):
        """Create ProjectCache with mock client."""
        return ProjectCache(mock_redis_client)

    # User Projects Tests

    @pytest.mark.asyncio
    async def test_cache_user_projects_uses_default_ttl(self, cache, mock_redis_client):
        """Project listings are stored as JSON with the default TTL."""
        projects = [{"id": str(uuid4()), "name": "Website"}]

        await cache.cache_user_projects("user-1", projects)

        mock_redis_client.client.setex.assert_called_once_with(
            "user:user-1:projects",
            ProjectCache.USER_PROJECTS_TTL,
            json.dumps(projects),
        )

    @pytest.mark.asyncio
    async def test_configured_ttl_overrides_default(self, mock_redis_client):
        """A configured TTL is used when no per-call TTL is given."""
        cache = ProjectCache(mock_redis_client, user_projects_ttl=30)

        await cache.cache_user_projects("user-1", [])

        assert mock_redis_client.client.setex.call_args[0][1] == 30

    @pytest.mark.asyncio
    async def test_get_user_projects_hit(self, cache, mock_redis_client):
        """Cached listings are decoded."""
        projects = [{"id": "p1", "name": "Website"}]
        mock_redis_client.client.get.return_value = json.dumps(projects)

        result = await cache.get_user_projects("user-1")

        assert result == projects
        mock_redis_client.client.get.assert_called_once_with("user:user-1:projects")

    @pytest.mark.asyncio
    async def test_get_user_projects_miss(self, cache, mock_redis_client):
        """A miss returns None."""
        assert await cache.get_user_projects("user-1") is None

    @pytest.mark.asyncio
    async def test_invalidate_user_projects_deletes_every_key(self, cache, mock_redis_client):
        """All listed users lose their cached listing in one call."""
        await cache.invalidate_user_projects("a", "b")

        mock_redis_client.client.delete.assert_called_once_with(
            "user:a:projects", "user:b:projects"
        )

    @pytest.mark.asyncio
    async def test_invalidate_without_users_is_noop(self, cache, mock_redis_client):
        """Nothing is deleted when no user is given."""
        await cache.invalidate_user_projects()

        mock_redis_client.client.delete.assert_not_called()

    # Room Presence Tests

    @pytest.mark.asyncio
    async def test_register_room_connection(self, cache, mock_redis_client):
        """Joining adds the connection id to the room set."""
        project_id = uuid4()

        await cache.register_room_connection(project_id, "conn-1")

        mock_redis_client.client.sadd.assert_called_once_with(
            f"room:{project_id}:connections", "conn-1"
        )

    @pytest.mark.asyncio
    async def test_unregister_room_connection(self, cache, mock_redis_client):
        """Leaving removes the connection id from the room set."""
        project_id = uuid4()

        await cache.unregister_room_connection(project_id, "conn-1")

        mock_redis_client.client.srem.assert_called_once_with(
            f"room:{project_id}:connections", "conn-1"
        )
