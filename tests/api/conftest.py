"""API test fixtures."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session."""
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.execute = AsyncMock()
    return session


@pytest.fixture
def mock_gateway() -> MagicMock:
    """Create mock sync gateway."""
    gateway = MagicMock()
    gateway.task_added = AsyncMock(return_value=1)
    gateway.task_edited = AsyncMock(return_value=1)
    gateway.task_deleted = AsyncMock(return_value=1)
    gateway.task_completed = AsyncMock(return_value=1)
    gateway.project_deleted = AsyncMock(return_value=1)
    gateway.relay = AsyncMock(return_value=1)
    return gateway


@pytest.fixture
def mock_cache() -> MagicMock:
    """Create mock project cache."""
    cache = MagicMock()
    cache.get_user_projects = AsyncMock(return_value=None)
    cache.cache_user_projects = AsyncMock()
    cache.invalidate_user_projects = AsyncMock()
    return cache


def apply_update(instance: Any) -> AsyncMock:
    """Repository ``update`` stand-in that writes the kwargs onto ``instance``."""

    async def _update(_id: Any, **kwargs: Any) -> Any:
        for key, value in kwargs.items():
            setattr(instance, key, value)
        return instance

    return AsyncMock(side_effect=_update)


@pytest.fixture
def updater():
    """Factory for repository ``update`` stand-ins."""
    return apply_update
