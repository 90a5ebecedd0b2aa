"""Router test fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from taskroom.api.auth import get_current_user_id
from taskroom.api.dependencies import get_cache, get_db, get_gateway
from taskroom.api.handlers import register_exception_handlers
from taskroom.api.routers import projects_router, tasks_router, users_router


@pytest.fixture
def app() -> FastAPI:
    """Create test FastAPI app with every HTTP router."""
    app = FastAPI()
    register_exception_handlers(app)
    for router in (users_router, projects_router, tasks_router):
        app.include_router(router, prefix="/api/v1")

    async def mock_get_db():
        yield MagicMock()

    def mock_get_cache():
        return MagicMock()

    def mock_get_gateway():
        return MagicMock()

    async def mock_get_user_id():
        return "creator-1"

    app.dependency_overrides[get_db] = mock_get_db
    app.dependency_overrides[get_cache] = mock_get_cache
    app.dependency_overrides[get_gateway] = mock_get_gateway
    app.dependency_overrides[get_current_user_id] = mock_get_user_id

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app, raise_server_exceptions=False)
