"""Health router tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from taskroom.api.routers import health_router


@pytest.fixture
def health_client() -> TestClient:
    """Client for an app exposing only the health endpoints."""
    app = FastAPI()
    app.include_router(health_router)
    return TestClient(app)


def _session_manager(fail: bool = False) -> MagicMock:
    manager = MagicMock()
    conn = AsyncMock()
    if fail:
        conn.execute.side_effect = ConnectionError("db down")
    manager.engine.connect.return_value.__aenter__.return_value = conn
    return manager


def _redis(ok: bool = True) -> MagicMock:
    redis = MagicMock()
    redis.ping = AsyncMock(return_value=ok)
    return redis


class TestHealth:
    """Tests for /health and /ready."""

    def test_health(self, health_client: TestClient) -> None:
        """Liveness never touches dependencies."""
        response = health_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, health_client: TestClient) -> None:
        """Ready when database and Redis answer."""
        with (
            patch(
                "taskroom.api.routers.health.get_session_manager",
                return_value=_session_manager(),
            ),
            patch("taskroom.api.routers.health.get_redis", return_value=_redis()),
        ):
            response = health_client.get("/ready")

        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True, "redis": True}

    def test_not_ready_when_database_down(self, health_client: TestClient) -> None:
        """A failing database makes the service unavailable."""
        with (
            patch(
                "taskroom.api.routers.health.get_session_manager",
                return_value=_session_manager(fail=True),
            ),
            patch("taskroom.api.routers.health.get_redis", return_value=_redis()),
        ):
            response = health_client.get("/ready")

        assert response.status_code == 503
        assert response.json()["checks"] == {"database": False, "redis": True}

    def test_not_ready_when_redis_down(self, health_client: TestClient) -> None:
        """A silent Redis makes the service unavailable."""
        with (
            patch(
                "taskroom.api.routers.health.get_session_manager",
                return_value=_session_manager(),
            ),
            patch("taskroom.api.routers.health.get_redis", return_value=_redis(ok=False)),
        ):
            response = health_client.get("/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "unavailable"
