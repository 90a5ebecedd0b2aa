"""WebSocket endpoint tests."""

from __future__ import annotations

from collections.abc import Iterator
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from taskroom.api.dependencies import set_ws_manager
from taskroom.api.routers import websocket_router
from taskroom.api.websocket import ConnectionManager


@pytest.fixture
def manager() -> Iterator[ConnectionManager]:
    """Install a fresh manager for the endpoint."""
    manager = ConnectionManager()
    set_ws_manager(manager)
    yield manager
    set_ws_manager(None)


@pytest.fixture
def ws_client(manager: ConnectionManager) -> TestClient:
    """Client for an app exposing only the socket endpoint."""
    app = FastAPI()
    app.include_router(websocket_router, prefix="/api/v1")
    return TestClient(app)


class TestWebSocketEndpoint:
    """End-to-end frames over the socket endpoint."""

    def test_ping_pong(self, ws_client: TestClient) -> None:
        """Keep-alive pings are answered."""
        with ws_client.websocket_connect("/api/v1/ws") as ws:
            ws.send_json({"type": "ping"})
            message = ws.receive_json()

        assert message["type"] == "pong"

    def test_anonymous_open_project_requires_auth(self, ws_client: TestClient) -> None:
        """Room auth is on by default."""
        with ws_client.websocket_connect("/api/v1/ws") as ws:
            ws.send_json({"type": "open_project", "payload": {"project_id": str(uuid4())}})
            message = ws.receive_json()

        assert message["type"] == "error"
        assert message["payload"]["error"] == "Authentication required"

    def test_connection_is_released_on_close(
        self,
        ws_client: TestClient,
        manager: ConnectionManager,
    ) -> None:
        """Closing the socket removes it from the manager."""
        with ws_client.websocket_connect("/api/v1/ws") as ws:
            ws.send_json({"type": "ping"})
            ws.receive_json()
            assert len(manager._connections) == 1

        assert len(manager._connections) == 0
