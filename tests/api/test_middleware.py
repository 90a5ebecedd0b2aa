"""Middleware tests."""

from __future__ import annotations

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from taskroom.api.middleware import RequestContextMiddleware


@pytest.fixture
def client() -> TestClient:
    """App with the request context middleware and an echo route."""
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.get("/echo")
    async def echo(request: Request) -> dict[str, str]:
        return {"request_id": request.state.request_id}

    return TestClient(app)


class TestRequestContextMiddleware:
    """Tests for RequestContextMiddleware."""

    def test_generates_request_id(self, client: TestClient) -> None:
        """A request id is generated when none is sent."""
        response = client.get("/echo")

        request_id = response.headers["X-Request-ID"]
        assert request_id
        assert response.json()["request_id"] == request_id

    def test_echoes_incoming_request_id(self, client: TestClient) -> None:
        """Client supplied ids are kept."""
        response = client.get("/echo", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"
        assert response.json()["request_id"] == "req-42"

    def test_adds_response_time_header(self, client: TestClient) -> None:
        """Durations are reported in milliseconds."""
        response = client.get("/echo")

        assert response.headers["X-Response-Time"].endswith("ms")

    def test_logs_handled_request(self, client: TestClient) -> None:
        """Completed requests are logged with their status."""
        with capture_logs() as logs:
            client.get("/echo", headers={"X-Request-ID": "req-7"})

        handled = [e for e in logs if e["event"] == "request_handled"]
        assert len(handled) == 1
        assert handled[0]["status_code"] == 200
