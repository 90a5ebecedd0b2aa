"""WebSocket support for live project rooms."""

from .handlers import WebSocketHandler
from .manager import Connection, ConnectionManager

__all__ = [
    "Connection",
    "ConnectionManager",
    "WebSocketHandler",
]
