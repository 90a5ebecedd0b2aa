"""WebSocket connection manager with project-scoped rooms."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID, uuid4

import structlog
from fastapi import WebSocket, WebSocketDisconnect

from ..schemas import WSMessage

logger = structlog.get_logger()


class PresenceMirror(Protocol):
    """Where room membership changes are mirrored (Redis in production)."""

    async def register_room_connection(self, project_id: UUID, connection_id: str) -> None:
        """Record a connection joining a room."""

    async def unregister_room_connection(self, project_id: UUID, connection_id: str) -> None:
        """Record a connection leaving a room."""


@dataclass
class Connection:
    """Represents a WebSocket connection."""

    id: str
    websocket: WebSocket
    user_id: str | None = None
    authenticated: bool = False
    rooms: set[UUID] = field(default_factory=set)


@dataclass
class ConnectionManager:
    """Manages WebSocket connections and project rooms.

    Connections live in an arena keyed by connection id; each room maps a
    project id to the ids of the connections viewing it. Rooms are created
    on first join and dropped when their last connection leaves.
    """

    presence: PresenceMirror | None = None
    _connections: dict[str, Connection] = field(default_factory=dict)
    _rooms: dict[UUID, set[str]] = field(default_factory=dict)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def connect(
        self,
        websocket: WebSocket,
        user_id: str | None = None,
    ) -> Connection:
        """Accept a new WebSocket connection.

        Args:
            websocket: WebSocket connection
            user_id: Optional authenticated user ID

        Returns:
            Connection object
        """
        await websocket.accept()

        connection_id = str(uuid4())
        connection = Connection(
            id=connection_id,
            websocket=websocket,
            user_id=user_id,
            authenticated=user_id is not None,
        )

        async with self._lock:
            self._connections[connection_id] = connection

        logger.info(
            "ws_connected",
            connection_id=connection_id,
            authenticated=connection.authenticated,
        )

        return connection

    async def disconnect(self, connection: Connection) -> None:
        """Drop a connection from the arena and from every room it joined.

        Safe to call more than once.

        Args:
            connection: Connection to remove
        """
        async with self._lock:
            self._connections.pop(connection.id, None)
            left = list(connection.rooms)
            for project_id in left:
                self._discard(project_id, connection.id)
            connection.rooms.clear()

        for project_id in left:
            await self._mirror_leave(project_id, connection.id)

        logger.info(
            "ws_disconnected",
            connection_id=connection.id,
            rooms_left=len(left),
        )

    async def join(self, connection: Connection, project_id: UUID) -> None:
        """Add a connection to a project room.

        Args:
            connection: Connection to add
            project_id: Project whose room to join
        """
        async with self._lock:
            self._rooms.setdefault(project_id, set()).add(connection.id)
            connection.rooms.add(project_id)

        await self._mirror_join(project_id, connection.id)

        logger.info(
            "ws_room_joined",
            connection_id=connection.id,
            project_id=str(project_id),
        )

    async def leave(self, connection: Connection, project_id: UUID) -> bool:
        """Remove a connection from one project room.

        Args:
            connection: Connection to remove
            project_id: Project whose room to leave

        Returns:
            True if the connection was in the room
        """
        async with self._lock:
            was_member = project_id in connection.rooms
            connection.rooms.discard(project_id)
            self._discard(project_id, connection.id)

        if was_member:
            await self._mirror_leave(project_id, connection.id)
            logger.info(
                "ws_room_left",
                connection_id=connection.id,
                project_id=str(project_id),
            )
        return was_member

    async def send_message(
        self,
        connection: Connection,
        message: WSMessage,
    ) -> bool:
        """Send message to a specific connection.

        Args:
            connection: Target connection
            message: Message to send

        Returns:
            True if sent successfully
        """
        try:
            await connection.websocket.send_json(message.model_dump(mode="json"))
            return True
        except WebSocketDisconnect:
            await self.disconnect(connection)
            return False
        except Exception as e:
            logger.error(
                "ws_send_failed",
                connection_id=connection.id,
                error=str(e),
            )
            return False

    async def publish(
        self,
        project_id: UUID,
        message: WSMessage,
        exclude: str | None = None,
    ) -> int:
        """Deliver a message to every connection in a project room.

        Recipients are snapshotted when the call starts. Sends run
        concurrently so one slow socket does not hold up the others.
        Failed recipients are dropped; failures never propagate.

        Args:
            project_id: Target room
            message: Message to deliver
            exclude: Connection id to skip (the originator)

        Returns:
            Number of connections the message reached
        """
        async with self._lock:
            recipients = [
                self._connections[conn_id]
                for conn_id in self._rooms.get(project_id, set())
                if conn_id != exclude and conn_id in self._connections
            ]

        if not recipients:
            logger.debug(
                "ws_publish_no_recipients",
                project_id=str(project_id),
                message_type=message.type,
            )
            return 0

        data = message.model_dump(mode="json")
        results = await asyncio.gather(
            *[conn.websocket.send_json(data) for conn in recipients],
            return_exceptions=True,
        )

        failed: list[Connection] = []
        for conn, result in zip(recipients, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, WebSocketDisconnect):
                    logger.warning(
                        "ws_publish_failed",
                        connection_id=conn.id,
                        error=str(result),
                    )
                failed.append(conn)

        for conn in failed:
            await self.disconnect(conn)

        sent_count = len(recipients) - len(failed)
        logger.debug(
            "ws_publish_complete",
            project_id=str(project_id),
            message_type=message.type,
            sent_count=sent_count,
            failed_count=len(failed),
        )

        return sent_count

    def get_room_connection_count(self, project_id: UUID) -> int:
        """Get number of connections in a project room."""
        return len(self._rooms.get(project_id, set()))

    def _discard(self, project_id: UUID, connection_id: str) -> None:
        # Caller holds the lock
        members = self._rooms.get(project_id)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self._rooms[project_id]

    async def _mirror_join(self, project_id: UUID, connection_id: str) -> None:
        if self.presence is None:
            return
        try:
            await self.presence.register_room_connection(project_id, connection_id)
        except Exception as e:
            logger.warning("presence_mirror_failed", action="join", error=str(e))

    async def _mirror_leave(self, project_id: UUID, connection_id: str) -> None:
        if self.presence is None:
            return
        try:
            await self.presence.unregister_room_connection(project_id, connection_id)
        except Exception as e:
            logger.warning("presence_mirror_failed", action="leave", error=str(e))
