"""WebSocket message handlers."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from typing import Any
from uuid import UUID

import structlog
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from taskroom.db.repository import ProjectRepository, TaskRepository
from taskroom.db.session import get_db_session

from ..auth import authenticate_websocket
from ..config import BroadcastMode, SyncSettings
from ..schemas import (
    RELAY_EVENTS,
    ProjectRoomPayload,
    TaskEventPayload,
    WSMessage,
    WSMessageType,
)
from ..services import access
from ..services.sync_gateway import SyncGateway
from .manager import Connection, ConnectionManager

logger = structlog.get_logger()

SessionProvider = Callable[[], AsyncGenerator[AsyncSession, None]]


class WebSocketHandler:
    """Handles WebSocket message processing.

    Manages authentication, project room membership and, in relay mode,
    forwarding of client-emitted task events.
    """

    def __init__(
        self,
        manager: ConnectionManager,
        gateway: SyncGateway,
        settings: SyncSettings,
        session_provider: SessionProvider = get_db_session,
    ) -> None:
        """Initialize handler.

        Args:
            manager: Connection manager
            gateway: Gateway used to relay client task events
            settings: Sync settings (broadcast mode, room gating)
            session_provider: Source of database sessions
        """
        self.manager = manager
        self.gateway = gateway
        self.settings = settings
        self._sessions = session_provider

    async def handle_connection(
        self,
        websocket: WebSocket,
        token: str | None = None,
        project_id: UUID | None = None,
    ) -> None:
        """Handle a WebSocket connection lifecycle.

        The connection is removed from every room when the loop ends,
        whatever the reason.

        Args:
            websocket: WebSocket connection
            token: Optional auth token from query param
            project_id: Optional project room to open right away
        """
        user_id = None
        if token:
            try:
                user_id = await authenticate_websocket(token)
            except Exception as e:
                logger.warning("ws_auth_failed", error=str(e))
                await websocket.close(code=4001, reason="Authentication failed")
                return

        connection = await self.manager.connect(websocket, user_id)

        try:
            if connection.authenticated:
                await self._send_auth_success(connection)
            if project_id is not None:
                await self._open_project(connection, project_id)

            await self._message_loop(connection)

        except WebSocketDisconnect:
            logger.debug("ws_client_disconnected", connection_id=connection.id)
        except Exception as e:
            logger.exception("ws_handler_error", error=str(e))
        finally:
            await self.manager.disconnect(connection)

    async def _message_loop(self, connection: Connection) -> None:
        """Process incoming messages until the client goes away.

        Args:
            connection: Active connection
        """
        while True:
            try:
                data = await connection.websocket.receive_json()
                await self._handle_message(connection, data)
            except WebSocketDisconnect:
                raise
            except Exception as e:
                logger.error(
                    "ws_message_error",
                    connection_id=connection.id,
                    error=str(e),
                )
                await self._send_error(connection, str(e))

    async def _handle_message(
        self,
        connection: Connection,
        data: dict[str, Any],
    ) -> None:
        """Route and handle a single message.

        Args:
            connection: Source connection
            data: Message data
        """
        msg_type = data.get("type")
        payload = data.get("payload") or {}

        if msg_type == WSMessageType.AUTH:
            await self._handle_auth(connection, payload)
        elif msg_type == WSMessageType.OPEN_PROJECT:
            await self._handle_open_project(connection, payload)
        elif msg_type == WSMessageType.LEAVE_PROJECT:
            await self._handle_leave_project(connection, payload)
        elif msg_type == WSMessageType.PING:
            await self.manager.send_message(connection, WSMessage(type=WSMessageType.PONG))
        elif msg_type in RELAY_EVENTS:
            await self._handle_relay(connection, WSMessageType(msg_type), payload)
        else:
            logger.warning(
                "ws_unknown_message",
                connection_id=connection.id,
                type=msg_type,
            )
            await self._send_error(connection, f"Unknown message type: {msg_type}")

    async def _handle_auth(
        self,
        connection: Connection,
        payload: dict[str, Any],
    ) -> None:
        """Handle authentication message.

        Args:
            connection: Source connection
            payload: Auth message payload
        """
        token = payload.get("token")
        if not token:
            await self._send_error(connection, "Token required")
            return

        try:
            user_id = await authenticate_websocket(token)
        except Exception as e:
            logger.warning(
                "ws_auth_failed",
                connection_id=connection.id,
                error=str(e),
            )
            await self._send_error(connection, "Authentication failed")
            return

        connection.user_id = user_id
        connection.authenticated = True
        await self._send_auth_success(connection)

        logger.info(
            "ws_authenticated",
            connection_id=connection.id,
            user_id=user_id,
        )

    async def _handle_open_project(
        self,
        connection: Connection,
        payload: dict[str, Any],
    ) -> None:
        """Handle a request to join a project room.

        Args:
            connection: Source connection
            payload: Message payload with ``project_id``
        """
        try:
            room = ProjectRoomPayload.model_validate(payload)
        except ValidationError:
            await self._send_error(connection, "Valid project_id required")
            return

        await self._open_project(connection, room.project_id)

    async def _open_project(self, connection: Connection, project_id: UUID) -> None:
        """Join a project room, checking membership when room auth is on.

        Args:
            connection: Source connection
            project_id: Project whose room to join
        """
        if self.settings.require_room_auth:
            if not connection.authenticated or connection.user_id is None:
                await self._send_error(connection, "Authentication required")
                return

            if not await self._may_read(project_id, connection.user_id):
                logger.warning(
                    "ws_open_project_denied",
                    connection_id=connection.id,
                    user_id=connection.user_id,
                    project_id=str(project_id),
                )
                await self._send_error(connection, "Not authorized to open this project")
                return

        await self.manager.join(connection, project_id)

        await self.manager.send_message(
            connection,
            WSMessage(
                type=WSMessageType.PROJECT_OPENED,
                payload={"project_id": str(project_id), "connection_id": connection.id},
            ),
        )

    async def _handle_leave_project(
        self,
        connection: Connection,
        payload: dict[str, Any],
    ) -> None:
        """Handle a request to leave a project room.

        Args:
            connection: Source connection
            payload: Message payload with ``project_id``
        """
        try:
            room = ProjectRoomPayload.model_validate(payload)
        except ValidationError:
            await self._send_error(connection, "Valid project_id required")
            return

        await self.manager.leave(connection, room.project_id)
        await self.manager.send_message(
            connection,
            WSMessage(
                type=WSMessageType.PROJECT_LEFT,
                payload={"project_id": str(room.project_id)},
            ),
        )

    async def _handle_relay(
        self,
        connection: Connection,
        msg_type: WSMessageType,
        payload: dict[str, Any],
    ) -> None:
        """Forward a client-emitted task event to the rest of the room.

        Only accepted in relay mode. Non-deletion events must name a task
        that is stored under the claimed project.

        Args:
            connection: Source connection
            msg_type: Client message type
            payload: Message payload with the persisted ``task``
        """
        if self.settings.broadcast_mode is not BroadcastMode.RELAY:
            await self._send_error(
                connection, "Client relay disabled; task changes are broadcast by the server"
            )
            return

        try:
            event = TaskEventPayload.model_validate(payload)
            project_id = event.project_id
            task_id = event.task_id
        except (ValidationError, KeyError, TypeError, ValueError):
            await self._send_error(connection, "Task with id and project required")
            return

        if self.settings.require_room_auth:
            if connection.user_id is None:
                await self._send_error(connection, "Authentication required")
                return
            if not await self._may_read(project_id, connection.user_id):
                await self._send_error(connection, "Not authorized for this project")
                return

        if msg_type is not WSMessageType.DELETE_TASK and not await self._task_in_project(
            task_id, project_id
        ):
            await self._send_error(connection, "Task not found in project")
            return

        await self.gateway.relay(RELAY_EVENTS[msg_type], project_id, event.task, connection.id)

    async def _may_read(self, project_id: UUID, user_id: str) -> bool:
        async for db in self._sessions():
            project = await ProjectRepository(db).get_by_id(project_id)
            return project is not None and access.can_read_project(project, user_id)
        return False

    async def _task_in_project(self, task_id: UUID, project_id: UUID) -> bool:
        async for db in self._sessions():
            task = await TaskRepository(db).get_by_id(task_id)
            return task is not None and task.project_id == project_id
        return False

    async def _send_auth_success(self, connection: Connection) -> None:
        """Send authentication success message.

        Args:
            connection: Target connection
        """
        await self.manager.send_message(
            connection,
            WSMessage(
                type=WSMessageType.AUTH_SUCCESS,
                payload={"user_id": connection.user_id, "connection_id": connection.id},
            ),
        )

    async def _send_error(self, connection: Connection, message: str) -> None:
        """Send error message.

        Args:
            connection: Target connection
            message: Error message
        """
        await self.manager.send_message(
            connection,
            WSMessage(
                type=WSMessageType.ERROR,
                payload={"error": message},
            ),
        )
