"""WebSocket endpoint for live project rooms."""

from uuid import UUID

from fastapi import APIRouter, Query, WebSocket

from ..config import get_sync_settings
from ..dependencies import get_gateway, get_ws_manager
from ..websocket import WebSocketHandler

router = APIRouter(tags=["websocket"])


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    token: str | None = Query(default=None),
    project_id: UUID | None = Query(default=None),
) -> None:
    """WebSocket endpoint for live project rooms.

    Authentication:
        - Via query parameter: ?token=<jwt>
        - Or via first message: {"type": "auth", "payload": {"token": "<jwt>"}}

    Room membership:
        - Via query parameter: ?project_id=<uuid>
        - Or via message: {"type": "open_project", "payload": {"project_id": "<uuid>"}}

    Message Types (Client -> Server):
        - auth: Authenticate with JWT
        - open_project: Join a project room
        - leave_project: Leave a project room
        - ping: Keep-alive ping
        - new_task, edit_task, delete_task, complete_task:
          Re-emit a persisted task (relay mode only)

    Message Types (Server -> Client):
        - auth_success: Authentication successful, carries the connection id
        - project_opened: Room joined
        - project_left: Room left
        - pong: Keep-alive response
        - task_added, task_edited, task_deleted, task_completed:
          A task changed in an open project
        - project_deleted: An open project was deleted
        - error: Error message

    Args:
        websocket: WebSocket connection
        token: Optional JWT token for authentication
        project_id: Optional project room to open on connect
    """
    manager = get_ws_manager()
    handler = WebSocketHandler(
        manager=manager,
        gateway=get_gateway(manager),
        settings=get_sync_settings(),
    )

    await handler.handle_connection(
        websocket=websocket,
        token=token,
        project_id=project_id,
    )
