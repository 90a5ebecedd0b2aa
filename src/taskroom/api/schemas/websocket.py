"""WebSocket message schemas and types."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class WSMessageType(StrEnum):
    """WebSocket message types."""

    # Client -> Server
    AUTH = "auth"
    OPEN_PROJECT = "open_project"
    LEAVE_PROJECT = "leave_project"
    PING = "ping"

    # Client -> Server relays (task already persisted over HTTP)
    NEW_TASK = "new_task"
    EDIT_TASK = "edit_task"
    DELETE_TASK = "delete_task"
    COMPLETE_TASK = "complete_task"

    # Server -> Client (control)
    AUTH_SUCCESS = "auth_success"
    PROJECT_OPENED = "project_opened"
    PROJECT_LEFT = "project_left"
    PONG = "pong"
    ERROR = "error"

    # Server -> Room members
    TASK_ADDED = "task_added"
    TASK_EDITED = "task_edited"
    TASK_DELETED = "task_deleted"
    TASK_COMPLETED = "task_completed"
    PROJECT_DELETED = "project_deleted"


# Relay message -> event delivered to the rest of the room
RELAY_EVENTS: dict[WSMessageType, WSMessageType] = {
    WSMessageType.NEW_TASK: WSMessageType.TASK_ADDED,
    WSMessageType.EDIT_TASK: WSMessageType.TASK_EDITED,
    WSMessageType.DELETE_TASK: WSMessageType.TASK_DELETED,
    WSMessageType.COMPLETE_TASK: WSMessageType.TASK_COMPLETED,
}


class WSMessage(BaseModel):
    """WebSocket message envelope."""

    type: WSMessageType
    payload: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    request_id: str | None = None


class ProjectRoomPayload(BaseModel):
    """Payload of OPEN_PROJECT / LEAVE_PROJECT messages."""

    project_id: UUID


class TaskEventPayload(BaseModel):
    """Payload of relayed task messages.

    The task is the object returned by the HTTP mutation; only the fields
    needed to route and verify it are validated here.
    """

    task: dict[str, Any]

    @property
    def task_id(self) -> UUID:
        """Id of the task."""
        return UUID(str(self.task["id"]))

    @property
    def project_id(self) -> UUID:
        """Project of the task, accepting a bare id or a populated project."""
        project = self.task.get("project") or self.task.get("project_id")
        if isinstance(project, dict):
            project = project.get("id")
        return UUID(str(project))


class ProjectDeletedPayload(BaseModel):
    """Payload for PROJECT_DELETED event."""

    project_id: UUID
