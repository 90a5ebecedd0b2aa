"""Pydantic schemas for API request/response validation."""

from .requests import (
    CollaboratorLookup,
    ProjectCreate,
    ProjectUpdate,
    TaskCreate,
    TaskUpdate,
    UserProfileUpdate,
)
from .responses import (
    ErrorResponse,
    PresenceResponse,
    ProjectDetailResponse,
    ProjectResponse,
    ProjectSummary,
    TaskResponse,
    UserResponse,
)
from .websocket import (
    RELAY_EVENTS,
    ProjectDeletedPayload,
    ProjectRoomPayload,
    TaskEventPayload,
    WSMessage,
    WSMessageType,
)

__all__ = [
    # Requests
    "UserProfileUpdate",
    "ProjectCreate",
    "ProjectUpdate",
    "CollaboratorLookup",
    "TaskCreate",
    "TaskUpdate",
    # Responses
    "UserResponse",
    "ProjectSummary",
    "ProjectResponse",
    "ProjectDetailResponse",
    "TaskResponse",
    "PresenceResponse",
    "ErrorResponse",
    # WebSocket
    "WSMessageType",
    "WSMessage",
    "RELAY_EVENTS",
    "ProjectRoomPayload",
    "TaskEventPayload",
    "ProjectDeletedPayload",
]
