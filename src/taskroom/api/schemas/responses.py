"""Response schemas for API endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """Public user data (never includes credentials)."""

    id: str
    email: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class ProjectSummary(BaseModel):
    """Project reference embedded in task payloads."""

    id: UUID
    name: str
    creator_id: str

    model_config = ConfigDict(from_attributes=True)


class TaskResponse(BaseModel):
    """Response schema for task data.

    ``project`` is always populated so live recipients can apply the task
    without a follow-up fetch; ``completed_by`` is populated once the status
    has been toggled.
    """

    id: UUID
    project_id: UUID
    name: str
    description: str = ""
    priority: str
    deliver_date: date | None = None
    status: bool = False
    completed_by_id: str | None = None
    project: ProjectSummary | None = None
    completed_by: UserResponse | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ProjectResponse(BaseModel):
    """Response schema for project listings (without tasks)."""

    id: UUID
    name: str
    description: str = ""
    client: str = ""
    deliver_date: date | None = None
    creator_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ProjectDetailResponse(ProjectResponse):
    """Detailed project response with collaborators and ordered tasks."""

    collaborators: list[UserResponse] = []
    tasks: list[TaskResponse] = []


class PresenceResponse(BaseModel):
    """Live viewers of a project room."""

    project_id: UUID
    connections: int


class ErrorResponse(BaseModel):
    """Error response body."""

    error: str
    detail: Any = None
    code: str
    request_id: str | None = None
