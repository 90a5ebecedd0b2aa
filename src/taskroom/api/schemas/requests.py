"""Request schemas for API endpoints."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from taskroom.db.models.enums import TaskPriority


class UserProfileUpdate(BaseModel):
    """Request schema for syncing the caller's profile."""

    email: EmailStr = Field(..., description="Email collaborators use to invite this user")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")


class ProjectCreate(BaseModel):
    """Request schema for creating a project."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=10000)
    client: str = Field(default="", max_length=255)
    deliver_date: date | None = None


class ProjectUpdate(BaseModel):
    """Request schema for editing a project.

    Omitted or empty fields keep their stored value.
    """

    name: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    client: str | None = Field(default=None, max_length=255)
    deliver_date: date | None = None


class CollaboratorLookup(BaseModel):
    """Request schema carrying a collaborator email."""

    email: EmailStr


class TaskCreate(BaseModel):
    """Request schema for creating a task."""

    project_id: UUID = Field(..., description="Project the task belongs to")
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=10000)
    priority: TaskPriority = TaskPriority.MEDIUM
    deliver_date: date | None = None


class TaskUpdate(BaseModel):
    """Request schema for editing a task.

    Merge-patch: omitted or empty fields keep their stored value.
    """

    name: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    priority: TaskPriority | None = None
    deliver_date: date | None = None
