"""Database models for Taskroom."""

from .base import Base
from .enums import TaskPriority
from .project import Project, project_collaborators
from .task import Task
from .user import User

__all__ = [
    "Base",
    "User",
    "Project",
    "Task",
    "TaskPriority",
    "project_collaborators",
]
