"""Repositories wrapping SQLAlchemy queries per model."""

from .base import BaseRepository
from .project_repo import ProjectRepository
from .task_repo import TaskRepository
from .user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "ProjectRepository",
    "TaskRepository",
    "UserRepository",
]
