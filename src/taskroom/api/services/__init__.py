"""API services for business logic."""

from .project_service import ProjectService
from .sync_gateway import SyncGateway
from .task_service import TaskService
from .user_service import UserService

__all__ = [
    "ProjectService",
    "SyncGateway",
    "TaskService",
    "UserService",
]
