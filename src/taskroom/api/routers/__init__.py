"""API routers for endpoint organization."""

from .health import router as health_router
from .projects import router as projects_router
from .tasks import router as tasks_router
from .users import router as users_router
from .websocket import router as websocket_router

__all__ = [
    "health_router",
    "users_router",
    "projects_router",
    "tasks_router",
    "websocket_router",
]
