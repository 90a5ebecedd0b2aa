"""Task endpoints.

Every successful mutation is announced to the task's project room,
skipping the caller's own socket when it sends ``X-Connection-ID``.
"""

from uuid import UUID

from fastapi import APIRouter, status

from ..dependencies import CurrentUserId, DBSession, Gateway, OriginConnection
from ..schemas import TaskCreate, TaskResponse, TaskUpdate
from ..services import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(
    request: TaskCreate,
    db: DBSession,
    gateway: Gateway,
    user_id: CurrentUserId,
    origin: OriginConnection,
) -> TaskResponse:
    """Create a task and append it to its project's task order.

    Args:
        request: Task creation request
        db: Database session
        gateway: Sync gateway
        user_id: Current user ID
        origin: Caller's socket id

    Returns:
        Created task with its project populated
    """
    service = TaskService(db, gateway)
    return await service.create_task(request, user_id, origin)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Get task details",
)
async def get_task(
    task_id: UUID,
    db: DBSession,
    user_id: CurrentUserId,
) -> TaskResponse:
    """Get a single task.

    Args:
        task_id: Task UUID
        db: Database session
        user_id: Current user ID

    Returns:
        Task details
    """
    service = TaskService(db)
    return await service.get_task(task_id, user_id)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Edit task",
)
async def edit_task(
    task_id: UUID,
    request: TaskUpdate,
    db: DBSession,
    gateway: Gateway,
    user_id: CurrentUserId,
    origin: OriginConnection,
) -> TaskResponse:
    """Merge-patch a task; empty values leave fields untouched.

    Args:
        task_id: Task UUID
        request: Fields to change
        db: Database session
        gateway: Sync gateway
        user_id: Current user ID
        origin: Caller's socket id

    Returns:
        Updated task
    """
    service = TaskService(db, gateway)
    return await service.edit_task(task_id, request, user_id, origin)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete task",
)
async def delete_task(
    task_id: UUID,
    db: DBSession,
    gateway: Gateway,
    user_id: CurrentUserId,
    origin: OriginConnection,
) -> None:
    """Delete a task and drop it from its project's task order.

    Args:
        task_id: Task UUID
        db: Database session
        gateway: Sync gateway
        user_id: Current user ID
        origin: Caller's socket id
    """
    service = TaskService(db, gateway)
    await service.delete_task(task_id, user_id, origin)


@router.post(
    "/{task_id}/status",
    response_model=TaskResponse,
    summary="Toggle task status",
)
async def toggle_status(
    task_id: UUID,
    db: DBSession,
    gateway: Gateway,
    user_id: CurrentUserId,
    origin: OriginConnection,
) -> TaskResponse:
    """Flip a task between open and done.

    Collaborators may do this as well as the creator.

    Args:
        task_id: Task UUID
        db: Database session
        gateway: Sync gateway
        user_id: Current user ID
        origin: Caller's socket id

    Returns:
        Updated task with ``completed_by`` populated
    """
    service = TaskService(db, gateway)
    return await service.toggle_status(task_id, user_id, origin)
