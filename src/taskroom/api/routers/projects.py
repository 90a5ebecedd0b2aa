"""Project management endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from ..dependencies import (
    Cache,
    CurrentUserId,
    DBSession,
    Gateway,
    OriginConnection,
)
from ..schemas import (
    CollaboratorLookup,
    PresenceResponse,
    ProjectCreate,
    ProjectDetailResponse,
    ProjectResponse,
    ProjectUpdate,
    UserResponse,
)
from ..services import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=list[ProjectResponse],
    summary="List user projects",
)
async def list_projects(
    db: DBSession,
    cache: Cache,
    user_id: CurrentUserId,
) -> list[ProjectResponse]:
    """List projects the authenticated user created or collaborates on.

    Args:
        db: Database session
        cache: Project cache
        user_id: Current user ID

    Returns:
        Projects without tasks
    """
    service = ProjectService(db, cache)
    return await service.list_projects(user_id)


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new project",
)
async def create_project(
    request: ProjectCreate,
    db: DBSession,
    cache: Cache,
    user_id: CurrentUserId,
) -> ProjectResponse:
    """Create a project owned by the authenticated user.

    Args:
        request: Project creation request
        db: Database session
        cache: Project cache
        user_id: Current user ID

    Returns:
        Created project
    """
    service = ProjectService(db, cache)
    return await service.create_project(request, user_id)


@router.post(
    "/collaborators/search",
    response_model=UserResponse,
    summary="Find a collaborator by email",
)
async def find_collaborator(
    request: CollaboratorLookup,
    db: DBSession,
    user_id: CurrentUserId,
) -> UserResponse:
    """Look up a registered user by email before inviting them.

    Args:
        request: Email to look up
        db: Database session
        user_id: Current user ID

    Returns:
        Public user data
    """
    service = ProjectService(db)
    return await service.find_collaborator(str(request.email))


@router.get(
    "/{project_id}",
    response_model=ProjectDetailResponse,
    summary="Get project details",
)
async def get_project(
    project_id: UUID,
    db: DBSession,
    user_id: CurrentUserId,
) -> ProjectDetailResponse:
    """Get a project with its collaborators and tasks in creation order.

    Args:
        project_id: Project UUID
        db: Database session
        user_id: Current user ID

    Returns:
        Project details
    """
    service = ProjectService(db)
    return await service.get_project(project_id, user_id)


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Update project",
)
async def update_project(
    project_id: UUID,
    request: ProjectUpdate,
    db: DBSession,
    cache: Cache,
    user_id: CurrentUserId,
) -> ProjectResponse:
    """Merge-patch a project; only the creator may do this.

    Args:
        project_id: Project UUID
        request: Fields to change
        db: Database session
        cache: Project cache
        user_id: Current user ID

    Returns:
        Updated project
    """
    service = ProjectService(db, cache)
    return await service.update_project(project_id, request, user_id)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
)
async def delete_project(
    project_id: UUID,
    db: DBSession,
    cache: Cache,
    gateway: Gateway,
    user_id: CurrentUserId,
    origin: OriginConnection,
) -> None:
    """Delete a project and all of its tasks.

    Viewers of the project room receive ``project_deleted``.

    Args:
        project_id: Project UUID
        db: Database session
        cache: Project cache
        gateway: Sync gateway
        user_id: Current user ID
        origin: Caller's socket id
    """
    service = ProjectService(db, cache, gateway)
    await service.delete_project(project_id, user_id, origin)


@router.post(
    "/{project_id}/collaborators",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add collaborator",
)
async def add_collaborator(
    project_id: UUID,
    request: CollaboratorLookup,
    db: DBSession,
    cache: Cache,
    user_id: CurrentUserId,
) -> UserResponse:
    """Add the user owning an email address as a collaborator.

    Args:
        project_id: Project UUID
        request: Collaborator email
        db: Database session
        cache: Project cache
        user_id: Current user ID

    Returns:
        Added collaborator
    """
    service = ProjectService(db, cache)
    return await service.add_collaborator(project_id, str(request.email), user_id)


@router.delete(
    "/{project_id}/collaborators/{collaborator_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove collaborator",
)
async def remove_collaborator(
    project_id: UUID,
    collaborator_id: str,
    db: DBSession,
    cache: Cache,
    user_id: CurrentUserId,
) -> None:
    """Remove a collaborator from a project.

    Args:
        project_id: Project UUID
        collaborator_id: User to remove
        db: Database session
        cache: Project cache
        user_id: Current user ID
    """
    service = ProjectService(db, cache)
    await service.remove_collaborator(project_id, collaborator_id, user_id)


@router.get(
    "/{project_id}/presence",
    response_model=PresenceResponse,
    summary="Count live viewers",
)
async def get_presence(
    project_id: UUID,
    db: DBSession,
    gateway: Gateway,
    user_id: CurrentUserId,
) -> PresenceResponse:
    """Number of sockets currently viewing the project room.

    Args:
        project_id: Project UUID
        db: Database session
        gateway: Sync gateway (owns the room registry)
        user_id: Current user ID

    Returns:
        Presence count
    """
    service = ProjectService(db, gateway=gateway)
    return await service.get_presence(project_id, user_id)
