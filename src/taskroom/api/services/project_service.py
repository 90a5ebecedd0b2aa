"""Project and membership management service."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskroom.db.repository import ProjectRepository, UserRepository

from ..exceptions import (
    DuplicateCollaboratorError,
    InvalidCollaboratorError,
    NotFoundError,
)
from ..schemas import (
    PresenceResponse,
    ProjectCreate,
    ProjectDetailResponse,
    ProjectResponse,
    ProjectUpdate,
    TaskResponse,
    UserResponse,
)
from . import access
from ._common import supplied_fields

if TYPE_CHECKING:
    from taskroom.cache import ProjectCache
    from taskroom.db.models import Project

    from .sync_gateway import SyncGateway

logger = structlog.get_logger()


class ProjectService:
    """Project CRUD and collaborator membership.

    Invariants: the creator never appears among the collaborators and a
    user collaborates on a project at most once.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        cache: ProjectCache | None = None,
        gateway: SyncGateway | None = None,
    ) -> None:
        """Initialize project service.

        Args:
            db_session: Database session
            cache: Optional project cache
            gateway: Optional gateway for live room notifications
        """
        self.db = db_session
        self.cache = cache
        self.gateway = gateway
        self.project_repo = ProjectRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def list_projects(self, actor_id: str) -> list[ProjectResponse]:
        """List projects the actor created or collaborates on.

        Args:
            actor_id: Acting user

        Returns:
            Projects without their tasks
        """
        if self.cache:
            cached = await self.cache.get_user_projects(actor_id)
            if cached is not None:
                return [ProjectResponse.model_validate(item) for item in cached]

        projects = await self.project_repo.list_for_user(actor_id)
        responses = [ProjectResponse.model_validate(p) for p in projects]

        if self.cache:
            await self.cache.cache_user_projects(
                actor_id,
                [r.model_dump(mode="json") for r in responses],
            )

        return responses

    async def create_project(
        self,
        request: ProjectCreate,
        actor_id: str,
    ) -> ProjectResponse:
        """Create a project owned by the actor.

        Args:
            request: Project creation request
            actor_id: Acting user, becomes the creator

        Returns:
            Created project

        Raises:
            NotFoundError: If the actor has no profile yet
        """
        creator = await self.user_repo.get_by_id(actor_id)
        if creator is None:
            raise NotFoundError("User", actor_id)

        project = await self.project_repo.create(
            name=request.name,
            description=request.description,
            client=request.client,
            deliver_date=request.deliver_date,
            creator_id=actor_id,
            task_ids=[],
        )
        await self.db.commit()

        await self._invalidate(actor_id)

        logger.info("project_created", project_id=str(project.id), actor_id=actor_id)

        return ProjectResponse.model_validate(project)

    async def get_project(self, project_id: UUID, actor_id: str) -> ProjectDetailResponse:
        """Get a project with collaborators and ordered tasks.

        Args:
            project_id: Project ID
            actor_id: Acting user (creator or collaborator)

        Returns:
            Project details
        """
        project = await self._get_project(project_id)
        access.ensure_can_read_project(project, actor_id)
        return self._detail(project)

    async def update_project(
        self,
        project_id: UUID,
        request: ProjectUpdate,
        actor_id: str,
    ) -> ProjectResponse:
        """Merge-patch a project's descriptive fields.

        Args:
            project_id: Project ID
            request: Fields to change
            actor_id: Acting user (creator)

        Returns:
            Updated project
        """
        project = await self._get_project(project_id)
        access.ensure_can_mutate_project(project, actor_id)

        changes = supplied_fields(request)
        if changes:
            await self.project_repo.update(project, **changes)
            await self.db.commit()
            await self._invalidate(project.creator_id, *project.collaborator_ids)
            logger.info(
                "project_updated",
                project_id=str(project_id),
                fields=sorted(changes),
            )

        return ProjectResponse.model_validate(project)

    async def delete_project(
        self,
        project_id: UUID,
        actor_id: str,
        origin: str | None = None,
    ) -> None:
        """Delete a project together with its tasks.

        Args:
            project_id: Project ID
            actor_id: Acting user (creator)
            origin: Connection id of the caller's socket
        """
        project = await self._get_project(project_id)
        access.ensure_can_mutate_project(project, actor_id)

        members = [project.creator_id, *project.collaborator_ids]
        task_count = len(project.task_ids)

        await self.project_repo.delete(project)
        await self.db.commit()

        await self._invalidate(*members)

        logger.info(
            "project_deleted",
            project_id=str(project_id),
            tasks_removed=task_count,
        )

        if self.gateway:
            try:
                await self.gateway.project_deleted(project_id, origin)
            except Exception as e:
                logger.warning(
                    "project_broadcast_failed", project_id=str(project_id), error=str(e)
                )

    async def find_collaborator(self, email: str) -> UserResponse:
        """Look up a prospective collaborator by email.

        Args:
            email: Email address

        Returns:
            Public user data

        Raises:
            NotFoundError: If no user has the email
        """
        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise NotFoundError("User", email)
        return UserResponse.model_validate(user)

    async def add_collaborator(
        self,
        project_id: UUID,
        email: str,
        actor_id: str,
    ) -> UserResponse:
        """Add the user owning ``email`` to the project's collaborators.

        Args:
            project_id: Project ID
            email: Collaborator email
            actor_id: Acting user (creator)

        Returns:
            The added collaborator

        Raises:
            NotFoundError: If the project or the user does not exist
            AccessDeniedError: If the actor did not create the project
            InvalidCollaboratorError: If the user is the creator
            DuplicateCollaboratorError: If the user already collaborates
        """
        project = await self._get_project(project_id)
        access.ensure_can_mutate_project(project, actor_id)

        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise NotFoundError("User", email)
        if user.id == project.creator_id:
            raise InvalidCollaboratorError(project_id, user.id)
        if user.id in project.collaborator_ids:
            raise DuplicateCollaboratorError(project_id, user.id)

        await self.project_repo.add_collaborator(project, user)
        await self.db.commit()

        await self._invalidate(user.id)

        logger.info(
            "collaborator_added",
            project_id=str(project_id),
            collaborator_id=user.id,
        )

        return UserResponse.model_validate(user)

    async def remove_collaborator(
        self,
        project_id: UUID,
        collaborator_id: str,
        actor_id: str,
    ) -> None:
        """Remove a collaborator; removing a non-member is a no-op.

        Args:
            project_id: Project ID
            collaborator_id: User to remove
            actor_id: Acting user (creator)
        """
        project = await self._get_project(project_id)
        access.ensure_can_mutate_project(project, actor_id)

        removed = await self.project_repo.remove_collaborator(project, collaborator_id)
        if not removed:
            logger.debug(
                "collaborator_not_member",
                project_id=str(project_id),
                collaborator_id=collaborator_id,
            )
            return

        await self.db.commit()
        await self._invalidate(collaborator_id)

        logger.info(
            "collaborator_removed",
            project_id=str(project_id),
            collaborator_id=collaborator_id,
        )

    async def get_presence(self, project_id: UUID, actor_id: str) -> PresenceResponse:
        """Count the sockets viewing a project room.

        Args:
            project_id: Project ID
            actor_id: Acting user (creator or collaborator)

        Returns:
            Presence count, 0 when no gateway is attached
        """
        project = await self._get_project(project_id)
        access.ensure_can_read_project(project, actor_id)
        connections = 0
        if self.gateway:
            connections = self.gateway.manager.get_room_connection_count(project_id)
        return PresenceResponse(project_id=project_id, connections=connections)

    async def _get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def _invalidate(self, *user_ids: str) -> None:
        # Runs after commit; a stale listing expires with its TTL
        if not self.cache:
            return
        try:
            await self.cache.invalidate_user_projects(*user_ids)
        except Exception as e:
            logger.warning("project_cache_invalidation_failed", error=str(e))

    @staticmethod
    def _detail(project: Project) -> ProjectDetailResponse:
        return ProjectDetailResponse(
            **ProjectResponse.model_validate(project).model_dump(),
            collaborators=[UserResponse.model_validate(u) for u in project.collaborators],
            tasks=[TaskResponse.model_validate(t) for t in project.ordered_tasks],
        )
