"""Task lifecycle management service."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskroom.db.repository import ProjectRepository, TaskRepository

from ..exceptions import NotFoundError, PartialFailureError
from ..schemas import TaskCreate, TaskResponse, TaskUpdate
from . import access
from ._common import supplied_fields

if TYPE_CHECKING:
    from taskroom.db.models import Task

    from .sync_gateway import SyncGateway

logger = structlog.get_logger()


class TaskService:
    """Task lifecycle management.

    Lifecycle: created, edited any number of times, completed and reopened
    any number of times, deleted once. Every successful write is followed
    by exactly one gateway call; failed writes publish nothing.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        gateway: SyncGateway | None = None,
    ) -> None:
        """Initialize task service.

        Args:
            db_session: Database session
            gateway: Optional gateway for live room notifications
        """
        self.db = db_session
        self.gateway = gateway
        self.project_repo = ProjectRepository(db_session)
        self.task_repo = TaskRepository(db_session)

    async def create_task(
        self,
        request: TaskCreate,
        actor_id: str,
        origin: str | None = None,
    ) -> TaskResponse:
        """Create a task and append it to its project's task list.

        Args:
            request: Task creation request
            actor_id: Acting user
            origin: Connection id of the caller's socket, skipped on broadcast

        Returns:
            Created task

        Raises:
            NotFoundError: If the project does not exist
            AccessDeniedError: If the actor did not create the project
            PartialFailureError: If the task was stored but the project list was not updated
        """
        project = await self.project_repo.get_by_id(request.project_id)
        if project is None:
            raise NotFoundError("Project", request.project_id)
        access.ensure_can_mutate_task(project, actor_id)

        task = await self.task_repo.create(
            project_id=project.id,
            name=request.name,
            description=request.description,
            priority=request.priority.value,
            deliver_date=request.deliver_date,
            status=False,
        )
        await self.db.commit()

        try:
            await self.project_repo.append_task(project, task.id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "task_project_link_failed",
                task_id=str(task.id),
                project_id=str(project.id),
                error=str(e),
            )
            raise PartialFailureError(
                "create_task",
                completed=["task_insert"],
                failed=["project_update"],
            ) from e

        response = await self._load_response(task.id)

        logger.info(
            "task_created",
            task_id=str(task.id),
            project_id=str(project.id),
            actor_id=actor_id,
        )

        if self.gateway:
            await self._broadcast(self.gateway.task_added, response, origin)

        return response

    async def get_task(self, task_id: UUID, actor_id: str) -> TaskResponse:
        """Get a task.

        Args:
            task_id: Task ID
            actor_id: Acting user

        Returns:
            Task with its project

        Raises:
            NotFoundError: If the task does not exist
            AccessDeniedError: If the actor did not create the project
        """
        task = await self._get_task(task_id)
        access.ensure_can_mutate_task(task.project, actor_id)
        return TaskResponse.model_validate(task)

    async def edit_task(
        self,
        task_id: UUID,
        request: TaskUpdate,
        actor_id: str,
        origin: str | None = None,
    ) -> TaskResponse:
        """Merge-patch a task.

        Only fields supplied with a non-empty value are overwritten.

        Args:
            task_id: Task ID
            request: Fields to change
            actor_id: Acting user
            origin: Connection id of the caller's socket

        Returns:
            Updated task
        """
        task = await self._get_task(task_id)
        access.ensure_can_mutate_task(task.project, actor_id)

        changes = supplied_fields(request)
        if not changes:
            return TaskResponse.model_validate(task)

        await self.task_repo.update(task, **changes)
        await self.db.commit()

        response = await self._load_response(task.id)

        logger.info(
            "task_edited",
            task_id=str(task_id),
            fields=sorted(changes),
            actor_id=actor_id,
        )

        if self.gateway:
            await self._broadcast(self.gateway.task_edited, response, origin)

        return response

    async def delete_task(
        self,
        task_id: UUID,
        actor_id: str,
        origin: str | None = None,
    ) -> None:
        """Delete a task and drop it from its project's task list.

        Both writes are attempted even when the first fails. The room is
        told about the deletion whenever the task row is gone.

        Args:
            task_id: Task ID
            actor_id: Acting user
            origin: Connection id of the caller's socket

        Raises:
            PartialFailureError: If either write failed
        """
        task = await self._get_task(task_id)
        project = task.project
        access.ensure_can_mutate_task(project, actor_id)

        snapshot = TaskResponse.model_validate(task)
        completed: list[str] = []
        failed: list[str] = []

        try:
            await self.project_repo.remove_task(project, task.id)
            await self.db.commit()
            completed.append("project_update")
        except SQLAlchemyError as e:
            await self.db.rollback()
            failed.append("project_update")
            logger.error("task_project_unlink_failed", task_id=str(task_id), error=str(e))

        try:
            await self.task_repo.delete(task)
            await self.db.commit()
            completed.append("task_delete")
        except SQLAlchemyError as e:
            await self.db.rollback()
            failed.append("task_delete")
            logger.error("task_delete_failed", task_id=str(task_id), error=str(e))

        if "task_delete" in completed:
            logger.info("task_deleted", task_id=str(task_id), actor_id=actor_id)
            if self.gateway:
                await self._broadcast(self.gateway.task_deleted, snapshot, origin)

        if failed:
            raise PartialFailureError("delete_task", completed=completed, failed=failed)

    async def toggle_status(
        self,
        task_id: UUID,
        actor_id: str,
        origin: str | None = None,
    ) -> TaskResponse:
        """Flip a task's status and record the actor as its last toggler.

        ``completed_by`` is overwritten on reopen as well, so it always names
        whoever touched the status last.

        Args:
            task_id: Task ID
            actor_id: Acting user (creator or collaborator)
            origin: Connection id of the caller's socket

        Returns:
            Updated task with project and completer populated
        """
        task = await self._get_task(task_id)
        access.ensure_can_toggle_task_status(task.project, actor_id)

        new_status = not task.status
        await self.task_repo.update(task, status=new_status, completed_by_id=actor_id)
        await self.db.commit()

        response = await self._load_response(task.id)

        logger.info(
            "task_status_toggled",
            task_id=str(task_id),
            status=new_status,
            actor_id=actor_id,
        )

        if self.gateway:
            await self._broadcast(self.gateway.task_completed, response, origin)

        return response

    async def _get_task(self, task_id: UUID) -> Task:
        task = await self.task_repo.get_with_project(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    async def _load_response(self, task_id: UUID) -> TaskResponse:
        task = await self._get_task(task_id)
        return TaskResponse.model_validate(task)

    async def _broadcast(
        self,
        publish: Callable[[TaskResponse, str | None], Awaitable[int]],
        task: TaskResponse,
        origin: str | None,
    ) -> None:
        # The write is already committed; delivery problems are only logged
        try:
            await publish(task, origin)
        except Exception as e:
            logger.warning(
                "task_broadcast_failed",
                task_id=str(task.id),
                error=str(e),
            )
