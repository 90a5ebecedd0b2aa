"""Task repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.task import Task
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Repository for Task model operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task repository.

        Args:
            session: Database session
        """
        super().__init__(Task, session)

    async def get_with_project(self, task_id: UUID) -> Task | None:
        """Get task with its project and completer eagerly loaded.

        Args:
            task_id: Task UUID

        Returns:
            Task or None if not found
        """
        stmt = (
            select(Task)
            .where(Task.id == task_id)
            .options(selectinload(Task.project), selectinload(Task.completed_by))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
