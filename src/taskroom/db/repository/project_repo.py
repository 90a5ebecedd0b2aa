"""Project repository for project and membership operations."""

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.project import Project, project_collaborators
from ..models.user import User
from .base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project model operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize project repository.

        Args:
            session: Database session
        """
        super().__init__(Project, session)

    async def list_for_user(self, user_id: str) -> list[Project]:
        """Get projects the user created or collaborates on.

        Args:
            user_id: User ID

        Returns:
            Projects, newest first
        """
        member_of = select(project_collaborators.c.project_id).where(
            project_collaborators.c.user_id == user_id
        )
        stmt = (
            select(Project)
            .where(or_(Project.creator_id == user_id, Project.id.in_(member_of)))
            .order_by(Project.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_collaborator(self, project: Project, user: User) -> Project:
        """Append a user to the project's collaborators.

        Args:
            project: Project to update
            user: User to add

        Returns:
            Updated project
        """
        project.collaborators.append(user)
        await self.session.flush()
        return project

    async def remove_collaborator(self, project: Project, user_id: str) -> bool:
        """Remove a user from the project's collaborators.

        Args:
            project: Project to update
            user_id: User ID to remove

        Returns:
            True if the user was a collaborator
        """
        for user in list(project.collaborators):
            if user.id == user_id:
                project.collaborators.remove(user)
                await self.session.flush()
                return True
        return False

    async def append_task(self, project: Project, task_id: UUID) -> Project:
        """Record a new task id at the end of the project's task list.

        Args:
            project: Project to update
            task_id: Task UUID

        Returns:
            Updated project
        """
        key = str(task_id)
        if key not in project.task_ids:
            project.task_ids.append(key)
        await self.session.flush()
        return project

    async def remove_task(self, project: Project, task_id: UUID) -> bool:
        """Drop a task id from the project's task list.

        Args:
            project: Project to update
            task_id: Task UUID

        Returns:
            True if the id was listed
        """
        key = str(task_id)
        if key not in project.task_ids:
            return False
        project.task_ids.remove(key)
        await self.session.flush()
        return True
