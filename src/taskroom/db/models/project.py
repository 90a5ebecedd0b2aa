"""Project model and collaborator association table."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import JSON, TEXT, VARCHAR, Column, DateTime, ForeignKey, Table, func
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .task import Task
    from .user import User


project_collaborators = Table(
    "project_collaborators",
    Base.metadata,
    Column(
        "project_id",
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("created_at", DateTime, server_default=func.now(), nullable=False),
)


class Project(Base):
    """Project owned by a creator and shared with collaborators.

    Attributes:
        id: Primary key (UUID)
        name: Project name
        description: Free-form description
        client: Client the project is delivered to
        deliver_date: Planned delivery date
        creator_id: Owner; never changes after creation
        task_ids: Ordered task ids (string UUIDs), appended on task creation
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    __tablename__ = "projects"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(VARCHAR(255))
    description: Mapped[str] = mapped_column(TEXT, default="")
    client: Mapped[str] = mapped_column(VARCHAR(255), default="")
    deliver_date: Mapped[date | None]
    creator_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True)
    task_ids: Mapped[list[str]] = mapped_column(
        MutableList.as_mutable(JSON), default=list
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    creator: Mapped[User] = relationship(lazy="selectin")
    collaborators: Mapped[list[User]] = relationship(
        secondary=project_collaborators, lazy="selectin"
    )
    tasks: Mapped[list[Task]] = relationship(
        back_populates="project",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def collaborator_ids(self) -> set[str]:
        """Ids of every collaborator."""
        return {user.id for user in self.collaborators}

    @property
    def ordered_tasks(self) -> list[Task]:
        """Tasks in the order recorded by ``task_ids``."""
        by_id = {str(task.id): task for task in self.tasks}
        return [by_id[task_id] for task_id in self.task_ids if task_id in by_id]

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name})>"
