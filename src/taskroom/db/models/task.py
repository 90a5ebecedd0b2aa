"""Task model."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import BOOLEAN, TEXT, VARCHAR, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .enums import TaskPriority

if TYPE_CHECKING:
    from .project import Project
    from .user import User


class Task(Base):
    """Task belonging to exactly one project.

    Attributes:
        id: Primary key (UUID)
        project_id: Owning project; never changes after creation
        name: Task name
        description: Free-form description
        priority: Priority level (low, medium, high)
        deliver_date: Planned delivery date
        status: True when complete
        completed_by_id: Last user who toggled ``status`` (set on reopen too)
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    __tablename__ = "tasks"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(VARCHAR(255))
    description: Mapped[str] = mapped_column(TEXT, default="")
    priority: Mapped[str] = mapped_column(VARCHAR(20), default=TaskPriority.MEDIUM.value)
    deliver_date: Mapped[date | None]
    status: Mapped[bool] = mapped_column(BOOLEAN, default=False)
    completed_by_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    # Relationships
    project: Mapped[Project] = relationship(back_populates="tasks", lazy="selectin")
    completed_by: Mapped[User | None] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, status={self.status})>"
