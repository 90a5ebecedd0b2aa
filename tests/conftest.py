"""Shared fixtures: transient ORM entities and fake transports."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any
from uuid import uuid4

import pytest

from taskroom.db.models import Project, Task, TaskPriority, User


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self, fail_with: BaseException | None = None) -> None:
        self.accepted = False
        self.closed = False
        self.close_code: int | None = None
        self.messages_sent: list[dict[str, Any]] = []
        self.fail_with = fail_with

    async def accept(self) -> None:
        self.accepted = True

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed = True
        self.close_code = code

    async def send_json(self, data: dict[str, Any]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.messages_sent.append(data)

    def sent_types(self) -> list[str]:
        return [m["type"] for m in self.messages_sent]


UserFactory = Callable[..., User]
ProjectFactory = Callable[..., Project]
TaskFactory = Callable[..., Task]


@pytest.fixture
def make_user() -> UserFactory:
    """Build transient users."""

    def _make(user_id: str, email: str | None = None, name: str | None = None) -> User:
        return User(
            id=user_id,
            email=email or f"{user_id}@example.com",
            name=name or user_id.title(),
        )

    return _make


@pytest.fixture
def make_project() -> ProjectFactory:
    """Build transient projects wired to their creator and collaborators."""

    def _make(
        creator: User,
        collaborators: Iterable[User] = (),
        name: str = "Website relaunch",
    ) -> Project:
        project = Project(
            id=uuid4(),
            name=name,
            description="",
            client="Acme",
            deliver_date=None,
            creator_id=creator.id,
            task_ids=[],
        )
        project.creator = creator
        project.collaborators = list(collaborators)
        return project

    return _make


@pytest.fixture
def make_task() -> TaskFactory:
    """Build transient tasks appended to their project's order."""

    def _make(
        project: Project,
        name: str = "Draft wireframes",
        status: bool = False,
        priority: TaskPriority = TaskPriority.MEDIUM,
    ) -> Task:
        task = Task(
            id=uuid4(),
            project_id=project.id,
            name=name,
            description="",
            priority=priority.value,
            deliver_date=None,
            status=status,
            completed_by_id=None,
        )
        task.project = project
        project.task_ids.append(str(task.id))
        return task

    return _make


@pytest.fixture
def creator(make_user: UserFactory) -> User:
    """Project creator."""
    return make_user("creator-1", name="Cora")


@pytest.fixture
def collaborator(make_user: UserFactory) -> User:
    """Collaborator on the project."""
    return make_user("collab-1", name="Colin")


@pytest.fixture
def stranger(make_user: UserFactory) -> User:
    """User with no relation to the project."""
    return make_user("stranger-1", name="Stan")


@pytest.fixture
def project(make_project: ProjectFactory, creator: User, collaborator: User) -> Project:
    """Project owned by ``creator`` shared with ``collaborator``."""
    return make_project(creator, [collaborator])


@pytest.fixture
def task(make_task: TaskFactory, project: Project) -> Task:
    """Open task in ``project``."""
    return make_task(project)


@pytest.fixture
def make_ws() -> type[MockWebSocket]:
    """Factory for mock WebSockets."""
    return MockWebSocket
