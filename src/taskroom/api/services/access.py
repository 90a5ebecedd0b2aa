"""Access rules for projects and tasks.

The predicates are pure: they take already-fetched entities and never
touch storage. ``ensure_*`` wrappers raise ``AccessDeniedError`` so
services can abort before any write or broadcast happens.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import AccessDeniedError

if TYPE_CHECKING:
    from taskroom.db.models import Project


def is_creator(project: Project, actor_id: str) -> bool:
    """Whether the actor created the project."""
    return project.creator_id == actor_id


def is_collaborator(project: Project, actor_id: str) -> bool:
    """Whether the actor collaborates on the project."""
    return actor_id in project.collaborator_ids


def can_read_project(project: Project, actor_id: str) -> bool:
    """Creator and collaborators may read the project and open its room."""
    return is_creator(project, actor_id) or is_collaborator(project, actor_id)


def can_mutate_project(project: Project, actor_id: str) -> bool:
    """Only the creator may edit or delete the project and manage collaborators."""
    return is_creator(project, actor_id)


def can_mutate_task(project: Project, actor_id: str) -> bool:
    """Only the project creator may create, edit, read or delete tasks."""
    return is_creator(project, actor_id)


def can_toggle_task_status(project: Project, actor_id: str) -> bool:
    """Completing a task is collaborative: creator or any collaborator."""
    return can_read_project(project, actor_id)


def ensure_can_read_project(project: Project, actor_id: str) -> None:
    """Raise AccessDeniedError unless the actor may read the project."""
    if not can_read_project(project, actor_id):
        raise AccessDeniedError("Project", project.id)


def ensure_can_mutate_project(project: Project, actor_id: str) -> None:
    """Raise AccessDeniedError unless the actor may mutate the project."""
    if not can_mutate_project(project, actor_id):
        raise AccessDeniedError("Project", project.id)


def ensure_can_mutate_task(project: Project, actor_id: str) -> None:
    """Raise AccessDeniedError unless the actor may mutate tasks of the project."""
    if not can_mutate_task(project, actor_id):
        raise AccessDeniedError("Project", project.id)


def ensure_can_toggle_task_status(project: Project, actor_id: str) -> None:
    """Raise AccessDeniedError unless the actor may toggle task status."""
    if not can_toggle_task_status(project, actor_id):
        raise AccessDeniedError("Project", project.id)
