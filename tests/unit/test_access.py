"""Access rule tests."""

from __future__ import annotations

import pytest

from taskroom.api.exceptions import AccessDeniedError
from taskroom.api.services import access
from taskroom.db.models import Project, User


class TestPredicates:
    """Capability matrix for creator, collaborator and stranger."""

    def test_creator_has_every_capability(self, project: Project, creator: User) -> None:
        """The creator may read, mutate and toggle."""
        assert access.is_creator(project, creator.id)
        assert access.can_read_project(project, creator.id)
        assert access.can_mutate_project(project, creator.id)
        assert access.can_mutate_task(project, creator.id)
        assert access.can_toggle_task_status(project, creator.id)

    def test_collaborator_reads_and_toggles_only(
        self, project: Project, collaborator: User
    ) -> None:
        """Collaborators read and toggle but never mutate."""
        assert access.is_collaborator(project, collaborator.id)
        assert access.can_read_project(project, collaborator.id)
        assert access.can_toggle_task_status(project, collaborator.id)
        assert not access.can_mutate_project(project, collaborator.id)
        assert not access.can_mutate_task(project, collaborator.id)

    def test_stranger_has_no_capability(self, project: Project, stranger: User) -> None:
        """Unrelated users get nothing."""
        assert not access.can_read_project(project, stranger.id)
        assert not access.can_mutate_project(project, stranger.id)
        assert not access.can_mutate_task(project, stranger.id)
        assert not access.can_toggle_task_status(project, stranger.id)

    def test_creator_is_not_a_collaborator(self, project: Project, creator: User) -> None:
        """Creator and collaborator roles are disjoint."""
        assert not access.is_collaborator(project, creator.id)


class TestEnsure:
    """Raising wrappers."""

    def test_ensure_read_passes_for_collaborator(
        self, project: Project, collaborator: User
    ) -> None:
        """No exception for members."""
        access.ensure_can_read_project(project, collaborator.id)

    def test_ensure_mutate_task_raises_for_collaborator(
        self, project: Project, collaborator: User
    ) -> None:
        """Collaborators cannot mutate tasks."""
        with pytest.raises(AccessDeniedError) as exc_info:
            access.ensure_can_mutate_task(project, collaborator.id)

        assert exc_info.value.status_code == 403
        assert exc_info.value.code == "ACCESS_DENIED"

    def test_ensure_toggle_raises_for_stranger(self, project: Project, stranger: User) -> None:
        """Strangers cannot toggle status."""
        with pytest.raises(AccessDeniedError):
            access.ensure_can_toggle_task_status(project, stranger.id)

    def test_ensure_mutate_project_raises_for_stranger(
        self, project: Project, stranger: User
    ) -> None:
        """Strangers cannot mutate projects."""
        with pytest.raises(AccessDeniedError):
            access.ensure_can_mutate_project(project, stranger.id)
