"""Bridge from durable task mutations to live project rooms."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from ..config import BroadcastMode
from ..schemas import ProjectDeletedPayload, TaskResponse, WSMessage, WSMessageType

if TYPE_CHECKING:
    from ..websocket.manager import ConnectionManager

logger = structlog.get_logger()


class SyncGateway:
    """Publishes exactly one room event per successful task mutation.

    Services call the gateway only after their durable write succeeded.
    In relay mode clients re-emit persisted tasks themselves, so the
    gateway stays silent for task events to keep one broadcast per
    mutation.
    """

    def __init__(
        self,
        manager: ConnectionManager,
        mode: BroadcastMode = BroadcastMode.SERVER,
    ) -> None:
        """Initialize gateway.

        Args:
            manager: Connection manager owning the rooms
            mode: Broadcast mode
        """
        self.manager = manager
        self.mode = mode

    async def task_added(self, task: TaskResponse, origin: str | None = None) -> int:
        """Announce a created task."""
        return await self._publish_task(WSMessageType.TASK_ADDED, task, origin)

    async def task_edited(self, task: TaskResponse, origin: str | None = None) -> int:
        """Announce an edited task."""
        return await self._publish_task(WSMessageType.TASK_EDITED, task, origin)

    async def task_deleted(self, task: TaskResponse, origin: str | None = None) -> int:
        """Announce a deleted task."""
        return await self._publish_task(WSMessageType.TASK_DELETED, task, origin)

    async def task_completed(self, task: TaskResponse, origin: str | None = None) -> int:
        """Announce a status toggle (completion or reopen)."""
        return await self._publish_task(WSMessageType.TASK_COMPLETED, task, origin)

    async def project_deleted(self, project_id: UUID, origin: str | None = None) -> int:
        """Tell viewers the project is gone.

        Sent in both modes since clients have no message for project
        deletion.
        """
        message = WSMessage(
            type=WSMessageType.PROJECT_DELETED,
            payload=ProjectDeletedPayload(project_id=project_id).model_dump(mode="json"),
        )
        return await self.manager.publish(project_id, message, exclude=origin)

    async def relay(
        self,
        event_type: WSMessageType,
        project_id: UUID,
        task: dict[str, object],
        origin: str,
    ) -> int:
        """Forward a client-emitted task event to the rest of its room.

        Args:
            event_type: Room event to deliver
            project_id: Room of the task
            task: Task object as sent by the client
            origin: Connection that sent it

        Returns:
            Number of recipients reached
        """
        message = WSMessage(type=event_type, payload={"task": task})
        return await self.manager.publish(project_id, message, exclude=origin)

    async def _publish_task(
        self,
        event_type: WSMessageType,
        task: TaskResponse,
        origin: str | None,
    ) -> int:
        if self.mode is BroadcastMode.RELAY:
            return 0

        message = WSMessage(
            type=event_type,
            payload={"task": task.model_dump(mode="json")},
        )
        sent = await self.manager.publish(task.project_id, message, exclude=origin)

        logger.info(
            "task_event_published",
            message_type=str(event_type),
            task_id=str(task.id),
            project_id=str(task.project_id),
            recipients=sent,
        )
        return sent
