"""Sync gateway tests."""

from __future__ import annotations

from uuid import uuid4

import pytest
from structlog.testing import capture_logs

from taskroom.api.config import BroadcastMode
from taskroom.api.schemas import TaskResponse, WSMessageType
from taskroom.api.services.sync_gateway import SyncGateway
from taskroom.api.websocket import ConnectionManager
from taskroom.db.models import Task


@pytest.fixture
def manager() -> ConnectionManager:
    """Create a real connection manager without presence mirroring."""
    return ConnectionManager()


class TestServerMode:
    """Gateway publishes after successful mutations."""

    @pytest.mark.asyncio
    async def test_task_added_reaches_room_except_origin(
        self,
        manager: ConnectionManager,
        make_ws,
        task: Task,
    ) -> None:
        """The originator does not receive its own event."""
        gateway = SyncGateway(manager)
        origin_ws, peer_ws = make_ws(), make_ws()
        origin = await manager.connect(origin_ws, "creator-1")
        peer = await manager.connect(peer_ws, "collab-1")
        await manager.join(origin, task.project_id)
        await manager.join(peer, task.project_id)

        sent = await gateway.task_added(TaskResponse.model_validate(task), origin.id)

        assert sent == 1
        assert origin_ws.messages_sent == []
        assert peer_ws.sent_types() == ["task_added"]
        payload = peer_ws.messages_sent[0]["payload"]["task"]
        assert payload["id"] == str(task.id)
        assert payload["project"]["id"] == str(task.project_id)

    @pytest.mark.asyncio
    async def test_each_event_maps_to_its_type(
        self,
        manager: ConnectionManager,
        make_ws,
        task: Task,
    ) -> None:
        """Edit, delete and completion use their own event types."""
        gateway = SyncGateway(manager)
        ws = make_ws()
        conn = await manager.connect(ws, "collab-1")
        await manager.join(conn, task.project_id)
        response = TaskResponse.model_validate(task)

        await gateway.task_edited(response)
        await gateway.task_completed(response)
        await gateway.task_deleted(response)

        assert ws.sent_types() == ["task_edited", "task_completed", "task_deleted"]

    @pytest.mark.asyncio
    async def test_publish_is_logged_with_message_type(
        self,
        manager: ConnectionManager,
        task: Task,
    ) -> None:
        """Each published task event is logged once with its type."""
        gateway = SyncGateway(manager)

        with capture_logs() as logs:
            await gateway.task_completed(TaskResponse.model_validate(task))

        published = [e for e in logs if e["event"] == "task_event_published"]
        assert len(published) == 1
        assert published[0]["message_type"] == "task_completed"
        assert published[0]["recipients"] == 0

    @pytest.mark.asyncio
    async def test_project_deleted(
        self,
        manager: ConnectionManager,
        make_ws,
    ) -> None:
        """Room viewers learn that the project is gone."""
        gateway = SyncGateway(manager)
        project_id = uuid4()
        ws = make_ws()
        conn = await manager.connect(ws, "collab-1")
        await manager.join(conn, project_id)

        await gateway.project_deleted(project_id)

        assert ws.messages_sent[0]["type"] == "project_deleted"
        assert ws.messages_sent[0]["payload"] == {"project_id": str(project_id)}


class TestRelayMode:
    """Clients broadcast; the gateway stays silent for task events."""

    @pytest.mark.asyncio
    async def test_task_events_are_not_published(
        self,
        manager: ConnectionManager,
        make_ws,
        task: Task,
    ) -> None:
        """Avoids double delivery when clients relay the same change."""
        gateway = SyncGateway(manager, mode=BroadcastMode.RELAY)
        ws = make_ws()
        conn = await manager.connect(ws, "collab-1")
        await manager.join(conn, task.project_id)

        sent = await gateway.task_added(TaskResponse.model_validate(task))

        assert sent == 0
        assert ws.messages_sent == []

    @pytest.mark.asyncio
    async def test_project_deleted_still_published(
        self,
        manager: ConnectionManager,
        make_ws,
    ) -> None:
        """Clients have no relay message for project deletion."""
        gateway = SyncGateway(manager, mode=BroadcastMode.RELAY)
        project_id = uuid4()
        ws = make_ws()
        conn = await manager.connect(ws, "collab-1")
        await manager.join(conn, project_id)

        assert await gateway.project_deleted(project_id) == 1

    @pytest.mark.asyncio
    async def test_relay_forwards_client_task(
        self,
        manager: ConnectionManager,
        make_ws,
    ) -> None:
        """Relayed tasks go to everyone in the room but the sender."""
        gateway = SyncGateway(manager, mode=BroadcastMode.RELAY)
        project_id = uuid4()
        sender_ws, peer_ws = make_ws(), make_ws()
        sender = await manager.connect(sender_ws, "creator-1")
        peer = await manager.connect(peer_ws, "collab-1")
        await manager.join(sender, project_id)
        await manager.join(peer, project_id)
        task = {"id": str(uuid4()), "project": {"id": str(project_id)}, "name": "Relayed"}

        sent = await gateway.relay(WSMessageType.TASK_EDITED, project_id, task, sender.id)

        assert sent == 1
        assert sender_ws.messages_sent == []
        assert peer_ws.messages_sent[0]["payload"] == {"task": task}
