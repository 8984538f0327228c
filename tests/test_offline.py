# tests/test_offline.py

from __future__ import annotations

import pytest

from taskboard.api.errors import HttpError
from taskboard.api.models import Task, TaskStatus
from taskboard.api.offline import OfflineTaskGateway, demo_tasks
from taskboard.cli.bootstrap import create_initial_state


@pytest.mark.asyncio
async def test_offline_round_trip_assigns_ids() -> None:
    gw = OfflineTaskGateway()
    draft = Task(id=42, title="Offline task", priority="HIGH")

    created = await gw.create_task(draft)
    fetched = await gw.get_task(created.id)

    assert created.id == 1
    assert fetched.same_content(draft)
    assert fetched.created_at is not None


@pytest.mark.asyncio
async def test_offline_active_is_non_cancelled_by_priority() -> None:
    gw = OfflineTaskGateway(demo_tasks())

    active = await gw.list_active_tasks()

    assert all(t.status != TaskStatus.CANCELLED for t in active)
    ranks = [t.priority.rank for t in active]
    assert ranks == sorted(ranks, reverse=True)


@pytest.mark.asyncio
async def test_offline_done_stamps_completion_and_missing_ids_404() -> None:
    gw = OfflineTaskGateway([Task(title="x")])

    done = await gw.update_task(1, Task(title="x", status=TaskStatus.DONE))
    assert done.completed_at is not None

    reopened = await gw.update_task(1, Task(title="x", status=TaskStatus.TODO))
    assert reopened.completed_at is None

    with pytest.raises(HttpError):
        await gw.delete_task(2)


@pytest.mark.asyncio
async def test_bootstrap_offline_mode(settings) -> None:
    settings.offline = True
    settings.default_filter = "done"

    state = create_initial_state(settings=settings)
    await state.board.load()

    assert isinstance(state.gateway, OfflineTaskGateway)
    assert state.board.selected is TaskStatus.DONE
    assert state.board.stats.total == 5
    assert settings.data_dir.exists()
