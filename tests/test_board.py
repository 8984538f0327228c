# tests/test_board.py

from __future__ import annotations

import asyncio

import pytest

from taskboard.api.errors import NetworkError
from taskboard.api.models import TaskStatus
from taskboard.core.state import AppState

from .fakes import FakeGateway


@pytest.mark.asyncio
async def test_load_renders_stats_tabs_and_list(state: AppState) -> None:
    await state.board.load()
    page = state.board.render()

    assert "Total: 5 | To Do: 2 | In Progress: 1 | Done: 1 | Cancelled: 1" in page
    assert "[all]" in page
    assert "Fix login" in page
    assert "cover the cache" in page


@pytest.mark.asyncio
async def test_filter_in_progress_shows_single_task(state: AppState) -> None:
    await state.board.load()
    state.board.select("IN_PROGRESS")

    visible = state.board.visible_tasks()
    page = state.board.render()

    assert [t.id for t in visible] == [2]
    assert state.board.stats.in_progress == 1
    assert "[IN PROGRESS]" in page.splitlines()[2]
    assert "Write docs" not in page


@pytest.mark.asyncio
async def test_loading_indicator_while_fetch_in_flight(state: AppState, gateway: FakeGateway) -> None:
    gateway.gate = asyncio.Event()

    loader = asyncio.create_task(state.board.load())
    for _ in range(5):
        await asyncio.sleep(0)
    assert state.board.loading
    assert "Loading tasks..." in state.board.render()

    gateway.gate.set()
    await loader
    assert not state.board.loading
    assert "Loading tasks..." not in state.board.render()


@pytest.mark.asyncio
async def test_failed_refresh_shows_error_not_stale_list(state: AppState, gateway: FakeGateway) -> None:
    await state.board.load()
    gateway.fail_next["list_tasks"] = NetworkError("connection refused")

    await state.board.load(refresh=True)
    page = state.board.render()

    assert "Error loading tasks" in page
    assert "Fix login" not in page
    assert "Total: 5" in page


@pytest.mark.asyncio
async def test_delete_reloads_board(state: AppState, gateway: FakeGateway) -> None:
    await state.board.load()

    await state.board.delete(2)

    assert gateway.calls["list_tasks"] == 2
    assert gateway.calls["get_stats"] == 2
    assert all(t.id != 2 for t in state.board.tasks)
    assert state.board.stats.in_progress == 0


@pytest.mark.asyncio
async def test_cancelled_filter_gets_its_own_tab(state: AppState) -> None:
    await state.board.load()
    state.board.select(TaskStatus.CANCELLED)

    assert "[CANCELLED]" in state.board.render()
    assert [t.id for t in state.board.visible_tasks()] == [4]
