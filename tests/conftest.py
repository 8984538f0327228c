# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.api.models import Task, TaskStatus
from taskboard.cli.bootstrap import create_initial_state
from taskboard.core.state import AppState

from .fakes import FakeGateway


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the gateway.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        api_url="http://testserver",
        connect_timeout_seconds=1.0,
        read_timeout_seconds=1.0,
        offline=False,
        default_filter="all",
    )


@pytest.fixture()
def sample_tasks() -> list[Task]:
    """Five tasks: 2 TODO, 1 IN_PROGRESS, 1 DONE, 1 CANCELLED (ids 1..5)."""
    return [
        Task(id=1, title="Write docs", status=TaskStatus.TODO, priority="LOW"),
        Task(id=2, title="Fix login", status=TaskStatus.IN_PROGRESS, priority="URGENT"),
        Task(id=3, title="Ship v1", status=TaskStatus.DONE, priority="HIGH"),
        Task(id=4, title="Old idea", status=TaskStatus.CANCELLED, priority="MEDIUM"),
        Task(id=5, title="Add tests", description="cover the cache", status=TaskStatus.TODO, priority="HIGH"),
    ]


@pytest.fixture()
def gateway(sample_tasks: list[Task]) -> FakeGateway:
    return FakeGateway(sample_tasks)


@pytest.fixture()
def state(settings: SimpleNamespace, gateway: FakeGateway) -> AppState:
    """AppState wired with the deterministic fake gateway."""
    return create_initial_state(settings=settings, gateway=gateway)
