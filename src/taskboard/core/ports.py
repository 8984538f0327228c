# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The synchronizer and the view depend on Protocols instead of concrete
implementations, so the HTTP gateway, the offline gateway and test fakes
are interchangeable.
"""

from typing import Protocol

from ..api.models import Task, TaskStats, TaskStatus


class TaskGateway(Protocol):
    """Remote task service: one coroutine per backend capability."""

    async def list_tasks(self) -> list[Task]: ...
    async def get_task(self, task_id: int) -> Task: ...
    async def list_tasks_by_status(self, status: TaskStatus | str) -> list[Task]: ...
    async def list_active_tasks(self) -> list[Task]: ...
    async def get_stats(self) -> TaskStats: ...

    async def create_task(self, task: Task) -> Task: ...
    async def update_task(self, task_id: int, task: Task) -> Task: ...
    async def delete_task(self, task_id: int) -> None: ...

    async def health(self) -> dict[str, str]: ...
    async def info(self) -> dict[str, str]: ...
    async def aclose(self) -> None: ...
