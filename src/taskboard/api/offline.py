# src/taskboard/api/offline.py

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime

from .errors import HttpError
from .models import Task, TaskStats, TaskStatus


class OfflineTaskGateway:
    """
    In-memory task gateway used for demos when no backend is reachable.

    Behavior mirrors what the REST service exposes:
    - ids are assigned here, never taken from the caller
    - missing ids -> HttpError(404)
    - status/active lists are ordered by priority (highest first), newest first
    - active == every status except CANCELLED
    - DONE stamps completed_at; leaving DONE clears it
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self._tasks: dict[int, Task] = {}
        self._next_id = 1
        for t in tasks or []:
            self._insert(t)

    def _insert(self, task: Task) -> Task:
        now = datetime.now()
        stored = replace(
            task,
            id=self._next_id,
            created_at=task.created_at or now,
            updated_at=now,
            completed_at=now if task.status == TaskStatus.DONE else None,
        )
        self._tasks[self._next_id] = stored
        self._next_id += 1
        return stored

    def _require(self, task_id: int, method: str) -> Task:
        task = self._tasks.get(int(task_id))
        if task is None:
            raise HttpError(404, method=method, url=f"offline:/api/tasks/{task_id}")
        return task

    @staticmethod
    def _ordered(tasks: list[Task]) -> list[Task]:
        by_created = sorted(tasks, key=lambda t: t.created_at or datetime.min, reverse=True)
        return sorted(by_created, key=lambda t: t.priority.rank, reverse=True)

    async def list_tasks(self) -> list[Task]:
        await asyncio.sleep(0)
        return list(self._tasks.values())

    async def get_task(self, task_id: int) -> Task:
        await asyncio.sleep(0)
        return self._require(task_id, "GET")

    async def list_tasks_by_status(self, status: TaskStatus | str) -> list[Task]:
        await asyncio.sleep(0)
        st = TaskStatus.parse(status)
        return self._ordered([t for t in self._tasks.values() if t.status == st])

    async def list_active_tasks(self) -> list[Task]:
        await asyncio.sleep(0)
        return self._ordered([t for t in self._tasks.values() if t.status != TaskStatus.CANCELLED])

    async def get_stats(self) -> TaskStats:
        await asyncio.sleep(0)
        tasks = list(self._tasks.values())

        def count(st: TaskStatus) -> int:
            return sum(1 for t in tasks if t.status == st)

        return TaskStats(
            total=len(tasks),
            todo=count(TaskStatus.TODO),
            in_progress=count(TaskStatus.IN_PROGRESS),
            done=count(TaskStatus.DONE),
            cancelled=count(TaskStatus.CANCELLED),
        )

    async def create_task(self, task: Task) -> Task:
        await asyncio.sleep(0)
        return self._insert(replace(task, created_at=None))

    async def update_task(self, task_id: int, task: Task) -> Task:
        await asyncio.sleep(0)
        current = self._require(task_id, "PUT")
        now = datetime.now()
        if task.status == TaskStatus.DONE:
            completed_at = current.completed_at or now
        else:
            completed_at = None
        updated = replace(
            current,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            updated_at=now,
            completed_at=completed_at,
        )
        self._tasks[current.id] = updated  # type: ignore[index]
        return updated

    async def delete_task(self, task_id: int) -> None:
        await asyncio.sleep(0)
        self._require(task_id, "DELETE")
        del self._tasks[int(task_id)]

    async def health(self) -> dict[str, str]:
        return {"status": "UP", "service": "offline"}

    async def info(self) -> dict[str, str]:
        return {"application": "taskboard-offline", "description": "In-memory demo backend"}

    async def aclose(self) -> None:
        return


def demo_tasks() -> list[Task]:
    """Seed data for offline demos."""
    return [
        Task(title="Set up CI pipeline", description="Build, test and publish on every push.",
             status=TaskStatus.DONE, priority="HIGH"),
        Task(title="Write API docs", description="Document the /api/tasks endpoints.",
             status=TaskStatus.IN_PROGRESS, priority="MEDIUM"),
        Task(title="Add health checks", status=TaskStatus.TODO, priority="URGENT"),
        Task(title="Tune database indexes", status=TaskStatus.TODO, priority="LOW"),
        Task(title="Migrate to legacy queue", status=TaskStatus.CANCELLED, priority="LOW"),
    ]
