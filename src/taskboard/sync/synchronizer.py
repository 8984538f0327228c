# src/taskboard/sync/synchronizer.py

from __future__ import annotations

import logging

from ..api.models import Task, TaskStats, TaskStatus
from ..core.ports import TaskGateway
from .cache import QueryCache, QueryKey

logger = logging.getLogger(__name__)

TASKS_KEY: QueryKey = ("tasks",)
ACTIVE_KEY: QueryKey = ("tasks", "active")
STATS_KEY: QueryKey = ("stats",)


def status_key(status: TaskStatus | str) -> QueryKey:
    return ("tasks", "status", TaskStatus.parse(status).value)


def task_key(task_id: int) -> QueryKey:
    return ("task", int(task_id))


class TaskSynchronizer:
    """
    Serves task data to the view from the cache and keeps it coherent.

    Reads go through QueryCache.fetch (one in-flight request per key).
    Mutations go straight to the gateway; only on success are the derived
    keys invalidated:
    - create: tasks*, stats
    - update: tasks*, stats, task:{id}
    - delete: tasks*, stats, and task:{id} is dropped
    A failed mutation leaves the cache untouched and re-raises.
    """

    def __init__(self, gateway: TaskGateway, cache: QueryCache) -> None:
        self.gateway = gateway
        self.cache = cache

    # ---- reads ----

    async def tasks(self, *, refresh: bool = False) -> list[Task]:
        return await self.cache.fetch(TASKS_KEY, self.gateway.list_tasks, force=refresh)

    async def tasks_by_status(self, status: TaskStatus | str, *, refresh: bool = False) -> list[Task]:
        st = TaskStatus.parse(status)
        return await self.cache.fetch(
            status_key(st),
            lambda: self.gateway.list_tasks_by_status(st),
            force=refresh,
        )

    async def active_tasks(self, *, refresh: bool = False) -> list[Task]:
        return await self.cache.fetch(ACTIVE_KEY, self.gateway.list_active_tasks, force=refresh)

    async def stats(self, *, refresh: bool = False) -> TaskStats:
        return await self.cache.fetch(STATS_KEY, self.gateway.get_stats, force=refresh)

    async def task(self, task_id: int, *, refresh: bool = False) -> Task:
        tid = int(task_id)
        return await self.cache.fetch(task_key(tid), lambda: self.gateway.get_task(tid), force=refresh)

    # ---- mutations ----

    async def create_task(self, task: Task) -> Task:
        created = await self.gateway.create_task(task)
        self._invalidate_collections()
        return created

    async def update_task(self, task_id: int, task: Task) -> Task:
        updated = await self.gateway.update_task(int(task_id), task)
        self._invalidate_collections()
        self.cache.invalidate(task_key(task_id))
        return updated

    async def delete_task(self, task_id: int) -> None:
        await self.gateway.delete_task(int(task_id))
        self._invalidate_collections()
        self.cache.remove(task_key(task_id))

    # ---- invalidation ----

    def _invalidate_collections(self) -> None:
        hit = self.cache.invalidate(TASKS_KEY) + self.cache.invalidate(STATS_KEY)
        logger.debug("mutation invalidated %d cache keys", len(hit))
