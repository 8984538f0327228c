# src/taskboard/view/board.py

from __future__ import annotations

import asyncio
import logging

from ..api.errors import friendly_error_message
from ..api.models import Task, TaskStats, TaskStatus
from ..sync.synchronizer import STATS_KEY, TASKS_KEY, TaskSynchronizer
from .filters import ALL, FILTER_TABS, FilterSelector, filter_label, filter_tasks, parse_filter

logger = logging.getLogger(__name__)

_STAT_CARDS: tuple[tuple[str, str], ...] = (
    ("Total", "total"),
    ("To Do", "todo"),
    ("In Progress", "in_progress"),
    ("Done", "done"),
    ("Cancelled", "cancelled"),
)


class TaskBoard:
    """
    Text rendition of the task page: stats cards, filter tabs, task list.

    The board never touches cache entries directly; it reads through the
    synchronizer and peeks at the last values for rendering. A failed load
    is kept as an error state and rendered instead of the (possibly stale)
    list.
    """

    def __init__(
        self,
        sync: TaskSynchronizer,
        *,
        selected: FilterSelector = ALL,
        title: str = "Task Manager",
    ) -> None:
        self.sync = sync
        self.selected: FilterSelector = selected
        self.title = title
        self.tasks_error: Exception | None = None
        self.stats_error: Exception | None = None

    # ---- state ----

    @property
    def loading(self) -> bool:
        return self.sync.cache.is_loading(TASKS_KEY)

    @property
    def tasks(self) -> list[Task] | None:
        return self.sync.cache.peek(TASKS_KEY)

    @property
    def stats(self) -> TaskStats | None:
        return self.sync.cache.peek(STATS_KEY)

    def select(self, raw: str | TaskStatus) -> FilterSelector:
        self.selected = parse_filter(raw)
        return self.selected

    def visible_tasks(self) -> list[Task]:
        return filter_tasks(self.tasks or [], self.selected)

    # ---- actions ----

    async def load(self, *, refresh: bool = False) -> None:
        """Fetch tasks and stats concurrently; failures become error state."""
        tasks_res, stats_res = await asyncio.gather(
            self.sync.tasks(refresh=refresh),
            self.sync.stats(refresh=refresh),
            return_exceptions=True,
        )

        if isinstance(tasks_res, asyncio.CancelledError) or isinstance(stats_res, asyncio.CancelledError):
            raise asyncio.CancelledError()

        self.tasks_error = tasks_res if isinstance(tasks_res, Exception) else None
        self.stats_error = stats_res if isinstance(stats_res, Exception) else None

        if self.tasks_error is not None:
            logger.info("Task list load failed: %s", self.tasks_error)
        if self.stats_error is not None:
            logger.info("Stats load failed: %s", self.stats_error)

    async def delete(self, task_id: int) -> None:
        """Delete through the synchronizer, then reload the invalidated keys."""
        await self.sync.delete_task(task_id)
        await self.load()

    # ---- rendering ----

    def render(self) -> str:
        lines = [f"=== {self.title} ==="]
        lines.append(self._render_stats())
        lines.append(self._render_tabs())
        lines.append("")
        lines.extend(self._render_list())
        return "\n".join(lines)

    def _render_stats(self) -> str:
        if self.stats_error is not None:
            return f"[stats unavailable: {friendly_error_message(self.stats_error)}]"
        stats = self.stats
        if stats is None:
            return "[stats loading...]"
        cards = [f"{label}: {getattr(stats, attr)}" for label, attr in _STAT_CARDS]
        return "[ " + " | ".join(cards) + " ]"

    def _render_tabs(self) -> str:
        tabs = []
        for tab in FILTER_TABS:
            label = filter_label(tab)
            tabs.append(f"[{label}]" if tab == self.selected else f" {label} ")
        if self.selected not in FILTER_TABS:
            tabs.append(f"[{filter_label(self.selected)}]")
        return "Filter: " + " ".join(tabs)

    def _render_list(self) -> list[str]:
        if self.tasks_error is not None:
            return [f"Error loading tasks: {friendly_error_message(self.tasks_error)}"]
        if self.loading or self.tasks is None:
            return ["Loading tasks..."]

        visible = self.visible_tasks()
        if not visible:
            return ["No tasks."]

        out: list[str] = []
        for t in visible:
            out.append(render_task_line(t))
            if t.description:
                out.append(f"      {t.description}")
        return out


def render_task_line(task: Task) -> str:
    tid = f"#{task.id}" if task.id is not None else "#?"
    return f"{tid:>5} {task.title}  [{task.status.label}] [{task.priority.value}]"


def render_task_detail(task: Task) -> str:
    lines = [render_task_line(task)]
    if task.description:
        lines.append(f"      {task.description}")
    for label, ts in (("created", task.created_at), ("updated", task.updated_at), ("completed", task.completed_at)):
        if ts is not None:
            lines.append(f"      {label}: {ts.isoformat(sep=' ', timespec='seconds')}")
    return "\n".join(lines)
