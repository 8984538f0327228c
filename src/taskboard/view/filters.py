# src/taskboard/view/filters.py

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from ..api.models import Task, TaskStatus

ALL: Literal["all"] = "all"

FilterSelector = Literal["all"] | TaskStatus

# Tabs shown on the board, in display order.
FILTER_TABS: tuple[FilterSelector, ...] = (ALL, TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.DONE)


def parse_filter(raw: str | TaskStatus) -> FilterSelector:
    """Accept 'all' or a status name ('in progress', 'in-progress', 'IN_PROGRESS', ...)."""
    if isinstance(raw, TaskStatus):
        return raw
    text = (raw or "").strip().lower()
    if text in ("", ALL, "*"):
        return ALL
    normalized = text.replace("-", "_").replace(" ", "_").upper()
    try:
        return TaskStatus(normalized)
    except ValueError:
        choices = ", ".join(["all", *(s.value for s in TaskStatus)])
        raise ValueError(f"Unknown filter {raw!r}. Use one of: {choices}") from None


def filter_tasks(tasks: Iterable[Task], selector: FilterSelector) -> list[Task]:
    """Tasks matching selector, in their original order. The input is not modified."""
    if selector == ALL:
        return list(tasks)
    return [t for t in tasks if t.status == selector]


def filter_label(selector: FilterSelector) -> str:
    return ALL if selector == ALL else selector.label
