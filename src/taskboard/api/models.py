# src/taskboard/api/models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from .errors import ValidationError


class TaskStatus(StrEnum):
    """
    Task lifecycle status as the backend spells it.

    CANCELLED is the only status excluded from the backend's "active" list.
    """

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus:
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().upper())
        except ValueError:
            raise ValidationError(f"unknown task status: {raw!r}") from None

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class TaskPriority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @classmethod
    def parse(cls, raw: Any) -> TaskPriority:
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().upper())
        except ValueError:
            raise ValidationError(f"unknown task priority: {raw!r}") from None

    @property
    def rank(self) -> int:
        return list(TaskPriority).index(self)


def _parse_ts(raw: Any, field_name: str) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"{field_name}: not an ISO-8601 timestamp: {raw!r}") from None


@dataclass(slots=True)
class Task:
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM

    # Server-assigned; never sent back in request bodies.
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValidationError("title is required")
        self.status = TaskStatus.parse(self.status)
        self.priority = TaskPriority.parse(self.priority)

    @classmethod
    def from_json(cls, data: Any) -> Task:
        if not isinstance(data, dict):
            raise ValidationError(f"task must be a JSON object, got {type(data).__name__}")

        raw_id = data.get("id")
        if raw_id is not None and (isinstance(raw_id, bool) or not isinstance(raw_id, int)):
            raise ValidationError(f"task id must be an integer, got {raw_id!r}")

        description = data.get("description")
        return cls(
            id=raw_id,
            title=data.get("title"),  # type: ignore[arg-type]
            description=None if description is None else str(description),
            status=data.get("status", TaskStatus.TODO),
            priority=data.get("priority", TaskPriority.MEDIUM),
            created_at=_parse_ts(data.get("createdAt"), "createdAt"),
            updated_at=_parse_ts(data.get("updatedAt"), "updatedAt"),
            completed_at=_parse_ts(data.get("completedAt"), "completedAt"),
        )

    def to_payload(self) -> dict[str, Any]:
        """Request body for create/update: client-supplied fields only."""
        payload: dict[str, Any] = {
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority.value,
        }
        if self.description is not None:
            payload["description"] = self.description
        return payload

    def same_content(self, other: Task) -> bool:
        """True if both tasks agree on every client-supplied field."""
        return self.to_payload() == other.to_payload()


def tasks_from_json(data: Any) -> list[Task]:
    if not isinstance(data, list):
        raise ValidationError(f"expected a JSON array of tasks, got {type(data).__name__}")
    return [Task.from_json(item) for item in data]


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    todo: int
    in_progress: int
    done: int
    cancelled: int

    @classmethod
    def from_json(cls, data: Any) -> TaskStats:
        if not isinstance(data, dict):
            raise ValidationError(f"stats must be a JSON object, got {type(data).__name__}")
        values: dict[str, int] = {}
        for name in ("total", "todo", "in_progress", "done", "cancelled"):
            raw = data.get(name, 0)
            if isinstance(raw, bool) or not isinstance(raw, int):
                raise ValidationError(f"stats.{name} must be an integer, got {raw!r}")
            values[name] = raw
        return cls(**values)

    def count_for(self, status: TaskStatus) -> int:
        return {
            TaskStatus.TODO: self.todo,
            TaskStatus.IN_PROGRESS: self.in_progress,
            TaskStatus.DONE: self.done,
            TaskStatus.CANCELLED: self.cancelled,
        }[status]
