# src/taskboard/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import shlex
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import cast

from ..api.models import Task, TaskPriority, TaskStatus
from ..core.state import AppState
from ..sync.cache import CacheState
from ..sync.synchronizer import TASKS_KEY
from ..view.board import render_task_detail, render_task_line
from ..view.filters import FILTER_TABS, filter_label

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_EDITABLE = ("title", "description", "status", "priority")


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Arguments are split shell-style, so quoted titles stay together.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return await h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return await h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(raw: str) -> int | None:
    try:
        value = int(raw.lstrip("#"))
    except ValueError:
        return None
    return value if value > 0 else None


def _split_fields(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate free words from key=value pairs (keys limited to editable fields)."""
    words: list[str] = []
    fields: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key.lower() in _EDITABLE:
            fields[key.lower()] = value
        else:
            words.append(arg)
    return words, fields


def _notify(emit: CommandEmitter | None, text: str) -> None:
    if emit:
        with contextlib.suppress(Exception):
            emit(text)


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    backend = "offline demo (in-memory)" if state.offline else str(getattr(state.settings, "api_url", "?"))
    cached = []
    for key in state.cache.keys():
        entry = state.cache.entry(key)
        cached.append(f"    {'/'.join(str(k) for k in key)}: {entry.state.value} (fetches: {entry.fetch_count})")
    return (
        "Status:\n"
        f"  Backend: {backend}\n"
        f"  Filter: {filter_label(state.board.selected)}\n"
        "  Cache:\n" + ("\n".join(cached) if cached else "    (empty)")
    )


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /list          -> board with the current filter
    /list <filter> -> switch filter first (all, todo, in_progress, done, cancelled)
    """
    if args:
        try:
            state.board.select(" ".join(args))
        except ValueError as e:
            return str(e)
    if state.cache.state(TASKS_KEY) != CacheState.POPULATED:
        _notify(emit, "Loading tasks...")
    await state.board.load()
    return state.board.render()


async def cmd_refresh(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    _notify(emit, "Loading tasks...")
    await state.board.load(refresh=True)
    return state.board.render()


async def cmd_filter(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /filter          -> show the current filter and available tabs
    /filter <name>   -> select a filter and show the board
    """
    if not args:
        tabs = ", ".join(filter_label(t) for t in FILTER_TABS)
        return f"Current filter: {filter_label(state.board.selected)}. Tabs: {tabs} (cancelled also accepted)."
    try:
        state.board.select(" ".join(args))
    except ValueError as e:
        return str(e)
    await state.board.load()
    return state.board.render()


async def cmd_stats(state: AppState, args: list[str]) -> str:
    stats = await state.sync.stats()
    lines = [f"Total: {stats.total}"]
    for st in TaskStatus:
        lines.append(f"  {st.label}: {stats.count_for(st)}")
    return "\n".join(lines)


async def cmd_active(state: AppState, args: list[str]) -> str:
    tasks = await state.sync.active_tasks()
    if not tasks:
        return "No active tasks."
    return "Active tasks (by priority):\n" + "\n".join(render_task_line(t) for t in tasks)


async def cmd_bystatus(state: AppState, args: list[str]) -> str:
    """/bystatus <status> -> server-side status query (ordered by priority)"""
    if not args:
        return "Usage: /bystatus TODO|IN_PROGRESS|DONE|CANCELLED"
    raw = "_".join(args)
    try:
        st = TaskStatus.parse(raw.replace("-", "_"))
    except ValueError as e:
        return str(e)
    tasks = await state.sync.tasks_by_status(st)
    if not tasks:
        return f"No tasks with status {st.label}."
    return f"Tasks with status {st.label}:\n" + "\n".join(render_task_line(t) for t in tasks)


async def cmd_show(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /show <id>"
    task = await state.sync.task(task_id)
    return render_task_detail(task)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title...> [description=...] [priority=LOW|MEDIUM|HIGH|URGENT] [status=...]
    """
    words, fields = _split_fields(args)
    title = fields.pop("title", None) or " ".join(words)
    if not title.strip():
        return "Usage: /add <title> [description=...] [priority=HIGH] [status=TODO]"

    task = Task(
        title=title,
        description=fields.get("description") or None,
        status=fields.get("status") or TaskStatus.TODO,
        priority=fields.get("priority") or TaskPriority.MEDIUM,
    )
    created = await state.sync.create_task(task)
    logger.debug("Task created from console id=%s", created.id)
    return f"Created {render_task_line(created)}"


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> field=value ...   (fields: title, description, status, priority)
    """
    task_id = _parse_id(args[0]) if args else None
    words, fields = _split_fields(args[1:])
    if task_id is None or not fields or words:
        return "Usage: /edit <id> [title=...] [description=...] [status=DONE] [priority=HIGH]"

    current = await state.sync.task(task_id)
    changes: dict[str, object] = dict(fields)
    if "description" in changes and changes["description"] == "":
        changes["description"] = None
    updated = await state.sync.update_task(task_id, replace(current, **changes))
    return f"Updated {render_task_line(updated)}"


async def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /delete <id>"
    await state.board.delete(task_id)
    _notify(emit, f"Deleted task #{task_id}.")
    return state.board.render()


async def cmd_health(state: AppState, args: list[str]) -> str:
    health = await state.gateway.health()
    info = await state.gateway.info()
    lines = ["Backend health:"]
    lines.extend(f"  {k}: {v}" for k, v in health.items())
    if info:
        lines.append("Backend info:")
        lines.extend(f"  {k}: {v}" for k, v in info.items())
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backend, current filter and cache state.")
registry.register("list", cmd_list, help_text="Show the task board: /list [filter].", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Re-fetch tasks and stats from the backend.", aliases=["r"])
registry.register("filter", cmd_filter, help_text="Select a filter: /filter all | todo | in_progress | done.")
registry.register("stats", cmd_stats, help_text="Show task counts per status.")
registry.register("active", cmd_active, help_text="List active (non-cancelled) tasks by priority.")
registry.register("bystatus", cmd_bystatus, help_text="Server-side status query: /bystatus DONE.")
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("add", cmd_add, help_text="Create a task: /add <title> [priority=HIGH] [description=...].")
registry.register("edit", cmd_edit, help_text="Update a task: /edit <id> status=DONE priority=LOW ...")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm", "del"])
registry.register("health", cmd_health, help_text="Check backend health and info.")
