# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires gateway, cache, synchronizer and board into AppState.
"""

from __future__ import annotations

import logging

from ..api.client import TaskApiClient
from ..api.offline import OfflineTaskGateway, demo_tasks
from ..config import get_settings
from ..core.ports import TaskGateway
from ..core.state import AppState
from ..sync.cache import QueryCache
from ..sync.synchronizer import TaskSynchronizer
from ..view.board import TaskBoard
from ..view.filters import ALL, parse_filter

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, gateway: TaskGateway | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the gateway) injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back to
    get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    offline = bool(getattr(settings, "offline", False))
    if gateway is None:
        if offline:
            logger.info("Offline mode: using in-memory demo backend.")
            gateway = OfflineTaskGateway(demo_tasks())
        else:
            gateway = TaskApiClient.from_settings(settings)
            logger.info("Using task service at %s", settings.api_url)

    try:
        selected = parse_filter(getattr(settings, "default_filter", ALL))
    except ValueError:
        logger.warning("Ignoring invalid default filter %r", getattr(settings, "default_filter", None))
        selected = ALL

    cache = QueryCache()
    sync = TaskSynchronizer(gateway, cache)
    board = TaskBoard(sync, selected=selected, title=f"{getattr(settings, 'app_name', 'taskboard')} tasks")

    return AppState(
        settings=settings,
        gateway=gateway,
        cache=cache,
        sync=sync,
        board=board,
        offline=offline,
    )


async def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.gateway.aclose()
    except Exception:
        logger.debug("Gateway close failed.", exc_info=True)
