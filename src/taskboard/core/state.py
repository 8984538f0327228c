# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..sync.cache import QueryCache
from ..sync.synchronizer import TaskSynchronizer
from ..view.board import TaskBoard
from .ports import TaskGateway


@dataclass
class AppState:
    """
    Everything one console session owns.

    The cache lives here (not in a module global) and is shared by the
    synchronizer and the board of this session only.
    """

    settings: Any
    gateway: TaskGateway
    cache: QueryCache
    sync: TaskSynchronizer
    board: TaskBoard
    offline: bool = False
