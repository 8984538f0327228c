# src/taskboard/sync/cache.py

from __future__ import annotations

"""
Key-based client cache with in-flight de-duplication.

Each key walks a small state machine:

    EMPTY -> LOADING -> POPULATED -> STALE -> LOADING -> POPULATED -> ...

- a read on EMPTY/STALE starts one fetch; concurrent readers join it
- a successful fetch stores the value (POPULATED)
- a failed fetch restores the prior state and re-raises to every waiter
  (POPULATED comes back as STALE if it was invalidated meanwhile)
- invalidation turns POPULATED into STALE; the old value stays peekable
- invalidation during LOADING makes the arriving value STALE right away

Keys are tuples and invalidation matches by prefix, so ("tasks",) also
covers ("tasks", "status", "TODO") and ("tasks", "active").
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

QueryKey = tuple[Any, ...]
T = TypeVar("T")


class CacheState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    POPULATED = "populated"
    STALE = "stale"


@dataclass(slots=True)
class CacheEntry:
    key: QueryKey
    state: CacheState = CacheState.EMPTY
    value: Any = None
    fetched_at: float | None = None
    error: Exception | None = None
    fetch_count: int = 0

    inflight: asyncio.Task[Any] | None = field(default=None, repr=False)
    invalidated_while_loading: bool = False


def _retrieve_exception(task: asyncio.Task[Any]) -> None:
    # Waiters may all have been cancelled; keep asyncio from warning about it.
    if not task.cancelled():
        task.exception()


class QueryCache:
    """
    Owned by one application session (see AppState); never a module global.

    Only the synchronizer should call fetch/invalidate/remove. The view
    reads through peek()/state() or through the synchronizer.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._clock = clock

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def entry(self, key: QueryKey) -> CacheEntry | None:
        return self._entries.get(key)

    def state(self, key: QueryKey) -> CacheState:
        entry = self._entries.get(key)
        return entry.state if entry is not None else CacheState.EMPTY

    def peek(self, key: QueryKey) -> Any | None:
        """Last fetched value (fresh or stale) without triggering a fetch."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def is_loading(self, key: QueryKey) -> bool:
        return self.state(key) == CacheState.LOADING

    async def fetch(self, key: QueryKey, fetcher: Callable[[], Awaitable[T]], *, force: bool = False) -> T:
        """
        Return the cached value for key, fetching it first when needed.

        force=True re-fetches a POPULATED entry. A fetch already in flight is
        always joined instead of starting a second one.
        """
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CacheEntry(key=key)

        if entry.inflight is not None:
            logger.debug("cache join in-flight key=%s", key)
            return await asyncio.shield(entry.inflight)

        if entry.state == CacheState.POPULATED and not force:
            return entry.value

        prior = entry.state
        entry.state = CacheState.LOADING
        entry.invalidated_while_loading = False

        inflight = asyncio.ensure_future(self._load(entry, fetcher, prior))
        inflight.add_done_callback(_retrieve_exception)
        entry.inflight = inflight
        return await asyncio.shield(inflight)

    async def _load(self, entry: CacheEntry, fetcher: Callable[[], Awaitable[T]], prior: CacheState) -> T:
        entry.fetch_count += 1
        logger.debug("cache fetch key=%s (from %s)", entry.key, prior.value)
        try:
            value = await fetcher()
        except Exception as e:
            entry.state = self._restored_state(entry, prior)
            entry.error = e
            logger.info("cache fetch failed key=%s: %s", entry.key, e.__class__.__name__)
            raise
        except asyncio.CancelledError:
            entry.state = self._restored_state(entry, prior)
            raise
        else:
            entry.value = value
            entry.fetched_at = self._clock()
            entry.error = None
            if entry.invalidated_while_loading:
                entry.state = CacheState.STALE
                logger.debug("cache key=%s invalidated during fetch -> stale", entry.key)
            else:
                entry.state = CacheState.POPULATED
            return value
        finally:
            entry.inflight = None
            entry.invalidated_while_loading = False

    @staticmethod
    def _restored_state(entry: CacheEntry, prior: CacheState) -> CacheState:
        # A value fetched before the invalidation must not come back as fresh.
        if entry.invalidated_while_loading and prior == CacheState.POPULATED:
            return CacheState.STALE
        return prior

    def invalidate(self, prefix: QueryKey) -> list[QueryKey]:
        """Mark every entry whose key starts with prefix as stale. Returns the keys hit."""
        n = len(prefix)
        hit: list[QueryKey] = []
        for key, entry in self._entries.items():
            if key[:n] != prefix:
                continue
            if entry.state == CacheState.POPULATED:
                entry.state = CacheState.STALE
            elif entry.state == CacheState.LOADING:
                entry.invalidated_while_loading = True
            else:
                continue
            hit.append(key)
        if hit:
            logger.debug("cache invalidated %s", hit)
        return hit

    def remove(self, key: QueryKey) -> None:
        """Drop an entry (e.g. a deleted task). A loading entry is only invalidated."""
        entry = self._entries.get(key)
        if entry is None:
            return
        if entry.state == CacheState.LOADING:
            entry.invalidated_while_loading = True
            return
        del self._entries[key]

    def clear(self) -> None:
        """Drop every settled entry. Keys still loading survive, flagged stale for their result."""
        for key in list(self._entries):
            self.remove(key)
