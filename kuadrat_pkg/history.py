"""Bounded, most-recent-first history of solve results.

The cache is a fixed-capacity deque: pushing onto a full cache drops the
oldest entry. Reading never reorders entries and identical results are
kept as separate entries.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Any

from . import config
from .logging_config import get_logger
from .types import SolutionSet

logger = get_logger("history")


class HistoryCache:
    """Most-recent-first record of the last ``capacity`` results."""

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is None:
            capacity = config.HISTORY_SIZE
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self._entries: deque[SolutionSet] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def push(self, result: SolutionSet) -> None:
        """Insert a result at the front, evicting the oldest one when full."""
        with self._lock:
            if len(self._entries) == self._entries.maxlen:
                logger.debug(f"History full, evicting {self._entries[-1].equation}")
            self._entries.appendleft(result)

    def contents(self) -> tuple[SolutionSet, ...]:
        """Return a read-only snapshot, most recent first."""
        with self._lock:
            return tuple(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def to_list(self) -> list[dict[str, Any]]:
        """Convert the snapshot to a list of response bodies for JSON output."""
        return [entry.to_dict() for entry in self.contents()]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self.contents())

    def __repr__(self) -> str:
        return f"HistoryCache(capacity={self.capacity}, size={len(self)})"
