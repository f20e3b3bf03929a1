"""Bounded in-memory activity log surfaced to the dashboard.

Entries are kept most-recent-first in a fixed-capacity ring buffer. The log is
process-wide and volatile: nothing is written to disk and a restart starts empty.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from datetime import datetime
from typing import Deque, List

from algofinance.models import LogEntry, LogType

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 200


class ActivityLog:
    """Thread-safe ring buffer of :class:`LogEntry` records."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY, clock=time.time) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._clock = clock
        self._lock = threading.Lock()
        # appendleft + maxlen evicts from the right, i.e. the oldest entry
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._last_id = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def record(self, type: LogType, source: str, message: str) -> LogEntry:
        """
        Prepend a new entry, dropping the oldest one once capacity is exceeded.

        Args:
            type: Entry type
            source: Originating collaborator (e.g. "TradingView", "Alpaca", "System")
            message: Free-form description

        Returns:
            The stored entry
        """
        now = self._clock()
        with self._lock:
            # Wall-clock milliseconds, bumped so ids stay strictly increasing
            entry_id = max(int(now * 1000), self._last_id + 1)
            self._last_id = entry_id
            entry = LogEntry(
                id=entry_id,
                time=datetime.fromtimestamp(now).strftime("%I:%M:%S %p"),
                type=LogType(type),
                source=source,
                message=message,
            )
            self._entries.appendleft(entry)

        level = logging.ERROR if entry.type == LogType.ERROR else logging.INFO
        logger.log(level, f"[{entry.type.value}] {source}: {message}")
        return entry

    def snapshot(self) -> List[LogEntry]:
        """Return a copy of the entries, most recent first."""
        with self._lock:
            return list(self._entries)
