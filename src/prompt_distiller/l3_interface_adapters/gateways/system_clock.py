"""Gateways: wall clock and time-based id generator."""

from __future__ import annotations

import threading
import time
from datetime import UTC, datetime


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)


class TimeIdGenerator:
    """Millisecond-timestamp ids, bumped so each id is strictly greater than the previous one."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            candidate = time.time_ns() // 1_000_000
            self._last = max(candidate, self._last + 1)
            return str(self._last)
