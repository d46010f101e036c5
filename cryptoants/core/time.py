"""cryptoants.core.time

The colony keeps block time: integer seconds since the epoch.

This module is the *only* time helper surface in the codebase.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from threading import Lock
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def now(self) -> int: ...


def to_datetime(ts: int) -> datetime:
    """Convert clock seconds into an aware UTC datetime."""

    return datetime.fromtimestamp(int(ts), tz=UTC)


class SystemClock:
    """Wall clock, truncated to whole seconds.

    Never runs backwards within one instance even if the host clock does.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._last = 0

    def now(self) -> int:
        with self._lock:
            self._last = max(self._last, int(time.time()))
            return self._last


class ManualClock:
    """Simulated time. Only moves when told to."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start must be >= 0")
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move forward by ``seconds`` and return the new time."""

        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self._now += int(seconds)
        return self._now

    def set(self, ts: int) -> None:
        if ts < self._now:
            raise ValueError(f"clock cannot move backwards: {ts} < {self._now}")
        self._now = int(ts)
