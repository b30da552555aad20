"""UTC time helpers and injectable clocks."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Union

Clock = Callable[[], int]
Duration = Union[int, float, timedelta]


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def system_clock() -> int:
    """Return the current time as integer seconds since the epoch."""
    return int(utc_now().timestamp())


def to_seconds(value: Duration) -> int:
    """Normalize a duration given as seconds or ``timedelta`` to whole seconds."""
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    return int(value)


def from_timestamp(value: int) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


class FixedClock:
    """Manually driven clock for deterministic tests and replays."""

    def __init__(self, now: int) -> None:
        self._now = int(now)
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            return self._now

    def advance(self, delta: Duration) -> int:
        with self._lock:
            self._now += to_seconds(delta)
            return self._now

    def set(self, now: int) -> None:
        with self._lock:
            self._now = int(now)
