from __future__ import annotations

import threading
import time
from typing import Protocol


class Clock(Protocol):
    """
    Source of the current time in seconds. Only differences between readings are meaningful.
    """

    def now(self) -> float: ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """
    Clock that only moves when told to. Used to drive lock expiry deterministically.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._lock = threading.Lock()

    def now(self) -> float:
        with self._lock:
            return self._now

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        with self._lock:
            self._now += seconds
            return self._now

    def set(self, value: float) -> None:
        with self._lock:
            if value < self._now:
                raise ValueError("ManualClock cannot move backwards")
            self._now = float(value)
