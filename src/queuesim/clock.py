"""
Wall clock used for job timestamps and schedule expectations.

Runs on real time by default. Tests freeze it at a fixed instant and
advance it explicitly so schedule assertions are deterministic.
"""

import time
from datetime import datetime, timedelta
from typing import Optional, Union

Instant = Union[datetime, int, float]
Interval = Union[timedelta, int, float]


def to_epoch(value: Instant) -> float:
    """Convert a datetime (naive = local time) or epoch number to epoch seconds."""
    if isinstance(value, datetime):
        return value.timestamp()
    return float(value)


def to_seconds(interval: Interval) -> float:
    """Convert a timedelta or a number of seconds to seconds."""
    if isinstance(interval, timedelta):
        return interval.total_seconds()
    return float(interval)


class Clock:
    """
    Controllable clock.

    - Real time unless frozen
    - freeze() pins the current instant
    - advance() moves a frozen clock forward (or shifts a running one)
    """

    def __init__(self):
        self._frozen_at: Optional[float] = None
        self._offset = 0.0

    @property
    def is_frozen(self) -> bool:
        return self._frozen_at is not None

    def now(self) -> float:
        """Current epoch seconds."""
        if self._frozen_at is not None:
            return self._frozen_at
        return time.time() + self._offset

    def from_now(self, interval: Interval) -> float:
        return self.now() + to_seconds(interval)

    def freeze(self, at: Optional[Instant] = None) -> float:
        """Freeze time at `at` (default: the current instant)."""
        self._frozen_at = self.now() if at is None else to_epoch(at)
        return self._frozen_at

    def advance(self, interval: Interval) -> float:
        """Move time forward by `interval`."""
        seconds = to_seconds(interval)
        if self._frozen_at is not None:
            self._frozen_at += seconds
        else:
            self._offset += seconds
        return self.now()

    def reset(self) -> None:
        """Return to real time."""
        self._frozen_at = None
        self._offset = 0.0


clock = Clock()
