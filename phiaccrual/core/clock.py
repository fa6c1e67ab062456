"""Time sources for failure detectors.

Detectors never read wall-clock time directly. They are handed a Clock and
ask it for ``now`` whenever the caller does not pass an explicit instant,
which keeps every computation reproducible under test.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable

from phiaccrual.core.temporal import Duration, Instant


@runtime_checkable
class Clock(Protocol):
    """Anything with a ``now`` property returning an Instant."""

    @property
    def now(self) -> Instant:
        ...


class MonotonicClock:
    """Process-local monotonic time, from ``time.monotonic_ns``."""

    @property
    def now(self) -> Instant:
        return Instant(time.monotonic_ns())

    def __repr__(self) -> str:
        return "MonotonicClock()"


class ManualClock:
    """A clock that only moves when told to.

    Args:
        start_time: Initial reading. Defaults to Instant.Epoch.
    """

    def __init__(self, start_time: Instant | None = None):
        self._current_time = start_time if start_time is not None else Instant.Epoch

    @property
    def now(self) -> Instant:
        return self._current_time

    def update(self, time: Instant) -> None:
        """Set the current reading. Moving backwards is allowed."""
        self._current_time = time

    def advance(self, duration: Duration) -> Instant:
        """Move the clock by ``duration`` and return the new reading."""
        self._current_time = self._current_time + duration
        return self._current_time

    def __repr__(self) -> str:
        return f"ManualClock(now={self._current_time!r})"
