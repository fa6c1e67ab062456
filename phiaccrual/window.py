"""Bounded history of heartbeat inter-arrival intervals.

SamplingWindow keeps the most recent ``max_size`` intervals and answers mean
and standard deviation queries in constant time. Running totals are kept as
exact integers (nanoseconds and nanoseconds squared) rather than floats, so
adding and evicting samples never accumulates rounding error and the same
sequence of intervals always produces the same statistics.

The window has no lock of its own; FailureDetector serializes access.
"""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Iterator

from phiaccrual.core.temporal import Duration


class SamplingWindow:
    """Sliding window of recent intervals with floored statistics.

    Args:
        max_size: Maximum number of intervals kept. Must be >= 1.
        min_std_deviation: Floor for ``stddev()``. Must be > 0.
        first_heartbeat_estimate: Value of ``mean()`` while the window is
            empty. Must be > 0.
    """

    def __init__(
        self,
        max_size: int,
        min_std_deviation: Duration,
        first_heartbeat_estimate: Duration,
    ) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        if min_std_deviation <= Duration.ZERO:
            raise ValueError(f"min_std_deviation must be > 0, got {min_std_deviation}")
        if first_heartbeat_estimate <= Duration.ZERO:
            raise ValueError(
                f"first_heartbeat_estimate must be > 0, got {first_heartbeat_estimate}"
            )
        self._max_size = max_size
        self._min_std = min_std_deviation
        self._estimate = first_heartbeat_estimate
        self._intervals: deque[int] = deque()
        self._sum: int = 0
        self._sum_sq: int = 0

    def add(self, interval: Duration) -> None:
        """Append an interval, evicting the oldest when full.

        Negative intervals are recorded as zero.
        """
        nanos = max(interval.nanoseconds, 0)
        self._intervals.append(nanos)
        self._sum += nanos
        self._sum_sq += nanos * nanos
        if len(self._intervals) > self._max_size:
            oldest = self._intervals.popleft()
            self._sum -= oldest
            self._sum_sq -= oldest * oldest

    def mean(self) -> Duration:
        """Arithmetic mean, or the bootstrap estimate when empty."""
        n = len(self._intervals)
        if n == 0:
            return self._estimate
        return Duration(round(self._sum / n))

    def stddev(self) -> Duration:
        """Population standard deviation, floored at ``min_std_deviation``."""
        n = len(self._intervals)
        if n < 2:
            return self._min_std
        # n * sum(x^2) - sum(x)^2 is exact and never negative for integers
        spread = n * self._sum_sq - self._sum * self._sum
        std = Duration(round(math.sqrt(spread) / n))
        return std if std > self._min_std else self._min_std

    def clear(self) -> None:
        self._intervals.clear()
        self._sum = 0
        self._sum_sq = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        return len(self._intervals)

    def __iter__(self) -> Iterator[Duration]:
        return (Duration(nanos) for nanos in self._intervals)

    def __repr__(self) -> str:
        return (
            f"SamplingWindow(samples={len(self._intervals)}/{self._max_size}, "
            f"mean={self.mean()!r}, stddev={self.stddev()!r})"
        )
