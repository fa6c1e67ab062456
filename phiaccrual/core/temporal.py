"""Time types used throughout phiaccrual.

Instant is a point in time and Duration is a signed span between two points.
Both are stored as integer nanoseconds, so arithmetic between them is exact
and comparisons never suffer from float rounding.

    >>> start = Instant.from_millis(1000)
    >>> (start + Duration.from_millis(250)).to_millis()
    1250.0
    >>> (Instant.from_seconds(2) - Instant.from_seconds(1.5)).to_millis()
    500.0
"""

from __future__ import annotations

from typing import ClassVar

_NANOS_PER_SECOND = 1_000_000_000
_NANOS_PER_MILLI = 1_000_000


def _to_nanos(value: int | float, scale: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    if isinstance(value, int):
        return value * scale
    return round(value * scale)


class Duration:
    """A signed span of time with nanosecond resolution."""

    __slots__ = ("_nanos",)

    ZERO: ClassVar[Duration]

    def __init__(self, nanoseconds: int):
        self._nanos = int(nanoseconds)

    @classmethod
    def from_seconds(cls, seconds: int | float) -> Duration:
        return cls(_to_nanos(seconds, _NANOS_PER_SECOND))

    @classmethod
    def from_millis(cls, millis: int | float) -> Duration:
        return cls(_to_nanos(millis, _NANOS_PER_MILLI))

    @property
    def nanoseconds(self) -> int:
        return self._nanos

    def to_seconds(self) -> float:
        return self._nanos / _NANOS_PER_SECOND

    def to_millis(self) -> float:
        return self._nanos / _NANOS_PER_MILLI

    def __add__(self, other):
        if isinstance(other, Duration):
            return Duration(self._nanos + other._nanos)
        if isinstance(other, Instant):
            return Instant(self._nanos + other.nanoseconds)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Duration):
            return Duration(self._nanos - other._nanos)
        return NotImplemented

    def __neg__(self) -> Duration:
        return Duration(-self._nanos)

    def __mul__(self, factor):
        if isinstance(factor, bool) or not isinstance(factor, (int, float)):
            return NotImplemented
        return Duration(round(self._nanos * factor))

    __rmul__ = __mul__

    def __bool__(self) -> bool:
        return self._nanos != 0

    def __eq__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self._nanos == other._nanos

    def __lt__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self._nanos < other._nanos

    def __le__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self._nanos <= other._nanos

    def __gt__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self._nanos > other._nanos

    def __ge__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self._nanos >= other._nanos

    def __hash__(self) -> int:
        return hash(("Duration", self._nanos))

    def __repr__(self) -> str:
        return f"Duration({self.to_millis()}ms)"


class Instant:
    """A point in time, in nanoseconds since an arbitrary epoch.

    Only differences between instants taken from the same clock are
    meaningful. Subtracting two instants yields a Duration; adding or
    subtracting a Duration yields another Instant.
    """

    __slots__ = ("_nanos",)

    Epoch: ClassVar[Instant]

    def __init__(self, nanoseconds: int):
        self._nanos = int(nanoseconds)

    @classmethod
    def from_seconds(cls, seconds: int | float) -> Instant:
        return cls(_to_nanos(seconds, _NANOS_PER_SECOND))

    @classmethod
    def from_millis(cls, millis: int | float) -> Instant:
        return cls(_to_nanos(millis, _NANOS_PER_MILLI))

    @property
    def nanoseconds(self) -> int:
        return self._nanos

    def to_seconds(self) -> float:
        return self._nanos / _NANOS_PER_SECOND

    def to_millis(self) -> float:
        return self._nanos / _NANOS_PER_MILLI

    def __add__(self, other):
        if isinstance(other, Duration):
            return Instant(self._nanos + other.nanoseconds)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Instant):
            return Duration(self._nanos - other._nanos)
        if isinstance(other, Duration):
            return Instant(self._nanos - other.nanoseconds)
        return NotImplemented

    def __eq__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self._nanos == other._nanos

    def __lt__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self._nanos < other._nanos

    def __le__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self._nanos <= other._nanos

    def __gt__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self._nanos > other._nanos

    def __ge__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self._nanos >= other._nanos

    def __hash__(self) -> int:
        return hash(("Instant", self._nanos))

    def __repr__(self) -> str:
        return f"Instant({self.to_seconds()}s)"


Duration.ZERO = Duration(0)
Instant.Epoch = Instant(0)
