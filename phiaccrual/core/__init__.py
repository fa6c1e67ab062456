"""Time primitives shared by the detector components."""

from phiaccrual.core.clock import Clock, ManualClock, MonotonicClock
from phiaccrual.core.temporal import Duration, Instant

__all__ = [
    "Clock",
    "Duration",
    "Instant",
    "ManualClock",
    "MonotonicClock",
]
