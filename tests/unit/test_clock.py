"""Tests for clock implementations."""

from phiaccrual.core.clock import Clock, ManualClock, MonotonicClock
from phiaccrual.core.temporal import Duration, Instant


class TestManualClock:

    def test_starts_at_epoch(self):
        assert ManualClock().now == Instant.Epoch

    def test_update_sets_time(self):
        clock = ManualClock()
        clock.update(Instant.from_millis(42))
        assert clock.now == Instant.from_millis(42)

    def test_advance_moves_forward(self):
        clock = ManualClock(Instant.from_seconds(1))
        result = clock.advance(Duration.from_millis(500))
        assert result == Instant.from_millis(1500)
        assert clock.now == result

    def test_implements_clock_protocol(self):
        assert isinstance(ManualClock(), Clock)


class TestMonotonicClock:

    def test_never_goes_backwards(self):
        clock = MonotonicClock()
        first = clock.now
        second = clock.now
        assert second >= first

    def test_implements_clock_protocol(self):
        assert isinstance(MonotonicClock(), Clock)
