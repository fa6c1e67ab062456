"""Tests for SamplingWindow."""

import pytest

from phiaccrual.core.temporal import Duration
from phiaccrual.window import SamplingWindow


def ms(value):
    return Duration.from_millis(value)


def make_window(max_size=4, min_std=10, estimate=1000):
    return SamplingWindow(
        max_size=max_size,
        min_std_deviation=ms(min_std),
        first_heartbeat_estimate=ms(estimate),
    )


class TestBootstrap:

    def test_empty_mean_is_estimate(self):
        assert make_window(estimate=750).mean() == ms(750)

    def test_empty_stddev_is_floor(self):
        assert make_window(min_std=25).stddev() == ms(25)

    def test_single_sample_stddev_is_floor(self):
        window = make_window(min_std=25)
        window.add(ms(900))
        assert window.mean() == ms(900)
        assert window.stddev() == ms(25)


class TestStatistics:

    def test_mean(self):
        window = make_window()
        for value in (100, 200, 300):
            window.add(ms(value))
        assert window.mean() == ms(200)

    def test_population_stddev(self):
        window = make_window(max_size=8, min_std=1)
        for value in (2, 4, 4, 4, 5, 5, 7, 9):
            window.add(ms(value))
        assert window.mean() == ms(5)
        assert window.stddev() == ms(2)

    def test_stddev_floored(self):
        window = make_window(min_std=10)
        for _ in range(4):
            window.add(ms(1000))
        assert window.stddev() == ms(10)

    def test_zero_interval_accepted(self):
        window = make_window()
        window.add(Duration.ZERO)
        assert len(window) == 1
        assert window.mean() == Duration.ZERO

    def test_negative_interval_recorded_as_zero(self):
        window = make_window()
        window.add(ms(-50))
        assert list(window) == [Duration.ZERO]


class TestBoundedWindow:

    def test_never_exceeds_max_size(self):
        window = make_window(max_size=3)
        for value in range(10):
            window.add(ms(value))
        assert len(window) == 3
        assert list(window) == [ms(7), ms(8), ms(9)]

    def test_statistics_only_reflect_recent_samples(self):
        """Evicted samples leave no trace in mean or stddev."""
        noisy = make_window(max_size=4, min_std=1)
        for value in (5000, 10, 7000, 3, 100, 200, 300, 400):
            noisy.add(ms(value))

        clean = make_window(max_size=4, min_std=1)
        for value in (100, 200, 300, 400):
            clean.add(ms(value))

        assert noisy.mean() == clean.mean()
        assert noisy.stddev() == clean.stddev()

    def test_clear(self):
        window = make_window()
        window.add(ms(10))
        window.clear()
        assert len(window) == 0
        assert window.mean() == ms(1000)


class TestValidation:

    def test_zero_size_rejected(self):
        with pytest.raises(ValueError):
            make_window(max_size=0)

    def test_zero_floor_rejected(self):
        with pytest.raises(ValueError):
            make_window(min_std=0)
