"""Phi accrual failure detector.

Implements the phi accrual failure detection algorithm from Hayashibara et al.
Instead of a binary alive/dead decision, the detector outputs a continuous
suspicion level (phi) that callers compare against their own threshold.

One FailureDetector monitors one peer. A transport calls ``heartbeat()``
each time a heartbeat arrives; a decision loop calls ``phi()`` or
``is_available()`` whenever it needs a verdict. Both may run on different
threads: a single lock guards the sampling window and the last-heartbeat
timestamp, so ``phi()`` always sees a pair produced by the same heartbeat.

Timestamps are never rejected. A heartbeat that appears to arrive before
the previous one (the local clock stepped backwards) contributes a zero
interval, and a query for a time before the last heartbeat sees zero
elapsed time.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto

from phiaccrual.calculator import phi as compute_phi
from phiaccrual.config import ConfigError, DetectorConfig
from phiaccrual.core.clock import Clock, MonotonicClock
from phiaccrual.core.temporal import Duration, Instant
from phiaccrual.window import SamplingWindow

logger = logging.getLogger(__name__)


class DetectorState(Enum):
    """Whether a detector has seen its peer yet."""
    UNKNOWN = auto()
    MONITORING = auto()


@dataclass(frozen=True)
class FailureDetectorStats:
    """Consistent snapshot of a FailureDetector.

    Attributes:
        state: UNKNOWN before the first heartbeat, MONITORING after.
        heartbeats_received: Total heartbeats recorded since the last reset.
        sample_count: Intervals currently in the sampling window.
        mean_interval: Mean of the window (bootstrap estimate when empty).
        std_interval: Floored standard deviation of the window.
        last_heartbeat: Timestamp of the last heartbeat, if any.
        current_phi: Phi at the snapshot time.
        is_suspected: Whether current_phi reached the configured threshold.
    """
    state: DetectorState
    heartbeats_received: int
    sample_count: int
    mean_interval: Duration
    std_interval: Duration
    last_heartbeat: Instant | None
    current_phi: float
    is_suspected: bool


def _check_instant(now: Instant) -> Instant:
    if not isinstance(now, Instant):
        raise TypeError(f"expected an Instant, got {type(now).__name__}")
    return now


class FailureDetector:
    """Phi accrual failure detector for a single peer.

    Args:
        config: Detector settings. Defaults to ``DetectorConfig()``.
        clock: Time source used when a call omits ``now``. Defaults to
            a MonotonicClock.

    Raises:
        ConfigError: If ``config`` is not a DetectorConfig.
    """

    def __init__(
        self,
        config: DetectorConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        if config is None:
            config = DetectorConfig()
        if not isinstance(config, DetectorConfig):
            raise ConfigError(f"config must be a DetectorConfig, got {type(config).__name__}")
        self._config = config
        self._clock = clock if clock is not None else MonotonicClock()
        self._lock = threading.Lock()
        self._window = SamplingWindow(
            max_size=config.window_size,
            min_std_deviation=config.min_std_deviation,
            first_heartbeat_estimate=config.first_heartbeat_estimate,
        )
        self._last_heartbeat: Instant | None = None
        self._heartbeat_count: int = 0

    def _now_locked(self, now: Instant | None) -> Instant:
        # Read under the lock so concurrent callers apply readings in order
        if now is None:
            return self._clock.now
        return now

    def heartbeat(self, now: Instant | None = None) -> None:
        """Record a heartbeat arrival.

        The first heartbeat only establishes a baseline; each later one adds
        the interval since its predecessor to the sampling window.

        Args:
            now: Arrival time. Defaults to the detector's clock.
        """
        if now is not None:
            _check_instant(now)
        with self._lock:
            now = self._now_locked(now)
            self._heartbeat_count += 1
            last = self._last_heartbeat
            if last is None:
                logger.debug("First heartbeat at %r; monitoring started", now)
            else:
                interval = now - last
                if interval < Duration.ZERO:
                    logger.warning(
                        "Heartbeat at %r precedes previous heartbeat at %r; "
                        "recording a zero interval",
                        now,
                        last,
                    )
                    interval = Duration.ZERO
                self._window.add(interval)
            self._last_heartbeat = now

    def phi(self, now: Instant | None = None) -> float:
        """Current suspicion level.

        Args:
            now: Time of the query. Defaults to the detector's clock.

        Returns:
            0.0 before any heartbeat; otherwise phi for the time elapsed
            since the last heartbeat, with the expected interval extended by
            ``acceptable_heartbeat_pause``.
        """
        if now is not None:
            _check_instant(now)
        with self._lock:
            now = self._now_locked(now)
            return self._phi_locked(now)

    def _phi_locked(self, now: Instant) -> float:
        last = self._last_heartbeat
        if last is None:
            return 0.0
        elapsed = now - last
        if elapsed < Duration.ZERO:
            elapsed = Duration.ZERO
        mean = self._window.mean() + self._config.acceptable_heartbeat_pause
        return compute_phi(elapsed, mean, self._window.stddev())

    def is_available(self, now: Instant | None = None, threshold: float | None = None) -> bool:
        """Whether phi is still below ``threshold``.

        Args:
            now: Time of the query. Defaults to the detector's clock.
            threshold: Phi threshold. Defaults to ``config.threshold``.
        """
        if threshold is None:
            threshold = self._config.threshold
        return self.phi(now) < threshold

    def stats_at(self, now: Instant | None = None) -> FailureDetectorStats:
        """Statistics snapshot including the phi value at ``now``."""
        if now is not None:
            _check_instant(now)
        with self._lock:
            now = self._now_locked(now)
            current_phi = self._phi_locked(now)
            return FailureDetectorStats(
                state=self._state_locked(),
                heartbeats_received=self._heartbeat_count,
                sample_count=len(self._window),
                mean_interval=self._window.mean(),
                std_interval=self._window.stddev(),
                last_heartbeat=self._last_heartbeat,
                current_phi=current_phi,
                is_suspected=current_phi >= self._config.threshold,
            )

    def reset(self) -> None:
        """Forget all history and return to the UNKNOWN state."""
        with self._lock:
            self._window.clear()
            self._last_heartbeat = None
            self._heartbeat_count = 0
        logger.debug("Detector reset")

    def _state_locked(self) -> DetectorState:
        if self._last_heartbeat is None:
            return DetectorState.UNKNOWN
        return DetectorState.MONITORING

    @property
    def state(self) -> DetectorState:
        with self._lock:
            return self._state_locked()

    @property
    def config(self) -> DetectorConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def last_heartbeat(self) -> Instant | None:
        """Timestamp of the last recorded heartbeat."""
        with self._lock:
            return self._last_heartbeat

    @property
    def heartbeat_count(self) -> int:
        with self._lock:
            return self._heartbeat_count

    def __repr__(self) -> str:
        return (
            f"FailureDetector(window_size={self._config.window_size}, "
            f"samples={len(self._window)}, "
            f"heartbeats={self._heartbeat_count})"
        )
