"""One failure detector per monitored peer.

A membership or health-monitoring layer usually watches many peers at once.
FailureDetectorRegistry keeps a FailureDetector per peer id, creating it on
the peer's first heartbeat and dropping it when the peer is removed.
Peers that were never heard from are reported as available with phi 0.0:
not yet observed is not the same as failed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable, Iterator

from phiaccrual.config import DetectorConfig
from phiaccrual.core.clock import Clock, MonotonicClock
from phiaccrual.core.temporal import Instant
from phiaccrual.detector import FailureDetector

logger = logging.getLogger(__name__)

DetectorFactory = Callable[[], FailureDetector]


class FailureDetectorRegistry:
    """Thread-safe map from peer id to FailureDetector.

    Args:
        config: Settings for detectors built by the default factory.
        clock: Clock shared by detectors built by the default factory.
        factory: Builds a new detector for a newly seen peer. Overrides
            ``config`` and ``clock`` when given.
    """

    def __init__(
        self,
        config: DetectorConfig | None = None,
        clock: Clock | None = None,
        factory: DetectorFactory | None = None,
    ) -> None:
        self._config = config if config is not None else DetectorConfig()
        self._clock = clock if clock is not None else MonotonicClock()
        self._factory = factory or self._default_factory
        self._detectors: dict[Hashable, FailureDetector] = {}
        self._lock = threading.Lock()

    def _default_factory(self) -> FailureDetector:
        return FailureDetector(self._config, clock=self._clock)

    def _get(self, peer: Hashable) -> FailureDetector | None:
        with self._lock:
            return self._detectors.get(peer)

    def _get_or_create(self, peer: Hashable) -> FailureDetector:
        with self._lock:
            detector = self._detectors.get(peer)
            if detector is None:
                detector = self._factory()
                self._detectors[peer] = detector
                logger.debug("Started monitoring peer %r", peer)
            return detector

    def heartbeat(self, peer: Hashable, now: Instant | None = None) -> None:
        """Record a heartbeat from ``peer``, creating its detector if needed."""
        self._get_or_create(peer).heartbeat(now)

    def phi(self, peer: Hashable, now: Instant | None = None) -> float:
        """Phi for ``peer``; 0.0 if the peer has never sent a heartbeat."""
        detector = self._get(peer)
        if detector is None:
            return 0.0
        return detector.phi(now)

    def is_available(
        self,
        peer: Hashable,
        now: Instant | None = None,
        threshold: float | None = None,
    ) -> bool:
        """Availability of ``peer``; True if it has never been observed."""
        detector = self._get(peer)
        if detector is None:
            return True
        return detector.is_available(now, threshold)

    def is_monitoring(self, peer: Hashable) -> bool:
        return self._get(peer) is not None

    def detector(self, peer: Hashable) -> FailureDetector | None:
        """The detector for ``peer``, or None if it is not monitored."""
        return self._get(peer)

    def peers(self) -> list[Hashable]:
        with self._lock:
            return list(self._detectors)

    def remove(self, peer: Hashable) -> bool:
        """Stop monitoring ``peer``. Returns whether it was monitored."""
        with self._lock:
            removed = self._detectors.pop(peer, None) is not None
        if removed:
            logger.info("Stopped monitoring peer %r", peer)
        return removed

    def reset(self) -> None:
        """Drop every detector."""
        with self._lock:
            count = len(self._detectors)
            self._detectors.clear()
        logger.info("Registry reset; dropped %d detectors", count)

    def __contains__(self, peer: Hashable) -> bool:
        return self.is_monitoring(peer)

    def __len__(self) -> int:
        with self._lock:
            return len(self._detectors)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.peers())

    def __repr__(self) -> str:
        return f"FailureDetectorRegistry(peers={len(self)})"
