"""End-to-end detector behavior over synthetic heartbeat streams.

Saves raw phi traces (CSV) and plots under test_output/ for inspection.
"""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from phiaccrual import (
    DetectorConfig,
    Duration,
    FailureDetector,
    FailureDetectorRegistry,
    Instant,
    PhiTrace,
)

THRESHOLD = 8.0


def _jittered_arrivals(seed: int, count: int, interval_ms: float, jitter_ms: float) -> list[float]:
    rng = random.Random(seed)
    t = 0.0
    arrivals = []
    for _ in range(count):
        arrivals.append(t)
        t += max(0.0, rng.gauss(interval_ms, jitter_ms))
    return arrivals


@pytest.fixture
def config() -> DetectorConfig:
    return DetectorConfig(
        window_size=100,
        min_std_deviation=Duration.from_millis(50),
        acceptable_heartbeat_pause=Duration.from_millis(500),
        first_heartbeat_estimate=Duration.from_millis(1000),
        threshold=THRESHOLD,
    )


def test_healthy_peer_never_suspected(config: DetectorConfig, test_output_dir: Path):
    """A peer with normal jitter stays below the threshold between heartbeats."""
    arrivals = _jittered_arrivals(seed=7, count=300, interval_ms=1000, jitter_ms=80)
    trace = PhiTrace(FailureDetector(config))

    for prev, nxt in zip(arrivals, arrivals[1:]):
        trace.heartbeat(Instant.from_millis(prev))
        # Sample just before the next heartbeat lands
        trace.sample(Instant.from_millis(nxt - 1))

    df = trace.to_dataframe()
    df.to_csv(test_output_dir / "phi_trace.csv", index=False)

    assert trace.max_phi() < THRESHOLD
    assert trace.first_crossing(THRESHOLD) is None


def test_crashed_peer_detected_quickly(config: DetectorConfig, test_output_dir: Path):
    """Once heartbeats stop, phi crosses the threshold within a few intervals."""
    arrivals = _jittered_arrivals(seed=11, count=120, interval_ms=1000, jitter_ms=80)
    trace = PhiTrace(FailureDetector(config))
    for t_ms in arrivals:
        trace.heartbeat(Instant.from_millis(t_ms))

    crash_ms = arrivals[-1]
    for offset_ms in range(0, 10_000, 50):
        trace.sample(Instant.from_millis(crash_ms + offset_ms))

    crossing = trace.first_crossing(THRESHOLD)
    trace.to_dataframe().to_csv(test_output_dir / "phi_trace.csv", index=False)

    assert crossing is not None
    detection_delay_s = crossing - crash_ms / 1000
    assert 1.0 < detection_delay_s < 4.0


def test_plot_phi_trace(config: DetectorConfig, test_output_dir: Path):
    """Render a phi plot with a threshold line."""
    matplotlib = pytest.importorskip("matplotlib")
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    trace = PhiTrace(FailureDetector(config))
    arrivals = _jittered_arrivals(seed=3, count=30, interval_ms=1000, jitter_ms=100)
    for t_ms in arrivals:
        trace.heartbeat(Instant.from_millis(t_ms))
        for offset_ms in range(100, 1000, 100):
            trace.sample(Instant.from_millis(t_ms + offset_ms))
    for offset_ms in range(1000, 5000, 100):
        trace.sample(Instant.from_millis(arrivals[-1] + offset_ms))

    open_figures = plt.get_fignums()
    out = test_output_dir / "phi.png"
    fig = trace.plot(out, threshold=THRESHOLD)

    assert plt.get_fignums() == open_figures
    assert fig.axes[0].get_ylabel() == "phi"
    assert out.exists()
    assert out.stat().st_size > 0


def test_registry_tracks_partial_outage(config: DetectorConfig):
    """Only the peers that stop sending are reported unavailable."""
    registry = FailureDetectorRegistry(config)
    peers = [f"node-{i}" for i in range(5)]
    crashed = {"node-1", "node-3"}

    for step in range(60):
        now = Instant.from_millis(step * 1000)
        for peer in peers:
            if peer in crashed and step >= 30:
                continue
            registry.heartbeat(peer, now)

    now = Instant.from_millis(60_000)
    verdicts = {peer: registry.is_available(peer, now) for peer in peers}

    assert {p for p, ok in verdicts.items() if not ok} == crashed
