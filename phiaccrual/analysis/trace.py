"""Phi time series for offline analysis.

PhiTrace wraps a FailureDetector and records ``(time, phi)`` samples
alongside the heartbeats that produced them. It is meant for tuning
detector settings against recorded or synthetic heartbeat traces: export
to a DataFrame for analysis, or plot phi against a candidate threshold.

Example::

    trace = PhiTrace(FailureDetector(config))
    for t_ms in arrivals_ms:
        trace.heartbeat(Instant.from_millis(t_ms))
    for t_ms in range(0, 60_000, 100):
        trace.sample(Instant.from_millis(t_ms))
    df = trace.to_dataframe()
    trace.plot("phi.png", threshold=8.0)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from phiaccrual.core.temporal import Instant
from phiaccrual.detector import FailureDetector

if TYPE_CHECKING:
    from matplotlib.figure import Figure

logger = logging.getLogger(__name__)


class PhiTrace:
    """Records phi samples and heartbeat marks from one detector.

    Args:
        detector: The detector to drive and sample.
    """

    TIME_S = "time_s"
    PHI = "phi"
    HEARTBEAT = "heartbeat"

    def __init__(self, detector: FailureDetector) -> None:
        self._detector = detector
        self._samples: list[tuple[float, float, bool]] = []

    @property
    def detector(self) -> FailureDetector:
        return self._detector

    def _resolve(self, now: Instant | None) -> Instant:
        return self._detector.clock.now if now is None else now

    def heartbeat(self, now: Instant | None = None) -> None:
        """Forward a heartbeat to the detector and record it.

        The recorded phi is the value just after the heartbeat.
        """
        now = self._resolve(now)
        self._detector.heartbeat(now)
        self._samples.append((now.to_seconds(), self._detector.phi(now), True))

    def sample(self, now: Instant | None = None) -> float:
        """Record and return phi at ``now``."""
        now = self._resolve(now)
        value = self._detector.phi(now)
        self._samples.append((now.to_seconds(), value, False))
        return value

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def to_dataframe(self) -> pd.DataFrame:
        """Samples as a DataFrame ordered by time.

        Columns: ``time_s`` (float), ``phi`` (float), ``heartbeat`` (bool).
        """
        df = pd.DataFrame(self._samples, columns=[self.TIME_S, self.PHI, self.HEARTBEAT])
        df = df.astype({self.TIME_S: "float64", self.PHI: "float64", self.HEARTBEAT: "bool"})
        return df.sort_values(self.TIME_S, kind="stable").reset_index(drop=True)

    def max_phi(self) -> float:
        """Largest recorded phi. Returns 0.0 if empty."""
        if not self._samples:
            return 0.0
        return float(np.max(self.to_dataframe()[self.PHI].to_numpy()))

    def first_crossing(self, threshold: float) -> float | None:
        """Earliest sample time (seconds) with phi >= ``threshold``."""
        df = self.to_dataframe()
        crossed = df[df[self.PHI] >= threshold]
        if crossed.empty:
            return None
        return float(crossed[self.TIME_S].iloc[0])

    def plot(self, path: str | Path | None = None, threshold: float | None = None) -> Figure:
        """Plot phi over time with heartbeat marks.

        Args:
            path: If given, the figure is saved there as an image.
            threshold: If given, drawn as a horizontal line.

        Returns:
            A matplotlib Figure. It is not registered with pyplot, so
            nothing needs to be closed once it is discarded.
        """
        from matplotlib.figure import Figure

        df = self.to_dataframe()
        fig = Figure(figsize=(10, 4))
        ax = fig.subplots()
        ax.plot(df[self.TIME_S], df[self.PHI], label="phi")
        beats = df[df[self.HEARTBEAT]]
        if not beats.empty:
            ax.scatter(beats[self.TIME_S], beats[self.PHI], marker="|", color="tab:green", label="heartbeat")
        if threshold is not None:
            ax.axhline(threshold, color="tab:red", linestyle="--", label=f"threshold={threshold:g}")
        ax.set_xlabel("time (s)")
        ax.set_ylabel("phi")
        ax.grid(True, alpha=0.3)
        ax.legend(loc="upper left")
        fig.tight_layout()

        if path is not None:
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(path)
            logger.info("Saved phi plot to %s", path)
        return fig
