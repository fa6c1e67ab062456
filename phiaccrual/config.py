"""Detector configuration.

DetectorConfig is immutable and validated on construction, so a detector
built from one can never run with a window of zero or a zero deviation
floor. Configuration can also be read from a plain mapping (for example a
parsed YAML or JSON document) or from environment variables.

Environment variables (with the default ``PHI_`` prefix):
    PHI_WINDOW_SIZE: Number of intervals kept in the sampling window.
    PHI_MIN_STD_DEVIATION_MS: Standard deviation floor, milliseconds.
    PHI_ACCEPTABLE_HEARTBEAT_PAUSE_MS: Grace period, milliseconds.
    PHI_FIRST_HEARTBEAT_ESTIMATE_MS: Bootstrap mean interval, milliseconds.
    PHI_THRESHOLD: Default phi threshold for availability checks.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from phiaccrual.core.temporal import Duration

__all__ = ["ConfigError", "DetectorConfig"]

_DURATION_FIELDS = (
    "min_std_deviation",
    "acceptable_heartbeat_pause",
    "first_heartbeat_estimate",
)


class ConfigError(ValueError):
    """Raised when a detector configuration is invalid."""


def _as_duration(name: str, value: Any) -> Duration:
    """Accept a Duration or a number of milliseconds."""
    if isinstance(value, Duration):
        return value
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a Duration or milliseconds, got {value!r}")
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            raise ConfigError(f"{name} must be a number of milliseconds, got {value!r}") from None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ConfigError(f"{name} must be finite, got {value!r}")
        return Duration.from_millis(value)
    raise ConfigError(f"{name} must be a Duration or milliseconds, got {value!r}")


@dataclass(frozen=True)
class DetectorConfig:
    """Settings for a FailureDetector.

    Attributes:
        window_size: Number of most recent intervals used for statistics.
        min_std_deviation: Floor applied to the computed standard deviation.
        acceptable_heartbeat_pause: Grace period added to the expected
            interval before elapsed time is judged suspicious.
        first_heartbeat_estimate: Assumed mean interval before any interval
            has been observed.
        threshold: Default phi threshold used by ``is_available``.

    Raises:
        ConfigError: If any field is out of range.
    """

    window_size: int = 1000
    min_std_deviation: Duration = Duration.from_millis(500)
    acceptable_heartbeat_pause: Duration = Duration.ZERO
    first_heartbeat_estimate: Duration = Duration.from_millis(1000)
    threshold: float = 8.0

    def __post_init__(self) -> None:
        if isinstance(self.window_size, bool) or not isinstance(self.window_size, int):
            raise ConfigError(f"window_size must be an int, got {self.window_size!r}")
        if self.window_size < 1:
            raise ConfigError(f"window_size must be >= 1, got {self.window_size}")

        for name in _DURATION_FIELDS:
            if not isinstance(getattr(self, name), Duration):
                raise ConfigError(f"{name} must be a Duration, got {getattr(self, name)!r}")

        if self.min_std_deviation <= Duration.ZERO:
            raise ConfigError(f"min_std_deviation must be > 0, got {self.min_std_deviation}")
        if self.acceptable_heartbeat_pause < Duration.ZERO:
            raise ConfigError(
                f"acceptable_heartbeat_pause must be >= 0, got {self.acceptable_heartbeat_pause}"
            )
        if self.first_heartbeat_estimate <= Duration.ZERO:
            raise ConfigError(
                f"first_heartbeat_estimate must be > 0, got {self.first_heartbeat_estimate}"
            )

        if isinstance(self.threshold, bool) or not isinstance(self.threshold, (int, float)):
            raise ConfigError(f"threshold must be a number, got {self.threshold!r}")
        if not math.isfinite(self.threshold) or self.threshold <= 0:
            raise ConfigError(f"threshold must be > 0, got {self.threshold}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> DetectorConfig:
        """Build a config from a mapping of field names.

        Duration fields accept a Duration or a number of milliseconds.
        Missing keys keep their defaults.

        Raises:
            ConfigError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for name, value in values.items():
            if name in _DURATION_FIELDS:
                kwargs[name] = _as_duration(name, value)
            elif name == "window_size" and isinstance(value, str):
                try:
                    kwargs[name] = int(value)
                except ValueError:
                    raise ConfigError(f"window_size must be an int, got {value!r}") from None
            elif name == "threshold" and isinstance(value, str):
                try:
                    kwargs[name] = float(value)
                except ValueError:
                    raise ConfigError(f"threshold must be a number, got {value!r}") from None
            else:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_env(
        cls,
        prefix: str = "PHI_",
        environ: Mapping[str, str] | None = None,
    ) -> DetectorConfig:
        """Build a config from environment variables.

        Unset variables keep their defaults.

        Args:
            prefix: Variable name prefix.
            environ: Mapping to read from. Defaults to ``os.environ``.
        """
        environ = os.environ if environ is None else environ
        names = {
            "window_size": f"{prefix}WINDOW_SIZE",
            "min_std_deviation": f"{prefix}MIN_STD_DEVIATION_MS",
            "acceptable_heartbeat_pause": f"{prefix}ACCEPTABLE_HEARTBEAT_PAUSE_MS",
            "first_heartbeat_estimate": f"{prefix}FIRST_HEARTBEAT_ESTIMATE_MS",
            "threshold": f"{prefix}THRESHOLD",
        }
        values = {field: environ[var] for field, var in names.items() if environ.get(var)}
        return cls.from_mapping(values)
