"""phiaccrual: a phi accrual failure detector.

Turns a stream of heartbeat arrival times into a continuous suspicion
level (phi) instead of a binary up/down verdict.

    from phiaccrual import DetectorConfig, Duration, FailureDetector, Instant

    detector = FailureDetector(DetectorConfig(window_size=100))
    detector.heartbeat(Instant.from_millis(0))
    detector.heartbeat(Instant.from_millis(1000))
    detector.phi(Instant.from_millis(1500))
"""

import logging

from phiaccrual.analysis import PhiTrace
from phiaccrual.calculator import MAX_PHI, phi, survival_probability
from phiaccrual.config import ConfigError, DetectorConfig
from phiaccrual.core import Clock, Duration, Instant, ManualClock, MonotonicClock
from phiaccrual.detector import DetectorState, FailureDetector, FailureDetectorStats
from phiaccrual.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_file_logging,
    enable_json_logging,
    enable_timed_file_logging,
    set_level,
    set_module_level,
)
from phiaccrual.registry import FailureDetectorRegistry
from phiaccrual.window import SamplingWindow

# Silent unless the application configures logging.
logging.getLogger("phiaccrual").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Time
    "Clock",
    "Duration",
    "Instant",
    "ManualClock",
    "MonotonicClock",
    # Configuration
    "ConfigError",
    "DetectorConfig",
    # Detection
    "DetectorState",
    "FailureDetector",
    "FailureDetectorRegistry",
    "FailureDetectorStats",
    "MAX_PHI",
    "SamplingWindow",
    "phi",
    "survival_probability",
    # Analysis
    "PhiTrace",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_file_logging",
    "enable_json_logging",
    "enable_timed_file_logging",
    "set_level",
    "set_module_level",
]
