"""
Shared pytest fixtures for phiaccrual tests.
"""

import logging
from pathlib import Path

import pytest

from phiaccrual import DetectorConfig, Duration, FailureDetector, Instant


@pytest.fixture(scope="session")
def test_output_root() -> Path:
    """
    Returns the root test_output directory. Created once per test session.
    Files here persist after tests complete for easy access.
    """
    output_dir = Path(__file__).parent.parent / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def test_output_dir(request, test_output_root) -> Path:
    """
    Returns a directory for the current test to write output files.
    Directory structure: test_output/<module_name>/<test_name>/
    """
    module_name = request.module.__name__.split(".")[-1]
    test_name = request.node.name

    test_dir = test_output_root / module_name / test_name
    test_dir.mkdir(parents=True, exist_ok=True)
    return test_dir


@pytest.fixture
def scenario_config() -> DetectorConfig:
    """Window of 4, 10ms deviation floor, no pause, 1s bootstrap estimate."""
    return DetectorConfig(
        window_size=4,
        min_std_deviation=Duration.from_millis(10),
        acceptable_heartbeat_pause=Duration.ZERO,
        first_heartbeat_estimate=Duration.from_millis(1000),
    )


@pytest.fixture
def steady_detector(scenario_config) -> FailureDetector:
    """Detector that received heartbeats at t = 0, 1000, ..., 4000 ms."""
    detector = FailureDetector(scenario_config)
    for t_ms in range(0, 5000, 1000):
        detector.heartbeat(Instant.from_millis(t_ms))
    return detector


@pytest.fixture(autouse=True)
def reset_phiaccrual_logging():
    """Reset the package logger before and after each test.

    Removes every handler but a NullHandler and resets the level, so
    logging configured by one test never leaks into another.
    """
    logger = logging.getLogger("phiaccrual")

    def _reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()
