"""The phi suspicion function.

Given the time elapsed since the last heartbeat and the mean and standard
deviation of recent intervals, phi is ``-log10(P(X >= elapsed))`` where X is
normally distributed with that mean and deviation. A phi of 1 means a ~10%
chance that a heartbeat this late is still normal; a phi of 8 means ~1e-8.

The normal survival function is not taken from a numerics library. It uses
the logistic approximation of the standard normal CDF (Bowling et al., 2009,
also used by Akka and Cassandra):

    y = (elapsed - mean) / stddev
    P(X >= elapsed) ~= 1 / (1 + exp(y * (1.5976 + 0.070566 * y**2)))

with a maximum absolute error of about 1.4e-4. Everything is computed in
float milliseconds. Phi is evaluated in log space,

    phi = log10(1 + exp(z)),  z = y * (1.5976 + 0.070566 * y**2)

using a softplus that only ever exponentiates non-positive numbers, so no
intermediate value under- or overflows. The result is capped at MAX_PHI.
"""

from __future__ import annotations

import math

from phiaccrual.core.temporal import Duration

__all__ = ["MAX_PHI", "phi", "survival_probability"]

MAX_PHI = 1_000_000.0
"""Largest value ``phi`` returns. Reached only for peers overdue by
hundreds of standard deviations."""

_A = 1.5976
_B = 0.070566
_LN_10 = math.log(10.0)
_FALLBACK_STD_MS = 1.0


def _z_score(elapsed: Duration, mean: Duration, stddev: Duration) -> float:
    sigma = stddev.to_millis()
    if sigma <= 0:
        sigma = _FALLBACK_STD_MS
    y = (elapsed.to_millis() - mean.to_millis()) / sigma
    return y * (_A + _B * y * y)


def _softplus(z: float) -> float:
    """Natural log of 1 + e**z without overflow."""
    if z > 0:
        return z + math.log1p(math.exp(-z))
    return math.log1p(math.exp(z))


def survival_probability(elapsed: Duration, mean: Duration, stddev: Duration) -> float:
    """Approximate probability that an interval is at least ``elapsed``.

    Negative elapsed time is treated as zero. A non-positive stddev is
    treated as 1 ms.
    """
    if elapsed < Duration.ZERO:
        elapsed = Duration.ZERO
    z = _z_score(elapsed, mean, stddev)
    if z > 0:
        e = math.exp(-z)
        return e / (1.0 + e)
    return 1.0 / (1.0 + math.exp(z))


def phi(elapsed: Duration, mean: Duration, stddev: Duration) -> float:
    """Suspicion level for a heartbeat ``elapsed`` late.

    Args:
        elapsed: Time since the last heartbeat. Values <= 0 yield 0.0.
        mean: Expected interval between heartbeats.
        stddev: Standard deviation of the interval. Non-positive values
            are treated as 1 ms.

    Returns:
        A finite value in [0, MAX_PHI], non-decreasing in ``elapsed``.
    """
    if elapsed <= Duration.ZERO:
        return 0.0
    value = _softplus(_z_score(elapsed, mean, stddev)) / _LN_10
    return min(value, MAX_PHI)
