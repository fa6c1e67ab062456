"""Offline analysis helpers for tuning detectors."""

from phiaccrual.analysis.trace import PhiTrace

__all__ = ["PhiTrace"]
