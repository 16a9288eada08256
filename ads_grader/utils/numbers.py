"""
Zero-safe numeric helpers shared by the snapshot model and the evaluators.

Ratios over an empty population resolve to ``0.0`` instead of raising or
producing NaN, so every evaluator stays total over any snapshot.
"""

from __future__ import annotations

import math


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator``, or ``0.0`` when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    value = numerator / denominator
    return value if math.isfinite(value) else 0.0


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
