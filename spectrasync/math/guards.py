"""Guarded arithmetic for metric denominators."""

from __future__ import annotations

import math


def safe_ratio(numerator: float, denominator: float, *, fallback: float = 0.0) -> float:
    """Divide, returning ``fallback`` for a zero denominator or a non-finite quotient."""

    if denominator == 0:
        return fallback
    value = numerator / denominator
    if not math.isfinite(value):
        return fallback
    return float(value)


__all__ = ["safe_ratio"]
