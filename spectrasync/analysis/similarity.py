"""Numeric similarity and divergence metrics for aligned absorbance spectra.

Each metric picks its own normalization: Pearson and cosine are scale
invariant and run on the raw aligned values, the distance metrics run on a
normalized footing, and SID always treats both curves as probability
distributions.
"""

from __future__ import annotations

import math

import numpy as np

from spectrasync.math.guards import safe_ratio
from spectrasync.math.normalization import distance_normalization, normalize
from spectrasync.models import AlignedSeries, NormalizationMethod

SID_EPSILON = 1e-10


def _has_variance(values: np.ndarray) -> bool:
    return bool(np.ptp(values) > 0)


def pearson(series: AlignedSeries) -> float:
    a, b = series.y_a, series.y_b
    if a.size < 2 or not _has_variance(a) or not _has_variance(b):
        return 0.0
    a_zero = a - np.mean(a)
    b_zero = b - np.mean(b)
    denom = math.sqrt(float(np.dot(a_zero, a_zero)) * float(np.dot(b_zero, b_zero)))
    return safe_ratio(float(np.dot(a_zero, b_zero)), denom)


def cosine(series: AlignedSeries) -> float:
    a, b = series.y_a, series.y_b
    denom = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    return safe_ratio(float(np.dot(a, b)), denom)


def _normalized_difference(series: AlignedSeries, method: NormalizationMethod) -> np.ndarray:
    policy = distance_normalization(method)
    return normalize(series.y_a, policy) - normalize(series.y_b, policy)


def rmse(series: AlignedSeries, method: NormalizationMethod = "none") -> float:
    if len(series) == 0:
        return 0.0
    diff = _normalized_difference(series, method)
    return float(np.sqrt(np.mean(diff**2)))


def euclidean(series: AlignedSeries, method: NormalizationMethod = "none") -> float:
    if len(series) == 0:
        return 0.0
    diff = _normalized_difference(series, method)
    return float(np.sqrt(np.sum(diff**2)))


def sid(series: AlignedSeries, *, epsilon: float = SID_EPSILON) -> float:
    """Spectral Information Divergence between the two aligned curves.

    Values are floored at ``epsilon`` and area-normalized regardless of the
    caller's normalization choice. The sum is returned as computed, so nearly
    identical inputs may give a tiny negative number from rounding.
    """

    if len(series) == 0:
        return 0.0
    p = normalize(np.maximum(series.y_a, epsilon), "area")
    q = normalize(np.maximum(series.y_b, epsilon), "area")
    return float(np.sum((p - q) * (np.log(p) - np.log(q))))


def compute_metrics(
    series: AlignedSeries,
    method: NormalizationMethod = "none",
    *,
    epsilon: float = SID_EPSILON,
) -> dict[str, float]:
    return {
        "pearson": pearson(series),
        "cosine": cosine(series),
        "rmse": rmse(series, method),
        "euclidean": euclidean(series, method),
        "sid": sid(series, epsilon=epsilon),
    }


__all__ = [
    "SID_EPSILON",
    "compute_metrics",
    "cosine",
    "euclidean",
    "pearson",
    "rmse",
    "sid",
]
