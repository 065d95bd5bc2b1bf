"""Intensity normalization policies."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from spectrasync.models import NORMALIZATION_METHODS, NormalizationMethod


def resolve_method(method: str | None) -> str:
    mode = (method or "none").lower()
    if mode not in NORMALIZATION_METHODS:
        raise ValueError(f"Unsupported normalization: {method}")
    return mode


def normalize(values: np.ndarray | Sequence[float], method: NormalizationMethod) -> np.ndarray:
    """Rescale ``values`` under ``none``, ``area`` (L1 = 1) or ``minmax`` ([0, 1])."""

    mode = resolve_method(method)
    array = np.asarray(values, dtype=float)
    if mode == "none" or array.size == 0:
        return array
    if mode == "area":
        total = float(np.sum(np.abs(array)))
        if total == 0:
            return array
        return array / total
    low = float(np.min(array))
    high = float(np.max(array))
    span = high - low
    if span == 0:
        # constant signal maps to all zeros
        return np.zeros_like(array)
    return (array - low) / span


def distance_normalization(method: NormalizationMethod) -> NormalizationMethod:
    """Policy used by distance metrics: raw data is compared area-normalized."""

    mode = resolve_method(method)
    if mode == "none":
        return "area"
    return mode  # type: ignore[return-value]


__all__ = ["distance_normalization", "normalize", "resolve_method"]
