"""Moving-average smoothing with truncated boundaries."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view


def moving_average(values: np.ndarray | Sequence[float], window: int) -> np.ndarray:
    """Box-filter ``values`` with a symmetric window of ``2 * (window // 2) + 1`` points.

    Near the edges the mean is taken over the points that exist, so the output
    has the same length as the input and is neither padded nor wrapped.
    """

    array = np.asarray(values, dtype=float)
    if window <= 1 or array.size == 0:
        return array
    half = int(window) // 2
    padded = np.pad(array, half, mode="constant", constant_values=np.nan)
    windows = sliding_window_view(padded, 2 * half + 1)
    return np.nanmean(windows, axis=1)


__all__ = ["moving_average"]
