"""Processed overlay table used to chart samples on a common wavelength axis."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd

from spectrasync.analysis.report import MAX_ALLOWED_WAVELENGTH_NM
from spectrasync.math.normalization import normalize, resolve_method
from spectrasync.math.smoothing import moving_average
from spectrasync.models import NormalizationMethod, Sample


def _union_axis(
    samples: Sequence[Sample], low: float, high: float
) -> np.ndarray:
    if not samples:
        return np.empty(0)
    wavelengths = np.unique(np.concatenate([s.spectrum.wavelengths_nm for s in samples]))
    return wavelengths[(wavelengths >= low) & (wavelengths <= high)]


def _values_on_axis(sample: Sample, axis: np.ndarray) -> np.ndarray:
    """Measured absorbance where the sample has that exact wavelength, else 0."""

    spectrum = sample.spectrum
    values = np.zeros_like(axis)
    if spectrum.is_empty or axis.size == 0:
        return values
    positions = np.searchsorted(spectrum.wavelengths_nm, axis, side="left")
    in_bounds = positions < spectrum.wavelengths_nm.size
    clipped = np.where(in_bounds, positions, 0)
    hits = in_bounds & (spectrum.wavelengths_nm[clipped] == axis)
    values[hits] = spectrum.absorption[clipped[hits]]
    return values


def build_overlay_frame(
    samples: Sequence[Sample],
    range_min: float,
    range_max: float,
    normalization: NormalizationMethod = "none",
    smoothing_enabled: bool = False,
    window: int = 5,
    *,
    max_allowed_wavelength: float = MAX_ALLOWED_WAVELENGTH_NM,
) -> pd.DataFrame:
    mode = resolve_method(normalization)
    axis = _union_axis(samples, range_min, min(range_max, max_allowed_wavelength))
    columns: dict[str, np.ndarray] = {}
    for sample in samples:
        values = _values_on_axis(sample, axis)
        if smoothing_enabled:
            values = moving_average(values, window)
        if mode != "none":
            values = normalize(values, mode)
        columns[sample.sample_id] = values
    frame = pd.DataFrame(columns, index=pd.Index(axis, name="wavelength_nm"))
    return frame


__all__ = ["build_overlay_frame"]
