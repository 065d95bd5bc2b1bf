"""Wavelength-grid alignment of two independently sampled spectra."""

from __future__ import annotations

import numpy as np

from spectrasync.models import AlignedSeries, Spectrum

GRID_STEP_NM = 0.5


def overlap_domain(spectrum_a: Spectrum, spectrum_b: Spectrum) -> tuple[float, float] | None:
    """Return the wavelength interval covered by both spectra, if any."""

    range_a = spectrum_a.wave_range_nm
    range_b = spectrum_b.wave_range_nm
    if range_a is None or range_b is None:
        return None
    low = max(range_a[0], range_b[0])
    high = min(range_a[1], range_b[1])
    if low > high:
        return None
    return low, high


def synthetic_grid(low: float, high: float, step: float = GRID_STEP_NM) -> np.ndarray:
    """Grid from ``low`` while ``<= high``, built by repeated addition of ``step``."""

    if step <= 0:
        raise ValueError("step must be positive")
    points: list[float] = []
    wavelength = float(low)
    while wavelength <= high:
        points.append(wavelength)
        wavelength += step
    return np.asarray(points, dtype=float)


def interpolate_clamped(spectrum: Spectrum, targets: np.ndarray) -> np.ndarray:
    """Linear interpolation that holds the end values outside the measured range."""

    targets = np.asarray(targets, dtype=float)
    if spectrum.is_empty:
        return np.full_like(targets, np.nan)
    return np.interp(
        targets,
        spectrum.wavelengths_nm,
        spectrum.absorption,
        left=spectrum.absorption[0],
        right=spectrum.absorption[-1],
    )


def align(
    spectrum_a: Spectrum, spectrum_b: Spectrum, *, step: float = GRID_STEP_NM
) -> AlignedSeries:
    domain = overlap_domain(spectrum_a, spectrum_b)
    if domain is None:
        return AlignedSeries.empty()
    grid = synthetic_grid(domain[0], domain[1], step)
    return AlignedSeries(
        x=grid,
        y_a=interpolate_clamped(spectrum_a, grid),
        y_b=interpolate_clamped(spectrum_b, grid),
    )


__all__ = [
    "GRID_STEP_NM",
    "align",
    "interpolate_clamped",
    "overlap_domain",
    "synthetic_grid",
]
