from __future__ import annotations

import numpy as np
import pytest

from spectrasync.math.alignment import (
    align,
    interpolate_clamped,
    overlap_domain,
    synthetic_grid,
)
from spectrasync.models import AlignedPair, Spectrum


def _spectrum(points: list[tuple[float, float]]) -> Spectrum:
    return Spectrum.from_points(points)


def test_identical_grids_reproduce_measured_values() -> None:
    wavelengths = 200.0 + 0.5 * np.arange(41)
    values = np.sin(wavelengths / 7.0) + 1.0
    spectrum = Spectrum(wavelengths_nm=wavelengths, absorption=values)

    aligned = align(spectrum, spectrum)

    assert len(aligned) == 41
    np.testing.assert_array_equal(aligned.x, wavelengths)
    np.testing.assert_array_equal(aligned.y_a, values)
    np.testing.assert_array_equal(aligned.y_b, values)


def test_coarse_identical_samples_match_at_measured_points() -> None:
    sample = _spectrum([(200.0, 0.10), (210.0, 0.30), (220.0, 0.20)])

    aligned = align(sample, sample)

    assert aligned.x[0] == 200.0
    assert aligned.x[-1] == 220.0
    assert len(aligned) == 41
    np.testing.assert_array_equal(aligned.y_a, aligned.y_b)
    assert aligned.y_a[0] == 0.10
    assert aligned.y_a[20] == 0.30
    assert aligned.y_a[40] == 0.20


def test_alignment_covers_only_the_overlap() -> None:
    spectrum_a = _spectrum([(200.0, 0.0), (300.0, 1.0)])
    spectrum_b = _spectrum([(250.0, 2.0), (350.0, 3.0)])

    aligned = align(spectrum_a, spectrum_b)

    assert overlap_domain(spectrum_a, spectrum_b) == (250.0, 300.0)
    assert aligned.x[0] == 250.0
    assert aligned.x[-1] == 300.0
    assert len(aligned) == 101
    assert np.all(np.diff(aligned.x) > 0)
    assert pytest.approx(aligned.y_a[0]) == 0.5
    assert pytest.approx(aligned.y_b[-1]) == 2.5


def test_non_overlapping_spectra_align_to_nothing() -> None:
    spectrum_a = _spectrum([(200.0, 0.1), (210.0, 0.2)])
    spectrum_b = _spectrum([(250.0, 0.1), (260.0, 0.2)])

    assert overlap_domain(spectrum_a, spectrum_b) is None
    aligned = align(spectrum_a, spectrum_b)
    assert len(aligned) == 0
    assert list(aligned) == []


def test_empty_spectrum_aligns_to_nothing() -> None:
    empty = Spectrum.from_points([])
    other = _spectrum([(200.0, 0.1), (210.0, 0.2)])

    assert len(align(empty, other)) == 0
    assert len(align(other, empty)) == 0


def test_interpolation_is_linear_and_clamped() -> None:
    spectrum = _spectrum([(200.0, 0.0), (210.0, 1.0), (220.0, 3.0)])

    values = interpolate_clamped(spectrum, np.array([190.0, 205.0, 215.0, 230.0]))

    np.testing.assert_allclose(values, [0.0, 0.5, 2.0, 3.0])


def test_aligned_pairs_iterate_as_named_tuples() -> None:
    spectrum = _spectrum([(200.0, 1.0), (201.0, 3.0)])

    pairs = list(align(spectrum, spectrum))

    assert pairs[1] == AlignedPair(200.5, 2.0, 2.0)


def test_grid_rejects_non_positive_step() -> None:
    with pytest.raises(ValueError):
        synthetic_grid(200.0, 210.0, 0.0)


def test_single_point_overlap_yields_single_pair() -> None:
    spectrum_a = _spectrum([(200.0, 0.4), (210.0, 0.6)])
    spectrum_b = _spectrum([(210.0, 0.9), (220.0, 0.1)])

    aligned = align(spectrum_a, spectrum_b)

    assert list(aligned) == [AlignedPair(210.0, 0.6, 0.9)]
