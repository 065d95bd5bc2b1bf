"""Shared data models for absorbance samples and comparison reports."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Literal, NamedTuple

import numpy as np

NormalizationMethod = Literal["none", "area", "minmax"]
NORMALIZATION_METHODS: tuple[str, ...] = ("none", "area", "minmax")


class SpectralPoint(NamedTuple):
    wavelength: float
    absorption: float


class AlignedPair(NamedTuple):
    x: float
    y_a: float
    y_b: float


@dataclass(frozen=True, slots=True, eq=False)
class Spectrum:
    """Wavelength-sorted absorbance curve for a single sample.

    Ordering is the loader's responsibility; the spectrum does not re-sort.
    """

    wavelengths_nm: np.ndarray
    absorption: np.ndarray

    def __post_init__(self) -> None:
        wavelengths = np.asarray(self.wavelengths_nm, dtype=float).reshape(-1)
        absorption = np.asarray(self.absorption, dtype=float).reshape(-1)
        if wavelengths.shape != absorption.shape:
            raise ValueError(
                "wavelength and absorption arrays must have the same length "
                f"({wavelengths.size} != {absorption.size})"
            )
        object.__setattr__(self, "wavelengths_nm", wavelengths)
        object.__setattr__(self, "absorption", absorption)

    @classmethod
    def from_points(cls, points: Iterable[SpectralPoint | tuple[float, float]]) -> Spectrum:
        pairs = [(float(w), float(a)) for w, a in points]
        if not pairs:
            return cls(wavelengths_nm=np.empty(0), absorption=np.empty(0))
        wavelengths, absorption = zip(*pairs, strict=True)
        return cls(wavelengths_nm=np.array(wavelengths), absorption=np.array(absorption))

    def __len__(self) -> int:
        return int(self.wavelengths_nm.size)

    def __iter__(self) -> Iterator[SpectralPoint]:
        for wavelength, absorption in zip(self.wavelengths_nm, self.absorption, strict=True):
            yield SpectralPoint(float(wavelength), float(absorption))

    @property
    def is_empty(self) -> bool:
        return self.wavelengths_nm.size == 0

    @property
    def wave_range_nm(self) -> tuple[float, float] | None:
        if self.is_empty:
            return None
        return float(self.wavelengths_nm[0]), float(self.wavelengths_nm[-1])

    def fingerprint(self) -> str:
        digest = hashlib.sha256()
        digest.update(self.wavelengths_nm.tobytes())
        digest.update(self.absorption.tobytes())
        return digest.hexdigest()


@dataclass(frozen=True, slots=True)
class Sample:
    """A named spectrum as loaded into the working set."""

    sample_id: str
    name: str
    spectrum: Spectrum
    color: str | None = None

    @property
    def fingerprint(self) -> str:
        return f"{self.sample_id}:{self.spectrum.fingerprint()}"

    def peak(self) -> SpectralPoint | None:
        """Return the point of maximum absorbance, first occurrence on ties."""

        if self.spectrum.is_empty:
            return None
        index = int(np.argmax(self.spectrum.absorption))
        return SpectralPoint(
            float(self.spectrum.wavelengths_nm[index]),
            float(self.spectrum.absorption[index]),
        )


@dataclass(frozen=True, slots=True, eq=False)
class AlignedSeries:
    """Two spectra resampled onto a shared, strictly increasing wavelength grid."""

    x: np.ndarray
    y_a: np.ndarray
    y_b: np.ndarray

    def __post_init__(self) -> None:
        x = np.asarray(self.x, dtype=float).reshape(-1)
        y_a = np.asarray(self.y_a, dtype=float).reshape(-1)
        y_b = np.asarray(self.y_b, dtype=float).reshape(-1)
        if not (x.size == y_a.size == y_b.size):
            raise ValueError("aligned columns must have equal length")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y_a", y_a)
        object.__setattr__(self, "y_b", y_b)

    @classmethod
    def empty(cls) -> AlignedSeries:
        return cls(x=np.empty(0), y_a=np.empty(0), y_b=np.empty(0))

    @classmethod
    def from_pairs(cls, pairs: Iterable[AlignedPair | tuple[float, float, float]]) -> AlignedSeries:
        rows = [tuple(float(value) for value in pair) for pair in pairs]
        if not rows:
            return cls.empty()
        x, y_a, y_b = zip(*rows, strict=True)
        return cls(x=np.array(x), y_a=np.array(y_a), y_b=np.array(y_b))

    def __len__(self) -> int:
        return int(self.x.size)

    def __iter__(self) -> Iterator[AlignedPair]:
        for x, y_a, y_b in zip(self.x, self.y_a, self.y_b, strict=True):
            yield AlignedPair(float(x), float(y_a), float(y_b))

    def within(self, low: float, high: float) -> AlignedSeries:
        mask = (self.x >= low) & (self.x <= high)
        return AlignedSeries(x=self.x[mask], y_a=self.y_a[mask], y_b=self.y_b[mask])

    def with_values(self, y_a: np.ndarray, y_b: np.ndarray) -> AlignedSeries:
        return AlignedSeries(x=self.x, y_a=y_a, y_b=y_b)


@dataclass(frozen=True, slots=True)
class SimilarityResult:
    sample_a: str
    sample_b: str
    pearson: float
    rmse: float
    euclidean: float
    cosine: float
    sid: float
    points: int = 0

    def metric(self, name: str) -> float:
        if name not in METRIC_NAMES:
            raise ValueError(f"Unknown metric: {name}")
        return float(getattr(self, name))

    def to_dict(self) -> dict[str, Any]:
        return {
            "sample_a": self.sample_a,
            "sample_b": self.sample_b,
            "pearson": self.pearson,
            "rmse": self.rmse,
            "euclidean": self.euclidean,
            "cosine": self.cosine,
            "sid": self.sid,
            "points": self.points,
        }


@dataclass(frozen=True, slots=True)
class ComparisonReport:
    samples: tuple[Sample, ...]
    results: tuple[SimilarityResult, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", tuple(self.samples))
        object.__setattr__(self, "results", tuple(self.results))

    @property
    def is_empty(self) -> bool:
        return not self.results

    def sample_lookup(self) -> dict[str, Sample]:
        return {sample.sample_id: sample for sample in self.samples}

    def result_for(self, sample_a: str, sample_b: str) -> SimilarityResult | None:
        for result in self.results:
            if {result.sample_a, result.sample_b} == {sample_a, sample_b}:
                return result
        return None


METRIC_NAMES: tuple[str, ...] = ("pearson", "cosine", "rmse", "euclidean", "sid")


__all__ = [
    "AlignedPair",
    "AlignedSeries",
    "ComparisonReport",
    "METRIC_NAMES",
    "NORMALIZATION_METHODS",
    "NormalizationMethod",
    "Sample",
    "SimilarityResult",
    "SpectralPoint",
    "Spectrum",
]
