"""Pairwise comparison reports over a set of absorbance samples."""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from spectrasync.analysis.similarity import SID_EPSILON, compute_metrics
from spectrasync.math.alignment import GRID_STEP_NM, align
from spectrasync.math.normalization import resolve_method
from spectrasync.math.smoothing import moving_average
from spectrasync.models import (
    METRIC_NAMES,
    ComparisonReport,
    NormalizationMethod,
    Sample,
    SimilarityResult,
)

MAX_ALLOWED_WAVELENGTH_NM = 300.0
SID_IDENTICAL_THRESHOLD = 1e-5
SID_SIMILAR_THRESHOLD = 1e-3

_LOGGER = logging.getLogger(__name__)

ReportKey = tuple[
    tuple[str, ...], float | None, float | None, str, bool, int, float | None, float, float
]


@dataclass(frozen=True, slots=True)
class ReportRequest:
    """Immutable snapshot of everything a report depends on."""

    samples: tuple[Sample, ...]
    range_min: float
    range_max: float
    normalization: NormalizationMethod = "none"
    smoothing_enabled: bool = False
    smoothing_window: int = 5
    max_allowed_wavelength: float = MAX_ALLOWED_WAVELENGTH_NM
    grid_step: float = GRID_STEP_NM
    sid_epsilon: float = SID_EPSILON

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", tuple(self.samples))
        object.__setattr__(self, "normalization", resolve_method(self.normalization))

    @property
    def upper_bound(self) -> float:
        return min(self.range_max, self.max_allowed_wavelength)

    def cache_key(self) -> ReportKey:
        return (
            tuple(sample.fingerprint for sample in self.samples),
            _normalise_float(self.range_min),
            _normalise_float(self.range_max),
            self.normalization,
            self.smoothing_enabled,
            int(self.smoothing_window) if self.smoothing_enabled else 0,
            _normalise_float(self.max_allowed_wavelength),
            self.grid_step,
            self.sid_epsilon,
        )


def _normalise_float(value: float | None) -> float | None:
    if value is None:
        return None
    if not math.isfinite(value):
        return None
    return round(float(value), 6)


def compare_pair(
    sample_a: Sample, sample_b: Sample, request: ReportRequest
) -> SimilarityResult | None:
    """Compare two samples under ``request``; ``None`` when nothing overlaps."""

    aligned = align(sample_a.spectrum, sample_b.spectrum, step=request.grid_step)
    filtered = aligned.within(request.range_min, request.upper_bound)
    if len(filtered) == 0:
        return None
    if request.smoothing_enabled:
        filtered = filtered.with_values(
            moving_average(filtered.y_a, request.smoothing_window),
            moving_average(filtered.y_b, request.smoothing_window),
        )
    metrics = compute_metrics(filtered, request.normalization, epsilon=request.sid_epsilon)
    return SimilarityResult(
        sample_a=sample_a.sample_id,
        sample_b=sample_b.sample_id,
        points=len(filtered),
        **metrics,
    )


def build_report_for(request: ReportRequest) -> ComparisonReport:
    samples = request.samples
    results: list[SimilarityResult] = []
    for i, sample_a in enumerate(samples):
        for j in range(i + 1, len(samples)):
            sample_b = samples[j]
            result = compare_pair(sample_a, sample_b, request)
            if result is None:
                _LOGGER.debug(
                    "No comparable region for %s / %s in %.1f-%.1f nm",
                    sample_a.name,
                    sample_b.name,
                    request.range_min,
                    request.upper_bound,
                )
                continue
            results.append(result)
    return ComparisonReport(samples=samples, results=tuple(results))


def build_report(
    samples: Sequence[Sample],
    range_min: float,
    range_max: float,
    normalization: NormalizationMethod = "none",
    smoothing_enabled: bool = False,
    window: int = 5,
    *,
    max_allowed_wavelength: float = MAX_ALLOWED_WAVELENGTH_NM,
) -> ComparisonReport:
    request = ReportRequest(
        samples=tuple(samples),
        range_min=range_min,
        range_max=range_max,
        normalization=normalization,
        smoothing_enabled=smoothing_enabled,
        smoothing_window=window,
        max_allowed_wavelength=max_allowed_wavelength,
    )
    return build_report_for(request)


class ReportCache:
    """Thread-safe memoisation of comparison reports keyed by request value."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[ReportKey, ComparisonReport] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def compute(self, request: ReportRequest) -> ComparisonReport:
        key = request.cache_key()
        with self._lock:
            cached = self._store.get(key)
        if cached is not None:
            _LOGGER.debug("Report cache hit for %d samples", len(request.samples))
            # the cached report may hold samples from an earlier, value-equal snapshot
            return ComparisonReport(samples=request.samples, results=cached.results)
        report = build_report_for(request)
        with self._lock:
            self._store[key] = report
        return report

    def reset(self) -> None:
        with self._lock:
            self._store.clear()


def sid_verdict(
    value: float,
    *,
    identical: float = SID_IDENTICAL_THRESHOLD,
    similar: float = SID_SIMILAR_THRESHOLD,
) -> str:
    if value < identical:
        return "Chemically Identical"
    if value < similar:
        return "Very Similar"
    return "Different"


def report_to_frame(
    report: ComparisonReport,
    *,
    identical: float = SID_IDENTICAL_THRESHOLD,
    similar: float = SID_SIMILAR_THRESHOLD,
) -> pd.DataFrame:
    lookup = report.sample_lookup()
    columns = ["sample_a", "sample_b", *METRIC_NAMES, "points", "verdict"]
    rows = []
    for result in report.results:
        name_a = lookup[result.sample_a].name if result.sample_a in lookup else result.sample_a
        name_b = lookup[result.sample_b].name if result.sample_b in lookup else result.sample_b
        row = {"sample_a": name_a, "sample_b": name_b}
        row.update({metric: result.metric(metric) for metric in METRIC_NAMES})
        row["points"] = result.points
        row["verdict"] = sid_verdict(result.sid, identical=identical, similar=similar)
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def build_metric_frames(report: ComparisonReport) -> dict[str, pd.DataFrame]:
    if len(report.samples) < 2:
        return {}
    identifiers = [sample.sample_id for sample in report.samples]
    frames: dict[str, pd.DataFrame] = {}
    for metric in METRIC_NAMES:
        diag_value = 1.0 if metric in {"pearson", "cosine"} else 0.0
        frame = pd.DataFrame(np.nan, index=identifiers, columns=identifiers, dtype=float)
        for identifier in identifiers:
            frame.loc[identifier, identifier] = diag_value
        frames[metric] = frame
    for result in report.results:
        for metric in METRIC_NAMES:
            value = result.metric(metric)
            frames[metric].loc[result.sample_a, result.sample_b] = value
            frames[metric].loc[result.sample_b, result.sample_a] = value
    return frames


__all__ = [
    "MAX_ALLOWED_WAVELENGTH_NM",
    "ReportCache",
    "ReportRequest",
    "SID_IDENTICAL_THRESHOLD",
    "SID_SIMILAR_THRESHOLD",
    "build_metric_frames",
    "build_report",
    "build_report_for",
    "compare_pair",
    "report_to_frame",
    "sid_verdict",
]
