"""Comparison report bundle writer and manifest replay."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from io import BytesIO
from typing import Any
from zipfile import ZIP_DEFLATED, ZipFile

from spectrasync.analysis.report import (
    MAX_ALLOWED_WAVELENGTH_NM,
    SID_IDENTICAL_THRESHOLD,
    SID_SIMILAR_THRESHOLD,
    ReportRequest,
    report_to_frame,
)
from spectrasync.analysis.similarity import SID_EPSILON
from spectrasync.math.alignment import GRID_STEP_NM
from spectrasync.models import ComparisonReport, Sample

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ExportBundle:
    manifest: dict
    zip_bytes: bytes


def _parameters(request: ReportRequest) -> dict[str, Any]:
    return {
        "range_min_nm": request.range_min,
        "range_max_nm": request.range_max,
        "max_allowed_wavelength_nm": request.max_allowed_wavelength,
        "normalization": request.normalization,
        "smoothing_enabled": request.smoothing_enabled,
        "smoothing_window": request.smoothing_window,
        "grid_step_nm": request.grid_step,
        "sid_epsilon": request.sid_epsilon,
    }


def _sample_entry(sample: Sample) -> dict[str, Any]:
    wave_range = sample.spectrum.wave_range_nm
    return {
        "sample_id": sample.sample_id,
        "name": sample.name,
        "color": sample.color,
        "points": len(sample.spectrum),
        "wave_range_nm": list(wave_range) if wave_range else None,
    }


def build_manifest(
    report: ComparisonReport,
    request: ReportRequest,
    *,
    app_version: str,
    schema_version: int,
    identical: float = SID_IDENTICAL_THRESHOLD,
    similar: float = SID_SIMILAR_THRESHOLD,
) -> dict:
    return {
        "schema_version": schema_version,
        "app_version": app_version,
        "created_utc": datetime.now(UTC).isoformat(),
        "parameters": _parameters(request),
        "sid_thresholds": {"identical": identical, "similar": similar},
        "samples": [_sample_entry(sample) for sample in report.samples],
        "results": [result.to_dict() for result in report.results],
    }


def _write_sample_csv(sample: Sample) -> bytes:
    buffer = BytesIO()
    buffer.write(b"wavelength_nm,absorbance\n")
    for point in sample.spectrum:
        buffer.write(f"{point.wavelength:.8e},{point.absorption:.8e}\n".encode())
    return buffer.getvalue()


def export_report(
    report: ComparisonReport,
    request: ReportRequest,
    *,
    app_version: str,
    schema_version: int,
    identical: float = SID_IDENTICAL_THRESHOLD,
    similar: float = SID_SIMILAR_THRESHOLD,
    include_samples: bool = True,
) -> ExportBundle:
    manifest = build_manifest(
        report,
        request,
        app_version=app_version,
        schema_version=schema_version,
        identical=identical,
        similar=similar,
    )
    table = report_to_frame(report, identical=identical, similar=similar)

    buffer = BytesIO()
    with ZipFile(buffer, mode="w", compression=ZIP_DEFLATED) as archive:
        archive.writestr("manifest.json", json.dumps(manifest, indent=2))
        archive.writestr("similarity.csv", table.to_csv(index=False))
        if include_samples:
            for sample in report.samples:
                archive.writestr(f"samples/{sample.sample_id}.csv", _write_sample_csv(sample))
    _LOGGER.info(
        "Exported %d results for %d samples", len(report.results), len(report.samples)
    )
    return ExportBundle(manifest=manifest, zip_bytes=buffer.getvalue())


def replay_manifest(manifest: Mapping[str, object]) -> dict[str, Any]:
    """Recover the analysis parameters recorded in a manifest."""

    raw = manifest.get("parameters", {})
    if not isinstance(raw, Mapping):
        return {}
    return {
        "range_min": float(raw.get("range_min_nm", 0.0)),
        "range_max": float(raw.get("range_max_nm", 0.0)),
        "max_allowed_wavelength": float(
            raw.get("max_allowed_wavelength_nm", MAX_ALLOWED_WAVELENGTH_NM)
        ),
        "normalization": str(raw.get("normalization", "none")),
        "smoothing_enabled": bool(raw.get("smoothing_enabled", False)),
        "smoothing_window": int(raw.get("smoothing_window", 1)),
        "grid_step": float(raw.get("grid_step_nm", GRID_STEP_NM)),
        "sid_epsilon": float(raw.get("sid_epsilon", SID_EPSILON)),
    }


__all__ = ["ExportBundle", "build_manifest", "export_report", "replay_manifest"]
