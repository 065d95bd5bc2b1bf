"""Analytical helpers for spectral comparison."""

from .overlay import build_overlay_frame
from .report import (
    ReportCache,
    ReportRequest,
    build_metric_frames,
    build_report,
    build_report_for,
    report_to_frame,
    sid_verdict,
)
from .similarity import compute_metrics, cosine, euclidean, pearson, rmse, sid

__all__ = [
    "ReportCache",
    "ReportRequest",
    "build_metric_frames",
    "build_overlay_frame",
    "build_report",
    "build_report_for",
    "compute_metrics",
    "cosine",
    "euclidean",
    "pearson",
    "report_to_frame",
    "rmse",
    "sid",
    "sid_verdict",
]
