"""UI helpers for similarity analysis."""

from __future__ import annotations

import math
from collections.abc import Sequence

import pandas as pd
import streamlit as st

from spectrasync.analysis.report import (
    ReportCache,
    ReportRequest,
    build_metric_frames,
    report_to_frame,
)
from spectrasync.models import ComparisonReport
from spectrasync.settings import AnalysisSettings

METRIC_LABELS = {
    "pearson": "Pearson (r)",
    "cosine": "Cosine Sim.",
    "rmse": "Norm. RMSE",
    "euclidean": "Euclidean",
    "sid": "SID",
}


def _format_value(value: float | None, metric: str) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "—"
    if metric in {"rmse", "euclidean"}:
        return f"{value:.4e}"
    return f"{value:.6f}"


def get_report_cache() -> ReportCache:
    cache = st.session_state.get("report_cache")
    if isinstance(cache, ReportCache):
        return cache
    cache = ReportCache()
    st.session_state["report_cache"] = cache
    return cache


def render_similarity_panel(
    request: ReportRequest,
    cache: ReportCache,
    settings: AnalysisSettings,
) -> ComparisonReport | None:
    st.markdown("### High-Precision Similarity Matrix")
    if len(request.samples) < 2:
        st.info("Add at least two samples to compute similarity metrics.")
        return None

    report = cache.compute(request)
    if report.is_empty:
        st.warning("No overlapping data in the selected wavelength range.")
        return report

    table = report_to_frame(
        report,
        identical=settings.sid_identical_threshold,
        similar=settings.sid_similar_threshold,
    )
    _render_table(table)
    _render_matrices(report)
    return report


def _render_table(table: pd.DataFrame) -> None:
    display = table.rename(columns={"sample_a": "Sample A", "sample_b": "Sample B"})
    display = display.rename(columns=METRIC_LABELS)
    display = display.rename(columns={"points": "Points", "verdict": "Verdict"})
    formatters = {
        METRIC_LABELS[metric]: (lambda v, m=metric: _format_value(v, m))
        for metric in METRIC_LABELS
    }
    st.dataframe(display.style.format(formatters), use_container_width=True)


def display_labels(keys: Sequence[str], lookup: dict[str, str]) -> list[str]:
    counts: dict[str, int] = {}
    labels: list[str] = []
    for key in keys:
        base = lookup.get(key, key)
        count = counts.get(base, 0) + 1
        counts[base] = count
        if count == 1:
            labels.append(base)
        else:
            labels.append(f"{base} ({count})")
    return labels


def _render_matrices(report: ComparisonReport) -> None:
    frames = build_metric_frames(report)
    if not frames:
        return
    lookup = {sample.sample_id: sample.name for sample in report.samples}
    tabs = st.tabs([METRIC_LABELS[name] for name in frames])
    for tab, (metric, frame) in zip(tabs, frames.items(), strict=False):
        with tab:
            display = frame.copy()
            display.index = display_labels(display.index.tolist(), lookup)
            display.columns = display_labels(display.columns.tolist(), lookup)
            styled = display.style.format(lambda v, m=metric: _format_value(v, m))
            st.dataframe(styled, use_container_width=True)
            st.caption(
                "Diagonal entries show self-similarity. Blank cells had no overlap in range."
            )


__all__ = ["display_labels", "get_report_cache", "render_similarity_panel"]
