"""Sample upload, sample list and processed spectra chart."""

from __future__ import annotations

from dataclasses import replace

import plotly.graph_objects as go
import streamlit as st

from app.state.session import AppSessionState
from app.ui.similarity import display_labels
from spectrasync.analysis.overlay import build_overlay_frame
from spectrasync.ingest.tabular_loader import (
    EXCEL_SUFFIXES,
    TEXT_SUFFIXES,
    SampleIngestError,
    content_id,
    load_sample,
)

UPLOAD_TYPES = [suffix.lstrip(".") for suffix in TEXT_SUFFIXES + EXCEL_SUFFIXES]


def _render_uploader(session: AppSessionState) -> None:
    uploaded_files = st.file_uploader(
        "Upload absorbance spectra (CSV/TXT/Excel)",
        type=UPLOAD_TYPES,
        accept_multiple_files=True,
        key="sample_uploader",
    )
    payloads = [(uploaded.name, uploaded.getvalue()) for uploaded in uploaded_files or []]
    session.release_uploads(content_id(payload) for _, payload in payloads)
    for filename, payload in payloads:
        sample_id = content_id(payload)
        if session.is_removed_upload(sample_id):
            st.caption(
                f"Skipped {filename}: removed earlier. "
                "Clear it from the uploader to add it again."
            )
            continue
        if sample_id in session.ingest_ledger:
            continue
        try:
            sample = load_sample(payload, filename, sample_id=sample_id)
        except SampleIngestError as err:
            st.error(f"Could not parse {filename}: {err}")
            continue
        colored = replace(sample, color=session.next_color())
        added, _ = session.register_sample(colored)
        if added:
            st.success(f"Added sample '{colored.name}' ({len(colored.spectrum)} points)")


def _render_sample_list(session: AppSessionState) -> None:
    st.subheader("Water Samples")
    if not session.sample_order:
        st.info("No samples loaded yet.")
        return
    for sample_id, sample in list(session.iter_samples()):
        name_column, remove_column = st.columns([4, 1])
        wave_range = sample.spectrum.wave_range_nm
        peak = sample.peak()
        caption = (
            f"{len(sample.spectrum)} pts, {wave_range[0]:.1f}–{wave_range[1]:.1f} nm"
            if wave_range
            else "no data"
        )
        if peak is not None:
            caption += f", peak {peak.absorption:.3f} AU at {peak.wavelength:.1f} nm"
        name_column.markdown(f"**{sample.name}**  \n{caption}")
        if remove_column.button("Remove", key=f"remove_{sample_id}"):
            session.remove_sample(sample_id)
            st.rerun()


def _axis_title(session: AppSessionState) -> str:
    if session.normalization == "none":
        return "Absorbance (AU)"
    return f"Normalized Intensity ({session.normalization})"


def plot_samples(session: AppSessionState) -> go.Figure:
    frame = build_overlay_frame(
        session.ordered_samples(),
        session.range_min,
        float(session.range_max or 0.0),
        session.normalization or "none",
        session.smoothing_enabled,
        int(session.smoothing_window or 1),
        max_allowed_wavelength=session.settings.max_allowed_wavelength_nm,
    )
    samples = session.ordered_samples()
    labels = display_labels(
        [sample.sample_id for sample in samples],
        {sample.sample_id: sample.name for sample in samples},
    )
    figure = go.Figure()
    for sample, label in zip(samples, labels, strict=True):
        if sample.sample_id not in frame.columns:
            continue
        figure.add_trace(
            go.Scatter(
                x=frame.index.to_numpy(),
                y=frame[sample.sample_id].to_numpy(),
                mode="lines",
                name=label,
                line=dict(color=sample.color, width=2),
                hovertemplate="%{x:.1f} nm, %{y:.4e}",
            )
        )
    figure.update_layout(
        margin=dict(l=40, r=40, t=40, b=40),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        xaxis_title="Wavelength (nm)",
        yaxis_title=_axis_title(session),
    )
    return figure


def render_samples_tab(session: AppSessionState) -> go.Figure | None:
    st.subheader("Upload Spectra")
    _render_uploader(session)
    _render_sample_list(session)
    if not session.sample_order:
        return None
    badges = [f"{session.normalization} mode"]
    if session.smoothing_enabled:
        badges.append("Smoothed")
    st.caption(" · ".join(badges))
    figure = plot_samples(session)
    st.plotly_chart(figure, use_container_width=True, key="samples_chart")
    return figure


__all__ = ["plot_samples", "render_samples_tab"]
