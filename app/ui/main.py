"""Main Streamlit entry point."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import streamlit as st
import yaml

from app.state.session import AppSessionState, get_session_state
from app.ui.samples import render_samples_tab
from app.ui.similarity import get_report_cache, render_similarity_panel
from spectrasync.export.bundle import export_report
from spectrasync.models import NORMALIZATION_METHODS
from spectrasync.settings import (
    CONFIG_DIR,
    AnalysisSettings,
    load_settings,
    load_version,
)

NORMALIZATION_OPTIONS = {
    "none": ("Raw Data", "Original absorbance values."),
    "area": ("Area Normalized", "Integral of curve = 1. Best for concentration variations."),
    "minmax": ("Min-Max Scaling", "Range [0, 1]. Best for comparing peak positions."),
}


@dataclass(slots=True)
class UIContract:
    tabs: list[str]
    sidebar_sections: list[str]
    version_badge_label: str


@dataclass(slots=True)
class AppConfig:
    app_version: str
    schema_version: int
    analysis: AnalysisSettings
    settings: dict[str, Any]


def load_config() -> AppConfig:
    version = load_version()
    settings_path = CONFIG_DIR / "settings.yaml"
    settings_payload = yaml.safe_load(settings_path.read_text()) if settings_path.exists() else {}
    return AppConfig(
        app_version=version.app_version,
        schema_version=version.schema_version,
        analysis=load_settings(settings_path),
        settings=settings_payload or {},
    )


def get_ui_contract() -> UIContract:
    return UIContract(
        tabs=["Spectra", "Similarity"],
        sidebar_sections=[
            "Wavelength Range",
            "Normalization Method",
            "Spectral Smoothing",
        ],
        version_badge_label="Version",
    )


def _configure_sidebar(session: AppSessionState) -> None:
    settings = session.settings
    ceiling = settings.max_allowed_wavelength_nm

    st.sidebar.header("Wavelength Range")
    low_column, high_column = st.sidebar.columns(2)
    range_min = low_column.number_input(
        "Min (nm)",
        min_value=0.0,
        max_value=ceiling,
        value=float(min(session.range_min, ceiling)),
        step=1.0,
        key="range_min_input",
    )
    range_max = high_column.number_input(
        "Max (nm)",
        min_value=0.0,
        max_value=ceiling,
        value=float(min(session.range_max or ceiling, ceiling)),
        step=1.0,
        key="range_max_input",
    )
    session.set_range(float(range_min), float(range_max))

    st.sidebar.header("Normalization Method")
    options = list(NORMALIZATION_METHODS)
    current = session.normalization or "none"
    choice = st.sidebar.radio(
        "Normalization",
        options=options,
        index=options.index(current),
        format_func=lambda value: NORMALIZATION_OPTIONS[value][0],
        captions=[NORMALIZATION_OPTIONS[value][1] for value in options],
        key="normalization_radio",
    )
    session.normalization = choice

    st.sidebar.header("Spectral Smoothing")
    session.smoothing_enabled = st.sidebar.toggle(
        "Moving average", value=session.smoothing_enabled, key="smoothing_toggle"
    )
    if session.smoothing_enabled:
        session.smoothing_window = st.sidebar.slider(
            "Window size",
            min_value=settings.smoothing_window_min,
            max_value=settings.smoothing_window_max,
            value=int(session.smoothing_window or settings.smoothing_window),
            step=2,
            key="smoothing_window_slider",
        )


def _header(app_version: str) -> None:
    st.title("SpectraSync")
    st.caption("UV absorbance comparison for water samples")
    st.markdown(f"**Version:** `{app_version}`")


def run_app() -> None:
    config = load_config()
    st.set_page_config(page_title="SpectraSync", layout="wide")
    session = get_session_state(st, default=AppSessionState(settings=config.analysis))

    _header(config.app_version)
    _configure_sidebar(session)

    spectra_tab, similarity_tab = st.tabs(get_ui_contract().tabs)
    with spectra_tab:
        render_samples_tab(session)

    request = session.snapshot()
    with similarity_tab:
        report = render_similarity_panel(request, get_report_cache(), session.settings)

    if report is not None and not report.is_empty:
        include_samples = bool(config.settings.get("export", {}).get("include_samples", True))
        bundle = export_report(
            report,
            request,
            app_version=config.app_version,
            schema_version=config.schema_version,
            identical=session.settings.sid_identical_threshold,
            similar=session.settings.sid_similar_threshold,
            include_samples=include_samples,
        )
        st.download_button(
            "Download report bundle",
            data=bundle.zip_bytes,
            file_name="spectrasync_report.zip",
            mime="application/zip",
            key="export_button",
        )


__all__ = ["AppConfig", "UIContract", "get_ui_contract", "load_config", "run_app"]
