"""Analysis defaults loaded from ``app/config/settings.yaml``."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from spectrasync.analysis.report import (
    MAX_ALLOWED_WAVELENGTH_NM,
    SID_IDENTICAL_THRESHOLD,
    SID_SIMILAR_THRESHOLD,
)
from spectrasync.analysis.similarity import SID_EPSILON
from spectrasync.math.alignment import GRID_STEP_NM
from spectrasync.math.normalization import resolve_method

CONFIG_DIR = Path(__file__).resolve().parents[1] / "app" / "config"

DEFAULT_PALETTE: tuple[str, ...] = (
    "#2563eb",
    "#dc2626",
    "#16a34a",
    "#d97706",
    "#7c3aed",
    "#db2777",
    "#0891b2",
    "#4f46e5",
)


@dataclass(frozen=True, slots=True)
class AnalysisSettings:
    grid_step_nm: float = GRID_STEP_NM
    max_allowed_wavelength_nm: float = MAX_ALLOWED_WAVELENGTH_NM
    sid_epsilon: float = SID_EPSILON
    default_normalization: str = "none"
    smoothing_window: int = 5
    smoothing_window_min: int = 3
    smoothing_window_max: int = 21
    sid_identical_threshold: float = SID_IDENTICAL_THRESHOLD
    sid_similar_threshold: float = SID_SIMILAR_THRESHOLD
    palette: tuple[str, ...] = DEFAULT_PALETTE

    def __post_init__(self) -> None:
        if self.grid_step_nm <= 0:
            raise ValueError("grid_step_nm must be positive")
        if self.sid_epsilon <= 0:
            raise ValueError("sid_epsilon must be positive")
        if self.sid_identical_threshold > self.sid_similar_threshold:
            raise ValueError("sid_identical_threshold must not exceed sid_similar_threshold")
        if not self.smoothing_window_min <= self.smoothing_window <= self.smoothing_window_max:
            raise ValueError("smoothing_window must lie within its configured bounds")
        if not self.palette:
            raise ValueError("palette must contain at least one colour")
        object.__setattr__(self, "default_normalization", resolve_method(self.default_normalization))
        object.__setattr__(self, "palette", tuple(str(color) for color in self.palette))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> AnalysisSettings:
        known = {field.name for field in fields(cls)}
        values = {key: value for key, value in payload.items() if key in known}
        if "palette" in values and isinstance(values["palette"], list | tuple):
            values["palette"] = tuple(values["palette"])
        return cls(**values)

    def color_for(self, index: int) -> str:
        return self.palette[index % len(self.palette)]


@dataclass(frozen=True, slots=True)
class VersionInfo:
    app_version: str
    schema_version: int


def load_settings(path: Path | None = None) -> AnalysisSettings:
    """Read the ``analysis`` section of the YAML settings, falling back to defaults."""

    settings_path = path or CONFIG_DIR / "settings.yaml"
    if not settings_path.exists():
        return AnalysisSettings()
    payload = yaml.safe_load(settings_path.read_text()) or {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Settings file {settings_path} must contain a mapping")
    section = payload.get("analysis", {}) or {}
    if not isinstance(section, Mapping):
        raise ValueError("The 'analysis' settings section must be a mapping")
    return AnalysisSettings.from_mapping(section)


def load_version(path: Path | None = None) -> VersionInfo:
    version_path = path or CONFIG_DIR / "version.json"
    payload = json.loads(version_path.read_text())
    return VersionInfo(
        app_version=str(payload["app_version"]),
        schema_version=int(payload["schema_version"]),
    )


__all__ = [
    "AnalysisSettings",
    "CONFIG_DIR",
    "DEFAULT_PALETTE",
    "VersionInfo",
    "load_settings",
    "load_version",
]
