"""Application session state and helpers."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from spectrasync.analysis.report import ReportRequest
from spectrasync.models import NormalizationMethod, Sample
from spectrasync.settings import AnalysisSettings


@dataclass(slots=True)
class AppSessionState:
    """Session-scoped state stored inside Streamlit's session_state."""

    settings: AnalysisSettings = field(default_factory=AnalysisSettings)
    samples: dict[str, Sample] = field(default_factory=dict)
    sample_order: list[str] = field(default_factory=list)
    range_min: float = 0.0
    range_max: float | None = None
    normalization: NormalizationMethod | None = None
    smoothing_enabled: bool = False
    smoothing_window: int | None = None
    colors_assigned: int = 0
    ingest_ledger: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.range_max is None:
            self.range_max = self.settings.max_allowed_wavelength_nm
        if self.smoothing_window is None:
            self.smoothing_window = self.settings.smoothing_window
        if self.normalization is None:
            self.normalization = self.settings.default_normalization  # type: ignore[assignment]

    def next_color(self) -> str:
        color = self.settings.color_for(self.colors_assigned)
        self.colors_assigned += 1
        return color

    def register_sample(self, sample: Sample) -> tuple[bool, str]:
        """Add a sample unless one with the same id is loaded. Returns (added?, sample_id)."""

        if sample.sample_id in self.samples:
            return False, sample.sample_id
        self.samples[sample.sample_id] = sample
        self.sample_order.append(sample.sample_id)
        self.ingest_ledger.add(sample.sample_id)
        wave_range = sample.spectrum.wave_range_nm
        if self.range_min == 0 and wave_range is not None:
            self.range_min = float(math.floor(wave_range[0]))
        return True, sample.sample_id

    def remove_sample(self, sample_id: str) -> None:
        """Drop a sample from the working set; its id stays in the ingest ledger
        until the file leaves the uploader (see :meth:`release_uploads`)."""

        if sample_id in self.samples:
            del self.samples[sample_id]
            self.sample_order = [sid for sid in self.sample_order if sid != sample_id]

    def release_uploads(self, attached: Iterable[str]) -> None:
        """Forget ledger ids whose file is no longer attached and not loaded."""

        keep = set(attached) | set(self.samples)
        self.ingest_ledger &= keep

    def is_removed_upload(self, sample_id: str) -> bool:
        return sample_id in self.ingest_ledger and sample_id not in self.samples

    def ordered_samples(self) -> list[Sample]:
        return [self.samples[sample_id] for sample_id in self.sample_order]

    def iter_samples(self) -> Iterable[tuple[str, Sample]]:
        for sample_id in self.sample_order:
            yield sample_id, self.samples[sample_id]

    def set_range(self, low: float, high: float) -> None:
        if low > high:
            low, high = high, low
        self.range_min = float(low)
        self.range_max = float(high)

    def snapshot(self) -> ReportRequest:
        return ReportRequest(
            samples=tuple(self.ordered_samples()),
            range_min=self.range_min,
            range_max=float(self.range_max if self.range_max is not None else 0.0),
            normalization=self.normalization or "none",
            smoothing_enabled=self.smoothing_enabled,
            smoothing_window=int(self.smoothing_window or 1),
            max_allowed_wavelength=self.settings.max_allowed_wavelength_nm,
            grid_step=self.settings.grid_step_nm,
            sid_epsilon=self.settings.sid_epsilon,
        )


SESSION_STATE_KEY = "spectrasync_session"


def get_session_state(st_module, *, default: AppSessionState | None = None) -> AppSessionState:
    """Retrieve or initialize the session state from Streamlit."""

    if SESSION_STATE_KEY not in st_module.session_state:
        st_module.session_state[SESSION_STATE_KEY] = default or AppSessionState()
    return st_module.session_state[SESSION_STATE_KEY]


__all__ = [
    "AppSessionState",
    "SESSION_STATE_KEY",
    "get_session_state",
]
