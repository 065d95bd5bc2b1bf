from __future__ import annotations

from dataclasses import replace
from types import SimpleNamespace

from app.state.session import SESSION_STATE_KEY, AppSessionState, get_session_state
from spectrasync.models import Sample, Spectrum
from spectrasync.settings import AnalysisSettings


def _sample(sample_id: str, start: float) -> Sample:
    return Sample(
        sample_id=sample_id,
        name=sample_id,
        spectrum=Spectrum.from_points([(start, 0.1), (start + 10.0, 0.2)]),
    )


def test_defaults_come_from_settings() -> None:
    settings = AnalysisSettings(max_allowed_wavelength_nm=280.0, default_normalization="area")
    session = AppSessionState(settings=settings)

    assert session.range_max == 280.0
    assert session.normalization == "area"
    assert session.smoothing_window == 5


def test_first_sample_sets_lower_bound() -> None:
    session = AppSessionState()

    added, sample_id = session.register_sample(_sample("a", 212.7))
    session.register_sample(_sample("b", 190.0))

    assert added is True
    assert sample_id == "a"
    assert session.range_min == 212.0
    assert session.sample_order == ["a", "b"]


def test_duplicate_ids_are_not_registered_twice() -> None:
    session = AppSessionState()
    session.register_sample(_sample("a", 200.0))

    added, sample_id = session.register_sample(_sample("a", 250.0))

    assert added is False
    assert sample_id == "a"
    assert len(session.samples) == 1


def test_removed_samples_stay_in_ledger() -> None:
    session = AppSessionState()
    session.register_sample(_sample("a", 200.0))
    session.register_sample(_sample("b", 200.0))

    session.remove_sample("a")
    session.remove_sample("missing")

    assert session.sample_order == ["b"]
    assert "a" in session.ingest_ledger
    assert [s.sample_id for s in session.ordered_samples()] == ["b"]


def test_colors_cycle_through_palette() -> None:
    session = AppSessionState(settings=AnalysisSettings(palette=("#1", "#2")))

    assert [session.next_color() for _ in range(3)] == ["#1", "#2", "#1"]


def test_set_range_swaps_inverted_bounds() -> None:
    session = AppSessionState()

    session.set_range(290.0, 210.0)

    assert (session.range_min, session.range_max) == (210.0, 290.0)


def test_snapshot_captures_current_controls() -> None:
    session = AppSessionState()
    sample = replace(_sample("a", 200.0), color="#2563eb")
    session.register_sample(sample)
    session.register_sample(_sample("b", 205.0))
    session.normalization = "minmax"
    session.smoothing_enabled = True
    session.smoothing_window = 9

    request = session.snapshot()

    assert [s.sample_id for s in request.samples] == ["a", "b"]
    assert request.range_min == 200.0
    assert request.range_max == 300.0
    assert request.normalization == "minmax"
    assert request.smoothing_enabled is True
    assert request.smoothing_window == 9
    assert request.grid_step == 0.5


def test_detached_uploads_leave_the_ledger() -> None:
    session = AppSessionState()
    session.register_sample(_sample("a", 200.0))
    session.register_sample(_sample("b", 200.0))
    session.remove_sample("a")

    session.release_uploads(["a", "b"])
    assert session.is_removed_upload("a")

    session.release_uploads(["b"])
    assert not session.is_removed_upload("a")
    assert "a" not in session.ingest_ledger

    session.release_uploads([])
    assert session.ingest_ledger == {"b"}
    added, _ = session.register_sample(_sample("a", 200.0))
    assert added is True


def test_session_state_is_created_once_per_streamlit_session() -> None:
    st_module = SimpleNamespace(session_state={})
    default = AppSessionState()

    first = get_session_state(st_module, default=default)
    second = get_session_state(st_module, default=AppSessionState())

    assert first is default
    assert second is default
    assert st_module.session_state[SESSION_STATE_KEY] is default
