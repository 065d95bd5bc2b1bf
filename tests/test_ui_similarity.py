from __future__ import annotations

from streamlit.testing.v1 import AppTest

from app.state.session import AppSessionState
from spectrasync.models import Sample, Spectrum


def _sample(sample_id: str, points: list[tuple[float, float]]) -> Sample:
    return Sample(sample_id=sample_id, name=f"Sample {sample_id}", spectrum=Spectrum.from_points(points))


def _render_similarity(session) -> None:
    from app.ui.similarity import get_report_cache, render_similarity_panel

    render_similarity_panel(session.snapshot(), get_report_cache(), session.settings)


def _render_samples(session) -> None:
    from app.ui.samples import render_samples_tab

    render_samples_tab(session)


def test_single_sample_prompts_for_more() -> None:
    session = AppSessionState()
    session.register_sample(_sample("a", [(200.0, 0.1), (210.0, 0.2)]))

    app = AppTest.from_function(_render_similarity, args=(session,)).run()

    assert not app.exception
    assert app.info
    assert "at least two samples" in app.info[0].value


def test_disjoint_samples_warn_about_overlap() -> None:
    session = AppSessionState()
    session.register_sample(_sample("a", [(200.0, 0.1), (210.0, 0.2)]))
    session.register_sample(_sample("b", [(250.0, 0.1), (260.0, 0.2)]))

    app = AppTest.from_function(_render_similarity, args=(session,)).run()

    assert not app.exception
    assert app.warning
    assert "No overlapping data" in app.warning[0].value


def test_overlapping_samples_render_table_and_matrices() -> None:
    points = [(200.0, 0.1), (210.0, 0.4), (220.0, 0.2)]
    session = AppSessionState()
    session.register_sample(_sample("a", points))
    session.register_sample(_sample("b", points))

    app = AppTest.from_function(_render_similarity, args=(session,)).run()

    assert not app.exception
    assert not app.warning
    # summary table plus one matrix per metric
    assert len(app.dataframe) >= 2


def test_samples_tab_renders_chart_for_loaded_samples() -> None:
    session = AppSessionState()
    session.register_sample(_sample("a", [(200.0, 0.1), (210.0, 0.2)]))

    app = AppTest.from_function(_render_samples, args=(session,)).run()

    assert not app.exception
    assert app.get("plotly_chart")
    assert app.button(key="remove_a").label == "Remove"


def test_samples_tab_without_samples_shows_hint() -> None:
    app = AppTest.from_function(_render_samples, args=(AppSessionState(),)).run()

    assert not app.exception
    assert not app.get("plotly_chart")
    assert "No samples loaded yet." in [element.value for element in app.info]


def test_chart_keeps_samples_that_share_a_name_apart() -> None:
    from app.ui.samples import plot_samples

    session = AppSessionState()
    session.register_sample(
        Sample(
            sample_id="id1",
            name="river",
            spectrum=Spectrum.from_points([(200.0, 0.1), (201.0, 0.2)]),
        )
    )
    session.register_sample(
        Sample(
            sample_id="id2",
            name="river",
            spectrum=Spectrum.from_points([(200.0, 0.9), (201.0, 0.8)]),
        )
    )

    figure = plot_samples(session)

    assert [trace.name for trace in figure.data] == ["river", "river (2)"]
    assert list(figure.data[0].y) == [0.1, 0.2]
    assert list(figure.data[1].y) == [0.9, 0.8]
