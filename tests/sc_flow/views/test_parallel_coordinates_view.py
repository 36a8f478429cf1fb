import pandas as pd
import plotly.graph_objs as go

from sc_flow.core.sample_loader import SAMPLE_COLUMNS, SamplePayload
from sc_flow.core.session import VisualizationSession
from sc_flow.core.view_state import ViewState
from sc_flow.views.parallel_coordinates_view import ParallelCoordinatesView


def _make_session():
    """
    3 genes × 2 samples, g3 zero everywhere:
    A: 10, 50, 0
    B: 20, 5, 0
    """
    session = VisualizationSession()
    for sample_id, values in {"A": [10, 50, 0], "B": [20, 5, 0]}.items():
        rows = pd.DataFrame(
            {
                "gene_id": ["g1", "g2", "g3"],
                "count_score": 1.0,
                "gene_length": 100.0,
                "rpkm": [float(v) for v in values],
            },
            columns=SAMPLE_COLUMNS,
        )
        session.add_sample(SamplePayload(sample_id, rows))
    return session


def test_lines_compute_data_is_long_format():
    view = ParallelCoordinatesView(_make_session())

    df = view.compute_data(ViewState(view_id="lines"))

    assert list(df.columns) == ["gene_id", "sample_id", "rpkm", "axis"]
    assert len(df) == 4
    assert set(df["gene_id"]) == {"g1", "g2"}
    g2_b = df[(df["gene_id"] == "g2") & (df["sample_id"] == "B")]
    assert g2_b["rpkm"].iloc[0] == 5.0
    assert g2_b["axis"].iloc[0] == 1
    assert df.attrs["sample_ids"] == ["A", "B"]
    assert df.attrs["y_range"] == (5, 50)


def test_lines_render_figure_single_trace_with_breaks():
    view = ParallelCoordinatesView(_make_session())
    state = ViewState(view_id="lines")

    fig = view.render_figure(view.compute_data(state), state)

    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 1
    # two genes, two axes each plus a separator
    assert list(fig.data[0].x) == [0, 1, None, 0, 1, None]


def test_lines_without_samples_renders_empty_figure():
    view = ParallelCoordinatesView(VisualizationSession())
    state = ViewState(view_id="lines")

    df = view.compute_data(state)

    assert df.empty
    assert len(view.render_figure(df, state).data) == 0
