import pandas as pd
import plotly.graph_objs as go

from sc_flow.core.sample_loader import SAMPLE_COLUMNS, SamplePayload
from sc_flow.core.session import VisualizationSession
from sc_flow.core.view_state import ViewState
from sc_flow.views.flow_view import FlowView


def _make_session(samples):
    """
    samples: {sample_id: [rpkm per gene]}, genes named g1..gN
    """
    session = VisualizationSession()
    for sample_id, values in samples.items():
        rows = pd.DataFrame(
            {
                "gene_id": [f"g{i + 1}" for i in range(len(values))],
                "count_score": 1.0,
                "gene_length": 100.0,
                "rpkm": [float(v) for v in values],
            },
            columns=SAMPLE_COLUMNS,
        )
        session.add_sample(SamplePayload(sample_id, rows))
    return session


def test_flow_view_compute_data_one_row_per_segment():
    session = _make_session(
        {"A": [100, 80, 60, 30, 10, 0], "B": [5, 40, 60, 90, 100, 0], "C": [1, 1, 1, 1, 1, 0]}
    )
    view = FlowView(session)

    df = view.compute_data(ViewState(n_bins=4))

    assert set(df["axis_index"]) == {0, 1}
    for axis in (0, 1):
        assert df.loc[df["axis_index"] == axis, "count"].sum() == 5
    assert df.attrs["sample_ids"] == ["A", "B", "C"]
    assert (df.loc[df["axis_index"] == 0, "from_sample"] == "A").all()
    assert (df.loc[df["axis_index"] == 1, "to_sample"] == "C").all()
    assert "g6" not in ", ".join(df["genes"])
    assert df["color"].str.startswith("rgb(").all()

    y_lo, y_hi = df.attrs["y_range"]
    assert y_lo <= df["to_mid"].min() and df["from_mid"].max() <= y_hi


def test_flow_view_render_figure_draws_each_segment():
    session = _make_session({"A": [100, 80, 60, 30, 10], "B": [5, 40, 60, 90, 100]})
    view = FlowView(session)
    state = ViewState(n_bins=4)

    df = view.compute_data(state)
    fig = view.render_figure(df, state)

    assert isinstance(fig, go.Figure)
    assert len(fig.data) == len(df)
    assert list(fig.layout.xaxis.ticktext) == ["A", "B"]


def test_flow_view_show_lines_adds_gene_trace():
    session = _make_session({"A": [100, 10], "B": [5, 40]})
    view = FlowView(session)
    state = ViewState(n_bins=4, show_lines=True)

    df = view.compute_data(state)
    fig = view.render_figure(df, state)

    assert len(fig.data) == len(df) + 1
    assert fig.data[0].name == "genes"


def test_flow_view_single_sample_gives_empty_figure():
    view = FlowView(_make_session({"A": [1, 2]}))
    state = ViewState()

    df = view.compute_data(state)
    fig = view.render_figure(df, state)

    assert df.empty
    assert len(fig.data) == 0


def test_flow_view_uses_configured_plot_geometry():
    session = _make_session({"A": [100, 10], "B": [5, 40]})
    view = FlowView(session, plot_height=300, plot_padding=20)
    state = ViewState(n_bins=4)

    assert view.plot_scale(session.filtered_matrix()).range == (20.0, 280.0)
    fig = view.render_figure(view.compute_data(state), state)
    assert fig.layout.height == 400
