import pandas as pd
import plotly.graph_objs as go

from sc_flow.core.sample_loader import SAMPLE_COLUMNS, SamplePayload
from sc_flow.core.session import VisualizationSession
from sc_flow.core.view_state import ViewState
from sc_flow.views.drawing_pad_view import HIT_POINTS, DrawingPadView


def _make_session(sample_ids=("A", "B", "C")):
    session = VisualizationSession()
    for sample_id in sample_ids:
        rows = pd.DataFrame(
            {"gene_id": ["g1", "g2"], "count_score": 1.0, "gene_length": 100.0, "rpkm": [1.0, 2.0]},
            columns=SAMPLE_COLUMNS,
        )
        session.add_sample(SamplePayload(sample_id, rows))
    return session


def test_pad_compute_data_lists_parameters():
    session = _make_session()
    scale = session.capture.scale
    session.capture.begin("B", scale(10.0))
    session.capture.release("A", scale(1000.0))
    view = DrawingPadView(session)

    df = view.compute_data(ViewState())

    assert df.to_dict("records") == [
        {"param_id": "param-group1", "higher_sample": "A", "lower_sample": "B", "fold_change": 100.0}
    ]
    assert df.attrs["sample_ids"] == ["A", "B", "C"]


def test_pad_render_has_hit_columns_and_parameter_lines():
    session = _make_session()
    session.capture.begin("A", 0.0)
    session.capture.release("C", 50.0)
    view = DrawingPadView(session)
    state = ViewState()

    fig = view.render_figure(view.compute_data(state), state)

    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 3 + 1
    hit = fig.data[0]
    assert len(hit.y) == HIT_POINTS
    assert set(hit.customdata) == {"A"}
    line = fig.data[3]
    assert line.name == "param-group1"
    assert fig.layout.clickmode == "event"


def test_pad_render_shows_pending_stroke():
    session = _make_session()
    session.capture.begin("B", 40.0)
    view = DrawingPadView(session)
    state = ViewState()

    fig = view.render_figure(view.compute_data(state), state)

    pending = fig.data[-1]
    assert list(pending.x) == [1]
    assert list(pending.y) == [40.0]


def test_pad_with_one_sample_renders_empty_figure():
    view = DrawingPadView(_make_session(sample_ids=("A",)))
    state = ViewState()

    assert len(view.render_figure(view.compute_data(state), state).data) == 0
