import pandas as pd
import pytest

from sc_flow.core.filter_pipeline import FilterPipeline
from sc_flow.core.fold_change import (
    CaptureState,
    FlowParameter,
    FoldChangeCapture,
    fold_change_predicate,
)


def _make_frame():
    """g1 is flat across A and B, g2 is ten times higher in A."""
    return pd.DataFrame(
        {"A": [10.0, 100.0], "B": [10.0, 10.0]},
        index=pd.Index(["g1", "g2"], name="gene_id"),
    )


def _make_capture():
    pipeline = FilterPipeline()
    return pipeline, FoldChangeCapture(pipeline)


def test_stroke_from_high_to_low_commits_fold_change_filter():
    pipeline, capture = _make_capture()
    scale = capture.scale

    assert capture.begin("A", scale(100.0))
    assert capture.state is CaptureState.DRAWING

    param = capture.release("B", scale(10.0))

    assert param.higher_sample == "A"
    assert param.lower_sample == "B"
    assert param.fold_change_threshold == 10.0
    assert capture.state is CaptureState.IDLE
    assert capture.parameters == {param.id: param}
    assert pipeline.names == [param.id]
    assert list(pipeline.apply(_make_frame()).index) == ["g2"]


def test_stroke_direction_does_not_change_higher_sample():
    pipeline, capture = _make_capture()
    scale = capture.scale

    capture.begin("B", scale(10.0))
    param = capture.release("A", scale(100.0))

    assert (param.higher_sample, param.lower_sample) == ("A", "B")
    assert param.fold_change_threshold == 10.0


def test_move_reports_live_fold_change():
    _, capture = _make_capture()

    assert capture.move(50.0) is None

    capture.begin("A", 0.0)
    assert capture.move(capture.scale(100.0)) == 100.0
    assert capture.pending == ("A", 0.0)


def test_release_on_same_axis_or_outside_discards_stroke():
    pipeline, capture = _make_capture()

    capture.begin("A", 10.0)
    assert capture.release("A", 80.0) is None

    capture.begin("A", 10.0)
    assert capture.release(None, 80.0) is None

    assert capture.state is CaptureState.IDLE
    assert capture.parameters == {}
    assert len(pipeline) == 0


def test_begin_outside_axis_stays_idle():
    _, capture = _make_capture()

    assert capture.begin(None, 10.0) is False
    assert capture.state is CaptureState.IDLE
    assert capture.release("B", 20.0) is None


def test_cancel_drops_stroke():
    _, capture = _make_capture()

    capture.begin("A", 10.0)
    capture.cancel()

    assert capture.state is CaptureState.IDLE
    assert capture.pending is None
    assert capture.release("B", 80.0) is None


def test_parameter_ids_are_sequential():
    _, capture = _make_capture()

    capture.begin("A", 0.0)
    first = capture.release("B", 50.0)
    capture.begin("B", 0.0)
    second = capture.release("A", 50.0)

    assert (first.id, second.id) == ("param-group1", "param-group2")


def test_update_regenerates_predicate():
    pipeline, capture = _make_capture()
    scale = capture.scale
    capture.begin("A", scale(100.0))
    param = capture.release("B", scale(10.0))

    updated = capture.update(param.id, fold_change_threshold=0.5)

    assert updated.id == param.id
    assert updated.fold_change_threshold == 0.5
    assert capture.parameters[param.id] == updated
    assert list(pipeline.apply(_make_frame()).index) == ["g1", "g2"]

    with pytest.raises(KeyError):
        capture.update("param-group99", fold_change_threshold=2.0)


def test_remove_and_clear_drop_predicates():
    pipeline, capture = _make_capture()
    capture.begin("A", 0.0)
    first = capture.release("B", 50.0)
    capture.begin("A", 0.0)
    capture.release("B", 100.0)

    capture.remove(first.id)
    capture.remove("param-group99")
    assert list(capture.parameters) == ["param-group2"]
    assert pipeline.names == ["param-group2"]

    capture.clear()
    assert capture.parameters == {}
    assert len(pipeline) == 0


def test_listeners_receive_every_change():
    _, capture = _make_capture()
    events = []
    capture.subscribe(events.append)

    capture.begin("A", 0.0)
    param = capture.release("B", 50.0)
    capture.remove(param.id)

    assert [list(e) for e in events] == [[param.id], []]


def test_parameters_are_a_snapshot():
    _, capture = _make_capture()
    capture.begin("A", 0.0)
    capture.release("B", 50.0)

    snapshot = capture.parameters
    snapshot.clear()

    assert len(capture.parameters) == 1


def test_predicate_uses_epsilon_for_zero_denominator():
    row = pd.Series({"A": 1.0, "B": 0.0})
    param = FlowParameter("p", "A", "B", 1000.0)

    assert fold_change_predicate(param)(row, "g1") is True
    assert fold_change_predicate(param, epsilon=1.0)(row, "g1") is False


def test_predicate_passes_when_a_sample_is_missing():
    param = FlowParameter("p", "A", "B", 1000.0)
    assert fold_change_predicate(param)(pd.Series({"A": 1.0}), "g1") is True
