from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Tuple

import dash
from dash import ALL, Input, Output, State
from dash.exceptions import PreventUpdate

from sc_flow.ui.helpers import parameter_list
from sc_flow.ui.ids import IDs

if TYPE_CHECKING:
    from sc_flow.ui.config import AppConfig

logger = logging.getLogger(__name__)


def _pad_point(event: Optional[dict]) -> Tuple[Optional[str], Optional[float]]:
    """(axis, level) of a pad click/hover; axis is None outside the axis hit zones."""
    if not event or not event.get("points"):
        return None, None
    point = event["points"][0]
    level = point.get("y")
    return point.get("customdata"), (float(level) if level is not None else None)


def register_pad_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    capture = ctx.session.capture

    # ---------------------------------------------------------
    # Click on an axis: start a stroke, or finish the current one
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Output(IDs.Control.PAD_LIVE_LABEL, "children", allow_duplicate=True),
        Input(IDs.Control.PAD_GRAPH, "clickData"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def on_pad_click(click_data, revision):
        axis, level = _pad_point(click_data)
        if level is None:
            raise PreventUpdate

        if capture.pending is None:
            if not capture.begin(axis, level):
                raise PreventUpdate
            return (revision or 0) + 1, f"drawing from {axis}"

        param = capture.release(axis, level)
        label = "" if param is None else f"{param.higher_sample} / {param.lower_sample} ≥ {param.fold_change_threshold}"
        return (revision or 0) + 1, label

    # ---------------------------------------------------------
    # Hover while drawing: live fold-change label
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.PAD_LIVE_LABEL, "children"),
        Input(IDs.Control.PAD_GRAPH, "hoverData"),
        prevent_initial_call=True,
    )
    def on_pad_hover(hover_data):
        _axis, level = _pad_point(hover_data)
        if level is None or capture.pending is None:
            raise PreventUpdate
        return f"fold change {capture.move(level)}"

    # ---------------------------------------------------------
    # Cancel / clear
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Output(IDs.Control.PAD_LIVE_LABEL, "children", allow_duplicate=True),
        Input(IDs.Control.PAD_CANCEL_BTN, "n_clicks"),
        Input(IDs.Control.PAD_CLEAR_BTN, "n_clicks"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def on_pad_reset(_cancel, _clear, revision):
        if dash.ctx.triggered_id == IDs.Control.PAD_CLEAR_BTN:
            capture.clear()
        else:
            capture.cancel()
        return (revision or 0) + 1, ""

    # ---------------------------------------------------------
    # Remove one committed parameter
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Input({"type": IDs.Pattern.PARAM_REMOVE, "index": ALL}, "n_clicks"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def on_param_remove(n_clicks, revision):
        triggered = dash.ctx.triggered_id
        if not triggered or not any(n_clicks or []):
            raise PreventUpdate
        capture.remove(triggered["index"])
        return (revision or 0) + 1

    # ---------------------------------------------------------
    # Parameter list
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.PARAM_LIST, "children"),
        Input(IDs.Store.REVISION, "data"),
    )
    def update_param_list(_revision):
        return parameter_list(ctx.session.fold_change_parameters())
