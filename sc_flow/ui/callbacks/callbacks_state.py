from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output

from sc_flow.core.view_state import ViewState
from sc_flow.ui.ids import IDs

if TYPE_CHECKING:
    from sc_flow.ui.config import AppConfig

logger = logging.getLogger(__name__)

OPT_SHOW_LINES = "show_lines"


def register_state_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Controls -> ViewState store
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.VIEW_STATE, "data"),
        Input(IDs.Control.VIEW_SELECT, "value"),
        Input(IDs.Control.BINS_SLIDER, "value"),
        Input(IDs.Control.OPTIONS_CHECKLIST, "value"),
        Input(IDs.Control.PEAK_INPUT, "value"),
        Input(IDs.Control.RANGE_SAMPLE_SELECT, "value"),
        Input(IDs.Control.RANGE_LOW_INPUT, "value"),
        Input(IDs.Control.RANGE_HIGH_INPUT, "value"),
        Input(IDs.Control.GENE_SELECT, "value"),
    )
    def update_view_state(view_id, n_bins, options, peak, range_sample, range_low, range_high, gene_ids):
        state = ViewState.from_dict(
            {
                "view_id": view_id or "flow",
                "n_bins": n_bins or ctx.global_config.n_bins,
                "show_lines": OPT_SHOW_LINES in (options or []),
                "peak_threshold": peak,
                "range_sample": range_sample,
                "range_low": range_low,
                "range_high": range_high,
                "gene_ids": gene_ids,
            }
        )
        logger.debug("View state updated", extra={"view_state": state.to_dict()})
        return state.to_dict()
