from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

import dash
import pandas as pd
import plotly.graph_objs as go
from dash import Input, Output

from sc_flow.core.exceptions import BinOverflowError, InsufficientAxesError
from sc_flow.core.view_state import ViewState
from sc_flow.ui.helpers import session_summary, sync_gene_filter, sync_peak_filter, sync_range_filter
from sc_flow.ui.ids import IDs

if TYPE_CHECKING:
    from sc_flow.ui.config import AppConfig

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Helper: Empty/Error Figures
# -----------------------------------------------------------------------------
def _message_figure(title: str, details: Optional[str] = None) -> go.Figure:
    fig = go.Figure()
    text = title if details is None else f"{title}<br><br>{details}"
    fig.add_annotation(
        text=text,
        showarrow=False,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(margin=dict(l=40, r=40, t=40, b=40))
    return fig


def _error_figure(details: str) -> go.Figure:
    return _message_figure("Something went wrong while rendering this view.", details)


def render_view(ctx: AppConfig, view_id: str, state: ViewState) -> go.Figure:
    """Compute and render one registered view, turning failures into message figures."""
    registry = ctx.registry
    if registry is None:
        return _error_figure("View registry is not available.")

    try:
        plot = ctx.global_config.plot
        view = registry.create(
            view_id, ctx.session, plot_height=plot.height, plot_padding=plot.padding
        )
        data = view.timed_compute(state)
        if isinstance(data, pd.DataFrame) and data.empty and view_id != "pad":
            return _message_figure(
                "No data to display.",
                "Your current filters removed every gene, or fewer than two samples are loaded.",
            )
        return view.render_figure(data, state)

    except InsufficientAxesError as exc:
        return _message_figure("Not enough samples.", str(exc))

    except BinOverflowError:
        logger.exception("Flow binning invariant violated", extra={"view_state": state.to_dict()})
        return _error_figure("Binning failed for the current scale; the redraw was aborted.")

    except Exception:
        logger.exception("Error rendering view", extra={"view_id": view_id, "view_state": state.to_dict()})
        return _error_figure(
            "The app hit an unexpected error. "
            "If this keeps happening, grab the logs and open an issue."
        )


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Main figure + table: ViewState/revision -> figures
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.MAIN_GRAPH, "figure"),
        Output(IDs.Control.TABLE_GRAPH, "figure"),
        Output(IDs.Control.SIDEBAR_SUMMARY, "children"),
        Input(IDs.Store.VIEW_STATE, "data"),
        Input(IDs.Store.REVISION, "data"),
    )
    def update_main_graph(vs_data: dict[str, Any] | None, _revision):
        try:
            state = ViewState.from_dict(vs_data or {})
        except (TypeError, ValueError):
            logger.exception("Invalid view state in main graph callback: %r", vs_data)
            err = _error_figure("Internal error: invalid view state.")
            return err, err, dash.no_update

        sync_peak_filter(ctx.session, state.peak_threshold)
        sync_range_filter(ctx.session, state.range_sample, state.range_low, state.range_high)
        sync_gene_filter(ctx.session, state.gene_ids)

        logger.info("render_start", extra={"view_id": state.view_id, "n_bins": state.n_bins})
        main = render_view(ctx, state.view_id, state)
        table = render_view(ctx, "table", state)
        return main, table, session_summary(ctx.session)

    # ---------------------------------------------------------
    # Drawing pad figure: revision -> figure
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.PAD_GRAPH, "figure"),
        Input(IDs.Store.REVISION, "data"),
    )
    def update_pad_graph(_revision):
        return render_view(ctx, "pad", ViewState(view_id="pad"))
