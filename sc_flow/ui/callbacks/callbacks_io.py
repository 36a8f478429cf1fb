from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
import plotly.graph_objs as go
from dash import Input, Output, State, dcc
from dash.exceptions import PreventUpdate

from sc_flow.ui.ids import IDs

if TYPE_CHECKING:
    from sc_flow.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_io_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Downloads: filtered genes (CSV or h5ad) or current plot (HTML)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.DOWNLOAD, "data"),
        Input(IDs.Control.DOWNLOAD_CSV_BTN, "n_clicks"),
        Input(IDs.Control.DOWNLOAD_HTML_BTN, "n_clicks"),
        Input(IDs.Control.DOWNLOAD_H5AD_BTN, "n_clicks"),
        State(IDs.Control.MAIN_GRAPH, "figure"),
        prevent_initial_call=True,
    )
    def download(_csv_clicks, _html_clicks, _h5ad_clicks, figure):
        export_service = ctx.export_service
        if export_service is None:
            raise PreventUpdate

        if dash.ctx.triggered_id == IDs.Control.DOWNLOAD_HTML_BTN:
            if not figure:
                raise PreventUpdate
            html = export_service.figure_html(go.Figure(figure), title=ctx.global_config.ui_title)
            return dcc.send_string(html, "sc_flow_plot.html")

        if dash.ctx.triggered_id == IDs.Control.DOWNLOAD_H5AD_BTN:
            session = ctx.session
            adata = session.matrix.to_anndata(gene_ids=session.filtered_matrix().index)
            return dcc.send_bytes(export_service.anndata_h5ad(adata), "sc_flow_genes.h5ad")

        csv = export_service.filtered_genes_csv(
            ctx.session.filtered_matrix(),
            ctx.session.fold_change_parameters(),
        )
        logger.info("Filtered genes exported")
        return dcc.send_string(csv, "sc_flow_genes.csv")
