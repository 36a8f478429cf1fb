from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from sc_flow.core.view_state import ViewState
from sc_flow.ui.config import AppConfig
from sc_flow.ui.ids import IDs
from sc_flow.ui.layout.build_control_panel import build_control_panel
from sc_flow.ui.layout.build_pad_panel import build_pad_panel
from sc_flow.ui.layout.build_plot_panel import build_plot_panel


def build_layout(ctx: AppConfig):
    initial_state = ViewState(n_bins=ctx.global_config.n_bins, peak_threshold=ctx.global_config.peak_threshold)

    return dbc.Container(
        fluid=True,
        className="scf-root",
        children=[
            dbc.Navbar(
                dbc.Container(
                    fluid=True,
                    children=[html.H2(ctx.global_config.ui_title, className="mb-0")],
                ),
                className="shadow-sm scf-navbar",
            ),

            # App-level stores
            dcc.Store(id=IDs.Store.VIEW_STATE, data=initial_state.to_dict()),
            dcc.Store(id=IDs.Store.REVISION, data=0),

            dbc.Row(
                [
                    dbc.Col(build_control_panel(ctx), md=3, className="mt-3"),
                    dbc.Col(
                        [build_plot_panel(), build_pad_panel()],
                        md=9,
                        className="mt-3",
                    ),
                ],
                className="gx-3",
            ),
        ],
    )
