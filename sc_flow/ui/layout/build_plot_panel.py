from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from sc_flow.ui.ids import IDs


def build_plot_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(html.Strong("Plot"), className="p-2"),
            dbc.CardBody(
                [
                    dcc.Loading(
                        id="main-graph-loading",
                        type="default",
                        children=dcc.Graph(
                            id=IDs.Control.MAIN_GRAPH,
                            style={"height": "620px"},
                            config={"responsive": True},
                        ),
                    ),
                    html.Div(
                        [
                            dbc.Button(
                                "Download genes (CSV)",
                                id=IDs.Control.DOWNLOAD_CSV_BTN,
                                color="secondary",
                                size="sm",
                                className="mt-2 me-2",
                            ),
                            dbc.Button(
                                "Download plot (HTML)",
                                id=IDs.Control.DOWNLOAD_HTML_BTN,
                                color="secondary",
                                size="sm",
                                className="mt-2 me-2",
                            ),
                            dbc.Button(
                                "Download genes (h5ad)",
                                id=IDs.Control.DOWNLOAD_H5AD_BTN,
                                color="secondary",
                                size="sm",
                                className="mt-2",
                            ),
                            dcc.Download(id=IDs.Control.DOWNLOAD),
                        ],
                        className="d-flex justify-content-end align-items-center",
                    ),
                    html.Hr(),
                    dcc.Graph(id=IDs.Control.TABLE_GRAPH, config={"displayModeBar": False}),
                ]
            ),
        ],
        className="scf-maincard",
    )
