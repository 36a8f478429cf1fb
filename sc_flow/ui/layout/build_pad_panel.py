from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from sc_flow.ui.ids import IDs


def build_pad_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.Strong("Fold-change pad"),
                        html.Span(id=IDs.Control.PAD_LIVE_LABEL, className="ms-3 text-danger"),
                        dbc.Button(
                            "Cancel stroke",
                            id=IDs.Control.PAD_CANCEL_BTN,
                            color="link",
                            size="sm",
                            className="ms-auto",
                        ),
                        dbc.Button(
                            "Clear all",
                            id=IDs.Control.PAD_CLEAR_BTN,
                            color="link",
                            size="sm",
                        ),
                    ],
                    className="d-flex align-items-center",
                ),
                className="p-2",
            ),
            dbc.CardBody(
                [
                    dcc.Graph(id=IDs.Control.PAD_GRAPH, config={"displayModeBar": False}),
                    html.Div(id=IDs.Control.PARAM_LIST, className="mt-2"),
                ]
            ),
        ],
        className="scf-padcard mt-3",
    )
