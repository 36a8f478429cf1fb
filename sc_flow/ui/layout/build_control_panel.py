from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from sc_flow.core.view_registry import ViewRegistry
from sc_flow.ui.config import AppConfig
from sc_flow.ui.helpers import load_status, session_summary
from sc_flow.ui.ids import IDs


def build_control_panel(ctx: AppConfig) -> dbc.Card:
    registry: ViewRegistry = ctx.registry
    view_options = [
        {"label": cls.label, "value": cls.id}
        for cls in registry.all_classes()
        if cls.id in ("flow", "lines")
    ]
    cfg = ctx.global_config
    sample_ids = ctx.session.matrix.sample_ids
    gene_ids = list(dict.fromkeys(ctx.session.matrix.genome_order or ()))

    return dbc.Card(
        [
            dbc.CardHeader("Controls", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Div(
                        [
                            html.P(
                                session_summary(ctx.session),
                                id=IDs.Control.SIDEBAR_SUMMARY,
                                className="card-subtitle text-muted mb-2",
                            ),
                            html.Div(load_status(ctx.load_report), id=IDs.Control.LOAD_STATUS, className="small"),
                            html.Hr(),
                        ]
                    ),
                    html.Label("View", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.VIEW_SELECT,
                        options=view_options,
                        value="flow",
                        clearable=False,
                        className="mb-3",
                    ),
                    html.Label("Bins per axis", className="form-label"),
                    dcc.Slider(
                        id=IDs.Control.BINS_SLIDER,
                        min=2,
                        max=30,
                        step=1,
                        value=cfg.n_bins,
                        marks={2: "2", 10: "10", 20: "20", 30: "30"},
                        className="mb-3",
                    ),
                    html.Label("Peak RPKM above", className="form-label"),
                    dbc.Input(
                        id=IDs.Control.PEAK_INPUT,
                        type="number",
                        min=0,
                        value=cfg.peak_threshold,
                        placeholder="No peak filter",
                        debounce=True,
                        className="mb-3",
                    ),
                    html.Label("RPKM range at sample", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.RANGE_SAMPLE_SELECT,
                        options=[{"label": s, "value": s} for s in sample_ids],
                        placeholder="No range filter",
                        className="mb-2",
                    ),
                    dbc.InputGroup(
                        [
                            dbc.Input(id=IDs.Control.RANGE_LOW_INPUT, type="number", min=0, placeholder="min", debounce=True),
                            dbc.Input(id=IDs.Control.RANGE_HIGH_INPUT, type="number", min=0, placeholder="max", debounce=True),
                        ],
                        size="sm",
                        className="mb-3",
                    ),
                    html.Label("Genes", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.GENE_SELECT,
                        options=gene_ids,
                        multi=True,
                        placeholder="All genes",
                        className="mb-3",
                    ),
                    dbc.Checklist(
                        id=IDs.Control.OPTIONS_CHECKLIST,
                        options=[{"label": " Show gene lines under the flow", "value": "show_lines"}],
                        value=[],
                        switch=True,
                    ),
                ]
            ),
        ],
        className="scf-sidebar",
    )
