from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from sc_flow.config.io import load_global_config, sample_source_for
from sc_flow.core.scales import LogScale
from sc_flow.core.session import VisualizationSession
from sc_flow.core.view_registry import ViewRegistry
from sc_flow.services.export_service import ExportService
from sc_flow.ui.callbacks.callbacks_io import register_io_callbacks
from sc_flow.ui.callbacks.callbacks_pad import register_pad_callbacks
from sc_flow.ui.callbacks.callbacks_render import register_render_callbacks
from sc_flow.ui.callbacks.callbacks_state import register_state_callbacks
from sc_flow.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def build_view_registry() -> ViewRegistry:
    from sc_flow.views import (
        DrawingPadView,
        FlowView,
        GeneTableView,
        ParallelCoordinatesView,
    )

    registry = ViewRegistry()
    registry.register(FlowView)
    registry.register(ParallelCoordinatesView)
    registry.register(GeneTableView)
    registry.register(DrawingPadView)
    return registry


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    config_root = Path(config_root)

    # 1) Load Config
    global_config = load_global_config(config_root)
    if not global_config.samples:
        logger.warning("No samples configured", extra={"config_root": str(config_root)})

    # 2) Session + samples
    pad = global_config.drawing_pad
    session = VisualizationSession(
        epsilon=global_config.fold_change_epsilon,
        pad_scale=LogScale(domain=pad.domain, range=pad.level_range),
    )
    source = sample_source_for(global_config, config_root)
    load_report = session.load_samples(source, [s.name for s in global_config.samples])

    # 3) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        session=session,
        load_report=load_report,
        registry=build_view_registry(),
        export_service=ExportService(),
    )
    ctx.validate()

    app = Dash(__name__, external_stylesheets=[dbc.themes.FLATLY])
    app.title = global_config.ui_title
    app.layout = build_layout(ctx)

    # Register callbacks
    register_state_callbacks(app, ctx)
    register_render_callbacks(app, ctx)
    register_pad_callbacks(app, ctx)
    register_io_callbacks(app, ctx)

    return app
