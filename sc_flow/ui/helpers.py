from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import dash_bootstrap_components as dbc
from dash import html

from sc_flow.core.filter_pipeline import expression_in_range, gene_ids_in, peak_expression_above
from sc_flow.core.fold_change import FlowParameter
from sc_flow.core.session import LoadReport, VisualizationSession
from sc_flow.ui.ids import param_remove_id

PEAK_FILTER = "peak-expression"
RANGE_FILTER = "expression-range"
GENE_FILTER = "gene-selection"


def sync_peak_filter(session: VisualizationSession, threshold: Optional[float]) -> None:
    """Install or drop the peak-expression filter to match the control value."""
    if threshold is None:
        session.pipeline.remove_filter(PEAK_FILTER)
    else:
        session.pipeline.add_filter(PEAK_FILTER, peak_expression_above(threshold))


def sync_range_filter(
        session: VisualizationSession,
        sample_id: Optional[str],
        low: Optional[float],
        high: Optional[float],
) -> None:
    """Range filter on one sample axis; dropped when no sample or no bound is set."""
    if sample_id is None or (low is None and high is None):
        session.pipeline.remove_filter(RANGE_FILTER)
        return
    session.pipeline.add_filter(
        RANGE_FILTER,
        expression_in_range(
            sample_id,
            float("-inf") if low is None else low,
            float("inf") if high is None else high,
        ),
    )


def sync_gene_filter(session: VisualizationSession, gene_ids: Sequence[str]) -> None:
    if gene_ids:
        session.pipeline.add_filter(GENE_FILTER, gene_ids_in(gene_ids))
    else:
        session.pipeline.remove_filter(GENE_FILTER)


def session_summary(session: VisualizationSession) -> str:
    n_samples, n_genes, n_filtered = session.summary()
    return f"{n_samples} samples · {n_genes} genes · {n_filtered} shown"


def load_status(report: Optional[LoadReport]):
    if report is None:
        return html.Span("No samples loaded.", className="text-muted")

    children: List = [html.Div(f"Loaded: {', '.join(report.loaded) or 'none'}")]
    for sample_id, error in report.failed.items():
        children.append(
            dbc.Alert(f"{sample_id}: {error}", color="danger", className="py-1 px-2 mb-1 small")
        )
    return html.Div(children)


def parameter_list(params: Dict[str, FlowParameter]):
    if not params:
        return html.Small("No fold-change filters. Click one axis, then another.", className="text-muted")

    return dbc.ListGroup(
        [
            dbc.ListGroupItem(
                html.Div(
                    [
                        html.Span(f"{p.higher_sample} / {p.lower_sample} ≥ {p.fold_change_threshold}"),
                        dbc.Button(
                            "×",
                            id=param_remove_id(p.id),
                            color="link",
                            size="sm",
                            className="ms-auto p-0",
                        ),
                    ],
                    className="d-flex align-items-center",
                ),
                className="py-1",
            )
            for p in params.values()
        ],
        flush=True,
    )
