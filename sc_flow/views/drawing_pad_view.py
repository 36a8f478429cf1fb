from __future__ import annotations

import numpy as np
import pandas as pd
import plotly.graph_objs as go

from sc_flow.core.base_view import BaseView
from sc_flow.core.view_state import ViewState

HIT_POINTS = 36


class DrawingPadView(BaseView):
    """
    Drawing pad:
    One vertical axis per loaded sample. A stroke from one axis to another
    defines a fold-change filter; committed strokes are drawn as lines labelled
    with their threshold.

    Every axis carries a column of invisible markers so that clicks report
    (sample id, level) to the FoldChangeCapture.
    """

    id = "pad"
    label = "Fold-change pad"

    def compute_data(self, state: ViewState) -> pd.DataFrame:
        params = self.session.fold_change_parameters()
        df = pd.DataFrame(
            [
                {
                    "param_id": p.id,
                    "higher_sample": p.higher_sample,
                    "lower_sample": p.lower_sample,
                    "fold_change": p.fold_change_threshold,
                }
                for p in params.values()
            ],
            columns=["param_id", "higher_sample", "lower_sample", "fold_change"],
        )
        df.attrs["sample_ids"] = self.session.matrix.sample_ids
        return df

    def render_figure(self, data: pd.DataFrame, state: ViewState) -> go.Figure:
        sample_ids = data.attrs.get("sample_ids", []) if data is not None else []
        if len(sample_ids) < 2:
            return self.empty_figure("Load at least two samples to draw fold-change filters")

        scale = self.session.capture.scale
        y0, y1 = scale.range
        axis_of = {s: i for i, s in enumerate(sample_ids)}
        levels = np.linspace(y0, y1, HIT_POINTS)

        fig = go.Figure()
        for sample_id, i in axis_of.items():
            fig.add_trace(
                go.Scatter(
                    x=[i] * HIT_POINTS,
                    y=levels,
                    customdata=[sample_id] * HIT_POINTS,
                    mode="markers",
                    marker=dict(size=14, color="rgba(0,0,0,0.02)"),
                    hoverinfo="none",
                    showlegend=False,
                )
            )

        for row in data.itertuples(index=False):
            if row.higher_sample not in axis_of or row.lower_sample not in axis_of:
                continue
            top = float(scale(row.fold_change)) + y0
            fig.add_trace(
                go.Scatter(
                    x=[axis_of[row.higher_sample], axis_of[row.lower_sample]],
                    y=[top, y0],
                    mode="lines+text",
                    line=dict(color="red", width=2),
                    text=[str(row.fold_change), ""],
                    textposition="top center",
                    name=row.param_id,
                    hoverinfo="name",
                    showlegend=False,
                )
            )

        pending = self.session.capture.pending
        if pending is not None and pending[0] in axis_of:
            fig.add_trace(
                go.Scatter(
                    x=[axis_of[pending[0]]],
                    y=[pending[1]],
                    mode="markers",
                    marker=dict(size=10, color="red", symbol="circle-open"),
                    hoverinfo="skip",
                    showlegend=False,
                )
            )

        self.sample_axes(fig, sample_ids, (y0, y1))
        fig.update_yaxes(range=[y0 - 5, y1 + 5], visible=False)
        fig.update_layout(
            height=260,
            margin=dict(l=40, r=40, b=40, t=20),
            plot_bgcolor="white",
            clickmode="event",
        )
        return fig
