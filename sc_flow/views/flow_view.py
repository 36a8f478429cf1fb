from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import plotly.graph_objs as go

from sc_flow.core.base_view import BaseView
from sc_flow.core.view_state import ViewState

logger = logging.getLogger(__name__)

MIN_WIDTH = 1.0
MAX_WIDTH = 14.0


class FlowView(BaseView):
    """
    Flow plot:
    Bin every sample axis into K intervals and draw one band per group of genes
    sharing the same transition between adjacent axes, coloured by group size.
    """

    id = "flow"
    label = "Flow"

    def compute_data(self, state: ViewState) -> pd.DataFrame:
        frame = self.filtered_matrix()
        if frame.empty or frame.shape[1] < 2:
            return pd.DataFrame()

        scale = self.plot_scale(frame)
        layout = self.session.flow_layout(scale, state.n_bins, frame=frame)
        if not layout.segments:
            return pd.DataFrame()

        bounds = layout.boundaries
        midpoints = (bounds[:-1] + bounds[1:]) / 2.0

        df = pd.DataFrame(
            {
                "axis_index": [s.axis_index for s in layout.segments],
                "from_sample": [str(frame.columns[s.axis_index]) for s in layout.segments],
                "to_sample": [str(frame.columns[s.axis_index + 1]) for s in layout.segments],
                "from_bin": [s.from_bin for s in layout.segments],
                "to_bin": [s.to_bin for s in layout.segments],
                "from_value": [s.from_value for s in layout.segments],
                "to_value": [s.to_value for s in layout.segments],
                "from_mid": [float(midpoints[s.from_bin]) for s in layout.segments],
                "to_mid": [float(midpoints[s.to_bin]) for s in layout.segments],
                "count": [s.count for s in layout.segments],
                "color": [s.color for s in layout.segments],
                "genes": [", ".join(s.gene_ids) for s in layout.segments],
            }
        )
        df.attrs["sample_ids"] = [str(s) for s in frame.columns]
        df.attrs["y_range"] = (float(bounds[-1]), float(bounds[0]))
        return df

    def render_figure(self, data: pd.DataFrame, state: ViewState) -> go.Figure:
        if data is None or data.empty:
            return self.empty_figure("No flow to show (need at least 2 samples with expressed genes)")

        max_count = int(data["count"].max())
        widths = MIN_WIDTH + (MAX_WIDTH - MIN_WIDTH) * np.sqrt(data["count"] / max_count)

        fig = go.Figure()

        if state.show_lines:
            lines = self.filtered_matrix()
            xs, ys = [], []
            for _, row in lines.iterrows():
                xs.extend(list(range(len(row))) + [None])
                ys.extend(list(row.to_numpy()) + [None])
            fig.add_trace(
                go.Scattergl(
                    x=xs, y=ys, mode="lines",
                    line=dict(color="blue", width=1),
                    opacity=0.15,
                    hoverinfo="skip",
                    name="genes",
                )
            )

        for row, width in zip(data.itertuples(index=False), widths):
            fig.add_trace(
                go.Scatter(
                    x=[row.axis_index, row.axis_index + 1],
                    y=[row.from_mid, row.to_mid],
                    mode="lines",
                    line=dict(color=row.color, width=float(width)),
                    hovertemplate=(
                        f"{row.from_sample} bin {row.from_bin} → {row.to_sample} bin {row.to_bin}"
                        f"<br>{row.count} genes<extra></extra>"
                    ),
                    showlegend=False,
                )
            )

        y_lo, y_hi = data.attrs.get("y_range", (data["to_value"].min(), data["from_value"].max()))
        self.sample_axes(fig, data.attrs.get("sample_ids", []), (y_lo, y_hi))
        fig.update_yaxes(range=[y_lo, y_hi], title="RPKM")
        fig.update_layout(
            height=int(self.plot_height) + 100,
            margin=dict(l=40, r=40, b=40, t=40),
            plot_bgcolor="white",
        )
        return fig
