from __future__ import annotations

import pandas as pd
import plotly.graph_objs as go

from sc_flow.core.base_view import BaseView
from sc_flow.core.view_state import ViewState


class ParallelCoordinatesView(BaseView):
    """
    Gene trajectories:
    One line per filtered gene, crossing every sample axis at its RPKM value.
    """

    id = "lines"
    label = "Gene trajectories"

    def compute_data(self, state: ViewState) -> pd.DataFrame:
        frame = self.filtered_matrix()
        if frame.empty or frame.shape[1] == 0:
            return pd.DataFrame()

        sample_ids = [str(s) for s in frame.columns]
        df = frame.copy()
        df.columns = sample_ids
        long_df = (
            df.reset_index()
            .melt(id_vars="gene_id", var_name="sample_id", value_name="rpkm")
        )
        long_df["axis"] = long_df["sample_id"].map({s: i for i, s in enumerate(sample_ids)})

        scale = self.plot_scale(frame)
        long_df.attrs["sample_ids"] = sample_ids
        long_df.attrs["y_range"] = (min(scale.domain), max(scale.domain))
        long_df.attrs["ticks"] = scale.ticks(7)
        return long_df

    def render_figure(self, data: pd.DataFrame, state: ViewState) -> go.Figure:
        if data is None or data.empty:
            return self.empty_figure("No genes to show")

        sample_ids = data.attrs.get("sample_ids", sorted(data["sample_id"].unique()))
        y_range = data.attrs.get("y_range", (data["rpkm"].min(), data["rpkm"].max()))

        xs, ys, texts = [], [], []
        for gene_id, gene_df in data.sort_values(["gene_id", "axis"]).groupby("gene_id", sort=False):
            xs.extend(gene_df["axis"].tolist() + [None])
            ys.extend(gene_df["rpkm"].tolist() + [None])
            texts.extend([gene_id] * len(gene_df) + [None])

        fig = go.Figure(
            go.Scatter(
                x=xs,
                y=ys,
                text=texts,
                mode="lines",
                line=dict(color="blue", width=1, shape="spline", smoothing=0.85),
                opacity=0.4,
                hovertemplate="%{text}<br>RPKM %{y}<extra></extra>",
            )
        )
        self.sample_axes(fig, sample_ids, y_range)
        fig.update_yaxes(
            range=list(y_range),
            tickvals=data.attrs.get("ticks"),
            gridcolor="#ccc",
            title="RPKM",
        )
        fig.update_layout(
            height=int(self.plot_height) + 100,
            margin=dict(l=40, r=40, b=40, t=40),
            plot_bgcolor="white",
        )
        return fig
