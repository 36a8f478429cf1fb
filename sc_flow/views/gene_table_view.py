from __future__ import annotations

import pandas as pd
import plotly.graph_objs as go

from sc_flow.core.base_view import BaseView
from sc_flow.core.view_state import ViewState


class GeneTableView(BaseView):
    """
    Table of the filtered genes with their RPKM in every sample.
    """

    id = "table"
    label = "Gene table"

    MAX_ROWS = 2000

    def compute_data(self, state: ViewState) -> pd.DataFrame:
        frame = self.filtered_matrix()
        if frame.empty:
            return pd.DataFrame()

        df = frame.copy()
        df.columns = [str(c) for c in df.columns]
        df["max_rpkm"] = frame.max(axis=1)
        df = df.sort_values("max_rpkm", ascending=False, kind="stable")
        return df.reset_index().head(self.MAX_ROWS)

    def render_figure(self, data: pd.DataFrame, state: ViewState) -> go.Figure:
        if data is None or data.empty:
            return self.empty_figure("No genes to show")

        columns = list(data.columns)
        cells = [data[c].tolist() if c == "gene_id" else data[c].round(2).tolist() for c in columns]

        fig = go.Figure(
            go.Table(
                header=dict(values=columns, fill_color="#f2f2f2", align="left"),
                cells=dict(values=cells, align="left"),
            )
        )
        fig.update_layout(
            height=600,
            margin=dict(l=40, r=40, b=40, t=40),
        )
        return fig
