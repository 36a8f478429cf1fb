from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Dict, Optional

import anndata as ad
import pandas as pd
import plotly.graph_objs as go

from sc_flow.core.fold_change import FlowParameter

logger = logging.getLogger(__name__)


class ExportService:
    """
    Serialises what is currently on screen. Nothing is kept on disk here;
    callers hand the returned strings/bytes to a download component.
    """

    def figure_html(self, fig: go.Figure, title: Optional[str] = None) -> str:
        """Standalone HTML page for a figure (plotly.js loaded from the CDN)."""
        if title:
            fig = go.Figure(fig)
            fig.update_layout(title=title)
        html = fig.to_html(full_html=True, include_plotlyjs="cdn")
        logger.info("Figure exported", extra={"n_traces": len(fig.data), "n_bytes": len(html)})
        return html

    def filtered_genes_csv(
        self,
        frame: pd.DataFrame,
        parameters: Optional[Dict[str, FlowParameter]] = None,
    ) -> str:
        """
        CSV of the filtered genes × samples matrix. Active fold-change parameters
        are listed as '#' comment lines above the header.
        """
        lines = []
        for param in (parameters or {}).values():
            lines.append(
                f"# {param.id}: {param.higher_sample} / {param.lower_sample} >= {param.fold_change_threshold}"
            )
        body = frame.to_csv(index=True, index_label="gene_id")
        return "\n".join(lines + [body]) if lines else body

    def anndata_h5ad(self, adata: ad.AnnData) -> bytes:
        """
        Serialise an AnnData object to .h5ad bytes.

        h5ad is written through h5py, which needs a real file, so the bytes go
        through a temporary directory that is removed afterwards.
        """
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "export.h5ad"
            adata.write_h5ad(path)
            data = path.read_bytes()
        logger.info("AnnData exported", extra={"n_obs": adata.n_obs, "n_vars": adata.n_vars, "n_bytes": len(data)})
        return data
