from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import anndata as ad
import numpy as np
import pandas as pd

from sc_flow.core.exceptions import GenomeMismatchError, UnknownGeneError

logger = logging.getLogger(__name__)


class ExpressionMatrix:
    """
    Aligned per-sample expression vectors over a fixed gene ordering.

    Includes:
    - Genome order adopted from the first sample and enforced on every other one
    - Dense float64 vector per sample, positionally aligned to the genome order
    - Gene-major DataFrame view (genes × samples) for filtering and plotting

    Samples keep the insertion order of their `add_cell` calls. Removing a
    sample never changes the genome order, only `reset()` does.
    """

    def __init__(self) -> None:
        self._samples: Dict[str, np.ndarray] = {}
        self._genome: Optional[Tuple[str, ...]] = None
        self._gene_index: Dict[str, int] = {}

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------
    def add_cell(self, sample_id: str, rows: pd.Series) -> None:
        """
        Add (or replace) one sample.

        :param sample_id: identifier of the sample, used as column name
        :param rows: expression values indexed by gene id, in the sample's gene order

        Raises:
            GenomeMismatchError: if the gene ids differ from the established
                genome order at any position (or in length). Nothing is stored.
        """
        gene_ids = tuple(str(g) for g in rows.index)
        values = np.asarray(rows.to_numpy(), dtype=np.float64)

        if self._genome is not None:
            self._check_genome(sample_id, gene_ids)

        # Values are converted before any state changes so a bad sample is all-or-nothing
        values = values.copy()
        values.setflags(write=False)

        if self._genome is None:
            self._genome = gene_ids
            self._gene_index = {}
            for idx, gene in enumerate(gene_ids):
                self._gene_index.setdefault(gene, idx)
            logger.info(
                "Genome order established",
                extra={"sample_id": sample_id, "n_genes": len(gene_ids)},
            )

        self._samples[sample_id] = values
        logger.debug("Sample added", extra={"sample_id": sample_id, "n_samples": len(self._samples)})

    def _check_genome(self, sample_id: str, gene_ids: Tuple[str, ...]) -> None:
        genome = self._genome
        for idx, expected in enumerate(genome):
            found = gene_ids[idx] if idx < len(gene_ids) else None
            if found != expected:
                raise GenomeMismatchError(sample_id, idx, expected, found)

        if len(gene_ids) > len(genome):
            raise GenomeMismatchError(sample_id, len(genome), None, gene_ids[len(genome)])

    def remove_cell(self, sample_id: str) -> None:
        """Remove a sample if present. Genome order is kept."""
        if self._samples.pop(sample_id, None) is not None:
            logger.debug("Sample removed", extra={"sample_id": sample_id})

    def reorder(self, sample_ids: Sequence[str]) -> None:
        """
        Move the listed samples behind all others, in the listed order.

        Unknown ids are skipped. Values and the genome order are untouched.
        """
        for sample_id in sample_ids:
            if sample_id in self._samples:
                self._samples[sample_id] = self._samples.pop(sample_id)

    def reset(self) -> None:
        """Drop every sample and the genome order."""
        self._samples.clear()
        self._genome = None
        self._gene_index = {}

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------
    def get_gene_row(self, gene_id: str) -> Dict[str, float]:
        """
        Return sample id -> expression for one gene.

        Raises:
            UnknownGeneError: if gene_id is not part of the genome order
        """
        idx = self._gene_index.get(gene_id)
        if idx is None:
            raise UnknownGeneError(gene_id)
        return {name: float(values[idx]) for name, values in self._samples.items()}

    def as_matrix(self) -> pd.DataFrame:
        """
        Gene-major view of the matrix.

        Index is the genome order (named 'gene_id'), columns are the sample ids in
        insertion order. An empty DataFrame is returned before any sample was added.
        """
        if self._genome is None:
            return pd.DataFrame(index=pd.Index([], name="gene_id", dtype=object))

        index = pd.Index(self._genome, name="gene_id")
        sample_ids = list(self._samples)
        if not sample_ids:
            return pd.DataFrame(index=index)

        data = np.column_stack([self._samples[s] for s in sample_ids])
        return pd.DataFrame(data, index=index, columns=sample_ids)

    def to_anndata(self, gene_ids: Optional[Iterable[str]] = None) -> ad.AnnData:
        """
        Export as AnnData with samples as observations and genes as variables.

        :param gene_ids: if given, only these genes are exported (genome order kept)
        """
        frame = self.as_matrix()
        if gene_ids is not None:
            frame = frame[frame.index.isin(list(gene_ids))]
        obs = pd.DataFrame(index=pd.Index([str(s) for s in frame.columns], name="sample_id"))
        var = pd.DataFrame(index=pd.Index(frame.index.astype(str), name="gene_id"))
        return ad.AnnData(X=frame.to_numpy().T.copy(), obs=obs, var=var)

    # -------------------------------------------------------------------------
    # Properties & getters
    # -------------------------------------------------------------------------
    @property
    def genome_order(self) -> Optional[Tuple[str, ...]]:
        return self._genome

    @property
    def sample_ids(self) -> List[str]:
        return list(self._samples)

    @property
    def n_genes(self) -> int:
        return 0 if self._genome is None else len(self._genome)

    @property
    def n_samples(self) -> int:
        return len(self._samples)

    def __contains__(self, sample_id: object) -> bool:
        return sample_id in self._samples

    def __len__(self) -> int:
        return len(self._samples)
