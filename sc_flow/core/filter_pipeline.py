from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List

import pandas as pd

logger = logging.getLogger(__name__)

FilterPredicate = Callable[[pd.Series, str], bool]
"""(expression row indexed by sample id, gene id) -> keep?"""


class FilterPipeline:
    """
    Ordered, named set of row predicates combined with logical AND.

    This is the single gate between "all genes" and "plotted / tabulated genes".
    Callers re-derive their filtered view after every add/remove.

    Design Notes:
    - Predicates are evaluated in insertion order; overwriting a name keeps its slot
    - A row stops being evaluated at the first predicate returning False
    - Genes that are not expressed in any active sample are dropped before the
      predicates run, they count as absent from the genome
    """

    def __init__(self) -> None:
        self._filters: Dict[str, FilterPredicate] = {}

    def add_filter(self, name: str, predicate: FilterPredicate) -> None:
        self._filters[name] = predicate
        logger.debug("Filter added", extra={"filter": name, "n_filters": len(self._filters)})

    def remove_filter(self, name: str) -> None:
        if self._filters.pop(name, None) is not None:
            logger.debug("Filter removed", extra={"filter": name, "n_filters": len(self._filters)})

    def clear_filters(self) -> None:
        self._filters.clear()

    @property
    def names(self) -> List[str]:
        return list(self._filters)

    def __contains__(self, name: object) -> bool:
        return name in self._filters

    def __len__(self) -> int:
        return len(self._filters)

    def apply(self, frame: pd.DataFrame) -> pd.DataFrame:
        """
        Return the rows of a genes × samples frame that pass every predicate.

        :param frame: gene-major matrix as produced by ExpressionMatrix.as_matrix()
        :return: the passing subset, original row order preserved
        """
        expressed = frame[(frame != 0).any(axis=1)]
        if not self._filters or expressed.empty:
            return expressed

        predicates = list(self._filters.values())
        keep = [
            all(predicate(row, gene_id) for predicate in predicates)
            for gene_id, row in expressed.iterrows()
        ]
        return expressed[keep]


# -----------------------------------------------------------------------------
# Predicate factories
# -----------------------------------------------------------------------------
def peak_expression_above(threshold: float) -> FilterPredicate:
    """Keep genes whose highest expression over the active samples exceeds threshold."""

    def predicate(row: pd.Series, gene_id: str) -> bool:
        return bool((row > threshold).any())

    return predicate


def expression_in_range(sample_id: str, low: float, high: float) -> FilterPredicate:
    """
    Brush filter on one sample axis: keep genes with low <= value <= high there.
    Passes everything once the sample is no longer loaded.
    """

    def predicate(row: pd.Series, gene_id: str) -> bool:
        if sample_id not in row.index:
            return True
        return bool(low <= row[sample_id] <= high)

    return predicate


def gene_ids_in(gene_ids: Iterable[str]) -> FilterPredicate:
    """Keep only the given genes (table selection)."""
    selected = frozenset(gene_ids)

    def predicate(row: pd.Series, gene_id: str) -> bool:
        return gene_id in selected

    return predicate
