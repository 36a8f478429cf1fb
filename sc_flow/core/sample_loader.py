from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Protocol, Union

import pandas as pd

from sc_flow.core.exceptions import SampleLoadError

logger = logging.getLogger(__name__)

SAMPLE_COLUMNS = ["gene_id", "count_score", "gene_length", "rpkm"]


@dataclass(frozen=True)
class SamplePayload:
    """
    One parsed sample: a DataFrame with SAMPLE_COLUMNS, in the file's gene order.
    Only 'gene_id' and 'rpkm' are used by the matrix.
    """
    sample_id: str
    rows: pd.DataFrame

    def expression(self) -> pd.Series:
        """RPKM values indexed by gene id, ready for ExpressionMatrix.add_cell."""
        return pd.Series(
            self.rows["rpkm"].to_numpy(dtype=float),
            index=self.rows["gene_id"].astype(str).to_numpy(),
            name=self.sample_id,
        )


class SampleSource(Protocol):
    def load_sample(self, sample_id: str) -> SamplePayload:
        ...


def read_rpkm_table(path: Union[str, Path], sample_id: str) -> SamplePayload:
    """
    Parse a flat tab-delimited RPKM file.

    The first line is a header whose wording varies between pipelines; it is
    replaced by the fixed columns gene_id, count_score, gene_length, rpkm.

    Raises:
        SampleLoadError: unreadable file, wrong column count or non-numeric values
    """
    path = Path(path)
    try:
        # The header line is skipped rather than parsed, so its field count never
        # shifts the data columns into an implicit index
        rows = pd.read_csv(
            path,
            sep="\t",
            header=None,
            skiprows=1,
            index_col=False,
            dtype=str,
        )
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise SampleLoadError(sample_id, f"{path}: {exc}") from exc

    if rows.shape[1] != len(SAMPLE_COLUMNS):
        raise SampleLoadError(
            sample_id, f"{path}: expected {len(SAMPLE_COLUMNS)} tab-separated columns, found {rows.shape[1]}"
        )
    rows.columns = SAMPLE_COLUMNS

    numeric = ["count_score", "gene_length", "rpkm"]
    converted = rows[numeric].apply(pd.to_numeric, errors="coerce")
    bad = converted.isna().any(axis=1)
    if bad.any():
        first = int(bad.to_numpy().argmax())
        raise SampleLoadError(sample_id, f"{path}: missing or non-numeric value on data line {first + 1}")

    rows = pd.concat([rows[["gene_id"]], converted], axis=1)
    logger.debug("Sample file parsed", extra={"sample_id": sample_id, "path": str(path), "n_genes": len(rows)})
    return SamplePayload(sample_id=sample_id, rows=rows)


class TsvSampleSource:
    """
    SampleSource reading one RPKM file per sample id.

    Relative paths are resolved against SC_FLOW_DATA_ROOT when it is set,
    otherwise against `base_dir`.
    """

    def __init__(self, paths: Mapping[str, Union[str, Path]], base_dir: Union[str, Path, None] = None) -> None:
        self.paths: Dict[str, Path] = {k: Path(v) for k, v in paths.items()}
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def resolve(self, sample_id: str) -> Path:
        try:
            path = self.paths[sample_id]
        except KeyError:
            raise SampleLoadError(sample_id, "no file configured for this sample")

        if path.is_absolute():
            return path

        data_root = os.environ.get("SC_FLOW_DATA_ROOT")
        if data_root:
            return Path(data_root) / path
        if self.base_dir is not None:
            return self.base_dir / path
        return path

    def load_sample(self, sample_id: str) -> SamplePayload:
        return read_rpkm_table(self.resolve(sample_id), sample_id)
