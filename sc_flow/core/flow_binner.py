from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd
from plotly.colors import find_intermediate_color, hex_to_rgb, label_rgb

from sc_flow.core.exceptions import BinOverflowError, InsufficientAxesError

logger = logging.getLogger(__name__)

DEFAULT_LOW_COLOR = "#c6dbef"
DEFAULT_HIGH_COLOR = "#08306b"


@dataclass(frozen=True)
class FlowSegment:
    """
    Genes sharing one bin-to-bin transition between two adjacent axes.

    - axis_index: index of the left axis (the right one is axis_index + 1)
    - from_bin / to_bin: bin index at the left / right axis (0 = highest values)
    - from_value / to_value: upper boundary value of those bins
    - color: 'rgb(r, g, b)' intensity for the group size
    - gene_ids: members, in genome order
    """
    axis_index: int
    from_bin: int
    to_bin: int
    from_value: float
    to_value: float
    color: str
    gene_ids: Tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.gene_ids)


@dataclass(frozen=True)
class FlowLayout:
    """Everything one binning run produces, for renderers that need more than segments."""
    boundaries: np.ndarray
    assignments: pd.DataFrame
    segments: List[FlowSegment]
    color_domain: Optional[Tuple[int, int]]


class FlowBinner:
    """
    Turns a continuous parallel-coordinates layout into discrete flow segments.

    Steps (per call, nothing is cached):
    1. K+1 bin boundaries from evenly spaced display coordinates, high -> low
    2. every gene gets a bin index at every sample axis
    3. genes are grouped by (bin at axis c, bin at axis c+1)
    4. group sizes are mapped onto a two-colour gradient whose domain ignores the
       `excluded_pair` groups (they are still returned)
    """

    def __init__(
        self,
        low_color: str = DEFAULT_LOW_COLOR,
        high_color: str = DEFAULT_HIGH_COLOR,
        excluded_pair: Optional[Tuple[int, int]] = (0, 0),
    ) -> None:
        self.low_rgb = hex_to_rgb(low_color)
        self.high_rgb = hex_to_rgb(high_color)
        self.excluded_pair = excluded_pair

    # -------------------------------------------------------------------------
    # Bin boundaries and assignment
    # -------------------------------------------------------------------------
    @staticmethod
    def boundaries(scale, n_bins: int) -> np.ndarray:
        """
        Return n_bins + 1 boundary values ordered from high to low.

        The outermost boundaries are pinned to the scale's domain so that any
        in-domain value has a bin.
        """
        if n_bins < 2:
            raise ValueError(f"n_bins must be >= 2, got {n_bins}")

        r0, r1 = scale.range
        coords = np.linspace(r0, r1, n_bins + 1)
        values = np.sort(np.asarray(scale.invert(coords), dtype=float))[::-1].copy()

        values[0] = max(scale.domain)
        values[-1] = min(scale.domain)
        return values

    @staticmethod
    def assign_bins(values: np.ndarray, boundaries: np.ndarray, axis: Optional[str] = None) -> np.ndarray:
        """
        Bin index per value: the smallest b with value >= boundaries[b + 1].

        Values are ranked with a stable sort first, so ties keep gene order.

        Raises:
            BinOverflowError: if a value lies outside [boundaries[-1], boundaries[0]]
        """
        n_bins = len(boundaries) - 1
        values = np.asarray(values, dtype=float)

        order = np.argsort(values, kind="stable")
        ranked = values[order]
        ascending = boundaries[::-1]

        if ranked.size and (
            np.isnan(ranked).any() or ranked[0] < ascending[0] or ranked[-1] > ascending[-1]
        ):
            raise BinOverflowError(
                f"Value range [{ranked[0]}, {ranked[-1]}] at axis {axis!r} does not fit "
                f"bin boundaries [{ascending[0]}, {ascending[-1]}]"
            )

        # Highest boundary <= value; a value on an inner boundary goes to the higher bin
        lower_edge = np.searchsorted(ascending, ranked, side="right") - 1
        lower_edge = np.minimum(lower_edge, n_bins - 1)

        bins = np.empty(values.shape[0], dtype=np.int64)
        bins[order] = (n_bins - 1) - lower_edge
        return bins

    # -------------------------------------------------------------------------
    # Colour
    # -------------------------------------------------------------------------
    def color_for(self, count: int, domain: Tuple[int, int]) -> str:
        lo, hi = domain
        if hi == lo:
            t = 0.0
        else:
            t = min(max((count - lo) / (hi - lo), 0.0), 1.0)
        rgb = find_intermediate_color(self.low_rgb, self.high_rgb, t, colortype="tuple")
        return label_rgb(tuple(int(round(c)) for c in rgb))

    def _color_domain(self, groups: List[Tuple[int, int, int, Tuple[str, ...]]]) -> Tuple[int, int]:
        counts = [len(members) for _, from_bin, to_bin, members in groups
                  if (from_bin, to_bin) != self.excluded_pair]
        if not counts:
            counts = [len(members) for *_, members in groups]
        return min(counts), max(counts)

    # -------------------------------------------------------------------------
    # Main entry point
    # -------------------------------------------------------------------------
    def compute(self, frame: pd.DataFrame, scale, n_bins: int) -> FlowLayout:
        """
        Bin a filtered genes × samples frame.

        :param frame: filtered matrix (index gene ids, columns sample ids in axis order)
        :param scale: value -> coordinate scale with `invert`, `domain` and `range`
        :param n_bins: number of bins K (>= 2)

        Raises:
            InsufficientAxesError: fewer than two sample columns
            ValueError: n_bins < 2
            BinOverflowError: a value outside the scale's domain
        """
        sample_ids = [str(s) for s in frame.columns]
        if len(sample_ids) < 2:
            raise InsufficientAxesError(
                f"Flow segments need at least 2 sample axes, got {len(sample_ids)}"
            )

        boundaries = self.boundaries(scale, n_bins)

        if frame.empty:
            assignments = pd.DataFrame(index=frame.index, columns=sample_ids, dtype=np.int64)
            return FlowLayout(boundaries, assignments, [], None)

        values = frame.to_numpy(dtype=float)
        assigned = np.column_stack(
            [self.assign_bins(values[:, c], boundaries, axis=sample_ids[c]) for c in range(len(sample_ids))]
        )
        assignments = pd.DataFrame(assigned, index=frame.index, columns=sample_ids)

        gene_ids = [str(g) for g in frame.index]
        groups: List[Tuple[int, int, int, Tuple[str, ...]]] = []
        for c in range(len(sample_ids) - 1):
            pairs = pd.DataFrame(
                {"from_bin": assigned[:, c], "to_bin": assigned[:, c + 1], "gene_id": gene_ids}
            )
            for (from_bin, to_bin), members in pairs.groupby(["from_bin", "to_bin"], sort=True)["gene_id"]:
                groups.append((c, int(from_bin), int(to_bin), tuple(members)))

        domain = self._color_domain(groups)
        segments = [
            FlowSegment(
                axis_index=c,
                from_bin=from_bin,
                to_bin=to_bin,
                from_value=float(boundaries[from_bin]),
                to_value=float(boundaries[to_bin]),
                color=self.color_for(len(members), domain),
                gene_ids=members,
            )
            for c, from_bin, to_bin, members in groups
        ]

        logger.debug(
            "Flow segments computed",
            extra={"n_genes": len(gene_ids), "n_axes": len(sample_ids),
                   "n_bins": n_bins, "n_segments": len(segments)},
        )
        return FlowLayout(boundaries, assignments, segments, domain)

    def segments(self, frame: pd.DataFrame, scale, n_bins: int) -> List[FlowSegment]:
        return self.compute(frame, scale, n_bins).segments
