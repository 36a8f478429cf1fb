from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from sc_flow.core.exceptions import SampleLoadError, ScFlowError
from sc_flow.core.expression_matrix import ExpressionMatrix
from sc_flow.core.filter_pipeline import FilterPipeline
from sc_flow.core.flow_binner import FlowBinner, FlowLayout, FlowSegment
from sc_flow.core.fold_change import DEFAULT_EPSILON, DEFAULT_PAD_SCALE, FlowParameter, FoldChangeCapture
from sc_flow.core.sample_loader import SamplePayload, SampleSource
from sc_flow.core.scales import LinearScale, expression_scale

logger = logging.getLogger(__name__)


@dataclass
class LoadReport:
    """Outcome of one load_samples call, in completion order."""
    loaded: List[str] = field(default_factory=list)
    failed: Dict[str, ScFlowError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class VisualizationSession:
    """
    One researcher's view on a set of samples.

    Owns the ExpressionMatrix, the FilterPipeline and the FoldChangeCapture, and
    exposes what the renderers consume:
    - filtered_matrix(): genes that survive the pipeline
    - flow_segments(scale, n_bins): binned transitions of the filtered genes
    - fold_change_parameters(): committed drawing-pad parameters

    Nothing is cached; every call recomputes from the current state.
    """

    def __init__(
        self,
        *,
        epsilon: float = DEFAULT_EPSILON,
        pad_scale=DEFAULT_PAD_SCALE,
        binner: Optional[FlowBinner] = None,
    ) -> None:
        self.matrix = ExpressionMatrix()
        self.pipeline = FilterPipeline()
        self.capture = FoldChangeCapture(self.pipeline, scale=pad_scale, epsilon=epsilon)
        self.binner = binner or FlowBinner()

    # -------------------------------------------------------------------------
    # Samples
    # -------------------------------------------------------------------------
    def add_sample(self, payload: SamplePayload) -> None:
        """Add one parsed sample. GenomeMismatchError propagates, matrix unchanged."""
        self.matrix.add_cell(payload.sample_id, payload.expression())

    def remove_sample(self, sample_id: str) -> None:
        self.matrix.remove_cell(sample_id)

    def reset(self) -> None:
        self.matrix.reset()
        self.pipeline.clear_filters()
        self.capture.clear()

    def load_samples(
        self,
        source: SampleSource,
        sample_ids: Sequence[str],
        max_workers: Optional[int] = None,
    ) -> LoadReport:
        """
        Fetch samples concurrently and add them in completion order.

        Reads run on worker threads; every add_cell runs on the calling thread,
        one at a time. A failing sample (I/O, parse, genome mismatch) is
        reported in the LoadReport and never partially added.

        Once every read is done, newly loaded samples are moved into the order
        of `sample_ids`, so axis order does not depend on thread timing.
        """
        report = LoadReport()
        if not sample_ids:
            return report
        existing = set(self.matrix.sample_ids)

        with ThreadPoolExecutor(max_workers=max_workers or min(8, len(sample_ids))) as pool:
            futures = {pool.submit(source.load_sample, sid): sid for sid in sample_ids}
            for future in as_completed(futures):
                sample_id = futures[future]
                try:
                    payload = future.result()
                    self.add_sample(payload)
                except (ScFlowError, OSError) as exc:
                    if not isinstance(exc, ScFlowError):
                        exc = SampleLoadError(sample_id, str(exc))
                    report.failed[sample_id] = exc
                    logger.error(
                        "Sample load failed",
                        extra={"sample_id": sample_id, "error": str(exc)},
                    )
                    continue
                report.loaded.append(sample_id)

        loaded = set(report.loaded)
        self.matrix.reorder([sid for sid in sample_ids if sid in loaded and sid not in existing])

        logger.info(
            "Samples loaded",
            extra={"loaded": report.loaded, "failed": sorted(report.failed), "n_genes": self.matrix.n_genes},
        )
        return report

    # -------------------------------------------------------------------------
    # Renderer-facing interface
    # -------------------------------------------------------------------------
    def filtered_matrix(self) -> pd.DataFrame:
        return self.pipeline.apply(self.matrix.as_matrix())

    def plot_scale(self, height: float, padding: float, frame: Optional[pd.DataFrame] = None) -> LinearScale:
        """Vertical scale spanning the filtered values, highest value at the top."""
        frame = self.filtered_matrix() if frame is None else frame
        return expression_scale(frame.to_numpy().ravel(), height=height, padding=padding)

    def flow_layout(self, scale, n_bins: int, frame: Optional[pd.DataFrame] = None) -> FlowLayout:
        frame = self.filtered_matrix() if frame is None else frame
        return self.binner.compute(frame, scale, n_bins)

    def flow_segments(self, scale, n_bins: int) -> List[FlowSegment]:
        return self.flow_layout(scale, n_bins).segments

    def fold_change_parameters(self) -> Dict[str, FlowParameter]:
        return self.capture.parameters

    def summary(self) -> Tuple[int, int, int]:
        """(n_samples, n_genes, n_filtered_genes)"""
        return self.matrix.n_samples, self.matrix.n_genes, len(self.filtered_matrix())
