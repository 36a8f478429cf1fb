from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd

from sc_flow.core.filter_pipeline import FilterPipeline, FilterPredicate
from sc_flow.core.scales import LogScale

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 0.0001

# Drawing pad of the original layout: 200px high with a 25px margin
DEFAULT_PAD_SCALE = LogScale(domain=(1.0, 10000.0), range=(0.0, 175.0))

ParametersListener = Callable[[Dict[str, "FlowParameter"]], None]


@dataclass(frozen=True)
class FlowParameter:
    """A committed fold-change constraint: higher_sample / lower_sample >= threshold."""
    id: str
    higher_sample: str
    lower_sample: str
    fold_change_threshold: float


class CaptureState(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"


@dataclass(frozen=True)
class _Stroke:
    start_axis: str
    start_level: float


def fold_change_predicate(param: FlowParameter, epsilon: float = DEFAULT_EPSILON) -> FilterPredicate:
    """
    Predicate keeping genes with row[higher] / row[lower] >= threshold.

    A zero denominator is replaced by `epsilon`. If either sample is not in the
    row (it was removed from the matrix) every gene passes.
    """

    def predicate(row: pd.Series, gene_id: str) -> bool:
        if param.higher_sample not in row.index or param.lower_sample not in row.index:
            return True
        denominator = row[param.lower_sample] or epsilon
        return bool(row[param.higher_sample] / denominator >= param.fold_change_threshold)

    return predicate


class FoldChangeCapture:
    """
    Drawing-pad state machine turning pointer strokes into fold-change filters.

    Lifecycle of one stroke:
        IDLE --begin(axis)--> DRAWING --release(other axis)--> commit, IDLE
                                      --release(same/no axis)--> discard, IDLE
                                      --cancel()--> discard, IDLE

    Every commit/update/remove writes the matching predicate into the
    FilterPipeline (under the parameter id) and notifies subscribers with the
    full parameter mapping.
    """

    def __init__(
        self,
        pipeline: FilterPipeline,
        scale=DEFAULT_PAD_SCALE,
        epsilon: float = DEFAULT_EPSILON,
    ) -> None:
        self.pipeline = pipeline
        self.scale = scale
        self.epsilon = epsilon
        self._stroke: Optional[_Stroke] = None
        self._params: Dict[str, FlowParameter] = {}
        self._listeners: List[ParametersListener] = []
        self._counter = 0

    @property
    def state(self) -> CaptureState:
        return CaptureState.IDLE if self._stroke is None else CaptureState.DRAWING

    @property
    def pending(self) -> Optional[Tuple[str, float]]:
        """(start_axis, start_level) of the stroke being drawn, if any."""
        if self._stroke is None:
            return None
        return self._stroke.start_axis, self._stroke.start_level

    @property
    def parameters(self) -> Dict[str, FlowParameter]:
        return dict(self._params)

    def subscribe(self, listener: ParametersListener) -> None:
        self._listeners.append(listener)

    def fold_change_between(self, start_level: float, end_level: float) -> float:
        """Ratio represented by the distance between two pad levels, rounded to 2 places."""
        return round(float(self.scale.invert(abs(end_level - start_level))), 2)

    # -------------------------------------------------------------------------
    # Pointer events
    # -------------------------------------------------------------------------
    def begin(self, axis: Optional[str], level: float) -> bool:
        """Start a stroke. Returns False (and stays idle) outside every axis zone."""
        if axis is None:
            return False
        if self._stroke is not None:
            logger.debug("Discarding unfinished stroke", extra={"start_axis": self._stroke.start_axis})
        self._stroke = _Stroke(start_axis=axis, start_level=float(level))
        return True

    def move(self, level: float) -> Optional[float]:
        """Live fold-change label for the current pointer level, None when idle."""
        if self._stroke is None:
            return None
        return self.fold_change_between(self._stroke.start_level, level)

    def release(self, axis: Optional[str], level: float) -> Optional[FlowParameter]:
        """
        Finish the stroke. Commits a FlowParameter when released over a different axis.
        """
        stroke = self._stroke
        self._stroke = None
        if stroke is None:
            return None

        if axis is None or axis == stroke.start_axis:
            logger.debug("Stroke discarded", extra={"start_axis": stroke.start_axis, "end_axis": axis})
            return None

        start_value = float(self.scale.invert(stroke.start_level))
        end_value = float(self.scale.invert(level))
        if start_value >= end_value:
            higher, lower = stroke.start_axis, axis
        else:
            higher, lower = axis, stroke.start_axis

        self._counter += 1
        param = FlowParameter(
            id=f"param-group{self._counter}",
            higher_sample=higher,
            lower_sample=lower,
            fold_change_threshold=self.fold_change_between(stroke.start_level, level),
        )
        self._store(param)
        logger.info(
            "Fold-change parameter committed",
            extra={"param_id": param.id, "higher": higher, "lower": lower,
                   "fold_change": param.fold_change_threshold},
        )
        return param

    def cancel(self) -> None:
        """Pointer left the pad: drop the in-progress stroke."""
        self._stroke = None

    # -------------------------------------------------------------------------
    # Committed parameters
    # -------------------------------------------------------------------------
    def update(
        self,
        param_id: str,
        *,
        higher_sample: Optional[str] = None,
        lower_sample: Optional[str] = None,
        fold_change_threshold: Optional[float] = None,
    ) -> FlowParameter:
        """
        Change a committed parameter and regenerate its predicate.

        Raises:
            KeyError: if no parameter with this id exists
        """
        try:
            current = self._params[param_id]
        except KeyError:
            raise KeyError(f"Fold-change parameter '{param_id}' not found")

        changes = {}
        if higher_sample is not None:
            changes["higher_sample"] = higher_sample
        if lower_sample is not None:
            changes["lower_sample"] = lower_sample
        if fold_change_threshold is not None:
            changes["fold_change_threshold"] = float(fold_change_threshold)

        param = replace(current, **changes)
        self._store(param)
        return param

    def remove(self, param_id: str) -> None:
        """Delete a parameter and its predicate. Unknown ids are ignored."""
        if self._params.pop(param_id, None) is None:
            return
        self.pipeline.remove_filter(param_id)
        logger.info("Fold-change parameter removed", extra={"param_id": param_id})
        self._notify()

    def clear(self) -> None:
        for param_id in list(self._params):
            self.pipeline.remove_filter(param_id)
        self._params.clear()
        self._stroke = None
        self._notify()

    def _store(self, param: FlowParameter) -> None:
        self._params[param.id] = param
        self.pipeline.add_filter(param.id, fold_change_predicate(param, self.epsilon))
        self._notify()

    def _notify(self) -> None:
        snapshot = self.parameters
        for listener in self._listeners:
            listener(snapshot)
