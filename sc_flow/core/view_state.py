from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value not in (None, "") else None


@dataclass
class ViewState:
    """
    Represents the current display options of the plot panel.

    Fields:

    - view_id: id of the view to render (see ViewRegistry)
    - n_bins: number of flow bins K per axis (>= 2)
    - show_lines: draw the individual gene trajectories under the flow segments
    - peak_threshold: if set, only genes whose highest RPKM exceeds it are shown
    - range_sample / range_low / range_high: keep genes whose RPKM at one sample
      lies within [low, high]; an open bound is unbounded
    - gene_ids: if non-empty, only these genes are shown

    """

    view_id: str = "flow"
    n_bins: int = 10
    show_lines: bool = False
    peak_threshold: Optional[float] = None
    range_sample: Optional[str] = None
    range_low: Optional[float] = None
    range_high: Optional[float] = None
    gene_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ViewState:
        return cls(
            view_id=data.get("view_id", "flow"),
            n_bins=int(data.get("n_bins", 10)),
            show_lines=bool(data.get("show_lines", False)),
            peak_threshold=_optional_float(data.get("peak_threshold")),
            range_sample=data.get("range_sample") or None,
            range_low=_optional_float(data.get("range_low")),
            range_high=_optional_float(data.get("range_high")),
            gene_ids=[str(g) for g in data.get("gene_ids") or []],
        )
