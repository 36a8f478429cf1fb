from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from sc_flow.core.fold_change import DEFAULT_EPSILON


@dataclass
class SampleConfig:
    """
    Parsed config entry for a single sample file.
    """
    raw: Dict[str, Any]
    source_path: Path
    index: int

    @property
    def name(self) -> str:
        return self.raw.get("name", f"Sample {self.index}")

    @property
    def path(self) -> Path:
        return Path(self.raw["file"])

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Path, index: int) -> SampleConfig:
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass(frozen=True)
class DrawingPadConfig:
    """Geometry of the fold-change drawing pad (log scale over `domain`)."""
    height: float = 200.0
    margin: float = 25.0
    domain: Tuple[float, float] = (1.0, 10000.0)

    @property
    def level_range(self) -> Tuple[float, float]:
        return 0.0, self.height - self.margin


@dataclass(frozen=True)
class PlotConfig:
    """Height of the sample axes and the padding above/below them."""
    height: float = 500.0
    padding: float = 30.0


@dataclass
class GlobalConfig:
    ui_title: str = "Single-Cell Flow Browser"
    n_bins: int = 10
    fold_change_epsilon: float = DEFAULT_EPSILON
    peak_threshold: Optional[float] = None
    drawing_pad: DrawingPadConfig = field(default_factory=DrawingPadConfig)
    plot: PlotConfig = field(default_factory=PlotConfig)
    samples: List[SampleConfig] = field(default_factory=list)
    data_root: Optional[Path] = None
