from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from sc_flow.config.model import DrawingPadConfig, GlobalConfig, PlotConfig, SampleConfig
from sc_flow.core.exceptions import ConfigError
from sc_flow.core.sample_loader import TsvSampleSource

logger = logging.getLogger(__name__)


def _drawing_pad(raw: Dict[str, Any]) -> DrawingPadConfig:
    defaults = DrawingPadConfig()
    domain = tuple(float(v) for v in raw.get("domain", defaults.domain))
    pad = DrawingPadConfig(
        height=float(raw.get("height", defaults.height)),
        margin=float(raw.get("margin", defaults.margin)),
        domain=domain,
    )
    if len(pad.domain) != 2 or min(pad.domain) <= 0:
        raise ConfigError(f"drawing_pad.domain must be two positive numbers, got {raw.get('domain')}")
    if pad.height <= pad.margin:
        raise ConfigError("drawing_pad.height must be larger than drawing_pad.margin")
    return pad


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory.

    Expected structure:

        root/
            global.json
            samples/
                sample_1.json      {"name": "...", "file": "..."}
                sample_2.json
                ...

    global.json keys (all optional): ui_title, n_bins, fold_change_epsilon,
    peak_threshold, data_root, drawing_pad {height, margin, domain},
    plot {height, padding}.

    Sample files are listed in file-name order. A relative 'data_root' is
    resolved against 'root'.

    :param root: Directory containing 'global.json' and optionally 'samples/'.
    :return: A GlobalConfig instance.
    :raises FileNotFoundError: if global.json does not exist.
    :raises ConfigError: on invalid values.
    """
    root = Path(root)
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raise FileNotFoundError(f"File not found at {global_path}")

    with global_path.open() as f:
        raw_global = json.load(f)

    samples: List[SampleConfig] = []
    samples_dir = root / "samples"
    if samples_dir.is_dir():
        for idx, config_file in enumerate(sorted(samples_dir.glob("*.json"))):
            with config_file.open() as f:
                raw = json.load(f)
            if "file" not in raw:
                raise ConfigError(f"Sample config {config_file} has no 'file' entry")
            samples.append(SampleConfig.from_raw(raw, source_path=config_file, index=idx))

    data_root_raw = raw_global.get("data_root")
    if data_root_raw is None:
        data_root = None
    else:
        data_root_path = Path(data_root_raw)
        data_root = data_root_path if data_root_path.is_absolute() else (root / data_root_path).resolve()

    n_bins = int(raw_global.get("n_bins", 10))
    if n_bins < 2:
        raise ConfigError(f"n_bins must be >= 2, got {n_bins}")

    epsilon = float(raw_global.get("fold_change_epsilon", GlobalConfig.fold_change_epsilon))
    if epsilon <= 0:
        raise ConfigError(f"fold_change_epsilon must be positive, got {epsilon}")

    peak = raw_global.get("peak_threshold")
    plot_raw = raw_global.get("plot", {})

    names = [s.name for s in samples]
    if len(set(names)) != len(names):
        raise ConfigError(f"Duplicate sample names in {samples_dir}: {names}")

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "Single-Cell Flow Browser"),
        n_bins=n_bins,
        fold_change_epsilon=epsilon,
        peak_threshold=float(peak) if peak is not None else None,
        drawing_pad=_drawing_pad(raw_global.get("drawing_pad", {})),
        plot=PlotConfig(
            height=float(plot_raw.get("height", PlotConfig.height)),
            padding=float(plot_raw.get("padding", PlotConfig.padding)),
        ),
        samples=samples,
        data_root=data_root,
    )


def sample_source_for(config: GlobalConfig, root: Path) -> TsvSampleSource:
    """
    SampleSource over the configured sample files.

    Relative files resolve against SC_FLOW_DATA_ROOT, then 'data_root', then the config root.
    """
    base_dir = config.data_root if config.data_root is not None else Path(root)
    return TsvSampleSource({s.name: s.path for s in config.samples}, base_dir=base_dir)
