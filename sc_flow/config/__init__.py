"""
Config package for sc_flow.

Responsible for:
- config models (GlobalConfig, SampleConfig, etc.)
- config I/O helpers (load_global_config / sample_source_for)
"""

from .model import GlobalConfig, SampleConfig, DrawingPadConfig, PlotConfig
from .io import load_global_config, sample_source_for
