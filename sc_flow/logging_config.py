from __future__ import annotations

import logging
import os
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that flood INFO with one line per request
_QUIET_LOGGERS = ("werkzeug", "urllib3")


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv("SC_FLOW_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def configure_logging(
        level: Union[int, str, None] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the flow browser.

    Modes:
    - JSON (default), one object per record, extra={...} fields included
    - plain text (dev mode)

    Selection order for the format:
        1) force_format argument ("json" or "plain") if provided
        2) env var SC_FLOW_LOG_FORMAT
        3) default = "json"

    The level comes from `level`, else SC_FLOW_LOG_LEVEL, else INFO.
    """
    if force_format is not None:
        format_mode = force_format.lower()
    else:
        format_mode = os.getenv("SC_FLOW_LOG_FORMAT", "json").lower()

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    handler = logging.StreamHandler()
    if format_mode == "plain":
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))

    # Replace any existing handlers to avoid duplicate logs
    root.handlers.clear()
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
