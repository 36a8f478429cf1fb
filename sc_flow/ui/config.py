from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sc_flow.config.model import GlobalConfig
from sc_flow.core.session import LoadReport, VisualizationSession
from sc_flow.core.view_registry import ViewRegistry
from sc_flow.services.export_service import ExportService


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    session: VisualizationSession
    load_report: Optional[LoadReport] = None

    registry: Optional[ViewRegistry] = None
    export_service: Optional[ExportService] = None

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.registry is None:
            raise RuntimeError("AppConfig.registry must be initialized.")
        if self.export_service is None:
            raise RuntimeError("AppConfig.export_service must be initialized.")
