from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import pandas as pd
import plotly.graph_objs as go

from .scales import LinearScale
from .session import VisualizationSession
from .view_state import ViewState

logger = logging.getLogger(__name__)


class BaseView(ABC):
    """
    Abstract base class for all plot views.

    Defines the contract that every view in the app must follow
    - expose an 'id' - used internally
    - expose a 'label' - used for UI/human-readable applications
    - implement 'compute_data' - used to compute the data given the current ViewState
    - implement 'render_figure' - used to render the figure using Plotly
    """

    id: str = None
    label: str = None

    # Default height of the sample axes and padding above/below them, in pixels
    PLOT_HEIGHT = 500
    PLOT_PADDING = 30

    def __init__(
            self,
            session: VisualizationSession,
            plot_height: Optional[float] = None,
            plot_padding: Optional[float] = None,
    ):
        self.session = session
        self.plot_height = self.PLOT_HEIGHT if plot_height is None else float(plot_height)
        self.plot_padding = self.PLOT_PADDING if plot_padding is None else float(plot_padding)

    @abstractmethod
    def compute_data(self, state: ViewState) -> Any:
        """
        Compute the data given the current ViewState
        :param state: the current {@link ViewState}
        :return: data: a dataframe containing the data to plot
        """
        raise NotImplementedError()

    @abstractmethod
    def render_figure(self, data: Any, state: ViewState) -> go.Figure:
        """
        Render the figure given the computed data
        :param data: the data provided by {@link compute_data()}
        :param state: the current {@link ViewState}
        :return: the Plotly figure for these parameters
        """
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # Common helpers for all views
    # ------------------------------------------------------------------
    def timed_compute(self, state: ViewState) -> Any:
        start = time.perf_counter()
        data = self.compute_data(state)
        logger.info(
            "compute_data finished",
            extra={"view_id": self.id, "elapsed_ms": round((time.perf_counter() - start) * 1000, 1)},
        )
        return data

    def filtered_matrix(self) -> pd.DataFrame:
        """
        The session's matrix after the FilterPipeline.

        All views should call this instead of touching the matrix directly,
        so if we ever need to change the filtering behaviour, we do it in one place.
        """
        return self.session.filtered_matrix()

    def plot_scale(self, frame: pd.DataFrame) -> LinearScale:
        return self.session.plot_scale(self.plot_height, self.plot_padding, frame=frame)

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure used by all views.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig

    @staticmethod
    def sample_axes(fig: go.Figure, sample_ids: list, y_range) -> go.Figure:
        """Vertical axis line and tick label for every sample."""
        for i, _ in enumerate(sample_ids):
            fig.add_shape(
                type="line",
                x0=i, x1=i, y0=y_range[0], y1=y_range[1],
                line=dict(color="darkgray", width=1),
                layer="below",
            )
        fig.update_xaxes(
            tickmode="array",
            tickvals=list(range(len(sample_ids))),
            ticktext=[str(s) for s in sample_ids],
            tickangle=25,
            showgrid=False,
            zeroline=False,
        )
        return fig
