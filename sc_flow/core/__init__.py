"""
Core domain layer: expression matrix, filter pipeline, flow binning,
fold-change capture, the session tying them together, and the view base
class and registry
"""

from .expression_matrix import ExpressionMatrix
from .filter_pipeline import FilterPipeline
from .flow_binner import FlowBinner, FlowLayout, FlowSegment
from .fold_change import FlowParameter, FoldChangeCapture
from .session import VisualizationSession
from .view_state import ViewState
from .base_view import BaseView
from .view_registry import ViewRegistry

__all__ = [
    "ExpressionMatrix",
    "FilterPipeline",
    "FlowBinner",
    "FlowLayout",
    "FlowSegment",
    "FlowParameter",
    "FoldChangeCapture",
    "VisualizationSession",
    "ViewState",
    "BaseView",
    "ViewRegistry",
]
