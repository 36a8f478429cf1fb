from .flow_view import FlowView
from .parallel_coordinates_view import ParallelCoordinatesView
from .gene_table_view import GeneTableView
from .drawing_pad_view import DrawingPadView

__all__ = ["FlowView", "ParallelCoordinatesView", "GeneTableView", "DrawingPadView"]
