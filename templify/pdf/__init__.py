"""PDF back end: pagination, drawing and template assembly."""

from .canvas import DrawOp, PageCanvas, RecordingCanvas, ReportLabPageCanvas
from .compiler import PdfCompiler, render_pdf, render_plain_pdf
from .tables import PlacedCell, TableLayout, TableMetrics
from .template import PageDrawing, PdfTemplate

__all__ = [
    "DrawOp",
    "PageCanvas",
    "PageDrawing",
    "PdfCompiler",
    "PdfTemplate",
    "PlacedCell",
    "RecordingCanvas",
    "ReportLabPageCanvas",
    "TableLayout",
    "TableMetrics",
    "render_pdf",
    "render_plain_pdf",
]
