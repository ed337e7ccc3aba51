"""
Background template handling.

Generated pages are ReportLab overlays merged on top of pages from the brand's
template PDF. Template bytes are only read; every output page is built from a
fresh overlay so a template page can back any number of output pages.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from reportlab.pdfgen import canvas as rl_canvas

from ..exceptions import RenderingError, TemplateError
from .canvas import RecordingCanvas, ReportLabPageCanvas

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PageDrawing:
    """Recorded content of one output page and the template page behind it."""

    template_index: int
    width: float
    height: float
    canvas: RecordingCanvas


class PdfTemplate:
    """Read-only view of a template PDF."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        try:
            self._reader = PdfReader(io.BytesIO(data))
            pages = list(self._reader.pages)
        except (PdfReadError, ValueError, OSError) as exc:
            raise TemplateError("Template PDF cannot be read", str(exc)) from exc
        if not pages:
            raise TemplateError("Template PDF has no pages")
        self.page_sizes: List[Tuple[float, float]] = [
            (float(page.mediabox.width), float(page.mediabox.height)) for page in pages
        ]

    @classmethod
    def from_bytes(cls, data: bytes) -> "PdfTemplate":
        return cls(data)

    @property
    def page_count(self) -> int:
        return len(self.page_sizes)

    @property
    def overflow_index(self) -> int:
        """Template page backing overflow pages: the second page if present."""
        return 1 if self.page_count > 1 else 0

    def _render_overlay(self, pages: Sequence[PageDrawing]) -> bytes:
        buffer = io.BytesIO()
        first = pages[0]
        c = rl_canvas.Canvas(buffer, pagesize=(first.width, first.height))
        for page in pages:
            c.setPageSize((page.width, page.height))
            page.canvas.replay(ReportLabPageCanvas(c, page.height))
            c.showPage()
        c.save()
        return buffer.getvalue()

    def assemble(self, pages: Sequence[PageDrawing]) -> bytes:
        """
        Merge the recorded pages onto their template backgrounds.

        Args:
            pages: Output pages in order

        Returns:
            PDF bytes of the finished document
        """
        if not pages:
            raise RenderingError("No pages to assemble")
        try:
            overlay = PdfReader(io.BytesIO(self._render_overlay(pages)))
            background = PdfReader(io.BytesIO(self.data))
            writer = PdfWriter()
            for page, overlay_page in zip(pages, overlay.pages):
                overlay_page.merge_page(background.pages[page.template_index], over=False)
                writer.add_page(overlay_page)
            output = io.BytesIO()
            writer.write(output)
        except (PdfReadError, ValueError, KeyError, OSError) as exc:
            raise RenderingError("PDF assembly failed", str(exc)) from exc
        logger.debug("Assembled %d pages", len(pages))
        return output.getvalue()
