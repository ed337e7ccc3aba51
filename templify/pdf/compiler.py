"""
PDF pagination and drawing.

:class:`PdfCompiler` walks the flattened blocks with a vertical cursor inside
the body region, opening overflow pages on demand, and records every drawing
operation per page. A second pass stamps ``Page i of N`` footers once the page
count is known. :func:`render_pdf` ties flattening, compiling and template
assembly together.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..config.layout import PdfLayout, TextBoxLayout
from ..engine.flattener import AlignmentDefaults, BlockFlattener, plain_text_blocks
from ..engine.line_breaker import LineBreaker, WrappedLine, wrap_plain
from ..engine.numbering import NumberingNormalizer
from ..engine.text_alignment import TextAlignmentEngine
from ..engine.text_metrics import FontFamily
from ..exceptions import MediaError
from ..media.images import parse_data_url
from ..models.blocks import Block, ImageBlock, ParagraphBlock, TableBlock
from ..models.document import RichDocument
from .canvas import RecordingCanvas
from .tables import BORDER_COLOR, TableLayout, TableMetrics
from .template import PageDrawing, PdfTemplate

logger = logging.getLogger(__name__)

SUBTITLE_GAP = 6.0
IMAGE_GAP = 8.0
TABLE_GAP = 8.0
PAGE_NUMBER_BACKGROUND = "#FFFFFF"


@dataclass(slots=True)
class _TextRole:
    """Font, size, line height and colour used for one kind of paragraph."""

    family: FontFamily
    font_size: float
    line_height: float
    color: str
    breaker: LineBreaker = field(init=False)

    def __post_init__(self) -> None:
        self.breaker = LineBreaker(self.family, self.font_size)


@dataclass(slots=True)
class _Flow:
    """Mutable pagination state of one compile call."""

    pages: List[PageDrawing] = field(default_factory=list)
    cursor: float = 0.0
    fresh: bool = True

    @property
    def page(self) -> PageDrawing:
        return self.pages[-1]

    @property
    def canvas(self) -> RecordingCanvas:
        return self.pages[-1].canvas


class PdfCompiler:
    """
    Lays out blocks over template-backed pages.

    Args:
        layout: Region geometry and styles (never mutated)
        page_sizes: ``(width, height)`` of every template page
        overflow_index: Template page backing overflow pages
        body_on_first_page: Flow content below the title on page 1; when False
            page 1 is a cover and content starts on the first overflow page
    """

    def __init__(
        self,
        layout: PdfLayout,
        page_sizes: Sequence[Tuple[float, float]],
        overflow_index: int = 0,
        body_on_first_page: bool = True,
    ) -> None:
        if not page_sizes:
            raise ValueError("page_sizes must not be empty")
        self.layout = layout
        self.page_sizes = list(page_sizes)
        self.overflow_index = overflow_index if overflow_index < len(self.page_sizes) else 0
        self.body_on_first_page = body_on_first_page

        body = layout.body
        body_style = layout.body_style
        self.body_role = _TextRole(FontFamily(body_style.font_name), body.font_size, body.line_height, body_style.color)
        heading_style = layout.heading_style or body_style
        heading_size = layout.heading_font_size or body.font_size
        self.heading_role = _TextRole(
            FontFamily(heading_style.font_name),
            heading_size,
            max(body.line_height, body.line_height + heading_size - body.font_size),
            heading_style.color,
        )
        self.alignment = TextAlignmentEngine()
        self.tables = TableLayout(self.body_role.breaker.wrap, body.line_height)

    def compile(self, blocks: Sequence[Block], title: str, subtitle: Optional[str] = None) -> List[PageDrawing]:
        """
        Paginate ``blocks`` and record all drawing operations.

        Args:
            blocks: Flattened blocks in reading order
            title: Document title (front matter and running header)
            subtitle: Optional subtitle

        Returns:
            Recorded pages, the first backed by template page 0
        """
        flow = _Flow()
        width, height = self.page_sizes[0]
        flow.pages.append(PageDrawing(0, width, height, RecordingCanvas()))
        front_bottom = self._draw_front_matter(flow.canvas, width, title, subtitle)

        body = self.layout.body
        if self.body_on_first_page:
            flow.cursor = max(body.y, front_bottom + body.line_height)
            flow.fresh = False
        else:
            flow.cursor = body.bottom
            flow.fresh = False

        for block in blocks:
            if isinstance(block, ParagraphBlock):
                self._place_paragraph(flow, block, title, subtitle)
            elif isinstance(block, ImageBlock):
                self._place_image(flow, block, title, subtitle)
            elif isinstance(block, TableBlock):
                self._place_table(flow, block, title, subtitle)

        self._draw_page_numbers(flow.pages)
        logger.debug("Compiled %d blocks into %d pages", len(blocks), len(flow.pages))
        return flow.pages

    # ------------------------------------------------------------------
    # Page management

    def _new_page(self, flow: _Flow, title: str, subtitle: Optional[str]) -> None:
        width, height = self.page_sizes[self.overflow_index]
        page = PageDrawing(self.overflow_index, width, height, RecordingCanvas())
        flow.pages.append(page)
        flow.cursor = self.layout.body.y
        flow.fresh = True
        self._draw_running_header(page.canvas, title, subtitle)
        logger.debug("Opened overflow page %d", len(flow.pages))

    def _ensure_room(self, flow: _Flow, height: float, title: str, subtitle: Optional[str]) -> None:
        if flow.cursor + height > self.layout.body.bottom and not flow.fresh:
            self._new_page(flow, title, subtitle)

    # ------------------------------------------------------------------
    # Fixed regions

    def _draw_box_lines(
        self,
        canvas: RecordingCanvas,
        lines: Sequence[str],
        box: TextBoxLayout,
        y: float,
        font_name: str,
        color: str,
    ) -> float:
        for index, text in enumerate(lines):
            if text:
                canvas.draw_text(box.x, y + index * box.line_height + box.font_size, text, font_name, box.font_size, color)
        return y + len(lines) * box.line_height

    def _draw_front_matter(self, canvas: RecordingCanvas, page_width: float, title: str, subtitle: Optional[str]) -> float:
        layout = self.layout
        title_family = FontFamily(layout.title_style.font_name)
        title_width = max(0.0, page_width - layout.title.x * 2)
        title_lines = wrap_plain(title, title_family, layout.title.font_size, title_width)
        bottom = self._draw_box_lines(
            canvas, title_lines, layout.title, layout.title.y, title_family.font_name(), layout.title_style.color
        )
        if subtitle:
            subtitle_family = FontFamily(layout.subtitle_style.font_name)
            subtitle_width = max(0.0, page_width - layout.subtitle.x * 2)
            subtitle_lines = wrap_plain(subtitle, subtitle_family, layout.subtitle.font_size, subtitle_width)
            subtitle_y = layout.title.y + len(title_lines) * layout.title.line_height + SUBTITLE_GAP
            bottom = self._draw_box_lines(
                canvas,
                subtitle_lines,
                layout.subtitle,
                subtitle_y,
                subtitle_family.font_name(),
                layout.subtitle_style.color,
            )
        return bottom

    def _draw_aligned(self, canvas: RecordingCanvas, text: str, box: TextBoxLayout, color: str, alignment: str) -> None:
        font_name = self.body_role.family.font_name()
        width = self.body_role.family.metrics().width_of(text, box.font_size)
        x = self.alignment.calculate_x(box.x, box.width, width, alignment)
        canvas.draw_text(x, box.y + box.font_size, text, font_name, box.font_size, color)

    def _draw_running_header(self, canvas: RecordingCanvas, title: str, subtitle: Optional[str]) -> None:
        layout = self.layout
        self._draw_aligned(canvas, title, layout.header_title, layout.body_style.color, "right")
        if subtitle:
            self._draw_aligned(canvas, subtitle, layout.header_subtitle, layout.subtitle_style.color, "right")

    def _draw_page_numbers(self, pages: Sequence[PageDrawing]) -> None:
        box = self.layout.page_number
        total = len(pages)
        for number, page in enumerate(pages[1:], start=2):
            page.canvas.draw_rect(box.x, box.y, box.width, box.height, fill=PAGE_NUMBER_BACKGROUND)
            self._draw_aligned(page.canvas, f"Page {number} of {total}", box, self.layout.body_style.color, "center")

    # ------------------------------------------------------------------
    # Text

    def draw_line(
        self,
        canvas: RecordingCanvas,
        line: WrappedLine,
        role: _TextRole,
        x: float,
        width: float,
        top: float,
        alignment: str,
        last: bool,
    ) -> None:
        """Draw one wrapped line with its top edge at ``top``."""
        if line.is_empty:
            return
        baseline = top + role.font_size
        family = role.family
        if alignment == "justify" and not last and not line.hard_break:
            segments = self.alignment.split_segments(line.runs)
            widths = [role.breaker.width_of(segment.text, segment) for segment in segments]
            word_width = sum(w for w, segment in zip(widths, segments) if not segment.text.isspace())
            gaps = self.alignment.justify_gaps(segments, word_width, width)
            if any(gaps):
                cursor = x
                for segment, natural, gap in zip(segments, widths, gaps):
                    if segment.text.isspace():
                        cursor += gap
                        continue
                    canvas.draw_text(
                        cursor,
                        baseline,
                        segment.text,
                        family.font_name(segment.bold, segment.italic),
                        role.font_size,
                        role.color,
                        segment.underline,
                    )
                    cursor += natural
                return
        cursor = self.alignment.calculate_x(x, width, line.width, alignment)
        for run in line.runs:
            canvas.draw_text(
                cursor,
                baseline,
                run.text,
                family.font_name(run.bold, run.italic),
                role.font_size,
                role.color,
                run.underline,
            )
            cursor += role.breaker.width_of(run.text, run)

    def _role_for(self, block: ParagraphBlock) -> _TextRole:
        return self.heading_role if block.is_heading else self.body_role

    def _place_paragraph(self, flow: _Flow, block: ParagraphBlock, title: str, subtitle: Optional[str]) -> None:
        body = self.layout.body
        role = self._role_for(block)
        lines = role.breaker.wrap(block.runs, body.width)
        height = len(lines) * role.line_height

        if height > body.height:
            logger.debug("Splitting %d-line paragraph across pages", len(lines))
        else:
            self._ensure_room(flow, height, title, subtitle)

        for index, line in enumerate(lines):
            if flow.cursor + role.line_height > body.bottom and not flow.fresh:
                self._new_page(flow, title, subtitle)
            self.draw_line(
                flow.canvas, line, role, body.x, body.width, flow.cursor, block.alignment, index == len(lines) - 1
            )
            flow.cursor += role.line_height
            flow.fresh = False

    # ------------------------------------------------------------------
    # Images

    def _place_image(self, flow: _Flow, block: ImageBlock, title: str, subtitle: Optional[str]) -> None:
        body = self.layout.body
        try:
            image = parse_data_url(block.src)
            pixel_width, pixel_height = image.size
        except MediaError as exc:
            logger.warning("Skipping image: %s", exc)
            return
        if pixel_width <= 0 or pixel_height <= 0:
            logger.warning("Skipping zero-size image")
            return

        scale = min(1.0, body.width / pixel_width)
        if pixel_height * scale > body.height:
            scale = body.height / pixel_height
        width = pixel_width * scale
        height = pixel_height * scale

        self._ensure_room(flow, height, title, subtitle)
        x = self.alignment.calculate_x(body.x, body.width, width, block.alignment)
        flow.canvas.draw_image(image.data, x, flow.cursor, width, height)
        flow.cursor += height + IMAGE_GAP
        flow.fresh = False

    # ------------------------------------------------------------------
    # Tables

    def measure_table(self, block: TableBlock) -> TableMetrics:
        return self.tables.measure(block, self.layout.body.x, self.layout.body.width)

    def _place_table(self, flow: _Flow, block: TableBlock, title: str, subtitle: Optional[str]) -> None:
        body = self.layout.body
        metrics = self.measure_table(block)
        if metrics.height > body.height:
            logger.warning(
                "Table of %d rows is taller than the body region (%.1f > %.1f)",
                len(block.rows),
                metrics.height,
                body.height,
            )
        self._ensure_room(flow, metrics.height, title, subtitle)

        top = flow.cursor
        padding = self.tables.padding
        role = self.body_role
        for placed in metrics.cells:
            cell_top = top + metrics.row_offset(placed.row)
            flow.canvas.draw_rect(
                placed.x, cell_top, placed.width, metrics.cell_height(placed), stroke=BORDER_COLOR
            )
            line_top = cell_top + padding
            inner_width = max(0.0, placed.width - 2 * padding)
            for paragraph, lines in zip(placed.cell.paragraphs, placed.paragraphs):
                for index, line in enumerate(lines):
                    self.draw_line(
                        flow.canvas,
                        line,
                        role,
                        placed.x + padding,
                        inner_width,
                        line_top,
                        paragraph.alignment,
                        index == len(lines) - 1,
                    )
                    line_top += role.line_height

        flow.cursor = top + metrics.height + TABLE_GAP
        flow.fresh = False


def render_pdf(
    document: RichDocument,
    template_bytes: bytes,
    title: str,
    subtitle: Optional[str],
    layout: PdfLayout,
) -> bytes:
    """
    Render a rich document over a template PDF.

    Args:
        document: Content to render
        template_bytes: Template PDF (page 1 background, page 2 for overflow pages)
        title: Document title
        subtitle: Optional subtitle
        layout: Region geometry and styles

    Returns:
        PDF bytes
    """
    template = PdfTemplate.from_bytes(template_bytes)
    flattener = BlockFlattener(NumberingNormalizer(), AlignmentDefaults.uniform(layout.body_align))
    blocks = flattener.flatten(document)
    compiler = PdfCompiler(layout, template.page_sizes, template.overflow_index)
    pages = compiler.compile(blocks, title, subtitle)
    return template.assemble(pages)


def render_plain_pdf(
    content: str,
    template_bytes: bytes,
    title: str,
    subtitle: Optional[str],
    layout: PdfLayout,
    labels: Optional[Sequence[str]] = None,
) -> bytes:
    """
    Render plain text lines, page 1 being a cover.

    Lines labelled ``heading`` are drawn bold; ``labels`` normally come from
    :func:`templify.services.heading_classifier.resolve_labels`.
    """
    template = PdfTemplate.from_bytes(template_bytes)
    blocks = plain_text_blocks(content, labels, layout.body_align)
    compiler = PdfCompiler(layout, template.page_sizes, template.overflow_index, body_on_first_page=False)
    pages = compiler.compile(blocks, title, subtitle)
    return template.assemble(pages)
