"""
Word package exporter - splices rendered blocks into a branded DOCX template.

The template's ``{{content}}`` paragraph is replaced with markup generated from
the flattened document, ``{{title}}``/``{{subtitle}}`` markers are filled in
the body and the header parts, and embedded images are added as new media
parts with their relationships and content types.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..config.brands import BrandConfig
from ..config.layout import PdfLayout
from ..engine.flattener import AlignmentDefaults, BlockFlattener
from ..engine.numbering import WordHeadingNumberer
from ..exceptions import MediaError
from ..media.images import parse_data_url
from ..models.blocks import ImageBlock, ParagraphBlock, TableBlock
from ..models.document import RichDocument
from ..utils.colors import normalize_hex
from ..utils.units import px_to_emu
from .package import DocxPackage
from .placeholders import (
    apply_template_placeholders,
    build_runs_with_line_breaks,
    ensure_document_namespace,
    extract_title_color,
    replace_paragraph_containing_placeholder,
    replace_placeholder_runs,
)
from .wordml import RunStyle, WordMarkupCanvas, image_xml

logger = logging.getLogger(__name__)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PICTURE_NAMESPACE = "http://schemas.openxmlformats.org/drawingml/2006/picture"
CONTENT_PLACEHOLDER = "{{content}}"
MAX_IMAGE_WIDTH_PX = 520
DEFAULT_FONT = "Helvetica"
DEFAULT_FONT_SIZE = 11.0
DEFAULT_TEXT_COLOR = "111827"


class WordPackageExporter:
    """
    Builds a DOCX from a branded template.

    Args:
        brand: Brand whose title/heading colouring rules apply
        layout: Optional layout supplying body and heading fonts, sizes and colours
        alignment: Per-kind alignment defaults (justified text, centred images)
    """

    def __init__(
        self,
        brand: BrandConfig,
        layout: Optional[PdfLayout] = None,
        alignment: Optional[AlignmentDefaults] = None,
    ) -> None:
        self.brand = brand
        self.layout = layout
        self.alignment = alignment or AlignmentDefaults()

    def _styles(self, document_xml: str) -> Tuple[RunStyle, RunStyle]:
        layout = self.layout
        heading_color = self.brand.forced_heading_color or extract_title_color(document_xml) or self.brand.heading_color_fallback
        if layout is None:
            content = RunStyle(DEFAULT_FONT, DEFAULT_FONT_SIZE, DEFAULT_TEXT_COLOR)
            heading = RunStyle(DEFAULT_FONT, max(12.0, DEFAULT_FONT_SIZE + 2), heading_color)
            return content, heading
        content = RunStyle(layout.body_style.font_name, layout.body.font_size, normalize_hex(layout.body_style.color))
        heading_font = layout.heading_style.font_name if layout.heading_style else content.font_name
        if layout.heading_style is not None:
            heading_color = normalize_hex(layout.heading_style.color)
        heading_size = layout.heading_font_size or max(12.0, layout.body.font_size + 2)
        return content, RunStyle(heading_font, heading_size, heading_color)

    def _image(self, package: DocxPackage, block: ImageBlock) -> Optional[str]:
        try:
            image = parse_data_url(block.src)
            width, height = image.size
        except MediaError as exc:
            logger.warning("Skipping image: %s", exc)
            return None
        if width <= 0 or height <= 0:
            logger.warning("Skipping zero-size image")
            return None
        rel_id = package.add_image(image.data, image.extension, image.mime)
        scale = min(1.0, MAX_IMAGE_WIDTH_PX / width)
        width_px = max(1, round(width * scale))
        height_px = max(1, round(height * scale))
        docpr_id = package.allocate_docpr_id()
        return image_xml(rel_id, px_to_emu(width_px), px_to_emu(height_px), docpr_id, f"Picture {docpr_id}")

    def build(self, document: RichDocument, template_bytes: bytes, title: str, subtitle: Optional[str] = None) -> bytes:
        """
        Render ``document`` into a copy of the template package.

        Args:
            document: Content to export
            template_bytes: Template DOCX bytes (left untouched)
            title: Document title
            subtitle: Optional subtitle

        Returns:
            DOCX bytes

        Raises:
            TemplateError: If the template is malformed or lacks the content placeholder
        """
        subtitle = subtitle or ""
        package = DocxPackage.from_bytes(template_bytes)
        xml = package.document_xml
        content_style, heading_style = self._styles(xml)

        xml = ensure_document_namespace(xml, "pic", PICTURE_NAMESPACE)
        if self.brand.title_run_color:
            color = self.brand.title_run_color
            xml = replace_placeholder_runs(xml, "title", build_runs_with_line_breaks(title, color, self.brand.title_wrap_chars))
            xml = replace_placeholder_runs(
                xml, "subtitle", build_runs_with_line_breaks(subtitle, color, self.brand.subtitle_wrap_chars)
            )
        xml = apply_template_placeholders(xml, title, subtitle)

        flattener = BlockFlattener(WordHeadingNumberer(), self.alignment, keep_blank_paragraphs=False)
        canvas = WordMarkupCanvas(content_style, heading_style)
        for block in flattener.flatten(document):
            if isinstance(block, ParagraphBlock):
                canvas.add_paragraph(block)
            elif isinstance(block, TableBlock):
                if block.has_rowspan:
                    logger.warning("Row spans are not merged in the word package; cells are emitted unmerged")
                canvas.add_table(block)
            elif isinstance(block, ImageBlock):
                drawing = self._image(package, block)
                if drawing:
                    canvas.add_drawing(drawing, block.alignment)

        package.document_xml = replace_paragraph_containing_placeholder(xml, CONTENT_PLACEHOLDER, canvas.markup())
        for name in package.header_parts():
            package.write_text(name, apply_template_placeholders(package.read_text(name), title, subtitle))

        data = package.to_bytes()
        logger.info("Built word package for %s (%d bytes)", self.brand.code, len(data))
        return data
