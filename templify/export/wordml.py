"""
WordprocessingML markup builders.

Everything here returns markup strings that are spliced into the template's
``word/document.xml``. All text passes through :func:`xml_escape`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..models.blocks import ParagraphBlock, TableBlock
from ..models.document import Run
from ..utils.units import points_to_half_points

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")
_WHITESPACE = re.compile(r"\s+")
_EDGE_WHITESPACE = re.compile(r"^\s|\s$")

BREAK_RUN = "<w:r><w:br/></w:r>"
TABLE_BORDER_COLOR = "DDDDDD"

_ALIGNMENT_VALUES = {"center": "center", "right": "right", "justify": "both"}


def xml_escape(value: str) -> str:
    """Strip control characters invalid in XML 1.0, then escape reserved characters."""
    sanitized = _CONTROL_CHARS.sub("", value)
    return (
        sanitized.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def normalize_export_text(value: str, trim_end: bool = True) -> str:
    """Replace non-breaking spaces and collapse whitespace runs to one space."""
    text = _WHITESPACE.sub(" ", value.replace("\u00a0", " "))
    return text.rstrip() if trim_end else text


@dataclass(frozen=True, slots=True)
class RunStyle:
    """Font, size (points) and colour (hex without ``#``) applied to runs."""

    font_name: Optional[str] = None
    font_size: Optional[float] = None
    color: Optional[str] = None


def run_properties_xml(
    bold: bool = False,
    italic: bool = False,
    underline: bool = False,
    style: Optional[RunStyle] = None,
) -> str:
    props: List[str] = []
    if bold:
        props.append("<w:b/>")
    if italic:
        props.append("<w:i/>")
    if underline:
        props.append('<w:u w:val="single"/>')
    if style is not None:
        if style.color:
            props.append(f'<w:color w:val="{style.color}"/>')
        if style.font_name:
            name = xml_escape(style.font_name)
            props.append(f'<w:rFonts w:ascii="{name}" w:hAnsi="{name}"/>')
        if style.font_size:
            size = points_to_half_points(style.font_size)
            props.append(f'<w:sz w:val="{size}"/>')
            props.append(f'<w:szCs w:val="{size}"/>')
    if not props:
        return ""
    return f"<w:rPr>{''.join(props)}</w:rPr>"


def text_run_xml(
    text: str,
    bold: bool = False,
    italic: bool = False,
    underline: bool = False,
    style: Optional[RunStyle] = None,
    preserve_space: bool = False,
) -> str:
    space = ' xml:space="preserve"' if preserve_space or _EDGE_WHITESPACE.search(text) else ""
    return f"<w:r>{run_properties_xml(bold, italic, underline, style)}<w:t{space}>{xml_escape(text)}</w:t></w:r>"


def alignment_xml(alignment: str) -> str:
    return f'<w:jc w:val="{_ALIGNMENT_VALUES.get(alignment, "left")}"/>'


def empty_paragraph_xml() -> str:
    return "<w:p><w:pPr/></w:p>"


def wrap_paragraph(content: str, alignment: str) -> str:
    return f"<w:p><w:pPr>{alignment_xml(alignment)}</w:pPr>{content}</w:p>"


def runs_xml(runs: Sequence[Run], style: Optional[RunStyle] = None, force_bold: bool = False) -> List[str]:
    """Markup for paragraph runs; only the paragraph's final text is right-trimmed."""
    last_text = max((i for i, run in enumerate(runs) if not run.is_break), default=-1)
    fragments: List[str] = []
    for index, run in enumerate(runs):
        if run.is_break:
            fragments.append(BREAK_RUN)
            continue
        text = normalize_export_text(run.text, trim_end=index == last_text)
        if not text:
            continue
        fragments.append(text_run_xml(text, force_bold or run.bold, run.italic, run.underline, style))
    if not fragments:
        fragments.append(text_run_xml(""))
    return fragments


def paragraph_xml(block: ParagraphBlock, style: Optional[RunStyle] = None, heading_style: Optional[RunStyle] = None) -> str:
    """
    Markup for one paragraph block.

    Headings get a ``Heading{level}`` paragraph style and the heading run
    style; other paragraphs use ``style``.
    """
    style_xml = ""
    run_style = style
    if block.is_heading:
        style_xml = f'<w:pStyle w:val="Heading{block.heading_level or 1}"/>'
        run_style = heading_style or style
    runs = runs_xml(block.runs, run_style, force_bold=block.is_heading)
    return f"<w:p><w:pPr>{style_xml}{alignment_xml(block.alignment)}</w:pPr>{''.join(runs)}</w:p>"


def _table_properties_xml() -> str:
    border = f'w:val="single" w:sz="4" w:space="0" w:color="{TABLE_BORDER_COLOR}"'
    edges = "".join(f"<w:{edge} {border}/>" for edge in ("top", "left", "bottom", "right", "insideH", "insideV"))
    return (
        '<w:tblPr><w:tblW w:type="pct" w:w="5000"/><w:tblLayout w:type="fixed"/>'
        f"<w:tblBorders>{edges}</w:tblBorders></w:tblPr>"
    )


def table_xml(block: TableBlock, style: Optional[RunStyle] = None) -> str:
    """
    Markup for a table with an equal-width fixed grid.

    Column spans become ``w:gridSpan``. Row spans have no counterpart here:
    every physical cell is emitted on its own row.
    """
    if not block.rows:
        return ""
    columns = block.column_count
    grid = ""
    if columns:
        grid = "<w:tblGrid>" + '<w:gridCol w:w="1"/>' * columns + "</w:tblGrid>"
    rows: List[str] = []
    for row in block.rows:
        cells: List[str] = []
        for cell in row:
            paragraphs = [paragraph_xml(paragraph, style) for paragraph in cell.paragraphs] or [empty_paragraph_xml()]
            span = f'<w:gridSpan w:val="{cell.colspan}"/>' if cell.colspan > 1 else ""
            cells.append(f'<w:tc><w:tcPr>{span}<w:vAlign w:val="top"/></w:tcPr>{"".join(paragraphs)}</w:tc>')
        rows.append(f"<w:tr>{''.join(cells)}</w:tr>")
    return f"<w:tbl>{_table_properties_xml()}{grid}{''.join(rows)}</w:tbl>"


def image_xml(rel_id: str, cx: int, cy: int, docpr_id: int, name: str) -> str:
    """Inline drawing referencing an image part by relationship id."""
    name = xml_escape(name)
    return (
        "<w:r><w:drawing>"
        '<wp:inline distT="0" distB="0" distL="0" distR="0">'
        f'<wp:extent cx="{cx}" cy="{cy}"/>'
        f'<wp:docPr id="{docpr_id}" name="{name}"/>'
        '<a:graphic xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main">'
        '<a:graphicData uri="http://schemas.openxmlformats.org/drawingml/2006/picture">'
        '<pic:pic xmlns:pic="http://schemas.openxmlformats.org/drawingml/2006/picture">'
        f'<pic:nvPicPr><pic:cNvPr id="0" name="{name}"/><pic:cNvPicPr/></pic:nvPicPr>'
        f'<pic:blipFill><a:blip r:embed="{rel_id}"/><a:stretch><a:fillRect/></a:stretch></pic:blipFill>'
        f'<pic:spPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="{cx}" cy="{cy}"/></a:xfrm>'
        '<a:prstGeom prst="rect"><a:avLst/></a:prstGeom></pic:spPr>'
        "</pic:pic></a:graphicData></a:graphic>"
        "</wp:inline></w:drawing></w:r>"
    )


class WordMarkupCanvas:
    """Accumulates block markup in document order."""

    def __init__(self, style: Optional[RunStyle] = None, heading_style: Optional[RunStyle] = None) -> None:
        self.style = style
        self.heading_style = heading_style
        self.fragments: List[str] = []

    def add_paragraph(self, block: ParagraphBlock) -> None:
        self.fragments.append(paragraph_xml(block, self.style, self.heading_style))

    def add_table(self, block: TableBlock) -> None:
        markup = table_xml(block, self.style)
        if markup:
            self.fragments.append(markup)
            self.fragments.append(empty_paragraph_xml())

    def add_drawing(self, drawing: str, alignment: str) -> None:
        self.fragments.append(wrap_paragraph(drawing, alignment))

    def markup(self) -> str:
        if not self.fragments:
            return empty_paragraph_xml()
        return "".join(self.fragments)
