"""
Conversion between the rich-text editor's JSON document and :class:`RichDocument`.

The editor stores documents as nested ``{"type", "attrs", "content", "marks",
"text"}`` mappings. Unknown node types are ignored so that documents produced
by newer editor versions still render.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .document import (
    BulletList,
    Heading,
    Image,
    ListItem,
    Node,
    OrderedList,
    Paragraph,
    RichDocument,
    Run,
    Table,
    TableCell,
    TableRow,
    plain_text,
)

logger = logging.getLogger(__name__)

_ALIGNMENTS = {"left", "center", "right", "justify"}


def _children(node: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    return [child for child in node.get("content") or [] if isinstance(child, Mapping)]


def _attrs(node: Mapping[str, Any]) -> Mapping[str, Any]:
    return node.get("attrs") or {}


def _runs(node: Mapping[str, Any]) -> List[Run]:
    runs: List[Run] = []
    for child in _children(node):
        kind = child.get("type")
        if kind == "text":
            marks = {mark.get("type") for mark in child.get("marks") or [] if isinstance(mark, Mapping)}
            runs.append(
                Run(
                    text=child.get("text") or "",
                    bold="bold" in marks,
                    italic="italic" in marks,
                    underline="underline" in marks,
                )
            )
        elif kind == "hardBreak":
            runs.append(Run.hard_break())
    return runs


def _paragraph(node: Mapping[str, Any]) -> Paragraph:
    alignment = _attrs(node).get("textAlign")
    return Paragraph(runs=_runs(node), alignment=alignment if alignment in _ALIGNMENTS else None)


def _list_item(node: Mapping[str, Any]) -> ListItem:
    item = ListItem()
    for child in _children(node):
        kind = child.get("type")
        if kind in ("paragraph", "heading"):
            item.children.append(_paragraph(child))
        elif kind == "bulletList":
            item.children.append(_bullet_list(child))
        elif kind == "orderedList":
            item.children.append(_ordered_list(child))
    return item


def _bullet_list(node: Mapping[str, Any]) -> BulletList:
    return BulletList(items=[_list_item(child) for child in _children(node) if child.get("type") == "listItem"])


def _ordered_list(node: Mapping[str, Any]) -> OrderedList:
    start = _attrs(node).get("start") or 1
    return OrderedList(
        items=[_list_item(child) for child in _children(node) if child.get("type") == "listItem"],
        start=int(start),
    )


def _table(node: Mapping[str, Any]) -> Table:
    table = Table()
    for row_node in _children(node):
        if row_node.get("type") != "tableRow":
            continue
        row = TableRow()
        for cell_node in _children(row_node):
            if cell_node.get("type") not in ("tableCell", "tableHeader"):
                continue
            attrs = _attrs(cell_node)
            paragraphs = [
                _paragraph(child) for child in _children(cell_node) if child.get("type") in ("paragraph", "heading")
            ]
            row.cells.append(
                TableCell(
                    paragraphs=paragraphs,
                    colspan=attrs.get("colspan") or 1,
                    rowspan=attrs.get("rowspan") or 1,
                )
            )
        table.rows.append(row)
    return table


def _node(node: Mapping[str, Any]) -> Optional[Node]:
    kind = node.get("type")
    if kind == "paragraph":
        return _paragraph(node)
    if kind == "heading":
        return Heading(runs=_runs(node), level=int(_attrs(node).get("level") or 1))
    if kind == "bulletList":
        return _bullet_list(node)
    if kind == "orderedList":
        return _ordered_list(node)
    if kind == "table":
        return _table(node)
    if kind == "image":
        return Image(src=str(_attrs(node).get("src") or ""))
    logger.debug("Ignoring unsupported editor node type %r", kind)
    return None


def from_tiptap(data: Mapping[str, Any]) -> RichDocument:
    """
    Convert editor JSON into a :class:`RichDocument`.

    Args:
        data: Mapping with ``type == "doc"`` and a ``content`` list

    Returns:
        RichDocument with top-level blocks in reading order
    """
    document = RichDocument()
    for child in _children(data):
        node = _node(child)
        if node is not None:
            document.blocks.append(node)
    return document


def _text_nodes(runs: Iterable[Run]) -> List[Dict[str, Any]]:
    nodes: List[Dict[str, Any]] = []
    for run in runs:
        if run.is_break:
            nodes.append({"type": "hardBreak"})
            continue
        if not run.text:
            continue
        marks = [{"type": name} for name, on in (("bold", run.bold), ("italic", run.italic), ("underline", run.underline)) if on]
        entry: Dict[str, Any] = {"type": "text", "text": run.text}
        if marks:
            entry["marks"] = marks
        nodes.append(entry)
    return nodes


def _paragraph_json(paragraph: Paragraph) -> Dict[str, Any]:
    entry: Dict[str, Any] = {"type": "paragraph", "content": _text_nodes(paragraph.runs)}
    if paragraph.alignment:
        entry["attrs"] = {"textAlign": paragraph.alignment}
    return entry


def _list_json(node: Any) -> Dict[str, Any]:
    items = []
    for item in node.items:
        content = [_paragraph_json(child) if isinstance(child, Paragraph) else _list_json(child) for child in item.children]
        items.append({"type": "listItem", "content": content})
    if isinstance(node, OrderedList):
        return {"type": "orderedList", "attrs": {"start": node.start}, "content": items}
    return {"type": "bulletList", "content": items}


def to_tiptap(document: RichDocument) -> Dict[str, Any]:
    """Convert a :class:`RichDocument` back into editor JSON."""
    content: List[Dict[str, Any]] = []
    for block in document.blocks:
        if isinstance(block, Paragraph):
            content.append(_paragraph_json(block))
        elif isinstance(block, Heading):
            content.append({"type": "heading", "attrs": {"level": block.level}, "content": _text_nodes(block.runs)})
        elif isinstance(block, (BulletList, OrderedList)):
            content.append(_list_json(block))
        elif isinstance(block, Image):
            content.append({"type": "image", "attrs": {"src": block.src}})
        elif isinstance(block, Table):
            rows = []
            for row in block.rows:
                cells = [
                    {
                        "type": "tableCell",
                        "attrs": {"colspan": cell.colspan, "rowspan": cell.rowspan},
                        "content": [_paragraph_json(p) for p in cell.paragraphs],
                    }
                    for cell in row.cells
                ]
                rows.append({"type": "tableRow", "content": cells})
            content.append({"type": "table", "content": rows})
    return {"type": "doc", "content": content}


def plain_text_to_document(text: str) -> RichDocument:
    """One paragraph per line; empty lines become empty paragraphs."""
    return RichDocument(blocks=[Paragraph(runs=[Run(line)] if line else []) for line in text.split("\n")])


def document_to_plain_text(document: RichDocument) -> str:
    """Paragraph and heading text one per line, with ``[image]``/``[table]`` markers."""
    lines: List[str] = []
    for block in document.blocks:
        if isinstance(block, (Paragraph, Heading)):
            lines.append(plain_text(block))
        elif isinstance(block, Image):
            lines.append("[image]")
        elif isinstance(block, Table):
            lines.append("[table]")
    return "\n".join(lines)


def extract_paragraph_texts(document: RichDocument) -> List[str]:
    """
    Lines submitted to the heading classifier.

    Table rows are flattened to their cell texts joined by ``" | "``; images
    contribute an empty line so labels stay aligned with the rendered blocks.
    """
    lines: List[str] = []
    for block in document.blocks:
        if isinstance(block, (Paragraph, Heading)):
            lines.append(plain_text(block))
        elif isinstance(block, Table):
            for row in block.rows:
                lines.append(" | ".join(plain_text(cell) for cell in row.cells))
        elif isinstance(block, Image):
            lines.append("")
    return lines


def is_document_empty(document: RichDocument) -> bool:
    """True when the document holds nothing but blank paragraphs."""
    return all(isinstance(block, Paragraph) and not plain_text(block).strip() for block in document.blocks)
