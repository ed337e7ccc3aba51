"""
Flattening of a :class:`RichDocument` into renderable blocks.

Both back ends consume the same block sequence; they differ only in the
heading numberer and alignment defaults they hand to :class:`BlockFlattener`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Sequence, Union

from ..models.blocks import Block, ImageBlock, ParagraphBlock, TableBlock, TableCellBlock
from ..models.document import (
    BulletList,
    Heading,
    Image,
    OrderedList,
    Paragraph,
    RichDocument,
    Run,
    Table,
    plain_text,
)
from .numbering import HeadingNumberer

logger = logging.getLogger(__name__)

BULLET_MARKER = "• "


@dataclass(frozen=True, slots=True)
class AlignmentDefaults:
    """Alignment applied per block kind when the author set none."""

    paragraph: str = "justify"
    heading: str = "justify"
    bullet: str = "justify"
    ordered: str = "justify"
    table: str = "justify"
    image: str = "center"

    @classmethod
    def uniform(cls, alignment: str) -> "AlignmentDefaults":
        return cls(
            paragraph=alignment,
            heading=alignment,
            bullet=alignment,
            ordered=alignment,
            table=alignment,
        )


def _list_alignment(alignment: str) -> str:
    return "left" if alignment == "justify" else alignment


class BlockFlattener:
    """
    Convert a rich document into an ordered list of blocks.

    Args:
        numberer: Per-render heading numberer (fresh instance per render)
        alignment: Alignment defaults per block kind
        keep_blank_paragraphs: Emit empty paragraphs as blank blocks instead of dropping them
    """

    def __init__(
        self,
        numberer: HeadingNumberer,
        alignment: Optional[AlignmentDefaults] = None,
        keep_blank_paragraphs: bool = True,
    ) -> None:
        self.numberer = numberer
        self.alignment = alignment or AlignmentDefaults()
        self.keep_blank_paragraphs = keep_blank_paragraphs

    def flatten(self, document: RichDocument) -> List[Block]:
        blocks: List[Block] = []
        for node in document.blocks:
            if isinstance(node, Heading):
                blocks.append(self._heading(node))
            elif isinstance(node, Paragraph):
                block = self._paragraph(node)
                if block is not None:
                    blocks.append(block)
            elif isinstance(node, (BulletList, OrderedList)):
                blocks.extend(self._list(node))
            elif isinstance(node, Table):
                table = self._table(node)
                if table is not None:
                    blocks.append(table)
            elif isinstance(node, Image):
                if node.src:
                    blocks.append(ImageBlock(src=node.src, alignment=self.alignment.image))
                else:
                    logger.debug("Skipping image without source")
            else:
                logger.debug("Ignoring unsupported node %s", type(node).__name__)
        logger.debug("Flattened %d nodes into %d blocks", len(document.blocks), len(blocks))
        return blocks

    def _paragraph(self, node: Paragraph) -> Optional[ParagraphBlock]:
        result = self.numberer.normalize(plain_text(node))
        if result.is_heading:
            return ParagraphBlock(
                runs=[Run(result.text, bold=True)],
                alignment=self.alignment.heading,
                is_heading=True,
                heading_level=result.level,
                kind="heading",
            )
        block = ParagraphBlock(
            runs=[replace(run) for run in node.runs],
            alignment=node.alignment or self.alignment.paragraph,
        )
        if block.is_blank:
            if not self.keep_blank_paragraphs:
                return None
            block.runs = []
        return block

    def _heading(self, node: Heading) -> ParagraphBlock:
        level = min(6, max(1, node.level))
        result = self.numberer.normalize(plain_text(node))
        if result.is_heading:
            runs = [Run(result.text, bold=True)]
        else:
            runs = [Run(run.text, bold=True, italic=run.italic, underline=run.underline) for run in node.runs]
        return ParagraphBlock(
            runs=runs,
            alignment=self.alignment.heading,
            is_heading=True,
            heading_level=level,
            kind="heading",
        )

    def _list(self, node: Union[BulletList, OrderedList]) -> List[ParagraphBlock]:
        ordered = isinstance(node, OrderedList)
        kind = "ordered" if ordered else "bullet"
        alignment = _list_alignment(self.alignment.ordered if ordered else self.alignment.bullet)
        counter = node.start if ordered else 1
        blocks: List[ParagraphBlock] = []
        for paragraph in _list_paragraphs(node):
            if not plain_text(paragraph).strip():
                continue
            marker = f"{counter}. " if ordered else BULLET_MARKER
            counter += 1
            blocks.append(
                ParagraphBlock(
                    runs=[Run(marker)] + [replace(run) for run in paragraph.runs],
                    alignment=alignment,
                    kind=kind,
                )
            )
        return blocks

    def _table(self, node: Table) -> Optional[TableBlock]:
        if not node.rows:
            return None
        rows: List[List[TableCellBlock]] = []
        for row in node.rows:
            cells = []
            for cell in row.cells:
                paragraphs = [
                    ParagraphBlock(
                        runs=[replace(run) for run in paragraph.runs],
                        alignment=self.alignment.table,
                        kind="table",
                    )
                    for paragraph in cell.paragraphs
                ]
                if not paragraphs:
                    paragraphs = [ParagraphBlock(runs=[], alignment=self.alignment.table, kind="table")]
                cells.append(TableCellBlock(paragraphs=paragraphs, colspan=cell.colspan, rowspan=cell.rowspan))
            rows.append(cells)
        return TableBlock(rows=rows)


def _list_paragraphs(node: Union[BulletList, OrderedList]) -> Iterator[Paragraph]:
    """Leaf paragraphs of a list in reading order, nested lists included."""
    for item in node.items:
        for child in item.children:
            if isinstance(child, Paragraph):
                yield child
            else:
                yield from _list_paragraphs(child)


def plain_text_blocks(
    content: str,
    labels: Optional[Sequence[str]] = None,
    alignment: str = "left",
) -> List[ParagraphBlock]:
    """
    Blocks for the single-style-run path.

    Each line of ``content`` becomes one paragraph; lines labelled ``heading``
    are bold, blank lines become empty paragraphs.
    """
    blocks: List[ParagraphBlock] = []
    for index, raw_line in enumerate(content.split("\n")):
        text = raw_line.strip()
        label = labels[index] if labels is not None and index < len(labels) else "body"
        if not text:
            blocks.append(ParagraphBlock(runs=[], alignment=alignment, kind="blank"))
        elif label == "heading":
            blocks.append(ParagraphBlock(runs=[Run(text, bold=True)], alignment=alignment, is_heading=True, kind="heading"))
        else:
            blocks.append(ParagraphBlock(runs=[Run(text)], alignment=alignment))
    return blocks
