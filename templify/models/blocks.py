"""Flattened, renderable blocks shared by the PDF and word-package back ends."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .document import Run


@dataclass(slots=True)
class ParagraphBlock:
    """
    One paragraph of styled runs.

    ``kind`` records where the paragraph came from (``paragraph``, ``heading``,
    ``bullet``, ``ordered`` or ``table``); back ends use it for styling only.
    """

    runs: List[Run]
    alignment: str = "left"
    is_heading: bool = False
    heading_level: Optional[int] = None
    kind: str = "paragraph"

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs if not run.is_break)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass(slots=True)
class ImageBlock:
    src: str
    alignment: str = "center"


@dataclass(slots=True)
class TableCellBlock:
    paragraphs: List[ParagraphBlock] = field(default_factory=list)
    colspan: int = 1
    rowspan: int = 1


@dataclass(slots=True)
class TableBlock:
    rows: List[List[TableCellBlock]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return max((sum(cell.colspan for cell in row) for row in self.rows), default=0)

    @property
    def has_rowspan(self) -> bool:
        return any(cell.rowspan > 1 for row in self.rows for cell in row)


Block = Union[ParagraphBlock, ImageBlock, TableBlock]
