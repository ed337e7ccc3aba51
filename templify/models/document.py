"""In-memory representation of an authored rich-text document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(slots=True)
class Run:
    """A span of text sharing one style combination."""

    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False

    @classmethod
    def hard_break(cls) -> "Run":
        """Forced line break inside a paragraph."""
        return cls(text="\n")

    @property
    def is_break(self) -> bool:
        return self.text == "\n"

    def styled_like(self, text: str) -> "Run":
        return Run(text=text, bold=self.bold, italic=self.italic, underline=self.underline)


@dataclass(slots=True)
class Paragraph:
    runs: List[Run] = field(default_factory=list)
    alignment: Optional[str] = None


@dataclass(slots=True)
class Heading:
    """Explicitly authored heading; ``level`` is clamped to 1-6 when rendered."""

    runs: List[Run] = field(default_factory=list)
    level: int = 1


@dataclass(slots=True)
class ListItem:
    """List entry holding paragraphs and nested lists in reading order."""

    children: List[Union[Paragraph, "BulletList", "OrderedList"]] = field(default_factory=list)


@dataclass(slots=True)
class BulletList:
    items: List[ListItem] = field(default_factory=list)


@dataclass(slots=True)
class OrderedList:
    items: List[ListItem] = field(default_factory=list)
    start: int = 1


@dataclass(slots=True)
class TableCell:
    paragraphs: List[Paragraph] = field(default_factory=list)
    colspan: int = 1
    rowspan: int = 1

    def __post_init__(self) -> None:
        self.colspan = max(1, int(self.colspan))
        self.rowspan = max(1, int(self.rowspan))


@dataclass(slots=True)
class TableRow:
    cells: List[TableCell] = field(default_factory=list)


@dataclass(slots=True)
class Table:
    rows: List[TableRow] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        """Maximum number of occupied columns (sum of colspans) across rows."""
        return max((sum(cell.colspan for cell in row.cells) for row in self.rows), default=0)


@dataclass(slots=True)
class Image:
    """Image referenced by a self-contained ``data:`` URL."""

    src: str


Node = Union[Paragraph, Heading, BulletList, OrderedList, Table, Image]


@dataclass(slots=True)
class RichDocument:
    """Root node; ``blocks`` are in reading order."""

    blocks: List[Node] = field(default_factory=list)


def plain_text(node: Union[Paragraph, Heading, TableCell, List[Run]]) -> str:
    """Concatenate the text of all runs, ignoring hard breaks."""
    if isinstance(node, TableCell):
        return "".join(plain_text(paragraph) for paragraph in node.paragraphs)
    runs = node if isinstance(node, list) else node.runs
    return "".join(run.text for run in runs if not run.is_break)
