"""
Table geometry: grid placement, column widths and rowspan-aware row heights.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Set, Tuple

from ..engine.line_breaker import WrappedLine
from ..models.blocks import TableBlock, TableCellBlock
from ..models.document import Run

CELL_PADDING = 4.0
BORDER_COLOR = "#DDDDDD"

WrapFunction = Callable[[Sequence[Run], float], List[WrappedLine]]


@dataclass(slots=True)
class PlacedCell:
    """A cell positioned on the table grid with its wrapped paragraphs."""

    cell: TableCellBlock
    row: int
    column: int
    rowspan: int
    x: float
    width: float
    content_height: float
    paragraphs: List[List[WrappedLine]] = field(default_factory=list)


@dataclass(slots=True)
class TableMetrics:
    column_count: int
    column_width: float
    row_heights: List[float]
    cells: List[PlacedCell]

    @property
    def height(self) -> float:
        return sum(self.row_heights)

    def row_offset(self, row: int) -> float:
        return sum(self.row_heights[:row])

    def cell_height(self, placed: PlacedCell) -> float:
        return sum(self.row_heights[placed.row:placed.row + placed.rowspan])


class TableLayout:
    """
    Computes table geometry for a body region.

    Column width is the body width divided by the table's column count (the
    largest sum of colspans over its rows). Each cell's wrapped height is
    shared evenly between the rows it spans and every row takes the largest
    share it receives, never less than one line plus padding.

    Args:
        wrap: Line breaking function used for cell paragraphs
        line_height: Height of one text line
        padding: Inner cell padding on every side
    """

    def __init__(self, wrap: WrapFunction, line_height: float, padding: float = CELL_PADDING) -> None:
        self.wrap = wrap
        self.line_height = line_height
        self.padding = padding

    @property
    def row_floor(self) -> float:
        return self.line_height + 2 * self.padding

    @staticmethod
    def place(table: TableBlock) -> List[Tuple[TableCellBlock, int, int, int]]:
        """
        Assign grid positions honouring cells reserved by rowspans above.

        Returns:
            ``(cell, row, column, rowspan)`` tuples; rowspans are clipped to the table
        """
        occupied: Set[Tuple[int, int]] = set()
        placements: List[Tuple[TableCellBlock, int, int, int]] = []
        row_count = len(table.rows)
        for row_index, row in enumerate(table.rows):
            column = 0
            for cell in row:
                while (row_index, column) in occupied:
                    column += 1
                rowspan = min(cell.rowspan, row_count - row_index)
                for r in range(row_index, row_index + rowspan):
                    for c in range(column, column + cell.colspan):
                        occupied.add((r, c))
                placements.append((cell, row_index, column, rowspan))
                column += cell.colspan
        return placements

    def measure(self, table: TableBlock, x: float, width: float) -> TableMetrics:
        placements = self.place(table)
        column_count = max(
            [table.column_count] + [column + cell.colspan for cell, _, column, _ in placements]
        )
        column_count = max(1, column_count)
        column_width = width / column_count
        row_heights = [self.row_floor] * len(table.rows)
        cells: List[PlacedCell] = []
        shares: Dict[int, float] = {}

        for cell, row, column, rowspan in placements:
            cell_width = column_width * cell.colspan
            inner = max(0.0, cell_width - 2 * self.padding)
            paragraphs = [self.wrap(paragraph.runs, inner) for paragraph in cell.paragraphs]
            line_count = sum(len(lines) for lines in paragraphs)
            content_height = max(1, line_count) * self.line_height + 2 * self.padding
            share = content_height / rowspan
            for r in range(row, row + rowspan):
                shares[r] = max(shares.get(r, 0.0), share)
            cells.append(
                PlacedCell(
                    cell=cell,
                    row=row,
                    column=column,
                    rowspan=rowspan,
                    x=x + column * column_width,
                    width=cell_width,
                    content_height=content_height,
                    paragraphs=paragraphs,
                )
            )

        for row, share in shares.items():
            row_heights[row] = max(row_heights[row], share)
        return TableMetrics(column_count=column_count, column_width=column_width, row_heights=row_heights, cells=cells)
