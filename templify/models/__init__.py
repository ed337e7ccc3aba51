"""Rich-document tree and the flattened block model."""

from .blocks import Block, ImageBlock, ParagraphBlock, TableBlock, TableCellBlock
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

__all__ = [
    "Block",
    "BulletList",
    "Heading",
    "Image",
    "ImageBlock",
    "ListItem",
    "Node",
    "OrderedList",
    "Paragraph",
    "ParagraphBlock",
    "RichDocument",
    "Run",
    "Table",
    "TableBlock",
    "TableCell",
    "TableCellBlock",
    "TableRow",
    "plain_text",
]
