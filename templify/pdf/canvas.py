"""
Page canvases.

Layout code draws through the :class:`PageCanvas` capability set using
top-left page coordinates. :class:`RecordingCanvas` captures the operations so
pages can be inspected (and re-numbered) before anything is rendered;
:class:`ReportLabPageCanvas` replays them onto a ReportLab canvas.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as rl_canvas

from ..utils.colors import hex_to_rgb

logger = logging.getLogger(__name__)


class PageCanvas(Protocol):
    """Drawing primitives in top-left page coordinates (points)."""

    def draw_text(
        self,
        x: float,
        baseline: float,
        text: str,
        font_name: str,
        font_size: float,
        color: str,
        underline: bool = False,
    ) -> None: ...

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: float = 0.5) -> None: ...

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        line_width: float = 0.5,
    ) -> None: ...

    def draw_image(self, data: bytes, x: float, y: float, width: float, height: float) -> None: ...


@dataclass(slots=True)
class DrawOp:
    """One recorded drawing operation."""

    kind: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    text: str = ""
    font_name: str = ""
    font_size: float = 0.0
    color: Optional[str] = None
    fill: Optional[str] = None
    stroke: Optional[str] = None
    line_width: float = 0.5
    underline: bool = False
    data: bytes = field(default=b"", repr=False)


class RecordingCanvas:
    """PageCanvas that stores operations for inspection and replay."""

    def __init__(self) -> None:
        self.ops: List[DrawOp] = []

    def draw_text(self, x, baseline, text, font_name, font_size, color, underline=False) -> None:
        self.ops.append(
            DrawOp("text", x, baseline, text=text, font_name=font_name, font_size=font_size, color=color, underline=underline)
        )

    def draw_line(self, x1, y1, x2, y2, color, width=0.5) -> None:
        self.ops.append(DrawOp("line", x1, y1, width=x2 - x1, height=y2 - y1, color=color, line_width=width))

    def draw_rect(self, x, y, width, height, fill=None, stroke=None, line_width=0.5) -> None:
        self.ops.append(DrawOp("rect", x, y, width=width, height=height, fill=fill, stroke=stroke, line_width=line_width))

    def draw_image(self, data, x, y, width, height) -> None:
        self.ops.append(DrawOp("image", x, y, width=width, height=height, data=data))

    def texts(self) -> List[str]:
        return [op.text for op in self.ops if op.kind == "text"]

    def of_kind(self, kind: str) -> List[DrawOp]:
        return [op for op in self.ops if op.kind == kind]

    def replay(self, target: PageCanvas) -> None:
        for op in self.ops:
            if op.kind == "text":
                target.draw_text(op.x, op.y, op.text, op.font_name, op.font_size, op.color or "#000000", op.underline)
            elif op.kind == "line":
                target.draw_line(op.x, op.y, op.x + op.width, op.y + op.height, op.color or "#000000", op.line_width)
            elif op.kind == "rect":
                target.draw_rect(op.x, op.y, op.width, op.height, op.fill, op.stroke, op.line_width)
            elif op.kind == "image":
                target.draw_image(op.data, op.x, op.y, op.width, op.height)


class ReportLabPageCanvas:
    """PageCanvas drawing onto a ReportLab canvas, flipping the y axis."""

    def __init__(self, canvas: rl_canvas.Canvas, page_height: float) -> None:
        self.canvas = canvas
        self.page_height = page_height

    def draw_text(self, x, baseline, text, font_name, font_size, color, underline=False) -> None:
        c = self.canvas
        y = self.page_height - baseline
        c.setFont(font_name, font_size)
        c.setFillColorRGB(*hex_to_rgb(color))
        c.drawString(x, y, text)
        if underline:
            width = c.stringWidth(text, font_name, font_size)
            c.setStrokeColorRGB(*hex_to_rgb(color))
            c.setLineWidth(max(0.5, font_size / 18.0))
            c.line(x, y - font_size * 0.12, x + width, y - font_size * 0.12)

    def draw_line(self, x1, y1, x2, y2, color, width=0.5) -> None:
        c = self.canvas
        c.setStrokeColorRGB(*hex_to_rgb(color))
        c.setLineWidth(width)
        c.line(x1, self.page_height - y1, x2, self.page_height - y2)

    def draw_rect(self, x, y, width, height, fill=None, stroke=None, line_width=0.5) -> None:
        c = self.canvas
        if fill:
            c.setFillColorRGB(*hex_to_rgb(fill))
        if stroke:
            c.setStrokeColorRGB(*hex_to_rgb(stroke))
            c.setLineWidth(line_width)
        c.rect(x, self.page_height - y - height, width, height, stroke=1 if stroke else 0, fill=1 if fill else 0)

    def draw_image(self, data, x, y, width, height) -> None:
        reader = ImageReader(io.BytesIO(data))
        self.canvas.drawImage(reader, x, self.page_height - y - height, width=width, height=height, mask="auto")
