"""
Font metrics for layout.

Widths come from ReportLab's AFM tables for the standard-14 fonts, so the
measurements used for pagination are exactly the ones the PDF canvas uses
when drawing.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Protocol, Tuple

from reportlab.pdfbase import pdfmetrics

from ..exceptions import LayoutError

STANDARD_FONT_VARIANTS: Dict[str, Dict[Tuple[bool, bool], str]] = {
    "Helvetica": {
        (False, False): "Helvetica",
        (True, False): "Helvetica-Bold",
        (False, True): "Helvetica-Oblique",
        (True, True): "Helvetica-BoldOblique",
    },
    "Times-Roman": {
        (False, False): "Times-Roman",
        (True, False): "Times-Bold",
        (False, True): "Times-Italic",
        (True, True): "Times-BoldItalic",
    },
    "Courier": {
        (False, False): "Courier",
        (True, False): "Courier-Bold",
        (False, True): "Courier-Oblique",
        (True, True): "Courier-BoldOblique",
    },
}


def resolve_font_variant(base: str, bold: bool = False, italic: bool = False) -> str:
    """
    Return the standard-14 font name for ``base`` with the given weight and slant.

    Args:
        base: Family name (``Helvetica``, ``Times-Roman`` or ``Courier``)
        bold: Bold weight
        italic: Italic/oblique slant

    Returns:
        ReportLab font name, e.g. ``Times-BoldItalic``
    """
    try:
        variants = STANDARD_FONT_VARIANTS[base]
    except KeyError:
        raise LayoutError("Unsupported font", base) from None
    return variants[(bool(bold), bool(italic))]


class FontMetrics(Protocol):
    """Width provider for one concrete font."""

    font_name: str

    def width_of(self, text: str, size: float) -> float: ...


@lru_cache(maxsize=4096)
def _string_width(text: str, font_name: str, size: float) -> float:
    return pdfmetrics.stringWidth(text, font_name, size)


@dataclass(frozen=True, slots=True)
class ReportLabFontMetrics:
    font_name: str

    def width_of(self, text: str, size: float) -> float:
        if not text:
            return 0.0
        return _string_width(text, self.font_name, float(size))


@dataclass(frozen=True, slots=True)
class FontFamily:
    """A font family whose variant is chosen per run style."""

    base: str = "Helvetica"

    def __post_init__(self) -> None:
        if self.base not in STANDARD_FONT_VARIANTS:
            raise LayoutError("Unsupported font", self.base)

    def metrics(self, bold: bool = False, italic: bool = False) -> FontMetrics:
        return ReportLabFontMetrics(resolve_font_variant(self.base, bold, italic))

    def font_name(self, bold: bool = False, italic: bool = False) -> str:
        return resolve_font_variant(self.base, bold, italic)
