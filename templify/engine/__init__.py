"""Layout core shared by the PDF and word-package back ends."""

from .flattener import AlignmentDefaults, BlockFlattener, plain_text_blocks
from .line_breaker import LineBreaker, WrappedLine, wrap_plain
from .numbering import (
    HeadingCounters,
    HeadingMatch,
    NumberedHeading,
    NumberingNormalizer,
    WordHeadingNumberer,
    detect_numbered_heading,
)
from .text_alignment import TextAlignmentEngine
from .text_metrics import FontFamily, FontMetrics, ReportLabFontMetrics, resolve_font_variant

__all__ = [
    "AlignmentDefaults",
    "BlockFlattener",
    "FontFamily",
    "FontMetrics",
    "HeadingCounters",
    "HeadingMatch",
    "LineBreaker",
    "NumberedHeading",
    "NumberingNormalizer",
    "ReportLabFontMetrics",
    "TextAlignmentEngine",
    "WordHeadingNumberer",
    "WrappedLine",
    "detect_numbered_heading",
    "plain_text_blocks",
    "resolve_font_variant",
    "wrap_plain",
]
