"""
TextAlignmentEngine - horizontal placement of wrapped lines inside a box.

Handles:
- left: flush with the box's left edge (default)
- center: centred in the box
- right: flush with the box's right edge
- justify: interior whitespace stretched to fill the box
"""

from __future__ import annotations

import re
from typing import List, Sequence

from ..models.document import Run

_SEGMENT_PATTERN = re.compile(r"\s+|\S+")


class TextAlignmentEngine:
    """Computes x offsets and justification gaps for a line."""

    @staticmethod
    def calculate_x(box_x: float, box_width: float, text_width: float, alignment: str = "left") -> float:
        """
        Calculate the starting x of a line.

        Args:
            box_x: Left edge of the text box
            box_width: Width of the text box
            text_width: Measured width of the line
            alignment: "left", "center", "right" or "justify"

        Returns:
            X position for the line
        """
        alignment = alignment.lower() if alignment else "left"
        if alignment == "center":
            return max(box_x, box_x + (box_width - text_width) / 2)
        if alignment == "right":
            return max(box_x, box_x + box_width - text_width)
        return box_x

    @staticmethod
    def justify_gaps(runs: Sequence[Run], word_width: float, box_width: float) -> List[float]:
        """
        Width assigned to each whitespace run of a justified line.

        Leftover width (``box_width - word_width``) is spread over the interior
        whitespace runs in proportion to their character counts. Leading and
        trailing whitespace keeps no width.

        Args:
            runs: Line runs split so that whitespace and words are separate runs
            word_width: Sum of the widths of the non-whitespace runs
            box_width: Width to fill

        Returns:
            One gap width per run; zero for non-whitespace runs
        """
        gaps = [0.0] * len(runs)
        word_indexes = [i for i, run in enumerate(runs) if run.text and not run.text.isspace()]
        if len(word_indexes) < 2:
            return gaps
        first, last = word_indexes[0], word_indexes[-1]
        interior = [i for i in range(first + 1, last) if runs[i].text.isspace()]
        total_chars = sum(len(runs[i].text) for i in interior)
        leftover = box_width - word_width
        if not interior or total_chars == 0 or leftover <= 0:
            return gaps
        for i in interior:
            gaps[i] = leftover * len(runs[i].text) / total_chars
        return gaps

    @staticmethod
    def split_segments(runs: Sequence[Run]) -> List[Run]:
        """Split runs into alternating whitespace and word segments, keeping styles."""
        segments: List[Run] = []
        for run in runs:
            for match in _SEGMENT_PATTERN.finditer(run.text):
                segments.append(run.styled_like(match.group(0)))
        return segments
