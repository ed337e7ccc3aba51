"""Unit conversion helpers for page geometry and WordprocessingML drawings."""

from __future__ import annotations

import math

EMU_PER_PIXEL = 9525
POINTS_PER_INCH = 72


def px_to_emu(pixels: float) -> int:
    """Convert pixels to English Metric Units, never returning less than 1."""
    return max(1, int(math.floor(pixels * EMU_PER_PIXEL)))


def points_to_half_points(value: float) -> int:
    """Convert a font size in points to the half-point value used by ``w:sz``."""
    return max(1, int(round(value * 2)))
