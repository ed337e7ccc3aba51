"""Colour conversion helpers."""

from __future__ import annotations

from typing import Tuple

from ..exceptions import LayoutError


def normalize_hex(value: str) -> str:
    """Return ``value`` as an upper-case six digit hex string without ``#``."""
    token = (value or "").strip().lstrip("#")
    if len(token) == 3:
        token = "".join(ch * 2 for ch in token)
    if len(token) != 6 or any(ch not in "0123456789abcdefABCDEF" for ch in token):
        raise LayoutError("Invalid colour", value)
    return token.upper()


def hex_to_rgb(value: str) -> Tuple[float, float, float]:
    """
    Convert ``#RRGGBB`` (or ``#RGB``) to a unit-interval RGB triple.

    Args:
        value: Hex colour, with or without the leading ``#``

    Returns:
        Tuple of red, green and blue components in ``[0, 1]``
    """
    token = normalize_hex(value)
    return tuple(int(token[i:i + 2], 16) / 255.0 for i in (0, 2, 4))  # type: ignore[return-value]
