"""Shared helpers: logging, unit conversion and colours."""

from .colors import hex_to_rgb, normalize_hex
from .logger import configure_logging, get_logger
from .units import EMU_PER_PIXEL, px_to_emu

__all__ = [
    "EMU_PER_PIXEL",
    "configure_logging",
    "get_logger",
    "hex_to_rgb",
    "normalize_hex",
    "px_to_emu",
]
