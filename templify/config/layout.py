"""
Layout geometry for the branded templates.

All regions are measured in PDF points from the top-left corner of the page.
A layout is owned by the caller and treated as immutable by the engines; the
UI persists per-orientation overrides which are merged over the defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..exceptions import ConfigError, LayoutError
from ..utils.colors import normalize_hex

logger = logging.getLogger(__name__)

ALIGNMENTS = ("left", "center", "right", "justify")
ORIENTATIONS = ("portrait", "landscape")
FONT_NAMES = ("Helvetica", "Times-Roman", "Courier")

_REGIONS = ("title", "subtitle", "header_title", "header_subtitle", "body", "page_number")
_STYLES = ("title_style", "subtitle_style", "body_style")


def _camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)


@dataclass(frozen=True, slots=True)
class TextBoxLayout:
    """Rectangular text region."""

    x: float
    y: float
    width: float
    height: float
    font_size: float
    line_height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise LayoutError("Text box dimensions must be non-negative", f"{self.width}x{self.height}")
        if self.font_size <= 0 or self.line_height <= 0:
            raise LayoutError("Font size and line height must be positive")

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TextBoxLayout":
        values = {}
        for name in ("x", "y", "width", "height", "font_size", "line_height"):
            raw = data.get(_camel(name), data.get(name))
            if raw is None:
                raise ConfigError("Missing text box field", name)
            values[name] = float(raw)
        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "fontSize": self.font_size,
            "lineHeight": self.line_height,
        }


@dataclass(frozen=True, slots=True)
class TextStyle:
    """Font family and colour of a region."""

    font_name: str = "Helvetica"
    color: str = "#111827"

    def __post_init__(self) -> None:
        if self.font_name not in FONT_NAMES:
            raise LayoutError("Unsupported font", self.font_name)
        normalize_hex(self.color)

    @property
    def hex(self) -> str:
        """Colour as six hex digits without ``#``."""
        return normalize_hex(self.color)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TextStyle":
        return cls(
            font_name=data.get("fontName", data.get("font_name", "Helvetica")),
            color=data.get("color", "#111827"),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"fontName": self.font_name, "color": self.color}


@dataclass(frozen=True, slots=True)
class PdfLayout:
    """Complete layout of a template orientation."""

    title: TextBoxLayout
    subtitle: TextBoxLayout
    header_title: TextBoxLayout
    header_subtitle: TextBoxLayout
    body: TextBoxLayout
    page_number: TextBoxLayout
    title_style: TextStyle = field(default_factory=lambda: TextStyle(color="#F04D23"))
    subtitle_style: TextStyle = field(default_factory=lambda: TextStyle(color="#414042"))
    body_style: TextStyle = field(default_factory=TextStyle)
    body_align: str = "left"
    heading_style: Optional[TextStyle] = None
    heading_font_size: Optional[float] = None

    def __post_init__(self) -> None:
        if self.body_align not in ALIGNMENTS:
            raise LayoutError("Unsupported body alignment", self.body_align)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PdfLayout":
        """Build a layout from the camelCase mapping persisted by the UI."""
        kwargs: Dict[str, Any] = {}
        for name in _REGIONS:
            raw = data.get(_camel(name), data.get(name))
            if raw is None:
                raise ConfigError("Missing layout region", name)
            kwargs[name] = TextBoxLayout.from_dict(raw)
        for name in _STYLES:
            raw = data.get(_camel(name), data.get(name))
            if raw is not None:
                kwargs[name] = TextStyle.from_dict(raw)
        heading_style = data.get("headingStyle", data.get("heading_style"))
        if heading_style is not None:
            kwargs["heading_style"] = TextStyle.from_dict(heading_style)
        heading_size = data.get("headingFontSize", data.get("heading_font_size"))
        if heading_size is not None:
            kwargs["heading_font_size"] = float(heading_size)
        kwargs["body_align"] = data.get("bodyAlign", data.get("body_align", "left"))
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for name in _REGIONS:
            payload[_camel(name)] = getattr(self, name).to_dict()
        for name in _STYLES:
            payload[_camel(name)] = getattr(self, name).to_dict()
        payload["bodyAlign"] = self.body_align
        if self.heading_style is not None:
            payload["headingStyle"] = self.heading_style.to_dict()
        if self.heading_font_size is not None:
            payload["headingFontSize"] = self.heading_font_size
        return payload

    def with_alignment(self, alignment: str) -> "PdfLayout":
        return replace(self, body_align=alignment)


def default_layout(orientation: str) -> PdfLayout:
    """
    Return the default layout for ``orientation``.

    Args:
        orientation: ``"portrait"`` (US Letter, 612x792) or ``"landscape"`` (792x612)

    Returns:
        Fresh PdfLayout instance
    """
    if orientation == "landscape":
        return PdfLayout(
            title=TextBoxLayout(38, 380, 648, 48, 36, 40),
            subtitle=TextBoxLayout(37, 424, 648, 32, 24, 28),
            header_title=TextBoxLayout(520, 42, 200, 18, 12, 14),
            header_subtitle=TextBoxLayout(520, 62, 200, 16, 10, 12),
            page_number=TextBoxLayout(0, 560, 792, 16, 10, 12),
            body=TextBoxLayout(72, 120, 648, 440, 11, 16),
        )
    if orientation == "portrait":
        return PdfLayout(
            title=TextBoxLayout(38, 250, 468, 48, 36, 40),
            subtitle=TextBoxLayout(37, 424, 468, 32, 24, 28),
            header_title=TextBoxLayout(360, 46, 200, 18, 12, 14),
            header_subtitle=TextBoxLayout(360, 64, 200, 16, 10, 12),
            page_number=TextBoxLayout(0, 760, 612, 16, 10, 12),
            body=TextBoxLayout(72, 100, 468, 600, 11, 16),
        )
    raise LayoutError("Unknown orientation", orientation)


def merge_layout(defaults: PdfLayout, partial: Mapping[str, Any]) -> PdfLayout:
    """
    Merge a partial (possibly stale) stored layout over ``defaults``.

    Each region and style is merged field by field so that layouts saved by
    older versions, which lack newer fields, still load.
    """
    merged = defaults.to_dict()
    for key, value in partial.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        elif value is not None:
            merged[key] = value
    return PdfLayout.from_dict(merged)


class LayoutStore:
    """Persists per-orientation layout overrides as JSON files."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, orientation: str) -> Path:
        if orientation not in ORIENTATIONS:
            raise LayoutError("Unknown orientation", orientation)
        return self.directory / f"layout-{orientation}.json"

    def load(self, orientation: str) -> PdfLayout:
        """Return the saved layout for ``orientation`` or the defaults."""
        defaults = default_layout(orientation)
        path = self._path(orientation)
        if not path.exists():
            return defaults
        try:
            stored = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError("Stored layout is not valid JSON", str(path)) from exc
        if not isinstance(stored, dict):
            raise ConfigError("Stored layout must be an object", str(path))
        return merge_layout(defaults, stored)

    def save(self, orientation: str, layout: PdfLayout) -> Path:
        path = self._path(orientation)
        self.directory.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(layout.to_dict(), indent=2), encoding="utf-8")
        logger.info("Saved %s layout to %s", orientation, path)
        return path

    def reset(self, orientation: str) -> None:
        path = self._path(orientation)
        if path.exists():
            path.unlink()
