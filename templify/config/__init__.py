"""Static brand metadata, layout geometry and runtime settings."""

from .brands import BRANDS, TEMPLATES, BrandConfig, Template, get_brand, get_template, templates_for_brand
from .layout import (
    ALIGNMENTS,
    ORIENTATIONS,
    LayoutStore,
    PdfLayout,
    TextBoxLayout,
    TextStyle,
    default_layout,
    merge_layout,
)
from .settings import Settings

__all__ = [
    "ALIGNMENTS",
    "BRANDS",
    "BrandConfig",
    "LayoutStore",
    "ORIENTATIONS",
    "PdfLayout",
    "Settings",
    "TEMPLATES",
    "Template",
    "TextBoxLayout",
    "TextStyle",
    "default_layout",
    "get_brand",
    "get_template",
    "merge_layout",
    "templates_for_brand",
]
