"""
Templify - branded report rendering.

This package renders rich-text documents (headings, paragraphs, lists, tables,
images) onto branded template pages, producing:

- PDF output: content paginated over the template PDF's pages, with title
  front matter, running headers and page numbers
- Word output: content spliced into the template DOCX at its ``{{content}}``
  placeholder, with title and subtitle filled in

Main Components:
- models: rich-document tree, flattened blocks and editor JSON conversion
- engine: heading numbering, block flattening, measurement and line breaking
- pdf: pagination, drawing and template assembly
- export: WordprocessingML markup and package editing
- config: brands, templates, layout geometry and settings
- services: template byte providers and the optional AI services
- api: export entry points
"""

from .exceptions import (
    ClassificationError,
    ConfigError,
    GenerationError,
    LayoutError,
    MediaError,
    RenderingError,
    ServiceError,
    TemplateError,
    TemplateUnavailableError,
    TemplifyError,
)
from .version import __version__, __version_info__

__all__ = [
    "ClassificationError",
    "ConfigError",
    "GenerationError",
    "LayoutError",
    "MediaError",
    "RenderingError",
    "ServiceError",
    "TemplateError",
    "TemplateUnavailableError",
    "TemplifyError",
    "__version__",
    "__version_info__",
]
