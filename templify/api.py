"""
High-level export API for Templify.

Main entry point for applications: each export call fetches the template,
renders a fresh document and returns the bytes with a download filename.
It is the single error boundary of a render; every failure propagates as a
:class:`~templify.exceptions.TemplifyError` subclass and no partial output is
returned.

Example:
    >>> from templify import api
    >>> from templify.config import get_template
    >>> from templify.models.tiptap import plain_text_to_document
    >>>
    >>> template = get_template("ihm-portrait")
    >>> from pathlib import Path
    >>> result = api.export_pdf(template, plain_text_to_document("1. Intro\\nHello"), "Annual Report")
    >>> Path(result.filename).write_bytes(result.data)
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from .config.brands import Template, get_brand
from .config.layout import PdfLayout, default_layout
from .config.settings import Settings
from .exceptions import TemplateError
from .export.docx_exporter import DOCX_MIME, WordPackageExporter
from .models.document import RichDocument
from .pdf.compiler import render_pdf, render_plain_pdf
from .services.heading_classifier import HeadingClassifier, resolve_labels
from .services.template_source import (
    AsyncHttpTemplateSource,
    FileTemplateSource,
    HttpTemplateSource,
    TemplateSource,
)

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"

__all__ = [
    "ExportResult",
    "build_filename",
    "export_pdf",
    "export_pdf_async",
    "export_plain_pdf",
    "export_plain_pdf_async",
    "export_word",
    "export_word_async",
]


@dataclass(frozen=True, slots=True)
class ExportResult:
    data: bytes
    filename: str
    mime_type: str


def build_filename(brand_code: str, title: str, extension: str, today: Optional[date] = None) -> str:
    """
    ``<Brand>_<Title_with_underscores>_<YYYY-MM-DD>.<ext>``.

    Args:
        brand_code: Brand code, e.g. ``IHM``
        title: Document title; whitespace runs become underscores
        extension: File extension without the dot
        today: Date to stamp (defaults to today)
    """
    brand = get_brand(brand_code)
    stamp = (today or date.today()).isoformat()
    safe_title = re.sub(r'\s+', '_', title)
    return f"{brand.name}_{safe_title}_{stamp}.{extension}"


def default_source(settings: Optional[Settings] = None) -> TemplateSource:
    settings = settings or Settings.from_env()
    if settings.template_dir is not None:
        return FileTemplateSource(settings.template_dir)
    return HttpTemplateSource(settings.template_base_url, settings.http_timeout)


def default_async_source(settings: Optional[Settings] = None) -> AsyncHttpTemplateSource:
    settings = settings or Settings.from_env()
    return AsyncHttpTemplateSource(settings.template_base_url, settings.http_timeout)


def _docx_url(template: Template) -> str:
    if not template.docx_url:
        raise TemplateError("Template has no word package", template.id)
    return template.docx_url


def _pdf_result(template: Template, title: str, data: bytes) -> ExportResult:
    result = ExportResult(data, build_filename(template.brand, title, "pdf"), PDF_MIME)
    logger.info("Exported %s (%d bytes)", result.filename, len(data))
    return result


def _word_result(template: Template, title: str, data: bytes) -> ExportResult:
    result = ExportResult(data, build_filename(template.brand, title, "docx"), DOCX_MIME)
    logger.info("Exported %s (%d bytes)", result.filename, len(data))
    return result


def _plain_labels(content: str, classifier: Optional[HeadingClassifier]) -> Sequence[str]:
    return resolve_labels(content.split("\n"), classifier)


def export_pdf(
    template: Template,
    document: RichDocument,
    title: str,
    subtitle: Optional[str] = None,
    layout: Optional[PdfLayout] = None,
    source: Optional[TemplateSource] = None,
) -> ExportResult:
    """
    Render a rich document to PDF over the template's pages.

    Args:
        template: Catalogue template
        document: Content to render
        title: Document title
        subtitle: Optional subtitle
        layout: Layout override (defaults to the template orientation's defaults)
        source: Template byte provider (defaults to one built from the environment)

    Returns:
        ExportResult with PDF bytes
    """
    layout = layout or default_layout(template.orientation)
    template_bytes = (source or default_source()).fetch(template.pdf_url)
    return _pdf_result(template, title, render_pdf(document, template_bytes, title, subtitle, layout))


def export_plain_pdf(
    template: Template,
    content: str,
    title: str,
    subtitle: Optional[str] = None,
    layout: Optional[PdfLayout] = None,
    source: Optional[TemplateSource] = None,
    classifier: Optional[HeadingClassifier] = None,
) -> ExportResult:
    """Render plain text to PDF; headings are labelled by ``classifier`` or the local heuristic."""
    layout = layout or default_layout(template.orientation)
    template_bytes = (source or default_source()).fetch(template.pdf_url)
    labels = _plain_labels(content, classifier)
    return _pdf_result(template, title, render_plain_pdf(content, template_bytes, title, subtitle, layout, labels))


def export_word(
    template: Template,
    document: RichDocument,
    title: str,
    subtitle: Optional[str] = None,
    layout: Optional[PdfLayout] = None,
    source: Optional[TemplateSource] = None,
) -> ExportResult:
    """Render a rich document into the template's word package."""
    url = _docx_url(template)
    template_bytes = (source or default_source()).fetch(url)
    exporter = WordPackageExporter(get_brand(template.brand), layout)
    return _word_result(template, title, exporter.build(document, template_bytes, title, subtitle))


async def export_pdf_async(
    template: Template,
    document: RichDocument,
    title: str,
    subtitle: Optional[str] = None,
    layout: Optional[PdfLayout] = None,
    source: Optional[AsyncHttpTemplateSource] = None,
) -> ExportResult:
    """Like :func:`export_pdf`; the fetch is awaited and rendering runs in a worker thread."""
    layout = layout or default_layout(template.orientation)
    template_bytes = await (source or default_async_source()).fetch(template.pdf_url)
    data = await asyncio.to_thread(render_pdf, document, template_bytes, title, subtitle, layout)
    return _pdf_result(template, title, data)


async def export_plain_pdf_async(
    template: Template,
    content: str,
    title: str,
    subtitle: Optional[str] = None,
    layout: Optional[PdfLayout] = None,
    source: Optional[AsyncHttpTemplateSource] = None,
    classifier: Optional[HeadingClassifier] = None,
) -> ExportResult:
    layout = layout or default_layout(template.orientation)
    template_bytes = await (source or default_async_source()).fetch(template.pdf_url)
    labels = await asyncio.to_thread(_plain_labels, content, classifier)
    data = await asyncio.to_thread(render_plain_pdf, content, template_bytes, title, subtitle, layout, labels)
    return _pdf_result(template, title, data)


async def export_word_async(
    template: Template,
    document: RichDocument,
    title: str,
    subtitle: Optional[str] = None,
    layout: Optional[PdfLayout] = None,
    source: Optional[AsyncHttpTemplateSource] = None,
) -> ExportResult:
    url = _docx_url(template)
    template_bytes = await (source or default_async_source()).fetch(url)
    exporter = WordPackageExporter(get_brand(template.brand), layout)
    data = await asyncio.to_thread(exporter.build, document, template_bytes, title, subtitle)
    return _word_result(template, title, data)


