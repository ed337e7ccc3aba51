"""
Pytest configuration for Templify
"""

import base64
import io
import logging
import sys
import zipfile
from pathlib import Path

import pytest
from PIL import Image
from reportlab.pdfgen import canvas

from templify.config.layout import default_layout
from templify.pdf.canvas import RecordingCanvas

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
WP_NS = "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing"

CONTENT_TYPES_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Default Extension="png" ContentType="image/png"/>'
    '<Override PartName="/word/document.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    '<Override PartName="/word/header1.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.header+xml"/>'
    "</Types>"
)

PACKAGE_RELS_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
    'Target="word/document.xml"/>'
    "</Relationships>"
)

DOCUMENT_RELS_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/styles" '
    'Target="styles.xml"/>'
    '<Relationship Id="rId3" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/image" '
    'Target="media/image3.png"/>'
    '<Relationship Id="rId7" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/header" '
    'Target="header1.xml"/>'
    "</Relationships>"
)

DOCUMENT_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    f'<w:document xmlns:w="{W_NS}" xmlns:r="{R_NS}" xmlns:wp="{WP_NS}"><w:body>'
    '<w:p><w:r><w:rPr><w:color w:val="f15c4e"/></w:rPr><w:t>{{title}}</w:t></w:r></w:p>'
    "<w:p><w:r><w:t>{{</w:t></w:r><w:r><w:t>subtitle}}</w:t></w:r></w:p>"
    '<w:p><w:pPr><w:pStyle w:val="Normal"/></w:pPr><w:r><w:t>{{content}}</w:t></w:r></w:p>'
    '<w:p><w:r><w:drawing><wp:inline><wp:docPr id="5" name="Logo"/></wp:inline></w:drawing></w:r></w:p>'
    "<w:sectPr/></w:body></w:document>"
)

HEADER_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    f'<w:hdr xmlns:w="{W_NS}"><w:p><w:r><w:t>{{{{title}}}}</w:t></w:r></w:p></w:hdr>'
)


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Temporary directory for tests."""
    return tmp_path


def build_template_pdf(pages: int = 2, size=(612, 792)) -> bytes:
    """Template PDF with a coloured band and a page label on every page."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=size)
    for index in range(pages):
        c.setFillColorRGB(0.94, 0.30, 0.14)
        c.rect(0, size[1] - 30, size[0], 30, stroke=0, fill=1)
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 8)
        c.drawString(20, 20, f"template page {index + 1}")
        c.showPage()
    c.save()
    return buffer.getvalue()


@pytest.fixture
def template_pdf_bytes() -> bytes:
    """Two-page US Letter template: cover and continuation page."""
    return build_template_pdf(2)


@pytest.fixture
def single_page_template_pdf_bytes() -> bytes:
    return build_template_pdf(1)


def build_template_docx(document_xml: str = DOCUMENT_XML) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", CONTENT_TYPES_XML)
        archive.writestr("_rels/.rels", PACKAGE_RELS_XML)
        archive.writestr("word/document.xml", document_xml)
        archive.writestr("word/_rels/document.xml.rels", DOCUMENT_RELS_XML)
        archive.writestr("word/header1.xml", HEADER_XML)
        archive.writestr("word/media/image3.png", b"\x89PNG placeholder")
    return buffer.getvalue()


@pytest.fixture
def template_docx_bytes() -> bytes:
    """
    Minimal template package.

    Holds a contiguous ``{{title}}`` preceded by a run colour, a split
    ``{{``/``subtitle}}`` marker, the ``{{content}}`` paragraph, an existing
    drawing (docPr id 5), media ``image3.png`` and relationships up to rId7.
    """
    return build_template_docx()


def make_png_data_url(width: int = 40, height: int = 20, color=(0, 150, 144)) -> str:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def make_truncated_png_data_url(width: int = 200, height: int = 100, cut: int = 40) -> str:
    """PNG whose header is intact but whose pixel data is cut short."""
    payload = base64.b64decode(make_png_data_url(width, height).split(",", 1)[1])
    return "data:image/png;base64," + base64.b64encode(payload[:-cut]).decode("ascii")


@pytest.fixture
def png_data_url() -> str:
    """40x20 PNG as a data URL."""
    return make_png_data_url()


@pytest.fixture
def recording_canvas() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture
def portrait_layout():
    return default_layout("portrait")


@pytest.fixture
def landscape_layout():
    return default_layout("landscape")


class FixedWidthMetrics:
    """Every character is ``ratio * size`` wide."""

    def __init__(self, font_name: str, ratio: float = 0.5):
        self.font_name = font_name
        self.ratio = ratio

    def width_of(self, text: str, size: float) -> float:
        return len(text) * size * self.ratio


class FixedWidthFamily:
    """Font family stand-in with predictable widths; bold glyphs are wider."""

    base = "Courier"

    def metrics(self, bold: bool = False, italic: bool = False):
        return FixedWidthMetrics("Courier-Bold" if bold else "Courier", 0.6 if bold else 0.5)

    def font_name(self, bold: bool = False, italic: bool = False) -> str:
        return "Courier-Bold" if bold else "Courier"


@pytest.fixture
def fixed_family() -> FixedWidthFamily:
    return FixedWidthFamily()
