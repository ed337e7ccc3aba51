"""
Tests for PdfCompiler pagination and drawing.
"""

import io
import logging

import pytest
from pypdf import PdfReader
from reportlab.pdfbase.pdfmetrics import stringWidth

from templify.config.layout import default_layout
from templify.engine.flattener import BlockFlattener, plain_text_blocks
from templify.engine.line_breaker import wrap_plain
from templify.engine.numbering import NumberingNormalizer
from templify.engine.text_metrics import FontFamily
from templify.models import (
    Heading,
    Image,
    ImageBlock,
    Paragraph,
    ParagraphBlock,
    RichDocument,
    Run,
    Table,
    TableBlock,
    TableCell,
    TableCellBlock,
    TableRow,
)
from templify.models.tiptap import plain_text_to_document
from templify.pdf.compiler import PdfCompiler, render_pdf, render_plain_pdf
from tests.conftest import make_png_data_url, make_truncated_png_data_url

LETTER = (612.0, 792.0)
TITLE = "Report"


def _compiler(layout=None, body_on_first_page=True):
    return PdfCompiler(layout or default_layout("portrait"), [LETTER, LETTER], 1, body_on_first_page)


def _lines_block(prefix, count, alignment="left"):
    """Paragraph of ``count`` lines separated by hard breaks."""
    runs = []
    for index in range(count):
        if index:
            runs.append(Run.hard_break())
        runs.append(Run(f"{prefix} {index + 1}"))
    return ParagraphBlock(runs=runs, alignment=alignment)


def _texts(page):
    return page.canvas.texts()


def _placements(pages):
    return [[(op.kind, op.x, op.y, op.text) for op in page.canvas.ops] for page in pages]


class TestFrontMatter:
    """Test cases for the title and subtitle on page 1."""

    def test_title_drawn_in_title_region(self):
        """Test that the title baseline sits in the title box."""
        layout = default_layout("portrait")
        pages = _compiler(layout).compile([], TITLE)
        op = next(op for op in pages[0].canvas.of_kind("text") if op.text == TITLE)
        assert op.x == layout.title.x
        assert op.y == pytest.approx(layout.title.y + layout.title.font_size)
        assert op.color == layout.title_style.color
        assert op.font_size == layout.title.font_size

    def test_long_title_pushes_subtitle_down(self):
        """Test that the subtitle offset follows the wrapped title line count."""
        layout = default_layout("portrait")
        title = "A considerably longer report title that needs several lines"
        title_lines = wrap_plain(title, FontFamily("Helvetica"), layout.title.font_size, LETTER[0] - 2 * layout.title.x)
        assert len(title_lines) > 1

        pages = _compiler(layout).compile([], title, "Second line")
        op = next(op for op in pages[0].canvas.of_kind("text") if op.text == "Second line")
        expected_top = layout.title.y + len(title_lines) * layout.title.line_height + 6
        assert op.y == pytest.approx(expected_top + layout.subtitle.font_size)

    def test_body_starts_below_front_matter(self):
        """Test that body text never overlaps the title."""
        layout = default_layout("portrait")
        pages = _compiler(layout).compile([ParagraphBlock(runs=[Run("Body")])], TITLE)
        body = next(op for op in pages[0].canvas.of_kind("text") if op.text == "Body")
        title_bottom = layout.title.y + layout.title.line_height
        assert body.y - layout.body.font_size >= title_bottom

    def test_single_page_has_no_page_number(self):
        """Test that page 1 carries no page label."""
        pages = _compiler().compile([ParagraphBlock(runs=[Run("Body")])], TITLE)
        assert len(pages) == 1
        assert not any(text.startswith("Page ") for text in _texts(pages[0]))


class TestRoundTripScenario:
    """Heading, paragraph and a 2x2 table fit on one page."""

    def _document(self):
        table = Table(
            rows=[
                TableRow(cells=[TableCell(paragraphs=[Paragraph(runs=[Run("A")])], colspan=2)]),
                TableRow(cells=[TableCell(paragraphs=[Paragraph(runs=[Run("B")])]), TableCell()]),
            ]
        )
        return RichDocument(
            blocks=[Heading(runs=[Run("1. Intro")], level=1), Paragraph(runs=[Run("Hello world")]), table]
        )

    def test_one_page_and_verbatim_heading(self):
        """Test page count and heading text."""
        blocks = BlockFlattener(NumberingNormalizer()).flatten(self._document())
        pages = _compiler().compile(blocks, TITLE)

        assert len(pages) == 1
        texts = _texts(pages[0])
        assert "1. Intro" in texts
        assert "A" in texts
        assert "B" in texts
        heading = next(op for op in pages[0].canvas.of_kind("text") if op.text == "1. Intro")
        assert heading.font_name == "Helvetica-Bold"

    def test_table_cells_are_bordered(self):
        """Test that every placed cell gets a border rectangle."""
        blocks = BlockFlattener(NumberingNormalizer()).flatten(self._document())
        pages = _compiler().compile(blocks, TITLE)
        borders = [op for op in pages[0].canvas.of_kind("rect") if op.stroke == "#DDDDDD"]
        assert len(borders) == 3
        assert borders[0].width == pytest.approx(468)

    def test_rendered_pdf_has_one_page(self, template_pdf_bytes):
        """Test the full render path."""
        data = render_pdf(self._document(), template_pdf_bytes, TITLE, None, default_layout("portrait"))
        reader = PdfReader(io.BytesIO(data))
        assert len(reader.pages) == 1
        assert "1. Intro" in reader.pages[0].extract_text()


class TestOverflowScenario:
    """A paragraph taller than the body region spills onto a second page."""

    def _long_paragraph(self, compiler):
        layout = compiler.layout
        words = ["lorem"] * 600
        block = ParagraphBlock(runs=[Run(" ".join(words))], alignment="left")
        lines = compiler.body_role.breaker.wrap(block.runs, layout.body.width)
        assert len(lines) * layout.body.line_height > layout.body.height
        return block, lines

    def test_two_pages_with_page_label(self):
        """Test that the last page reads 'Page 2 of 2'."""
        compiler = _compiler()
        block, lines = self._long_paragraph(compiler)
        pages = compiler.compile([block], TITLE)

        assert len(pages) == 2
        assert "Page 2 of 2" in _texts(pages[1])
        drawn = sum(1 for page in pages for op in page.canvas.of_kind("text") if op.text.startswith("lorem"))
        assert drawn == len(lines)

    def test_overflow_page_uses_second_template_page(self):
        """Test that overflow pages are backed by template page 2."""
        compiler = _compiler()
        block, _ = self._long_paragraph(compiler)
        pages = compiler.compile([block], TITLE)
        assert [page.template_index for page in pages] == [0, 1]

    def test_lines_stay_inside_body_region(self):
        """Test that no line baseline falls below the body region."""
        compiler = _compiler()
        block, _ = self._long_paragraph(compiler)
        body = compiler.layout.body
        for page in compiler.compile([block], TITLE):
            for op in page.canvas.of_kind("text"):
                if op.text.startswith("lorem"):
                    assert op.y <= body.bottom

    def test_rendered_pdf_has_two_pages(self, template_pdf_bytes):
        """Test the full render path with overflow."""
        document = RichDocument(blocks=[Paragraph(runs=[Run(" ".join(["lorem"] * 600))])])
        data = render_pdf(document, template_pdf_bytes, TITLE, "Sub", default_layout("portrait"))
        reader = PdfReader(io.BytesIO(data))
        assert len(reader.pages) == 2
        assert "Page 2 of 2" in reader.pages[1].extract_text()


class TestPagination:
    """Test cases for the cursor flow."""

    def test_block_that_does_not_fit_moves_whole(self):
        """Test that a paragraph is not split when it fits on a fresh page."""
        compiler = _compiler()
        pages = compiler.compile([_lines_block("alpha", 20), _lines_block("omega", 6)], TITLE)

        assert len(pages) == 2
        assert not any(text.startswith("omega") for text in _texts(pages[0]))
        assert sum(1 for text in _texts(pages[1]) if text.startswith("omega")) == 6
        first_omega = next(op for op in pages[1].canvas.of_kind("text") if op.text == "omega 1")
        assert first_omega.y == pytest.approx(compiler.layout.body.y + compiler.layout.body.font_size)

    def test_running_header_on_overflow_pages(self):
        """Test that overflow pages repeat the title and subtitle, right aligned."""
        compiler = _compiler()
        layout = compiler.layout
        pages = compiler.compile([_lines_block("alpha", 30)], TITLE, "Subtitle")
        header = next(op for op in pages[1].canvas.of_kind("text") if op.text == TITLE)
        width = stringWidth(TITLE, "Helvetica", layout.header_title.font_size)
        assert header.x + width == pytest.approx(layout.header_title.right)
        assert "Subtitle" in _texts(pages[1])

    def test_page_number_box_is_blanked(self):
        """Test that the page label sits on a white rectangle."""
        compiler = _compiler()
        box = compiler.layout.page_number
        pages = compiler.compile([_lines_block("alpha", 30)], TITLE)
        rects = [op for op in pages[1].canvas.of_kind("rect") if op.fill == "#FFFFFF"]
        assert len(rects) == 1
        assert (rects[0].x, rects[0].y, rects[0].width, rects[0].height) == (box.x, box.y, box.width, box.height)

    def test_every_page_labelled_with_total(self):
        """Test 'Page i of N' on all pages after the first."""
        pages = _compiler().compile([_lines_block("alpha", 100)], TITLE)
        total = len(pages)
        assert total >= 3
        for number, page in enumerate(pages[1:], start=2):
            assert f"Page {number} of {total}" in _texts(page)

    def test_pagination_is_deterministic(self):
        """Test that compiling twice yields identical placements."""
        blocks = [_lines_block("alpha", 20), _lines_block("omega", 40, alignment="justify")]
        first = _compiler().compile(blocks, TITLE, "Sub")
        second = _compiler().compile(blocks, TITLE, "Sub")
        assert len(first) == len(second)
        assert _placements(first) == _placements(second)

    def test_cover_page_path(self):
        """Test that plain rendering starts the body on page 2."""
        blocks = plain_text_blocks("Hello\n\n1 Intro", ["body", "blank", "heading"])
        pages = _compiler(body_on_first_page=False).compile(blocks, TITLE)
        assert len(pages) == 2
        assert "Hello" not in _texts(pages[0])
        assert "Hello" in _texts(pages[1])
        assert "Page 2 of 2" in _texts(pages[1])


class TestJustification:
    """Justified lines fill the box except the last line."""

    def _paragraph(self):
        text = " ".join(["justified words spread evenly"] * 12)
        return ParagraphBlock(runs=[Run(text)], alignment="justify")

    def test_non_last_lines_reach_right_edge(self):
        """Test that every non-last line ends at the body's right edge."""
        compiler = _compiler()
        body = compiler.layout.body
        pages = compiler.compile([self._paragraph()], TITLE)
        ops = [op for op in pages[0].canvas.of_kind("text") if op.text != TITLE]
        baselines = sorted({op.y for op in ops})
        assert len(baselines) > 2

        for baseline in baselines[:-1]:
            line_ops = [op for op in ops if op.y == baseline]
            right = max(op.x + stringWidth(op.text, op.font_name, op.font_size) for op in line_ops)
            assert right == pytest.approx(body.right, abs=1e-6)
            assert min(op.x for op in line_ops) == pytest.approx(body.x)

    def test_last_line_is_not_stretched(self):
        """Test that the last line keeps natural spacing."""
        compiler = _compiler()
        body = compiler.layout.body
        pages = compiler.compile([self._paragraph()], TITLE)
        ops = [op for op in pages[0].canvas.of_kind("text") if op.text != TITLE]
        last_baseline = max(op.y for op in ops)
        last_ops = [op for op in ops if op.y == last_baseline]
        assert len(last_ops) == 1
        right = last_ops[0].x + stringWidth(last_ops[0].text, last_ops[0].font_name, last_ops[0].font_size)
        assert right < body.right

    def test_hard_break_lines_are_not_stretched(self):
        """Test that a line ended by a hard break keeps natural spacing."""
        block = ParagraphBlock(runs=[Run("short line"), Run.hard_break(), Run("next line")], alignment="justify")
        pages = _compiler().compile([block], TITLE)
        assert "short line" in _texts(pages[0])

    def test_leading_whitespace_does_not_overflow(self):
        """Test that leading whitespace on a justified line takes no width."""
        text = "   " + " ".join(["justified words spread evenly"] * 12)
        compiler = _compiler()
        body = compiler.layout.body
        pages = compiler.compile([ParagraphBlock(runs=[Run(text)], alignment="justify")], TITLE)
        ops = [op for op in pages[0].canvas.of_kind("text") if op.text != TITLE]
        first_line = [op for op in ops if op.y == min(o.y for o in ops)]

        right = max(op.x + stringWidth(op.text, op.font_name, op.font_size) for op in first_line)
        assert right == pytest.approx(body.right, abs=1e-6)
        assert min(op.x for op in first_line) == pytest.approx(body.x)


class TestImages:
    """Test cases for image placement."""

    def test_small_image_is_not_upscaled(self, png_data_url):
        """Test natural size and centring of a small image."""
        compiler = _compiler()
        body = compiler.layout.body
        pages = compiler.compile([ImageBlock(src=png_data_url)], TITLE)
        image = pages[0].canvas.of_kind("image")[0]
        assert (image.width, image.height) == (40, 20)
        assert image.x == pytest.approx(body.x + (body.width - 40) / 2)

    def test_wide_image_is_scaled_to_body_width(self):
        """Test proportional downscaling to the body width."""
        compiler = _compiler()
        pages = compiler.compile([ImageBlock(src=make_png_data_url(936, 200))], TITLE)
        image = pages[0].canvas.of_kind("image")[0]
        assert image.width == pytest.approx(468)
        assert image.height == pytest.approx(100)

    def test_undecodable_image_is_skipped(self, caplog):
        """Test that a broken image is skipped and rendering continues."""
        blocks = [ImageBlock(src="data:image/png;base64,AAAA"), ParagraphBlock(runs=[Run("After")])]
        with caplog.at_level(logging.WARNING):
            pages = _compiler().compile(blocks, TITLE)
        assert pages[0].canvas.of_kind("image") == []
        assert "After" in _texts(pages[0])
        assert "Skipping image" in caplog.text

    def test_truncated_image_is_skipped(self, caplog):
        """Test that an image with a valid header but cut-off pixel data is skipped."""
        blocks = [ImageBlock(src=make_truncated_png_data_url()), ParagraphBlock(runs=[Run("After")])]
        with caplog.at_level(logging.WARNING):
            pages = _compiler().compile(blocks, TITLE)
        assert pages[0].canvas.of_kind("image") == []
        assert "After" in _texts(pages[0])
        assert "Skipping image" in caplog.text

    def test_truncated_image_does_not_abort_render(self, template_pdf_bytes):
        """Test that a full render completes around a truncated image."""
        document = RichDocument(
            blocks=[
                Paragraph(runs=[Run("before")]),
                Image(src=make_truncated_png_data_url()),
                Paragraph(runs=[Run("after")]),
            ]
        )
        data = render_pdf(document, template_pdf_bytes, TITLE, None, default_layout("portrait"))
        text = PdfReader(io.BytesIO(data)).pages[0].extract_text()
        assert "before" in text
        assert "after" in text

    def test_non_data_url_is_skipped(self):
        """Test that remote image URLs are skipped."""
        pages = _compiler().compile([ImageBlock(src="https://example.com/a.png")], TITLE)
        assert pages[0].canvas.of_kind("image") == []


class TestTables:
    """Test cases for table placement."""

    def test_table_that_does_not_fit_moves_to_next_page(self):
        """Test that tables are placed whole."""
        rows = [[TableCellBlock(paragraphs=[ParagraphBlock(runs=[Run(f"cell {i}")])])] for i in range(5)]
        pages = _compiler().compile([_lines_block("alpha", 22), TableBlock(rows=rows)], TITLE)
        assert len(pages) == 2
        assert "cell 0" in _texts(pages[1])
        assert not any(text.startswith("cell") for text in _texts(pages[0]))

    def test_oversized_table_warns(self, caplog):
        """Test that a table taller than the body region is reported."""
        rows = [[TableCellBlock(paragraphs=[ParagraphBlock(runs=[Run(str(i))])])] for i in range(40)]
        with caplog.at_level(logging.WARNING):
            _compiler().compile([TableBlock(rows=rows)], TITLE)
        assert "taller than the body region" in caplog.text


class TestPlainRendering:
    """Test cases for render_plain_pdf."""

    def test_cover_plus_content(self, template_pdf_bytes):
        """Test that plain content produces a cover and a content page."""
        data = render_plain_pdf(
            "1 Intro\nSome body text", template_pdf_bytes, TITLE, None, default_layout("portrait"), ["heading", "body"]
        )
        reader = PdfReader(io.BytesIO(data))
        assert len(reader.pages) == 2
        assert "Some body text" in reader.pages[1].extract_text()

    def test_landscape_layout(self, template_pdf_bytes):
        """Test that a landscape layout renders with a portrait-sized template."""
        document = plain_text_to_document("Hello")
        data = render_pdf(document, template_pdf_bytes, TITLE, None, default_layout("landscape"))
        assert data.startswith(b"%PDF")
