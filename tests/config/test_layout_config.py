"""
Tests for layout configuration and persistence.
"""

import json

import pytest

from templify.config.layout import LayoutStore, PdfLayout, TextBoxLayout, TextStyle, default_layout, merge_layout
from templify.exceptions import ConfigError, LayoutError


class TestTextBoxLayout:
    """Test cases for TextBoxLayout."""

    def test_edges(self):
        """Test derived bottom and right edges."""
        box = TextBoxLayout(72, 100, 468, 600, 11, 16)
        assert box.bottom == 700
        assert box.right == 540

    def test_negative_size(self):
        """Test that negative sizes are rejected."""
        with pytest.raises(LayoutError):
            TextBoxLayout(0, 0, -1, 10, 11, 16)

    def test_camel_case_keys(self):
        """Test parsing of persisted camelCase keys."""
        box = TextBoxLayout.from_dict({"x": 1, "y": 2, "width": 3, "height": 4, "fontSize": 9, "lineHeight": 12})
        assert box.font_size == 9
        assert box.to_dict()["lineHeight"] == 12

    def test_missing_field(self):
        """Test that incomplete boxes are a config error."""
        with pytest.raises(ConfigError):
            TextBoxLayout.from_dict({"x": 1})


class TestPdfLayout:
    """Test cases for PdfLayout."""

    def test_defaults(self, portrait_layout, landscape_layout):
        """Test the default body regions."""
        assert (portrait_layout.body.x, portrait_layout.body.y, portrait_layout.body.width) == (72, 100, 468)
        assert landscape_layout.body.width == 648
        assert portrait_layout.body_align == "left"

    def test_unknown_orientation(self):
        """Test that unknown orientations raise LayoutError."""
        with pytest.raises(LayoutError):
            default_layout("square")

    def test_unknown_alignment(self, portrait_layout):
        """Test that unsupported alignments are rejected."""
        with pytest.raises(LayoutError):
            portrait_layout.with_alignment("distributed")

    def test_unknown_font(self):
        """Test that only standard fonts are accepted."""
        with pytest.raises(LayoutError):
            TextStyle(font_name="Comic Sans")

    def test_dict_round_trip(self, portrait_layout):
        """Test that to_dict output parses back to an equal layout."""
        layout = portrait_layout.with_alignment("justify")
        assert PdfLayout.from_dict(layout.to_dict()) == layout

    def test_heading_style_persisted(self, portrait_layout):
        """Test optional heading fields."""
        payload = portrait_layout.to_dict()
        assert "headingStyle" not in payload
        payload["headingStyle"] = {"fontName": "Times-Roman", "color": "#003366"}
        payload["headingFontSize"] = 15
        layout = PdfLayout.from_dict(payload)
        assert layout.heading_style.hex == "003366"
        assert layout.heading_font_size == 15


class TestMergeLayout:
    """Test cases for partial layout merging."""

    def test_nested_merge(self, portrait_layout):
        """Test that a partial region only overrides the given fields."""
        merged = merge_layout(portrait_layout, {"body": {"fontSize": 12}, "bodyAlign": "justify"})
        assert merged.body.font_size == 12
        assert merged.body.width == portrait_layout.body.width
        assert merged.body_align == "justify"
        assert merged.title == portrait_layout.title

    def test_none_ignored(self, portrait_layout):
        """Test that null values keep the defaults."""
        assert merge_layout(portrait_layout, {"subtitle": None}) == portrait_layout


class TestLayoutStore:
    """Test cases for layout persistence."""

    def test_load_defaults(self, temp_dir):
        """Test that a missing file yields the defaults."""
        assert LayoutStore(temp_dir).load("portrait") == default_layout("portrait")

    def test_save_and_load(self, temp_dir):
        """Test persistence of an override."""
        store = LayoutStore(temp_dir / "layouts")
        layout = default_layout("landscape").with_alignment("center")
        path = store.save("landscape", layout)
        assert path.name == "layout-landscape.json"
        assert store.load("landscape") == layout

    def test_stale_file_merged(self, temp_dir):
        """Test that a file missing newer fields still loads."""
        (temp_dir / "layout-portrait.json").write_text(json.dumps({"body": {"x": 80}}), encoding="utf-8")
        layout = LayoutStore(temp_dir).load("portrait")
        assert layout.body.x == 80
        assert layout.body.width == 468

    def test_reset(self, temp_dir):
        """Test that reset removes the override."""
        store = LayoutStore(temp_dir)
        store.save("portrait", default_layout("portrait").with_alignment("right"))
        store.reset("portrait")
        assert store.load("portrait").body_align == "left"
        store.reset("portrait")

    def test_invalid_json(self, temp_dir):
        """Test that corrupt files raise ConfigError."""
        (temp_dir / "layout-portrait.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            LayoutStore(temp_dir).load("portrait")

    def test_non_object(self, temp_dir):
        """Test that non-object JSON is rejected."""
        (temp_dir / "layout-portrait.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError):
            LayoutStore(temp_dir).load("portrait")
