"""Embedded image payloads."""

from .images import EmbeddedImage, mime_to_extension, parse_data_url

__all__ = ["EmbeddedImage", "mime_to_extension", "parse_data_url"]
