"""Word package (DOCX) back end."""

from .docx_exporter import DOCX_MIME, WordPackageExporter
from .package import DocxPackage

__all__ = ["DOCX_MIME", "DocxPackage", "WordPackageExporter"]
