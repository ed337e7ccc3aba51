"""
Template DOCX package access.

The package is read once into memory; parts are edited as text and written
to a fresh zip on :meth:`DocxPackage.to_bytes`, so the template bytes are
never modified.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
from typing import Dict, List

from ..exceptions import TemplateError

logger = logging.getLogger(__name__)

DOCUMENT_PART = "word/document.xml"
RELS_PART = "word/_rels/document.xml.rels"
CONTENT_TYPES_PART = "[Content_Types].xml"
REQUIRED_PARTS = (DOCUMENT_PART, RELS_PART, CONTENT_TYPES_PART)

IMAGE_REL_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"

_HEADER_PART = re.compile(r"^word/header\d+\.xml$")
_REL_ID = re.compile(r"rId(\d+)")
_MEDIA_IMAGE = re.compile(r"^word/media/image(\d+)\.")
_DOCPR_ID = re.compile(r'<wp:docPr[^>]*\bid="(\d+)"')


def next_relationship_id(rels_xml: str) -> int:
    return max((int(value) for value in _REL_ID.findall(rels_xml)), default=0) + 1


def next_image_id(names: List[str]) -> int:
    ids = [int(match.group(1)) for match in map(_MEDIA_IMAGE.match, names) if match]
    return max(ids, default=0) + 1


def next_docpr_id(document_xml: str) -> int:
    return max((int(value) for value in _DOCPR_ID.findall(document_xml)), default=0) + 1


class DocxPackage:
    """
    In-memory DOCX package with id allocation for injected images.

    Id counters start above the largest id already present so injected
    relationships, media files and drawings never collide with the template's.
    """

    def __init__(self, parts: Dict[str, bytes]) -> None:
        missing = [name for name in REQUIRED_PARTS if name not in parts]
        if missing:
            raise TemplateError("Template is missing required DOCX parts", ", ".join(missing))
        self._parts = dict(parts)
        self.document_xml = self._text(DOCUMENT_PART)
        self.rels_xml = self._text(RELS_PART)
        self.content_types_xml = self._text(CONTENT_TYPES_PART)
        self._next_rel_id = next_relationship_id(self.rels_xml)
        self._next_image_id = next_image_id(list(self._parts))
        self._next_docpr_id = next_docpr_id(self.document_xml)

    @classmethod
    def from_bytes(cls, data: bytes) -> "DocxPackage":
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                parts = {info.filename: archive.read(info) for info in archive.infolist() if not info.is_dir()}
        except zipfile.BadZipFile as exc:
            raise TemplateError("Template is not a valid DOCX package", str(exc)) from exc
        return cls(parts)

    def _text(self, name: str) -> str:
        try:
            return self._parts[name].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TemplateError("Package part is not UTF-8", name) from exc

    @property
    def names(self) -> List[str]:
        return list(self._parts)

    def header_parts(self) -> List[str]:
        return sorted(name for name in self._parts if _HEADER_PART.match(name))

    def read_text(self, name: str) -> str:
        return self._text(name)

    def write_text(self, name: str, text: str) -> None:
        self._parts[name] = text.encode("utf-8")

    def allocate_docpr_id(self) -> int:
        value = self._next_docpr_id
        self._next_docpr_id += 1
        return value

    def add_image(self, data: bytes, extension: str, mime: str) -> str:
        """
        Store an image part, register its relationship and content type.

        Returns:
            Relationship id referencing the new part
        """
        filename = f"image{self._next_image_id}.{extension}"
        self._next_image_id += 1
        self._parts[f"word/media/{filename}"] = data

        rel_id = f"rId{self._next_rel_id}"
        self._next_rel_id += 1
        relationship = f'<Relationship Id="{rel_id}" Type="{IMAGE_REL_TYPE}" Target="media/{filename}"/>'
        self.rels_xml = self.rels_xml.replace("</Relationships>", f"{relationship}</Relationships>", 1)
        self.ensure_content_type(extension, mime)
        logger.debug("Added %s as %s", filename, rel_id)
        return rel_id

    def ensure_content_type(self, extension: str, mime: str) -> None:
        if f'Extension="{extension}"' in self.content_types_xml:
            return
        entry = f'<Default Extension="{extension}" ContentType="{mime}"/>'
        self.content_types_xml = self.content_types_xml.replace("</Types>", f"{entry}</Types>", 1)

    def to_bytes(self) -> bytes:
        self.write_text(DOCUMENT_PART, self.document_xml)
        self.write_text(RELS_PART, self.rels_xml)
        self.write_text(CONTENT_TYPES_PART, self.content_types_xml)
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            names = [CONTENT_TYPES_PART] + [name for name in self._parts if name != CONTENT_TYPES_PART]
            for name in names:
                archive.writestr(name, self._parts[name])
        return buffer.getvalue()
