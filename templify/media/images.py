"""
Embedded image model.

Images arrive as self-contained ``data:<mime>;base64,<payload>`` URLs. The
payload is decoded eagerly; pixel dimensions are discovered lazily with
Pillow the first time they are needed.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..exceptions import MediaError

logger = logging.getLogger(__name__)

_DATA_URL_PATTERN = re.compile(r"^data:(.+?);base64,(.+)$", re.DOTALL)

_MIME_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
}


def mime_to_extension(mime: str) -> Optional[str]:
    """Return the package file extension for ``mime`` or None when unsupported."""
    return _MIME_EXTENSIONS.get(mime.strip().lower())


@dataclass(slots=True)
class EmbeddedImage:
    """Decoded image payload."""

    mime: str
    data: bytes
    extension: str
    _size: Optional[Tuple[int, int]] = field(default=None, repr=False)

    @property
    def size(self) -> Tuple[int, int]:
        """
        Pixel dimensions ``(width, height)``.

        Raises:
            MediaError: If Pillow cannot identify or fully decode the payload
        """
        if self._size is None:
            try:
                with Image.open(io.BytesIO(self.data)) as image:
                    image.load()
                    self._size = (int(image.width), int(image.height))
            except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
                raise MediaError("Cannot decode image", str(exc)) from exc
        return self._size

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]


def parse_data_url(src: str) -> EmbeddedImage:
    """
    Decode a base64 ``data:`` URL.

    Args:
        src: Image source as stored in the document

    Returns:
        EmbeddedImage with decoded bytes

    Raises:
        MediaError: If the source is not a base64 data URL, the MIME type is
            unsupported or the payload is not valid base64
    """
    match = _DATA_URL_PATTERN.match(src.strip())
    if not match:
        raise MediaError("Image source is not a base64 data URL", src[:40])
    mime = match.group(1)
    extension = mime_to_extension(mime)
    if extension is None:
        raise MediaError("Unsupported image type", mime)
    try:
        data = base64.b64decode(match.group(2), validate=False)
    except (binascii.Error, ValueError) as exc:
        raise MediaError("Invalid base64 image payload", str(exc)) from exc
    if not data:
        raise MediaError("Empty image payload")
    logger.debug("Decoded %s image (%d bytes)", mime, len(data))
    return EmbeddedImage(mime=mime, data=data, extension=extension)
