"""
Template byte providers.

A template source resolves a template URL (as stored in the template catalogue)
to raw bytes. Any failure to obtain the bytes raises
:class:`~templify.exceptions.TemplateUnavailableError`, which aborts the export.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import quote, urljoin

import httpx

from ..exceptions import TemplateUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class TemplateSource(Protocol):
    def fetch(self, url: str) -> bytes: ...


def resolve_url(base_url: Optional[str], url: str) -> str:
    """Join ``url`` onto ``base_url`` and percent-encode spaces in the path."""
    encoded = quote(url, safe=":/?&=%#@+,;")
    if base_url and not encoded.startswith(("http://", "https://")):
        return urljoin(base_url.rstrip("/") + "/", encoded.lstrip("/"))
    return encoded


def _check(response: httpx.Response, url: str) -> bytes:
    if not response.is_success:
        raise TemplateUnavailableError(url, response.status_code)
    logger.debug("Fetched template %s (%d bytes)", url, len(response.content))
    return response.content


class HttpTemplateSource:
    """
    Fetches templates over HTTP with httpx.

    Args:
        base_url: Prefix for catalogue paths such as ``/templates/IHM_Potrait.docx``
        timeout: Request timeout in seconds
        client: Optional preconfigured client (tests pass one with a mock transport)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    def fetch(self, url: str) -> bytes:
        target = resolve_url(self.base_url, url)
        try:
            if self._client is not None:
                response = self._client.get(target)
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                    response = client.get(target)
        except httpx.HTTPError as exc:
            raise TemplateUnavailableError(target, details=str(exc)) from exc
        return _check(response, target)


class AsyncHttpTemplateSource:
    """Asynchronous variant of :class:`HttpTemplateSource`."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    async def fetch(self, url: str) -> bytes:
        target = resolve_url(self.base_url, url)
        try:
            if self._client is not None:
                response = await self._client.get(target)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(target)
        except httpx.HTTPError as exc:
            raise TemplateUnavailableError(target, details=str(exc)) from exc
        return _check(response, target)


class FileTemplateSource:
    """Reads templates from a local directory; the URL's file name is looked up under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def fetch(self, url: str) -> bytes:
        path = self.root / Path(url).name
        try:
            return path.read_bytes()
        except OSError as exc:
            raise TemplateUnavailableError(str(path), details=str(exc)) from exc
