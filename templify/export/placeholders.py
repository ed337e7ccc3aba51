"""
Placeholder splicing in WordprocessingML.

Templates carry ``{{title}}``, ``{{subtitle}}`` and ``{{content}}`` markers.
Word frequently splits a marker over several runs (``{{`` in one ``w:t``,
``title}}`` in a later one); those are matched inside a bounded window that
never crosses another ``{{`` fragment.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from ..exceptions import TemplateError
from .wordml import BREAK_RUN, xml_escape

logger = logging.getLogger(__name__)

SPLIT_WINDOW = 1000
TITLE_COLOR_WINDOW = 5000

_PARAGRAPH_START = re.compile(r"<w:p[\s>]")
_COLOR_PATTERN = re.compile(r'<w:color w:val="([0-9A-Fa-f]{6})"/>')


def _split_pattern(key: str) -> re.Pattern:
    return re.compile(
        r"(<w:t[^>]*>)\{\{</w:t>((?:(?!\{\{</w:t>)[\s\S]){0,%d}?)(<w:t[^>]*>)%s\}\}</w:t>" % (SPLIT_WINDOW, re.escape(key))
    )


def replace_split_placeholder(xml: str, key: str, value: str) -> str:
    """
    Replace ``{{key}}`` whose braces sit in different text runs.

    The value goes into the run holding ``{{``; the run holding ``key}}`` is
    emptied and the markup in between is kept. An empty value clears the marker.
    """
    escaped = xml_escape(value)
    return _split_pattern(key).sub(lambda m: f"{m.group(1)}{escaped}</w:t>{m.group(2)}{m.group(3)}</w:t>", xml)


def apply_template_placeholders(xml: str, title: str, subtitle: str) -> str:
    """Replace title and subtitle markers, contiguous or split."""
    updated = xml.replace("{{title}}", xml_escape(title))
    updated = updated.replace("{{subtitle}}", xml_escape(subtitle))
    updated = replace_split_placeholder(updated, "title", title)
    return replace_split_placeholder(updated, "subtitle", subtitle)


def wrap_by_length(text: str, max_chars: int) -> List[str]:
    """Greedy word wrap by character count; words longer than ``max_chars`` stay whole."""
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) > max_chars and current:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def build_runs_with_line_breaks(text: str, color: Optional[str], max_chars: int) -> str:
    """Coloured runs for ``text`` wrapped at ``max_chars`` with explicit breaks between lines."""
    if not text:
        return ""
    properties = f'<w:rPr><w:color w:val="{color}"/></w:rPr>' if color else ""
    runs: List[str] = []
    for index, line in enumerate(wrap_by_length(text, max_chars)):
        space = ' xml:space="preserve"' if line[:1].isspace() or line[-1:].isspace() else ""
        run = f"<w:r>{properties}<w:t{space}>{xml_escape(line)}</w:t></w:r>"
        runs.append(run if index == 0 else BREAK_RUN + run)
    return "".join(runs)


_RUN_OPEN = r"<w:r(?:\s[^>]*)?>(?:<w:rPr>(?:(?!</w:rPr>)[\s\S])*</w:rPr>)?\s*"


def replace_placeholder_runs(xml: str, key: str, replacement_runs: str) -> str:
    """
    Replace the run(s) holding ``{{key}}`` with ``replacement_runs``.

    Both the contiguous marker and the ``{{`` ... ``key}}`` split form are
    matched at run level, so the replacement never nests inside a ``w:r``.
    """
    if not replacement_runs:
        return xml
    key = re.escape(key)
    direct = re.compile(_RUN_OPEN + r"<w:t[^>]*>\{\{%s\}\}</w:t>\s*</w:r>" % key)
    updated = direct.sub(lambda _: replacement_runs, xml)
    split = re.compile(
        _RUN_OPEN
        + r"<w:t[^>]*>\{\{</w:t>\s*</w:r>(?:(?!\{\{</w:t>)[\s\S]){0,%d}?" % SPLIT_WINDOW
        + _RUN_OPEN
        + r"<w:t[^>]*>%s\}\}</w:t>\s*</w:r>" % key
    )
    return split.sub(lambda _: replacement_runs, updated)


def extract_title_color(document_xml: str) -> Optional[str]:
    """Last explicit run colour within the markup preceding ``{{title}}``."""
    index = document_xml.find("{{title}}")
    if index == -1:
        return None
    snippet = document_xml[max(0, index - TITLE_COLOR_WINDOW):index + 50]
    colors = _COLOR_PATTERN.findall(snippet)
    return colors[-1].upper() if colors else None


def replace_paragraph_containing_placeholder(document_xml: str, placeholder: str, markup: str) -> str:
    """
    Replace the whole ``w:p`` element containing ``placeholder`` with ``markup``.

    Raises:
        TemplateError: If the placeholder is missing or not inside a paragraph
    """
    position = document_xml.find(placeholder)
    if position == -1:
        raise TemplateError(f"Placeholder {placeholder} not found in template")
    start = -1
    for match in _PARAGRAPH_START.finditer(document_xml, 0, position):
        start = match.start()
    end = document_xml.find("</w:p>", position)
    if start == -1 or end == -1:
        raise TemplateError(f"Placeholder {placeholder} is not inside a paragraph")
    logger.debug("Splicing %d characters of markup at offset %d", len(markup), start)
    return document_xml[:start] + markup + document_xml[end + len("</w:p>"):]


def ensure_document_namespace(xml: str, prefix: str, uri: str) -> str:
    attribute = f'xmlns:{prefix}="{uri}"'
    if attribute in xml:
        return xml
    return xml.replace("<w:document", f"<w:document {attribute}", 1)
