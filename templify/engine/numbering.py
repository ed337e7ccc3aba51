"""
Heading detection and hierarchical renumbering.

Authors write headings as ``2 Scope`` or ``2.3. Details``; the renderers
discard the author's numbers and re-derive them from a counter stack so that
inserted or reordered sections stay consistently numbered.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

NUMBERED_HEADING_PATTERN = re.compile(r"^(\d+(?:\.\d+)*)(\.)?\s+(.*)$", re.DOTALL)
SECTION_HEADING_PATTERN = re.compile(r"^(?:section\s+)?(\d+(?:\.\d+)*)(\.)?\s+(.+)$", re.IGNORECASE | re.DOTALL)
_SENTENCE_END = re.compile(r"[.!?]$")
_SENTENCE_BREAK = re.compile(r"[.!?]\s")

MAX_HEADING_DEPTH = 6
MAX_HEADING_CHARS = 160
MAX_HEADING_WORDS = 20


@dataclass(slots=True)
class NumberedHeading:
    """Result of feeding one line to a numberer."""

    text: str
    is_heading: bool
    level: Optional[int] = None


@dataclass(slots=True)
class HeadingMatch:
    level: int
    title: str
    trailing_period: bool = False


class HeadingNumberer(Protocol):
    def normalize(self, text: str) -> NumberedHeading: ...


@dataclass(slots=True)
class HeadingCounters:
    """
    Counter stack, one entry per heading depth.

    Advancing level ``L`` pads missing parents with 1, increments level ``L``
    when it already exists (or starts it at 1) and drops all deeper counters.
    ``max_depth`` clamps the level, the word package supports six levels.
    """

    max_depth: Optional[int] = None
    values: List[int] = field(default_factory=list)

    def advance(self, level: int) -> List[int]:
        level = max(1, level)
        if self.max_depth is not None:
            level = min(self.max_depth, level)
        if level == 1:
            self.values = [(self.values[0] if self.values else 0) + 1]
            return list(self.values)
        while len(self.values) < level - 1:
            self.values.append(1)
        if len(self.values) >= level:
            self.values[level - 1] += 1
        else:
            self.values.append(1)
        del self.values[level:]
        return list(self.values)

    def label(self) -> str:
        return ".".join(str(value) for value in self.values)


def format_heading(numbers: List[int], title: str, trailing_period: bool = False) -> str:
    prefix = ".".join(str(value) for value in numbers)
    if trailing_period:
        prefix += "."
    return f"{prefix} {title}"


class NumberingNormalizer:
    """
    Stateful single-pass renumbering of ``N(.N)*`` headings.

    Create one instance per render; lines must be fed in document order.
    """

    def __init__(self) -> None:
        self.counters = HeadingCounters()

    def normalize(self, text: str) -> NumberedHeading:
        match = NUMBERED_HEADING_PATTERN.match(text.strip())
        if not match:
            return NumberedHeading(text=text, is_heading=False)
        level = len(match.group(1).split("."))
        numbers = self.counters.advance(level)
        return NumberedHeading(
            text=format_heading(numbers, match.group(3), bool(match.group(2))),
            is_heading=True,
            level=level,
        )


def detect_numbered_heading(text: str) -> Optional[HeadingMatch]:
    """
    Recognise a numbered heading the way the word package does.

    Accepts an optional leading ``section`` word and rejects titles that read
    like sentences: ending in ``.``, ``!`` or ``?``, containing sentence
    punctuation followed by whitespace, or longer than 160 characters or
    20 words.
    """
    stripped = text.strip()
    if not stripped:
        return None
    match = SECTION_HEADING_PATTERN.match(stripped)
    if not match:
        return None
    title = match.group(3).strip()
    if not title or _SENTENCE_END.search(title) or _SENTENCE_BREAK.search(title):
        return None
    if len(title) > MAX_HEADING_CHARS or len(title.split()) > MAX_HEADING_WORDS:
        return None
    depth = len(match.group(1).split("."))
    return HeadingMatch(
        level=min(MAX_HEADING_DEPTH, max(1, depth)),
        title=title,
        trailing_period=bool(match.group(2)),
    )


class WordHeadingNumberer:
    """Numberer used by the word package: sentence-aware detection, six levels."""

    def __init__(self) -> None:
        self.counters = HeadingCounters(max_depth=MAX_HEADING_DEPTH)

    def normalize(self, text: str) -> NumberedHeading:
        match = detect_numbered_heading(text)
        if match is None:
            return NumberedHeading(text=text, is_heading=False)
        numbers = self.counters.advance(match.level)
        return NumberedHeading(
            text=format_heading(numbers, match.title, match.trailing_period),
            is_heading=True,
            level=match.level,
        )
