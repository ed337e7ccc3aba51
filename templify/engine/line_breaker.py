"""
Greedy line breaking over styled runs.

The same :class:`LineBreaker` is used to measure block heights during
pagination and to produce the lines that are drawn, so measured and drawn
page breaks cannot diverge.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from ..models.document import Run
from .text_metrics import FontFamily

_TOKEN_PATTERN = re.compile(r"\s+|\S+")


@dataclass(slots=True)
class _Token:
    text: str
    run: Run
    width: float = 0.0
    is_space: bool = False
    is_break: bool = False


@dataclass(slots=True)
class WrappedLine:
    """One output line: styled runs plus their measured width."""

    runs: List[Run] = field(default_factory=list)
    width: float = 0.0
    hard_break: bool = False

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def is_empty(self) -> bool:
        return not self.runs


def _style_key(run: Run) -> Tuple[bool, bool, bool]:
    return (run.bold, run.italic, run.underline)


class LineBreaker:
    """
    Wraps runs to a maximum width using font metrics of ``family`` at ``font_size``.

    Lines break only before non-whitespace tokens; tokens wider than the whole
    line are packed character by character. The result always holds at least
    one (possibly empty) line.
    """

    def __init__(self, family: FontFamily, font_size: float) -> None:
        self.family = family
        self.font_size = font_size

    def width_of(self, text: str, run: Run) -> float:
        return self.family.metrics(run.bold, run.italic).width_of(text, self.font_size)

    def line_width(self, runs: Sequence[Run]) -> float:
        return sum(self.width_of(run.text, run) for run in runs if not run.is_break)

    def _tokens(self, runs: Sequence[Run]) -> Iterator[_Token]:
        for run in runs:
            pieces = run.text.split("\n")
            for index, piece in enumerate(pieces):
                if index:
                    yield _Token("\n", run, is_break=True)
                for match in _TOKEN_PATTERN.finditer(piece):
                    text = match.group(0)
                    yield _Token(text, run, self.width_of(text, run), is_space=text.isspace())

    def _split_chars(self, token: _Token, max_width: float) -> List[_Token]:
        chunks: List[_Token] = []
        chunk = ""
        for char in token.text:
            candidate = chunk + char
            if chunk and self.width_of(candidate, token.run) > max_width:
                chunks.append(_Token(chunk, token.run, self.width_of(chunk, token.run)))
                chunk = char
            else:
                chunk = candidate
        if chunk:
            chunks.append(_Token(chunk, token.run, self.width_of(chunk, token.run)))
        return chunks

    @staticmethod
    def _close(tokens: List[_Token], hard_break: bool = False) -> WrappedLine:
        while tokens and tokens[-1].is_space:
            tokens.pop()
        runs: List[Run] = []
        width = 0.0
        for token in tokens:
            width += token.width
            if runs and _style_key(runs[-1]) == _style_key(token.run):
                runs[-1].text += token.text
            else:
                runs.append(token.run.styled_like(token.text))
        return WrappedLine(runs=runs, width=width, hard_break=hard_break)

    def wrap(self, runs: Sequence[Run], max_width: float) -> List[WrappedLine]:
        """
        Break ``runs`` into lines no wider than ``max_width``.

        Args:
            runs: Styled runs of one paragraph; ``"\\n"`` forces a break
            max_width: Available width in points

        Returns:
            Wrapped lines in order, never empty
        """
        lines: List[WrappedLine] = []
        current: List[_Token] = []
        width = 0.0
        has_content = False

        for token in self._tokens(runs):
            if token.is_break:
                lines.append(self._close(current, hard_break=True))
                current, width, has_content = [], 0.0, False
                continue
            if token.is_space:
                current.append(token)
                width += token.width
                continue
            if has_content and width + token.width > max_width:
                lines.append(self._close(current))
                current, width, has_content = [], 0.0, False
            if not has_content and width + token.width > max_width:
                # leading whitespace yields to the word
                current, width = [], 0.0
            if token.width > max_width:
                chunks = self._split_chars(token, max_width)
                for chunk in chunks[:-1]:
                    lines.append(self._close([chunk]))
                token = chunks[-1]
            current.append(token)
            width += token.width
            has_content = True

        lines.append(self._close(current))
        return lines

    def height_of(self, runs: Sequence[Run], max_width: float, line_height: float) -> float:
        return len(self.wrap(runs, max_width)) * line_height


def wrap_plain(
    text: str,
    family: FontFamily,
    font_size: float,
    max_width: float,
    bold: bool = False,
) -> List[str]:
    """Wrap a single-style string and return the line texts."""
    breaker = LineBreaker(family, font_size)
    return [line.text for line in breaker.wrap([Run(text, bold=bold)], max_width)]
