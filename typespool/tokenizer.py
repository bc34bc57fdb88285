"""Grapheme-aware word and line tokenization.

All positions handed around by typespool are grapheme indices, so a flag
emoji or a letter with combining accents counts as one character.
"""

from dataclasses import dataclass
from enum import Enum

import regex

_GRAPHEME_RE = regex.compile(r"\X")
_NEWLINES = frozenset(("\n", "\r", "\r\n", "\u2028", "\u2029"))


def split_graphemes(text: str) -> tuple[str, ...]:
    """Split text into extended grapheme clusters."""
    return tuple(_GRAPHEME_RE.findall(text))


def _is_newline(grapheme: str) -> bool:
    # "\r\n" is a single grapheme cluster
    return grapheme in _NEWLINES


@dataclass(frozen=True)
class TokenSpan:
    """Closed span [start, end] of grapheme indices."""
    start: int
    end: int

    def __len__(self):
        return self.end - self.start + 1

    def __contains__(self, position):
        return self.start <= position <= self.end


@dataclass(frozen=True)
class TokenTable:
    """Ordered spans plus a position -> span index lookup.

    ``index[i]`` is the span containing position ``i``. Positions in a gap
    (whitespace between words, blank lines) point at the next span to be
    opened, or at ``len(spans)`` when no span follows.
    """
    spans: tuple[TokenSpan, ...]
    index: tuple[int, ...]

    def in_gap(self, position: int) -> bool:
        """Return True if position lies outside every span."""
        span_index = self.index[position]
        return span_index >= len(self.spans) or position not in self.spans[span_index]


class Granularity(Enum):
    """Unit a fade or seek steps by."""
    CHAR = "char"
    WORD = "word"
    LINE = "line"


@dataclass(frozen=True)
class Tokens:
    word: TokenTable
    line: TokenTable

    def table_for(self, granularity: Granularity) -> TokenTable:
        if granularity is Granularity.WORD:
            return self.word
        if granularity is Granularity.LINE:
            return self.line
        raise ValueError(f"No token table for {granularity}")


class _TableBuilder:
    """Accumulates spans for one granularity during the forward scan."""

    def __init__(self):
        self.spans: list[TokenSpan] = []
        self.index: list[int] = []
        self._open_start: int | None = None

    def feed(self, position: int, inside: bool):
        if inside:
            if self._open_start is None:
                self._open_start = position
        else:
            self.close(position)
        # Inside a span this is the open span; in a gap it is the next to open
        self.index.append(len(self.spans))

    def close(self, position: int):
        if self._open_start is not None:
            self.spans.append(TokenSpan(self._open_start, position - 1))
            self._open_start = None

    def build(self, length: int) -> TokenTable:
        self.close(length)
        return TokenTable(tuple(self.spans), tuple(self.index))


def tokenize(graphemes) -> Tokens:
    """Build word and line token tables for a grapheme sequence.

    Args:
        graphemes: Sequence of grapheme strings (see split_graphemes).

    Returns:
        Tokens with one TokenTable per granularity.
    """
    words = _TableBuilder()
    lines = _TableBuilder()
    for position, grapheme in enumerate(graphemes):
        newline = _is_newline(grapheme)
        words.feed(position, not newline and not grapheme.isspace())
        lines.feed(position, not newline)
    length = len(graphemes)
    return Tokens(word=words.build(length), line=lines.build(length))
