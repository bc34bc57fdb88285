"""Resolve "N tokens back/forward from the caret" to a grapheme index."""

from typing import Optional

from .tokenizer import Granularity, Tokens


def seek(tokens: Tokens, length: int, index: int, offset: int,
         granularity: Granularity) -> Optional[int]:
    """Return the caret position ``offset`` units away from ``index``.

    Character seeks are plain arithmetic and are not clamped against the
    text length; the caller bounds the result when it needs to.

    Word and line seeks step over spans. Moving backward (offset <= 0) the
    span under the caret is step 0 and the result is the start of the target
    span. When the caret sits in a gap the table points at the span *after*
    the gap, so the backward walk takes one extra step to land relative to
    the span just typed. That extra step is taken only from a gap: inside a
    span the walk is exactly ``offset`` spans, so ``"ab cd ef"`` with the
    caret on ``f`` and offset -1 resolves to 3, not 0. Either way the caret's
    own span plus ``-offset`` spans behind it stay past the result. Moving
    forward the result is the exclusive end of the target span, and from a
    gap the following span is the first step.

    Args:
        tokens: Token tables of the active text.
        length: Grapheme count of the active text.
        index: Caret position in [0, length].
        offset: Signed number of units to move.
        granularity: Unit to step by.

    Returns:
        The resolved position, or None when the seek runs off either end.
    """
    if index == length and offset == 0:
        return length

    if granularity is Granularity.CHAR:
        result = index + offset
        return result if result >= 0 else None

    if length == 0:
        return None
    table = tokens.table_for(granularity)
    if not table.spans:
        return None
    if index >= length:
        index = length - 1

    # A gap position points at the following span, one step ahead of the
    # span just behind the caret
    target = table.index[index] + offset
    if table.in_gap(index):
        target -= 1

    if target < 0 or target >= len(table.spans):
        return None
    span = table.spans[target]
    return span.start if offset <= 0 else span.end + 1
