"""Per-character decoration derived from the animation state.

This is the boundary contract consumed by renderers: for every grapheme an
ordered tuple of tags (one of typed/untyped/selected/erased, then any fade
keys), plus a descriptor of what the caret is doing. Frames are rebuilt from
scratch after every state change.
"""

from dataclasses import dataclass
from enum import Enum

from .state import AnimationState, Phase


class Tag:
    TYPED = "typed"
    UNTYPED = "untyped"
    SELECTED = "selected"
    ERASED = "erased"


class CaretStatus(Enum):
    IDLE = "idle"
    PRE_TYPE = "pre-type"
    PRE_ERASE = "pre-erase"
    TYPING = "typing"
    SELECTING = "selecting"
    ERASING = "erasing"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Frame:
    graphemes: tuple[str, ...]
    tags: tuple[tuple[str, ...], ...]
    caret: int
    caret_status: CaretStatus
    phase: Phase

    @property
    def text(self) -> str:
        return "".join(self.graphemes)

    def characters_with(self, tag: str) -> str:
        """Concatenate the graphemes carrying ``tag``."""
        return "".join(g for g, tags in zip(self.graphemes, self.tags) if tag in tags)


def caret_status(state: AnimationState) -> CaretStatus:
    if state.phase is Phase.COMPLETE:
        return CaretStatus.COMPLETE
    if state.phase is Phase.TYPING:
        return CaretStatus.TYPING
    if state.phase is Phase.ERASING:
        if state.erase_style.selects and not state.is_done_erasing:
            return CaretStatus.SELECTING
        return CaretStatus.ERASING
    if state.pending_phase is Phase.TYPING:
        return CaretStatus.PRE_TYPE
    if state.pending_phase is Phase.ERASING:
        return CaretStatus.PRE_ERASE
    return CaretStatus.IDLE


def _base_tag(state: AnimationState, position: int) -> str:
    if position < state.caret.current_index:
        return Tag.TYPED
    if state.erasing_word:
        if state.erase_style.selects and not state.is_done_erasing:
            return Tag.SELECTED
        return Tag.ERASED
    return Tag.UNTYPED


def decorate(state: AnimationState) -> Frame:
    """Build the frame for the current state. Pure; never mutates state."""
    tags = tuple(
        (_base_tag(state, position),) + state.fades.classify(position)
        for position in range(state.length)
    )
    return Frame(
        graphemes=state.graphemes,
        tags=tags,
        caret=state.caret.current_index,
        caret_status=caret_status(state),
        phase=state.phase,
    )
