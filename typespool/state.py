"""The animation state record mutated by the state machine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .config import EraseStyle
from .fade import FadeScheduler
from .tokenizer import Tokens, tokenize


class Phase(Enum):
    IDLE = "idle"
    TYPING = "typing"
    ERASING = "erasing"
    COMPLETE = "complete"


@dataclass
class Caret:
    """Caret position in graphemes, plus where it was before the last shift."""
    current_index: int = 0
    previous_index: int = 0

    def shift(self, delta: int, length: int):
        self.previous_index = self.current_index
        self.current_index = max(0, min(self.current_index + delta, length))

    def place(self, index: int, length: int):
        """Put the caret somewhere without recording a shift."""
        index = max(0, min(index, length))
        self.current_index = index
        self.previous_index = index


@dataclass
class AnimationState:
    graphemes: tuple[str, ...] = ()
    tokens: Tokens = field(default_factory=lambda: tokenize(()))
    caret: Caret = field(default_factory=Caret)
    phase: Phase = Phase.IDLE
    pending_phase: Optional[Phase] = None
    erase_style: EraseStyle = EraseStyle.SELECT_ALL
    # True from the start of an erase phase until the next item starts typing
    erasing_word: bool = False
    fades: FadeScheduler = field(default_factory=FadeScheduler)

    @property
    def length(self) -> int:
        return len(self.graphemes)

    @property
    def text(self) -> str:
        return "".join(self.graphemes)

    @property
    def is_done_erasing(self) -> bool:
        # Selection styles need the caret at 0 for two ticks in a row
        if self.erase_style.selects:
            return self.caret.current_index == 0 and self.caret.previous_index == 0
        return self.caret.current_index == 0

    def recompute_fades(self):
        self.fades.recompute(self.tokens, self.length, self.caret.current_index)
