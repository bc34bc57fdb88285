"""Play the typewriter in a plain terminal using Blessed."""

import asyncio
import logging
import random
from typing import Optional

import blessed

from .clock import AsyncioClock
from .config import TypewriterOptions
from .constants import TypewriterConstants
from .decorate import CaretStatus, Frame, Tag
from .machine import Typewriter, TypewriterView

logger = logging.getLogger(__name__)


class TerminalInterface:
    """Handles terminal output using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        # Number of rows drawn by the previous frame, cleared on the next one
        self._last_rows = 0

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        print(self.term.enter_fullscreen + self.term.hide_cursor + self.term.clear, end='', flush=True)
        self.is_fullscreen = True

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen + self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False

    @property
    def height(self) -> int:
        return self.term.height

    def styled(self, grapheme: str, tags: tuple[str, ...]) -> str:
        """Wrap a grapheme in the terminal sequences for its tags."""
        if tags[0] in (Tag.UNTYPED, Tag.ERASED):
            return ''
        prefix = ''
        if tags[0] == Tag.SELECTED:
            prefix += self.term.reverse
        if len(tags) > 1:
            prefix += self.term.dim
        if not prefix:
            return grapheme
        return prefix + grapheme + self.term.normal

    def format_lines(self, frame: Frame) -> list[str]:
        """Turn a frame into display lines, one per line of text."""
        lines = ['']
        show_caret = frame.caret_status is not CaretStatus.COMPLETE
        for position, (grapheme, tags) in enumerate(zip(frame.graphemes, frame.tags)):
            if show_caret and position == frame.caret:
                lines[-1] += self.term.bold('|')
            if grapheme in ('\n', '\r\n') and tags[0] not in (Tag.UNTYPED, Tag.ERASED):
                lines.append('')
                continue
            lines[-1] += self.styled(grapheme, tags)
        if show_caret and frame.caret >= len(frame.graphemes):
            lines[-1] += self.term.bold('|')
        return lines

    def draw_frame(self, frame: Frame, status: str = ''):
        """Redraw the animated text vertically centered, plus a status line."""
        lines = self.format_lines(frame)
        top = max(0, (self.height - len(lines)) // 2)
        margin = TypewriterConstants.FRAME_MARGIN
        out = []
        for y in range(top, top + max(self._last_rows, len(lines))):
            out.append(self.term.move(y, 0) + self.term.clear_eol)
        for offset, line in enumerate(lines):
            out.append(self.term.move(top + offset, margin) + line)
        if status:
            out.append(self.term.move(self.height - 1, 0) + self.term.clear_eol + self.term.dim(status))
        print(''.join(out), end='', flush=True)
        self._last_rows = len(lines)


class TerminalPlayer(TypewriterView):
    """Runs a Typewriter against the terminal until it completes."""

    def __init__(self, options: TypewriterOptions, terminal: Optional[TerminalInterface] = None,
                 rng: Optional[random.Random] = None):
        self.options = options
        self.rng = rng
        self.terminal = terminal or TerminalInterface()
        self._done: Optional[asyncio.Event] = None

    def render(self, frame: Frame) -> None:
        self.terminal.draw_frame(frame, status=TypewriterConstants.STATUS_MESSAGE)

    def completed(self) -> None:
        logger.debug("Terminal playback complete")
        if self._done is not None:
            self._done.set()

    async def play_async(self) -> None:
        """Play until completion (forever with unbounded repeat)."""
        self._done = asyncio.Event()
        typewriter = Typewriter(self.options, self, AsyncioClock(), rng=self.rng)
        try:
            await self._done.wait()
        finally:
            typewriter.stop()

    def run(self) -> None:
        """Set up the terminal, play, and restore the terminal afterwards."""
        self.terminal.setup()
        try:
            asyncio.run(self.play_async())
        except KeyboardInterrupt:
            logger.debug("Interrupted")
        finally:
            self.terminal.cleanup()
