"""The typewriter state machine.

Phases run ``IDLE -> TYPING -> IDLE -> ERASING -> IDLE -> (TYPING | COMPLETE)``.
Each phase starts with a one-shot pre-delay, performs its first step right
away, then ticks on a periodic timer until its completion predicate holds.
Between finishing a phase and acting on it the machine waits for one refresh
so the final frame of the phase is rendered before the next one starts.

Only one phase timer is ever armed. Every state change ends with a fresh
frame (see decorate.decorate) handed to the view.
"""

import logging
import random
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Optional, Union

import regex

from .clock import Clock, ManualClock, Timer
from .config import EraseStyle, InitialAction, TypewriterOptions
from .constants import TypewriterConstants
from .decorate import Frame, decorate
from .spool import Spool
from .state import AnimationState, Phase
from .tokenizer import split_graphemes, tokenize

logger = logging.getLogger(__name__)

_WORD_CHAR_RE = regex.compile(r"\w")


class TypewriterView(ABC):
    """Receives frames and lifecycle events from a Typewriter.

    Views consume frames read-only. Only render() is required; the event
    hooks default to doing nothing.
    """

    @abstractmethod
    def render(self, frame: Frame) -> None:
        """Show a frame."""

    def typed_char(self, char: str, index: int) -> None:
        pass

    def typed(self, text: str) -> None:
        pass

    def erased(self, text: str) -> None:
        pass

    def completed(self) -> None:
        pass


class RecordingView(TypewriterView):
    """View that records every frame and event, for headless runs."""

    def __init__(self):
        self.frames: list[Frame] = []
        self.events: list[tuple] = []

    def render(self, frame: Frame) -> None:
        self.frames.append(frame)

    def typed_char(self, char: str, index: int) -> None:
        self.events.append(("typed-char", char, index))

    def typed(self, text: str) -> None:
        self.events.append(("typed", text))

    def erased(self, text: str) -> None:
        self.events.append(("erased", text))

    def completed(self) -> None:
        self.events.append(("completed",))

    @property
    def last_frame(self) -> Optional[Frame]:
        return self.frames[-1] if self.frames else None


def _trailing_non_word_run(graphemes, end: int) -> int:
    """Count consecutive non-word graphemes immediately before ``end``."""
    count = 0
    position = end - 1
    while position >= 0 and not _WORD_CHAR_RE.match(graphemes[position]):
        count += 1
        position -= 1
    return count


class Typewriter:
    """Types and erases the spool items, one timer tick at a time."""

    def __init__(self, options: Union[TypewriterOptions, Mapping], view: TypewriterView,
                 clock: Clock, rng: Optional[random.Random] = None, autostart: bool = True):
        if isinstance(options, Mapping):
            options = TypewriterOptions.from_mapping(options)
        self.options = options
        self.view = view
        self.clock = clock
        self.state = AnimationState()
        self.spool: Optional[Spool] = None
        self._rng = rng
        self._timer: Optional[Timer] = None
        self._refresh_timer: Optional[Timer] = None
        self._generation = 0
        self.last_frame: Optional[Frame] = None
        if autostart:
            self.reset()

    # --- Queries ---

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def caret(self):
        return self.state.caret

    @property
    def text(self) -> str:
        return self.state.text

    @property
    def is_done_erasing(self) -> bool:
        return self.state.is_done_erasing

    @property
    def busy(self) -> bool:
        """True while a phase timer or a refresh deferral is pending."""
        return self._timer is not None or self._refresh_timer is not None

    def frame(self) -> Frame:
        return decorate(self.state)

    # --- Configuration and lifecycle ---

    def configure(self, **changes) -> None:
        """Change options and restart the animation from scratch.

        The new options are validated before anything is touched, so a
        ConfigError leaves the running animation as it was.
        """
        options = self.options.replace(**changes)
        self.options = options
        self.reset()

    def reset(self) -> None:
        """Cancel all timers and restart from the configured initial action."""
        self._cancel_timers()
        self._generation += 1
        options = self.options
        self.spool = Spool(options.text, shuffle=options.shuffle,
                           repeat=options.repeat, rng=self._rng)
        self.state.erase_style = options.erase_style
        self.state.fades.reset(options.fade_specs)
        self.state.phase = Phase.IDLE
        self.state.pending_phase = None
        self.state.erasing_word = False
        self._load_current()
        logger.debug(
            f"Reset: {len(self.spool)} item(s), repeat={options.repeat}, "
            f"initial_action={options.initial_action.value}"
        )
        if options.initial_action is InitialAction.TYPING:
            self.start_typing()
        else:
            # Treat the first item as already typed
            generation = self._generation
            self.state.caret.place(self.state.length, self.state.length)
            self._refresh()
            if not self._superseded(generation):
                self.on_word_typed()

    def stop(self) -> None:
        """Tear down: cancel every pending timer. State is left as it is."""
        self._cancel_timers()
        logger.debug("Stopped")

    def _cancel_timers(self):
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        if self._refresh_timer is not None:
            self._refresh_timer.stop()
            self._refresh_timer = None

    def _load_current(self):
        graphemes = split_graphemes(self.spool.current)
        self.state.graphemes = graphemes
        self.state.tokens = tokenize(graphemes)
        self.state.caret.place(self.state.caret.current_index, len(graphemes))

    def _superseded(self, generation: int) -> bool:
        """True when a view call-out reset the machine since ``generation``."""
        return generation != self._generation

    def _refresh(self):
        self.state.recompute_fades()
        self.last_frame = decorate(self.state)
        self.view.render(self.last_frame)

    # --- Typing ---

    def start_typing(self) -> None:
        if self.busy:
            logger.debug("start_typing ignored: a phase timer is already armed")
            return
        generation = self._generation
        state = self.state
        state.caret.place(0, state.length)
        state.erasing_word = False
        state.fades.clear_fade_out()
        state.phase = Phase.IDLE
        state.pending_phase = Phase.TYPING
        self._refresh()
        if self._superseded(generation):
            return
        self._timer = self.clock.set_timer(self.options.pre_type_delay, self._begin_typing)

    def _begin_typing(self):
        self._timer = None
        generation = self._generation
        self.state.pending_phase = None
        self.state.phase = Phase.TYPING
        logger.debug(f"Typing {self.state.text!r}")
        done = self.type_step()
        if self._superseded(generation):
            return
        if done:
            self._finish_typing()
        else:
            self._timer = self.clock.set_interval(self.options.type_delay, self._on_type_tick)

    def type_step(self) -> bool:
        """Type one grapheme, or advance the fade-out once at the end.

        Returns:
            True when the text is fully typed and every fade-out is done.
        """
        generation = self._generation
        state = self.state
        caret = state.caret
        typed = None
        if caret.current_index < state.length:
            index = caret.current_index
            typed = (state.graphemes[index], index)
            caret.shift(1, state.length)
            if caret.current_index == state.length:
                state.fades.begin_fade_out()
        elif state.fades.fading_out:
            state.fades.tick_fade_out()
        else:
            state.fades.begin_fade_out()
        self._refresh()
        if typed is not None and not self._superseded(generation):
            self.view.typed_char(*typed)
        return caret.current_index >= state.length and state.fades.fade_out_done

    def _on_type_tick(self):
        generation = self._generation
        done = self.type_step()
        if done and not self._superseded(generation):
            self._finish_typing()

    def _finish_typing(self):
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        generation = self._generation
        self.state.phase = Phase.IDLE
        self._refresh()
        if self._superseded(generation):
            return
        self._refresh_timer = self.clock.call_after_refresh(self._after_typed)

    def _after_typed(self):
        self._refresh_timer = None
        self.on_word_typed()

    def on_word_typed(self) -> None:
        """Decide what follows a fully typed item."""
        generation = self._generation
        self.view.typed(self.state.text)
        if generation != self._generation:
            # The view reconfigured us
            return
        spool = self.spool
        if spool.is_last:
            if self.options.erase_on_complete or spool.repeats_remaining:
                self.start_erasing()
            else:
                self._complete()
        else:
            self.start_erasing()

    # --- Erasing ---

    def start_erasing(self) -> None:
        if self.busy:
            logger.debug("start_erasing ignored: a phase timer is already armed")
            return
        generation = self._generation
        state = self.state
        state.caret.place(state.length, state.length)
        state.phase = Phase.IDLE
        state.pending_phase = Phase.ERASING
        self._refresh()
        if self._superseded(generation):
            return
        self._timer = self.clock.set_timer(self.options.pre_erase_delay, self._begin_erasing)

    def _begin_erasing(self):
        self._timer = None
        generation = self._generation
        state = self.state
        state.pending_phase = None
        state.phase = Phase.ERASING
        state.erasing_word = True
        state.fades.clear_fade_out()
        logger.debug(f"Erasing {state.text!r} ({self.options.erase_style.value})")
        done = self.erase_step()
        if self._superseded(generation):
            return
        if done:
            self._finish_erasing()
        else:
            self._timer = self.clock.set_interval(self.options.erase_delay, self._on_erase_tick)

    def erase_step(self) -> bool:
        """Perform one erase tick.

        Returns:
            True once erasing is done for the current erase style.
        """
        state = self.state
        caret = state.caret
        if state.erase_style in (EraseStyle.BACKSPACE, EraseStyle.SELECT_BACK):
            run = _trailing_non_word_run(state.graphemes, caret.current_index)
            caret.shift(-(run + 1), state.length)
        else:
            caret.shift(-caret.current_index, state.length)
        self._refresh()
        return state.is_done_erasing

    def _on_erase_tick(self):
        generation = self._generation
        done = self.erase_step()
        if done and not self._superseded(generation):
            self._finish_erasing()

    def _finish_erasing(self):
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        generation = self._generation
        self.state.phase = Phase.IDLE
        self._refresh()
        if self._superseded(generation):
            return
        self._refresh_timer = self.clock.call_after_refresh(self._after_erased)

    def _after_erased(self):
        self._refresh_timer = None
        self.on_word_erased()

    def on_word_erased(self) -> None:
        """Decide what follows a fully erased item."""
        generation = self._generation
        self.view.erased(self.state.text)
        if generation != self._generation:
            return
        spool = self.spool
        if spool.is_last:
            if spool.repeats_remaining:
                spool.next_cycle()
                logger.debug(f"Starting repeat cycle {spool.repeat_counter}")
            else:
                self._complete()
                return
        else:
            spool.advance()
        self._load_current()
        self.start_typing()

    def _complete(self):
        self._cancel_timers()
        generation = self._generation
        self.state.phase = Phase.COMPLETE
        self.state.pending_phase = None
        self._refresh()
        if self._superseded(generation):
            return
        logger.debug("Complete")
        self.view.completed()


def run_headless(options: Union[TypewriterOptions, Mapping], rng: Optional[random.Random] = None,
                 limit: float = TypewriterConstants.HEADLESS_TIME_LIMIT) -> RecordingView:
    """Play an animation on virtual time and return what was recorded.

    Unbounded repeats stop at ``limit`` virtual seconds.
    """
    view = RecordingView()
    clock = ManualClock()
    machine = Typewriter(options, view, clock, rng=rng)
    clock.run_until_idle(limit=limit)
    machine.stop()
    return view
