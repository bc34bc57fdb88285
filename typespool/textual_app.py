"""Textual widget and demo app for the typewriter."""

import random
from collections.abc import Mapping
from typing import Optional, Union

from rich.style import Style
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Footer, Header, Static

from .clock import Callback, Clock, Timer
from .config import TypewriterOptions
from .decorate import Frame
from .machine import Typewriter, TypewriterView
from .view import FrameRenderer


class _DeferredCall(Timer):
    def __init__(self):
        self.cancelled = False

    def stop(self) -> None:
        self.cancelled = True


class TextualClock(Clock):
    """Clock that schedules on a Textual widget's timers."""

    def __init__(self, widget: Widget):
        self._widget = widget

    def set_timer(self, delay: float, callback: Callback) -> Timer:
        return self._widget.set_timer(delay, callback)

    def set_interval(self, interval: float, callback: Callback) -> Timer:
        return self._widget.set_interval(interval, callback)

    def call_after_refresh(self, callback: Callback) -> Timer:
        # call_after_refresh returns no handle, so wrap the callback in one
        handle = _DeferredCall()

        def run():
            if not handle.cancelled:
                callback()

        self._widget.call_after_refresh(run)
        return handle


class _WidgetView(TypewriterView):
    """Forwards frames and events from the state machine to the widget."""

    def __init__(self, widget: "TypewriterWidget"):
        self._widget = widget

    def render(self, frame: Frame) -> None:
        self._widget.show_frame(frame)

    def typed_char(self, char: str, index: int) -> None:
        self._widget.post_message(TypewriterWidget.TypedChar(char, index))

    def typed(self, text: str) -> None:
        self._widget.post_message(TypewriterWidget.Typed(text))

    def erased(self, text: str) -> None:
        self._widget.post_message(TypewriterWidget.Erased(text))

    def completed(self) -> None:
        self._widget.post_message(TypewriterWidget.Completed())


class TypewriterWidget(Static):
    """Static that types, fades and erases its text items."""

    DEFAULT_CSS = """
    TypewriterWidget {
        height: auto;
        width: 100%;
        padding: 0 1;
    }
    """

    class TypedChar(Message):
        """A character was typed."""

        def __init__(self, char: str, index: int) -> None:
            super().__init__()
            self.char = char
            self.index = index

    class Typed(Message):
        """An item was fully typed."""

        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    class Erased(Message):
        """An item was fully erased."""

        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    class Completed(Message):
        """The animation finished."""

    def __init__(self, options: Union[TypewriterOptions, Mapping],
                 fade_styles: Optional[dict[str, Style]] = None,
                 rng: Optional[random.Random] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.rng = rng
        if isinstance(options, Mapping):
            options = TypewriterOptions.from_mapping(options)
        self.options = options
        self.frame_renderer = FrameRenderer(fade_styles)
        self.typewriter: Optional[Typewriter] = None

    def on_mount(self) -> None:
        self.typewriter = Typewriter(self.options, _WidgetView(self), TextualClock(self), rng=self.rng)

    def on_unmount(self) -> None:
        if self.typewriter is not None:
            self.typewriter.stop()

    def show_frame(self, frame: Frame) -> None:
        self.update(self.frame_renderer.render(frame))

    def configure(self, **changes) -> None:
        """Change options and restart; raises ConfigError on invalid changes."""
        if self.typewriter is None:
            self.options = self.options.replace(**changes)
            return
        self.typewriter.configure(**changes)
        self.options = self.typewriter.options


class TypewriterApp(App):
    """Full-screen demo of a TypewriterWidget."""

    CSS = """
    Screen {
        align: center middle;
    }
    TypewriterWidget {
        width: 80%;
        content-align: center middle;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("r", "restart", "Restart"),
    ]

    def __init__(self, options: TypewriterOptions, fade_styles: Optional[dict[str, Style]] = None,
                 rng: Optional[random.Random] = None):
        super().__init__()
        self.options = options
        self.fade_styles = fade_styles
        self.rng = rng

    def compose(self) -> ComposeResult:
        yield Header()
        yield TypewriterWidget(self.options, fade_styles=self.fade_styles, rng=self.rng, id="typewriter")
        yield Footer()

    def on_typewriter_widget_typed(self, message: TypewriterWidget.Typed) -> None:
        self.sub_title = f"Typed: {message.text}"

    def on_typewriter_widget_completed(self, message: TypewriterWidget.Completed) -> None:
        self.sub_title = "Complete"

    def action_restart(self) -> None:
        widget = self.query_one(TypewriterWidget)
        if widget.typewriter is not None:
            self.sub_title = ""
            widget.typewriter.reset()
