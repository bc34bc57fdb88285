"""Render frames as Rich text.

Maps the decoration tags of a Frame to Rich styles. Untyped and erased
characters are not shown; selected characters are reversed; fade keys get
their own style (dim unless configured otherwise).
"""

from typing import Optional

from rich.style import Style
from rich.text import Text

from .decorate import CaretStatus, Frame, Tag

DEFAULT_STYLES: dict[str, Style] = {
    Tag.TYPED: Style(),
    Tag.SELECTED: Style(reverse=True),
}

DEFAULT_FADE_STYLE = Style(dim=True)

CARET = "▏"

# Graphemes hidden from the output
_HIDDEN_TAGS = (Tag.UNTYPED, Tag.ERASED)


class FrameRenderer:
    """Turns frames into Rich Text.

    Args:
        fade_styles: Style per fade key. Keys not listed use DEFAULT_FADE_STYLE.
        caret: Character drawn at the caret position, or "" for none.
        caret_style: Style of the caret character.
    """

    def __init__(self, fade_styles: Optional[dict[str, Style]] = None,
                 caret: str = CARET, caret_style: Optional[Style] = None):
        self.fade_styles = dict(fade_styles or {})
        self.caret = caret
        self.caret_style = caret_style or Style(bold=True)

    def style_for(self, tags: tuple[str, ...]) -> Style:
        style = DEFAULT_STYLES.get(tags[0], Style())
        for key in tags[1:]:
            style += self.fade_styles.get(key, DEFAULT_FADE_STYLE)
        return style

    def _draws_caret(self, frame: Frame) -> bool:
        return bool(self.caret) and frame.caret_status is not CaretStatus.COMPLETE

    def render(self, frame: Frame) -> Text:
        text = Text()
        for position, (grapheme, tags) in enumerate(zip(frame.graphemes, frame.tags)):
            if position == frame.caret and self._draws_caret(frame):
                text.append(self.caret, style=self.caret_style)
            if tags[0] in _HIDDEN_TAGS:
                continue
            text.append(grapheme, style=self.style_for(tags))
        if frame.caret >= len(frame.graphemes) and self._draws_caret(frame):
            text.append(self.caret, style=self.caret_style)
        return text


def render_frame(frame: Frame) -> Text:
    """Render a frame with the default styles."""
    return FrameRenderer().render(frame)
