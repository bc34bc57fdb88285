"""Test the Blessed terminal player."""

from unittest.mock import MagicMock, PropertyMock, patch

import blessed

from typespool.config import TypewriterOptions
from typespool.decorate import Tag, decorate
from typespool.state import AnimationState, Phase
from typespool.terminal import TerminalInterface, TerminalPlayer
from typespool.tokenizer import split_graphemes, tokenize


def plain_interface():
    # No styling: every capability renders as an empty string
    return TerminalInterface(blessed.Terminal(force_styling=None))


def make_frame(text, caret, phase=Phase.TYPING):
    graphemes = split_graphemes(text)
    state = AnimationState(graphemes=graphemes, tokens=tokenize(graphemes), phase=phase)
    state.caret.place(caret, len(graphemes))
    return decorate(state)


def test_styled_hides_untyped_and_erased():
    """Test grapheme output for each base tag."""
    interface = plain_interface()
    assert interface.styled("a", (Tag.TYPED,)) == "a"
    assert interface.styled("a", (Tag.SELECTED,)) == "a"
    assert interface.styled("a", (Tag.TYPED, "faded")) == "a"
    assert interface.styled("a", (Tag.UNTYPED,)) == ""
    assert interface.styled("a", (Tag.ERASED, "faded")) == ""


def test_format_lines_with_caret():
    """Test the caret marker while typing."""
    interface = plain_interface()
    assert interface.format_lines(make_frame("ab", 1)) == ["a|"]
    assert interface.format_lines(make_frame("ab", 2)) == ["ab|"]


def test_format_lines_splits_on_newlines():
    """Test that typed newlines start new display lines."""
    interface = plain_interface()
    frame = make_frame("ab\ncd", 5, phase=Phase.COMPLETE)
    assert interface.format_lines(frame) == ["ab", "cd"]
    # An untyped newline does not break the line yet
    assert interface.format_lines(make_frame("ab\ncd", 2)) == ["ab|"]


def test_draw_frame_writes_text_and_status(capsys):
    """Test drawing a frame with a status line."""
    interface = plain_interface()
    with patch.object(TerminalInterface, 'height', new_callable=PropertyMock, return_value=24):
        interface.draw_frame(make_frame("hello", 5, phase=Phase.COMPLETE), status="bye")
    out = capsys.readouterr().out
    assert "hello" in out
    assert "bye" in out


def test_player_runs_to_completion():
    """Test playing a short animation against a mock terminal."""
    terminal = MagicMock()
    options = TypewriterOptions(text=["a", "b"], repeat=0, pre_type_delay=0, type_delay=0,
                                pre_erase_delay=0, erase_delay=0)
    player = TerminalPlayer(options, terminal=terminal)
    player.run()

    terminal.setup.assert_called_once()
    terminal.cleanup.assert_called_once()
    last_frame = terminal.draw_frame.call_args[0][0]
    assert last_frame.text == "b"
    assert last_frame.phase is Phase.COMPLETE


def test_player_cleans_up_on_interrupt():
    """Test that Ctrl-C restores the terminal."""
    terminal = MagicMock()
    player = TerminalPlayer(TypewriterOptions(text="a"), terminal=terminal)
    with patch('typespool.terminal.asyncio.run', side_effect=KeyboardInterrupt):
        player.run()
    terminal.cleanup.assert_called_once()
