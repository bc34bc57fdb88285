"""Test option validation."""

import dataclasses
import math

import pytest

from typespool.config import EraseStyle, InitialAction, TypewriterOptions, option_names
from typespool.constants import TypewriterConstants
from typespool.errors import ConfigError
from typespool.fade import FadeSpec


def test_defaults():
    """Test the default options."""
    options = TypewriterOptions(text="Hello")
    assert options.text == ("Hello",)
    assert options.repeat is None
    assert options.shuffle is False
    assert options.initial_action is InitialAction.TYPING
    assert options.erase_style is EraseStyle.SELECT_ALL
    assert options.erase_on_complete is False
    assert options.pre_type_delay == TypewriterConstants.PRE_TYPE_DELAY
    assert options.type_delay == TypewriterConstants.TYPE_DELAY
    assert options.pre_erase_delay == TypewriterConstants.PRE_ERASE_DELAY
    assert options.erase_delay == TypewriterConstants.ERASE_DELAY
    assert options.fade_specs == ()


def test_text_list_becomes_tuple():
    """Test that sequences of items are normalized to a tuple."""
    assert TypewriterOptions(text=["a", "b"]).text == ("a", "b")


@pytest.mark.parametrize("text", [[], [""], "", ["a", ""], ["a", 3], 42, None])
def test_invalid_text(text):
    """Test that missing or empty items are rejected."""
    with pytest.raises(ConfigError):
        TypewriterOptions(text=text)


def test_repeat_values():
    """Test repeat normalization."""
    assert TypewriterOptions(text="a", repeat=0).repeat == 0
    assert TypewriterOptions(text="a", repeat=2.0).repeat == 2
    assert TypewriterOptions(text="a", repeat=math.inf).repeat is None


@pytest.mark.parametrize("repeat", [-1, 1.5, -math.inf, math.nan, True, "2"])
def test_invalid_repeat(repeat):
    """Test that negative, fractional and non-numeric repeats are rejected."""
    with pytest.raises(ConfigError):
        TypewriterOptions(text="a", repeat=repeat)


@pytest.mark.parametrize("name", ["pre_type_delay", "type_delay", "pre_erase_delay", "erase_delay"])
def test_invalid_delays(name):
    """Test that negative and non-finite delays are rejected."""
    for value in (-0.1, math.inf, "1", None):
        with pytest.raises(ConfigError):
            TypewriterOptions(text="a", **{name: value})
    assert getattr(TypewriterOptions(text="a", **{name: 0}), name) == 0.0


def test_enum_strings():
    """Test that enum options accept their string spellings."""
    options = TypewriterOptions(text="a", erase_style="select_back", initial_action="ERASING")
    assert options.erase_style is EraseStyle.SELECT_BACK
    assert options.initial_action is InitialAction.ERASING
    assert TypewriterOptions(text="a", erase_style="clear").erase_style is EraseStyle.CLEAR


def test_invalid_enums():
    """Test that unknown enum spellings are rejected."""
    with pytest.raises(ConfigError):
        TypewriterOptions(text="a", erase_style="shred")
    with pytest.raises(ConfigError):
        TypewriterOptions(text="a", initial_action="waiting")


def test_booleans_must_be_bools():
    """Test that flags are not coerced from other types."""
    with pytest.raises(ConfigError):
        TypewriterOptions(text="a", shuffle="yes")
    with pytest.raises(ConfigError):
        TypewriterOptions(text="a", erase_on_complete=1)


def test_fade_is_parsed_up_front():
    """Test that fades are normalized on construction."""
    options = TypewriterOptions(text="a", fade=["2ws", True])
    assert [spec.key for spec in options.fade_specs] == ["faded-2ws", "faded"]
    assert all(isinstance(spec, FadeSpec) for spec in options.fade_specs)
    with pytest.raises(ConfigError):
        TypewriterOptions(text="a", fade="2q")


def test_selects_property():
    """Test which erase styles select before removing."""
    assert EraseStyle.SELECT_BACK.selects
    assert EraseStyle.SELECT_ALL.selects
    assert not EraseStyle.BACKSPACE.selects
    assert not EraseStyle.CLEAR.selects


def test_replace_validates():
    """Test that replace returns a validated copy."""
    options = TypewriterOptions(text="a")
    changed = options.replace(text=["x", "y"], fade=2)
    assert changed.text == ("x", "y")
    assert changed.fade_specs == (FadeSpec(offset=2),)
    assert options.text == ("a",)

    with pytest.raises(ConfigError):
        options.replace(type_delay=-1)
    with pytest.raises(ConfigError, match="Unknown options: speed"):
        options.replace(speed=2)
    with pytest.raises(ConfigError):
        options.replace(fade_specs=())


def test_mapping_round_trip():
    """Test converting options to a plain mapping and back."""
    options = TypewriterOptions(
        text=["a", "b"], repeat=3, shuffle=True, erase_style="backspace",
        erase_on_complete=True, fade="1w", type_delay=0.5,
    )
    mapping = options.to_mapping()
    assert mapping["erase_style"] == "backspace"
    assert mapping["text"] == ["a", "b"]
    assert TypewriterOptions.from_mapping(mapping) == options


def test_from_mapping_errors():
    """Test that mappings need text and known keys only."""
    with pytest.raises(ConfigError, match="text is required"):
        TypewriterOptions.from_mapping({"repeat": 1})
    with pytest.raises(ConfigError):
        TypewriterOptions.from_mapping({"text": "a", "colour": "red"})


def test_option_names():
    """Test the public option names."""
    names = option_names()
    assert "fade" in names
    assert "fade_specs" not in names
    assert names[0] == "text"


def test_options_are_detached_and_frozen():
    """Test that options do not change with the caller's lists and cannot be reassigned."""
    fade = ["2ws", {"offset": 1, "key": "soft"}]
    options = TypewriterOptions(text="a", fade=fade)
    fade.append(True)
    fade[1]["offset"] = 5

    assert options.fade == ("2ws", {"offset": 1, "key": "soft"})
    assert [spec.offset for spec in options.fade_specs] == [2, 1]
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.fade = True
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.repeat = 1
