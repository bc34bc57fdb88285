"""Test normalization of the fade option."""

import math

import pytest

from typespool.errors import ConfigError
from typespool.fade import FadeOutPolicy, FadeSpec, normalize_fade, parse_enum
from typespool.tokenizer import Granularity


def test_disabled_shapes():
    """Test that absent and false fades normalize to nothing."""
    assert normalize_fade(None) == []
    assert normalize_fade(False) == []
    assert normalize_fade([]) == []


def test_true_is_default_fade():
    """Test the defaults of the boolean shorthand."""
    assert normalize_fade(True) == [
        FadeSpec(offset=1, granularity=Granularity.CHAR, key="faded", out=FadeOutPolicy.FAST)
    ]


def test_number_sets_offset():
    """Test that a number keeps the defaults apart from the offset."""
    assert normalize_fade(3) == [FadeSpec(offset=3)]
    assert normalize_fade(0) == [FadeSpec(offset=0)]
    assert normalize_fade(2.0) == [FadeSpec(offset=2)]


def test_string_with_word_and_slow():
    """Test the compact string grammar with every letter given."""
    assert normalize_fade("2ws") == [
        FadeSpec(offset=2, granularity=Granularity.WORD, key="faded-2ws", out=FadeOutPolicy.SLOW)
    ]


@pytest.mark.parametrize("config, granularity, out", [
    ("1", Granularity.CHAR, FadeOutPolicy.SLOW),
    ("1c", Granularity.CHAR, FadeOutPolicy.SLOW),
    ("4l", Granularity.LINE, FadeOutPolicy.SLOW),
    ("1f", Granularity.CHAR, FadeOutPolicy.FAST),
    ("3wn", Granularity.WORD, FadeOutPolicy.NONE),
    ("1LF", Granularity.LINE, FadeOutPolicy.FAST),
])
def test_string_letters(config, granularity, out):
    """Test granularity and fade-out letters, including upper case."""
    [spec] = normalize_fade(config)
    assert spec.granularity is granularity
    assert spec.out is out
    assert spec.key == "faded-" + config


def test_mapping_merges_over_defaults():
    """Test that mapping fields override only what they name."""
    assert normalize_fade({}) == [FadeSpec()]
    assert normalize_fade({"offset": 2, "type": "line", "key": "dim", "out": "none"}) == [
        FadeSpec(offset=2, granularity=Granularity.LINE, key="dim", out=FadeOutPolicy.NONE)
    ]
    assert normalize_fade({"type": Granularity.WORD, "out": "SLOW"}) == [
        FadeSpec(granularity=Granularity.WORD, out=FadeOutPolicy.SLOW)
    ]


def test_sequence_concatenates():
    """Test that lists and tuples concatenate their elements' fades."""
    specs = normalize_fade([True, "2w", {"key": "x"}, [3]])
    assert [spec.key for spec in specs] == ["faded", "faded-2w", "x", "faded"]
    assert specs[3].offset == 3
    assert normalize_fade(("1", None)) == normalize_fade("1")


def test_fade_spec_passes_through():
    """Test that an existing FadeSpec is accepted as is."""
    spec = FadeSpec(offset=5, key="k")
    assert normalize_fade(spec) == [spec]
    assert normalize_fade([spec, spec]) == [spec, spec]


@pytest.mark.parametrize("config", [
    -1,
    1.5,
    math.inf,
    math.nan,
    "",
    "x",
    "2x",
    "-2",
    "2ww",
    {"offset": -1},
    {"offset": True},
    {"offset": "2"},
    {"type": "paragraph"},
    {"out": "later"},
    {"key": ""},
    {"key": 3},
    {"speed": 2},
    ["1", "bad"],
    object(),
    FadeSpec(offset=-1),
    FadeSpec(key=""),
])
def test_invalid_fades_raise(config):
    """Test that malformed fade configurations are rejected."""
    with pytest.raises(ConfigError):
        normalize_fade(config)


def test_config_error_is_value_error():
    """Test that ConfigError can be caught as ValueError."""
    with pytest.raises(ValueError):
        normalize_fade("nope")


def test_parse_enum_spellings():
    """Test that enums parse from members, values and names."""
    assert parse_enum(Granularity, Granularity.WORD, "type") is Granularity.WORD
    assert parse_enum(Granularity, "Word", "type") is Granularity.WORD
    assert parse_enum(FadeOutPolicy, " fast ", "out") is FadeOutPolicy.FAST
    with pytest.raises(ConfigError, match="expected one of char, word, line"):
        parse_enum(Granularity, "sentence", "type")
    with pytest.raises(ConfigError):
        parse_enum(Granularity, 1, "type")
