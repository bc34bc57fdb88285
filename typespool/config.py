"""Animation options and their validation."""

import math
from collections.abc import Mapping, Sequence
import dataclasses
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional, Union

from .constants import TypewriterConstants
from .errors import ConfigError
from .fade import FadeSpec, normalize_fade, parse_enum


class EraseStyle(Enum):
    BACKSPACE = "backspace"
    SELECT_BACK = "select-back"
    SELECT_ALL = "select-all"
    CLEAR = "clear"

    @property
    def selects(self) -> bool:
        """True for styles that highlight text before removing it."""
        return self in (EraseStyle.SELECT_BACK, EraseStyle.SELECT_ALL)


class InitialAction(Enum):
    TYPING = "typing"
    ERASING = "erasing"


def _normalize_text(text) -> tuple[str, ...]:
    if isinstance(text, str):
        items = (text,)
    elif isinstance(text, Sequence):
        items = tuple(text)
    else:
        raise ConfigError(f"text must be a string or a list of strings, got {text!r}")
    if not items:
        raise ConfigError("text must contain at least one item")
    for item in items:
        if not isinstance(item, str):
            raise ConfigError(f"text items must be strings, got {item!r}")
        if not item:
            raise ConfigError("text items must not be empty")
    return items


def _normalize_repeat(repeat) -> Optional[int]:
    # None and infinity both mean "repeat forever"
    if repeat is None:
        return None
    if isinstance(repeat, bool) or not isinstance(repeat, (int, float)):
        raise ConfigError(f"repeat must be a whole number or None, got {repeat!r}")
    if repeat == math.inf:
        return None
    if not math.isfinite(repeat) or repeat != int(repeat) or repeat < 0:
        raise ConfigError(f"repeat must be a non-negative whole number, got {repeat!r}")
    return int(repeat)


def _normalize_delay(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number of seconds, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ConfigError(f"{name} must be a non-negative finite duration, got {value!r}")
    return float(value)


def _copy_fade(fade):
    # Detach from the caller's containers; sequences are stored as tuples
    if isinstance(fade, (list, tuple)):
        return tuple(_copy_fade(item) for item in fade)
    if isinstance(fade, Mapping):
        return dict(fade)
    return fade


def _check_bool(name: str, value) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class TypewriterOptions:
    """Validated animation options.

    Construction validates and normalizes every field: ``text`` becomes a
    tuple, enum fields accept their string values, ``repeat`` of ``math.inf``
    becomes ``None``, and ``fade`` is parsed into ``fade_specs``.

    Raises:
        ConfigError: If any option is invalid.
    """
    text: Union[str, Sequence[str]]
    repeat: Optional[int] = None
    shuffle: bool = False
    initial_action: InitialAction = InitialAction.TYPING
    pre_type_delay: float = TypewriterConstants.PRE_TYPE_DELAY
    type_delay: float = TypewriterConstants.TYPE_DELAY
    pre_erase_delay: float = TypewriterConstants.PRE_ERASE_DELAY
    erase_delay: float = TypewriterConstants.ERASE_DELAY
    erase_style: EraseStyle = EraseStyle.SELECT_ALL
    erase_on_complete: bool = False
    fade: Any = None
    fade_specs: tuple[FadeSpec, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        normalized = {
            "text": _normalize_text(self.text),
            "repeat": _normalize_repeat(self.repeat),
            "shuffle": _check_bool("shuffle", self.shuffle),
            "erase_on_complete": _check_bool("erase_on_complete", self.erase_on_complete),
            "initial_action": parse_enum(InitialAction, self.initial_action, "initial_action"),
            "erase_style": parse_enum(EraseStyle, self.erase_style, "erase_style"),
            "fade": _copy_fade(self.fade),
        }
        for name in ("pre_type_delay", "type_delay", "pre_erase_delay", "erase_delay"):
            normalized[name] = _normalize_delay(name, getattr(self, name))
        normalized["fade_specs"] = tuple(normalize_fade(normalized["fade"]))
        for name, value in normalized.items():
            object.__setattr__(self, name, value)

    def replace(self, **changes) -> "TypewriterOptions":
        """Return a validated copy with some options changed."""
        unknown = set(changes) - set(option_names())
        if unknown:
            raise ConfigError(f"Unknown options: {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> "TypewriterOptions":
        """Build options from a plain mapping, e.g. a preset loaded from JSON."""
        unknown = set(mapping) - set(option_names())
        if unknown:
            raise ConfigError(f"Unknown options: {', '.join(sorted(map(str, unknown)))}")
        if "text" not in mapping:
            raise ConfigError("text is required")
        return cls(**mapping)

    def to_mapping(self) -> dict[str, Any]:
        """Plain JSON-friendly representation of the options."""
        return {
            "text": list(self.text),
            "repeat": self.repeat,
            "shuffle": self.shuffle,
            "initial_action": self.initial_action.value,
            "pre_type_delay": self.pre_type_delay,
            "type_delay": self.type_delay,
            "pre_erase_delay": self.pre_erase_delay,
            "erase_delay": self.erase_delay,
            "erase_style": self.erase_style.value,
            "erase_on_complete": self.erase_on_complete,
            "fade": self.fade,
        }


def option_names() -> tuple[str, ...]:
    return tuple(f.name for f in fields(TypewriterOptions) if f.init)
