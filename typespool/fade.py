"""Fade descriptors: parsing the fade option and scheduling fade boundaries.

A fade marks characters that are far enough behind the caret with a key
(``"faded"`` by default). The boundary for each fade is derived from the
caret position on every change; once typing reaches the end of the text a
fade-out sequence walks the offset down to zero, driven by the same typing
ticks.
"""

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .constants import TypewriterConstants
from .errors import ConfigError
from .seek import seek
from .tokenizer import Granularity, Tokens

logger = logging.getLogger(__name__)

_FADE_STRING_RE = re.compile(r"^(\d+)([cwl]?)([sfn]?)$", re.IGNORECASE)

_GRANULARITY_LETTERS = {
    "": Granularity.CHAR,
    "c": Granularity.CHAR,
    "w": Granularity.WORD,
    "l": Granularity.LINE,
}


class FadeOutPolicy(Enum):
    """What happens to a fade once typing reaches the end of the text."""
    FAST = "fast"  # offset drops to 0 on the final tick
    SLOW = "slow"  # offset counts down by 1 per tick
    NONE = "none"  # boundary stays where it was


_POLICY_LETTERS = {
    "": FadeOutPolicy.SLOW,
    "s": FadeOutPolicy.SLOW,
    "f": FadeOutPolicy.FAST,
    "n": FadeOutPolicy.NONE,
}

_MAPPING_FIELDS = ("offset", "type", "key", "out")


@dataclass(frozen=True)
class FadeSpec:
    offset: int = TypewriterConstants.FADE_OFFSET
    granularity: Granularity = Granularity.CHAR
    key: str = TypewriterConstants.FADE_KEY
    out: FadeOutPolicy = FadeOutPolicy.FAST


def parse_enum(enum_cls, value, option: str):
    """Parse an enum member from a member, its value or its name.

    Strings are matched case-insensitively and ``_``/``-`` are
    interchangeable, so ``"select_back"``, ``"SELECT-BACK"`` and
    ``EraseStyle.SELECT_BACK`` are the same thing.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        wanted = value.strip().lower().replace("_", "-")
        for member in enum_cls:
            if wanted in (member.value.lower(), member.name.lower().replace("_", "-")):
                return member
    choices = ", ".join(member.value for member in enum_cls)
    raise ConfigError(f"Invalid {option}: {value!r} (expected one of {choices})")


def _check_offset(offset) -> int:
    if isinstance(offset, bool) or not isinstance(offset, (int, float)):
        raise ConfigError(f"Fade offset must be a number, got {offset!r}")
    if not math.isfinite(offset):
        raise ConfigError(f"Fade offset must be finite, got {offset!r}")
    if offset != int(offset):
        raise ConfigError(f"Fade offset must be a whole number, got {offset!r}")
    if offset < 0:
        raise ConfigError(f"Fade offset must not be negative, got {offset!r}")
    return int(offset)


def _check_key(key) -> str:
    if not isinstance(key, str) or not key:
        raise ConfigError(f"Fade key must be a non-empty string, got {key!r}")
    return key


def _from_string(config: str) -> FadeSpec:
    match = _FADE_STRING_RE.match(config)
    if not match:
        raise ConfigError(
            f"Invalid fade string {config!r} (expected e.g. '2', '3w', '1lf')"
        )
    offset, granularity, policy = match.groups()
    return FadeSpec(
        offset=int(offset),
        granularity=_GRANULARITY_LETTERS[granularity.lower()],
        key=TypewriterConstants.FADE_STRING_KEY_PREFIX + config,
        out=_POLICY_LETTERS[policy.lower()],
    )


def _from_mapping(config: Mapping) -> FadeSpec:
    unknown = set(config) - set(_MAPPING_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown fade fields: {', '.join(sorted(map(str, unknown)))}")
    defaults = FadeSpec()
    return FadeSpec(
        offset=_check_offset(config.get("offset", defaults.offset)),
        granularity=parse_enum(Granularity, config.get("type", defaults.granularity), "fade type"),
        key=_check_key(config.get("key", defaults.key)),
        out=parse_enum(FadeOutPolicy, config.get("out", defaults.out), "fade out policy"),
    )


def normalize_fade(config: Any) -> list[FadeSpec]:
    """Normalize the polymorphic fade option into a list of FadeSpec.

    Accepted shapes:
        - None / False: no fades
        - True: one default fade
        - a non-negative whole number: default fade with that offset
        - a string like ``"2ws"``: offset, granularity letter (c/w/l) and
          fade-out letter (s/f/n); keyed ``"faded-2ws"``
        - a mapping with optional ``offset``, ``type``, ``key``, ``out``
        - a FadeSpec
        - a list or tuple of any of the above

    Raises:
        ConfigError: If any element cannot be parsed.
    """
    if config is None or config is False:
        return []
    if config is True:
        return [FadeSpec()]
    if isinstance(config, FadeSpec):
        _check_offset(config.offset)
        _check_key(config.key)
        return [config]
    if isinstance(config, (int, float)):
        return [FadeSpec(offset=_check_offset(config))]
    if isinstance(config, str):
        return [_from_string(config)]
    if isinstance(config, Mapping):
        return [_from_mapping(config)]
    if isinstance(config, (list, tuple)):
        specs: list[FadeSpec] = []
        for item in config:
            specs.extend(normalize_fade(item))
        return specs
    raise ConfigError(f"Unsupported fade configuration: {config!r}")


class FadeScheduler:
    """Tracks the current boundary of every active fade.

    A character carries fade key ``k`` iff its index is below the boundary
    of some fade keyed ``k``. Boundaries and fade-out countdowns belong to
    each fade by its position in ``specs``, so fades that share a key keep
    their own offsets and policies. Boundaries are recomputed from scratch on
    every call to recompute(); nothing is patched incrementally.
    """

    def __init__(self, specs=()):
        self.specs: tuple[FadeSpec, ...] = ()
        self._boundaries: list[int] = []
        # Fade-out countdowns by spec position; only populated after typing
        # reached the end
        self._fade_out: dict[int, int] = {}
        self._fading_out = False
        self.reset(specs)

    def reset(self, specs):
        self.specs = tuple(specs)
        self._boundaries = [0] * len(self.specs)
        self.clear_fade_out()

    @property
    def fading_out(self) -> bool:
        return self._fading_out

    @property
    def fade_out_state(self) -> dict[int, int]:
        """Copy of the remaining fade-out offsets by spec position."""
        return dict(self._fade_out)

    def effective_offset(self, position: int) -> int:
        return self._fade_out.get(position, self.specs[position].offset)

    def begin_fade_out(self):
        """Start the terminal fade-out once typing has reached the end."""
        self._fading_out = True
        self._fade_out = {}
        for position, spec in enumerate(self.specs):
            if spec.out is FadeOutPolicy.FAST:
                self._fade_out[position] = 0
            elif spec.out is FadeOutPolicy.SLOW:
                self._fade_out[position] = spec.offset
        logger.debug(f"Fade-out started: {self._fade_out}")

    def tick_fade_out(self):
        """Advance slow fade-outs by one step."""
        for position, spec in enumerate(self.specs):
            if spec.out is FadeOutPolicy.SLOW and self._fade_out.get(position, 0) > 0:
                self._fade_out[position] -= 1

    @property
    def fade_out_done(self) -> bool:
        """True once every fade with a fade-out policy reached offset 0."""
        if not self._fading_out:
            return False
        return all(
            self._fade_out.get(position, 0) == 0
            for position, spec in enumerate(self.specs)
            if spec.out is not FadeOutPolicy.NONE
        )

    def clear_fade_out(self):
        self._fade_out = {}
        self._fading_out = False

    def recompute(self, tokens: Tokens, length: int, caret: int):
        """Recompute every boundary for the given caret position."""
        for position, spec in enumerate(self.specs):
            resolved = seek(tokens, length, caret, -self.effective_offset(position), spec.granularity)
            if resolved is None:
                resolved = 0
            self._boundaries[position] = max(0, min(resolved, length))

    def boundary(self, key: str) -> int:
        """Furthest boundary among the fades keyed ``key``."""
        boundaries = [self._boundaries[position]
                      for position, spec in enumerate(self.specs) if spec.key == key]
        if not boundaries:
            raise KeyError(key)
        return max(boundaries)

    def classify(self, char_index: int) -> tuple[str, ...]:
        """Return the fade keys carried by the character at char_index."""
        keys = []
        for position, spec in enumerate(self.specs):
            if char_index < self._boundaries[position] and spec.key not in keys:
                keys.append(spec.key)
        return tuple(keys)
