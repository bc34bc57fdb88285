"""typespool CLI entry point.

Allows running via `python -m typespool` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import logging
import math
import random
import sys
from typing import Any, Optional

from .config import EraseStyle, InitialAction, TypewriterOptions
from .errors import ConfigError
from .presets import PresetStore, get_presets
from .version import get_version_string

logger = logging.getLogger(__name__)

# argparse destination -> TypewriterOptions field
_OPTION_ARGS = (
    "repeat",
    "shuffle",
    "initial_action",
    "pre_type_delay",
    "type_delay",
    "pre_erase_delay",
    "erase_delay",
    "erase_style",
    "erase_on_complete",
    "fade",
)


def _parse_repeat(value: str):
    if value.lower() in ("inf", "infinite", "forever"):
        return math.inf
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a whole number or 'inf', got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typespool",
        description="Type, fade and erase text items in the terminal.",
    )
    parser.add_argument("text", nargs="*", help="text items to cycle through")
    parser.add_argument("-V", "--version", action="store_true", help="print version and exit")
    parser.add_argument("--repeat", type=_parse_repeat, help="extra cycles, or 'inf'")
    parser.add_argument("--shuffle", action="store_true", default=None,
                        help="shuffle the items on every cycle")
    parser.add_argument("--initial-action", choices=[a.value for a in InitialAction])
    parser.add_argument("--erase-style", choices=[s.value for s in EraseStyle])
    parser.add_argument("--erase-on-complete", action="store_true", default=None,
                        help="erase the final item before completing")
    parser.add_argument("--fade", action="append", metavar="SPEC",
                        help="fade spec like 2, 3w or 1lf; repeatable")
    parser.add_argument("--pre-type-delay", type=float, metavar="SECONDS")
    parser.add_argument("--type-delay", type=float, metavar="SECONDS")
    parser.add_argument("--pre-erase-delay", type=float, metavar="SECONDS")
    parser.add_argument("--erase-delay", type=float, metavar="SECONDS")
    parser.add_argument("--seed", type=int, help="random seed for --shuffle")
    parser.add_argument("--preset", help="load options from a saved preset")
    parser.add_argument("--save-preset", metavar="NAME", help="save the options as a preset")
    parser.add_argument("--list-presets", action="store_true", help="list saved presets and exit")
    parser.add_argument("--textual", action="store_true", help="play in a Textual app")
    parser.add_argument("--dry-run", action="store_true",
                        help="play on virtual time and print the event transcript")
    parser.add_argument("--log-file", help="write debug logs to this file")
    return parser


def collect_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Options given explicitly on the command line."""
    overrides: dict[str, Any] = {}
    if args.text:
        overrides["text"] = args.text
    for name in _OPTION_ARGS:
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    return overrides


def build_options(args: argparse.Namespace, store: Optional[PresetStore] = None) -> TypewriterOptions:
    """Resolve command line arguments (and an optional preset) into options.

    Raises:
        ConfigError: If the options are invalid or no text was given.
    """
    overrides = collect_overrides(args)
    if args.preset:
        return (store or get_presets()).load_preset(args.preset, **overrides)
    if "text" not in overrides:
        raise ConfigError("no text given (pass TEXT arguments or --preset)")
    return TypewriterOptions(**overrides)


def _configure_logging(log_file: Optional[str]) -> None:
    # No console handler: the animation owns the terminal
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


def _print_transcript(options: TypewriterOptions, rng: random.Random) -> None:
    from .machine import run_headless

    view = run_headless(options, rng=rng)
    for event in view.events:
        name, *payload = event
        print(name, *(repr(value) for value in payload))


def main(argv: Optional[list[str]] = None, store: Optional[PresetStore] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(get_version_string())
        return 0

    _configure_logging(args.log_file)
    store = store or get_presets()

    if args.list_presets:
        for name in store.list_presets():
            print(name)
        return 0

    try:
        options = build_options(args, store)
    except ConfigError as e:
        print(f"typespool: {e}", file=sys.stderr)
        return 2
    logger.debug(f"Options: {options}")

    if args.save_preset:
        if store.save_preset(args.save_preset, options):
            print(f"Saved preset {args.save_preset!r} to {store.path}")
        else:
            print(f"typespool: could not save preset {args.save_preset!r}", file=sys.stderr)
            return 1

    rng = random.Random(args.seed)
    if args.dry_run:
        _print_transcript(options, rng)
        return 0

    # Lazy imports to avoid loading UI deps for --version and --dry-run
    if args.textual:
        from .textual_app import TypewriterApp
        TypewriterApp(options, rng=rng).run()
    else:
        from .terminal import TerminalPlayer
        TerminalPlayer(options, rng=rng).run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
