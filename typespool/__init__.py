"""typespool - typewriter-style text animation."""

from .config import EraseStyle, InitialAction, TypewriterOptions
from .decorate import CaretStatus, Frame, Tag, decorate
from .errors import ConfigError
from .fade import FadeOutPolicy, FadeScheduler, FadeSpec, normalize_fade
from .machine import RecordingView, Typewriter, TypewriterView, run_headless
from .seek import seek
from .spool import Spool
from .state import Phase
from .tokenizer import Granularity, split_graphemes, tokenize

__all__ = [
    'CaretStatus',
    'ConfigError',
    'EraseStyle',
    'FadeOutPolicy',
    'FadeScheduler',
    'FadeSpec',
    'Frame',
    'Granularity',
    'InitialAction',
    'Phase',
    'RecordingView',
    'Spool',
    'Tag',
    'Typewriter',
    'TypewriterOptions',
    'TypewriterView',
    'decorate',
    'normalize_fade',
    'run_headless',
    'seek',
    'split_graphemes',
    'tokenize',
]
