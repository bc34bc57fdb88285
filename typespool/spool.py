"""The spool: ordered text items with shuffle and repeat bookkeeping."""

import logging
import random
from typing import Optional

logger = logging.getLogger(__name__)


class Spool:
    """Ordered list of text items cycled by the typewriter.

    ``repeat`` is the number of extra cycles after the first one; ``None``
    repeats forever. The order is rebuilt (and reshuffled when enabled) on
    construction and at the start of every repeat cycle.
    """

    def __init__(self, items, shuffle: bool = False, repeat: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        self._source: tuple[str, ...] = tuple(items)
        self.shuffle = shuffle
        self.repeat = repeat
        self.repeat_counter = 0
        self.index = 0
        self._rng = rng or random.Random()
        self.items: list[str] = []
        self.rebuild()

    def rebuild(self):
        """Rebuild the order from the source items and rewind to the first."""
        self.items = list(self._source)
        if self.shuffle:
            # random.shuffle is an in-place Fisher-Yates shuffle
            self._rng.shuffle(self.items)
        self.index = 0
        logger.debug(f"Spool rebuilt: {self.items!r}")

    def __len__(self):
        return len(self.items)

    @property
    def current(self) -> str:
        return self.items[self.index]

    @property
    def is_last(self) -> bool:
        return self.index >= len(self.items) - 1

    @property
    def repeats_remaining(self) -> bool:
        if self.repeat is None:
            return True
        return self.repeat_counter < self.repeat

    def advance(self) -> str:
        """Move to the next item in the current cycle."""
        if not self.is_last:
            self.index += 1
        return self.current

    def next_cycle(self) -> str:
        """Count a repetition and start a new cycle from the first item."""
        self.repeat_counter += 1
        self.rebuild()
        return self.current
