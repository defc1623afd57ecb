import numpy as np
from typing import Optional

MIN_COUNT = 1
MAX_COUNT = 10


class AgingCounters:
    """Per-slot aging counters approximating LRU.

    Each slot carries an integer in [0, MAX_COUNT]. A reference to a slot
    bumps its counter by one (capped at MAX_COUNT) and ages every other
    slot by one (floored at 0). The victim for a new block is the slot with
    the smallest counter, lowest index on ties.

    Counters are drawn uniformly from [MIN_COUNT, MAX_COUNT] on warm-up and
    on every replacement; the generator is always passed in so runs can be
    reproduced from a seed.
    """

    def __init__(self, size: int):
        self.size = size
        self.counts = np.zeros(size, dtype=np.int64)

    def _draw(self, rng: np.random.Generator, n: Optional[int] = None):
        return rng.integers(MIN_COUNT, MAX_COUNT + 1, size=n)

    def refresh(self, rng: np.random.Generator, occupied=None) -> None:
        """Redraw every counter. Slots marked unoccupied are reset to 0."""
        self.counts = np.asarray(self._draw(rng, self.size), dtype=np.int64)
        if occupied is not None:
            mask = np.asarray(occupied, dtype=bool)
            self.counts[~mask] = 0

    def age(self, referenced: Optional[int]) -> None:
        """Apply one reference: bump `referenced`, decay everything else.

        `referenced` is None on a miss, in which case every slot decays.
        """
        if self.size == 0:
            return
        others = np.ones(self.size, dtype=bool)
        if referenced is not None:
            others[referenced] = False
            self.bump(referenced)
        decay = others & (self.counts > 0)
        self.counts[decay] -= 1

    def bump(self, index: int) -> None:
        if self.counts[index] < MAX_COUNT:
            self.counts[index] += 1

    def victim(self) -> Optional[int]:
        """Slot to overwrite, or None when every slot is at MAX_COUNT.

        Also None for a zero-size array.
        """
        if self.size == 0:
            return None
        index = int(np.argmin(self.counts))
        if self.counts[index] >= MAX_COUNT:
            return None
        return index

    def replace(self, index: int, rng: np.random.Generator) -> None:
        """Give a freshly written slot a new uniform draw."""
        self.counts[index] = int(self._draw(rng))

    def __getitem__(self, index: int) -> int:
        return int(self.counts[index])

    def __setitem__(self, index: int, value: int) -> None:
        self.counts[index] = value

    def tolist(self):
        return [int(c) for c in self.counts]

    def __len__(self) -> int:
        return self.size


def evict(store, counters: AgingCounters, block, rng: np.random.Generator) -> Optional[int]:
    """Write `block` over the coldest slot of `store`.

    Returns the slot written, or None when the insertion was dropped
    because every counter is at MAX_COUNT (or the store has no slots).
    """
    index = counters.victim()
    if index is None:
        return None
    store.update(index, block)
    counters.replace(index, rng)
    return index
