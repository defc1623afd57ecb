from typing import Any, Iterable, List, Optional

from coopcache.exceptions import InvalidConfigurationError
from coopcache.storage.block import Block, content_id


class SlotStore:
    """Fixed-capacity slot array with lookup by content identity.

    Used for client caches, the coordinator cache and the coordinator disk.
    Capacity is set at construction and never changes; a slot is either
    empty (None) or holds exactly one Block.

    Example:
        store = SlotStore(capacity=2)
        store.warm_up([Block("x"), Block("y")])
        store.lookup("y")   # -> 1
        store.lookup("z")   # -> None
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise InvalidConfigurationError(f"capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self._slots: List[Optional[Block]] = [None] * capacity

    def warm_up(self, blocks: Iterable[Any]) -> int:
        """Fill slots from the front with the given blocks or payloads.

        Extra blocks beyond capacity are ignored. Returns the number of
        occupied slots afterwards.
        """
        self._slots = [None] * self.capacity
        for i, block in enumerate(blocks):
            if i >= self.capacity:
                break
            self._slots[i] = block if isinstance(block, Block) else Block(block)
        return self.occupied

    def lookup(self, value: Any) -> Optional[int]:
        """Return the slot index holding value, or None."""
        wanted = content_id(value)
        for i, block in enumerate(self._slots):
            if block is not None and block.identity == wanted:
                return i
        return None

    def get_block(self, index: int) -> Optional[Block]:
        return self._slots[index]

    def update(self, index: int, block: Block) -> None:
        self._slots[index] = block

    def is_occupied(self, index: int) -> bool:
        return self._slots[index] is not None

    def blocks(self) -> List[Block]:
        """Occupied blocks in slot order."""
        return [b for b in self._slots if b is not None]

    def identities(self) -> set:
        return {b.identity for b in self._slots if b is not None}

    @property
    def occupied(self) -> int:
        return sum(1 for b in self._slots if b is not None)

    def __len__(self) -> int:
        return self.capacity

    def __repr__(self) -> str:
        return f"SlotStore(capacity={self.capacity}, occupied={self.occupied})"
