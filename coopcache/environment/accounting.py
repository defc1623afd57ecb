"""Per-request accounting threaded through every hop.

A RequestRecord is created at the requesting client and handed along by
value: every step that charges cost or counts a hit returns a new record,
so a failed peer probe can never leak its charges back into the caller.
"""

from dataclasses import dataclass, replace
from typing import Optional

from coopcache.storage.block import Block


@dataclass(frozen=True)
class RequestRecord:
    """Cost and hit/miss counts accumulated by one in-flight request."""
    cost: int = 0
    cache_miss: int = 0
    local_hit: int = 0
    global_hit: int = 0

    def charge(self, ticks: int) -> "RequestRecord":
        return replace(self, cost=self.cost + ticks)

    def with_local_hit(self) -> "RequestRecord":
        return replace(self, local_hit=self.local_hit + 1)

    def with_global_hit(self) -> "RequestRecord":
        return replace(self, global_hit=self.global_hit + 1)

    def with_miss(self) -> "RequestRecord":
        return replace(self, cache_miss=self.cache_miss + 1)


@dataclass(frozen=True)
class Response:
    """What the requester sees once its block has been found."""
    block: Optional[Block]
    cost: int
    cache_miss: int
    local_hit: int
    global_hit: int

    @classmethod
    def from_record(cls, block: Block, record: RequestRecord) -> "Response":
        return cls(
            block=block,
            cost=record.cost,
            cache_miss=record.cache_miss,
            local_hit=record.local_hit,
            global_hit=record.global_hit,
        )
