import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

import numpy as np

from coopcache.environment.accounting import RequestRecord, Response
from coopcache.environment.aging import AgingCounters, evict
from coopcache.exceptions import InvalidConfigurationError, NotWarmedUpError
from coopcache.storage.block import Block
from coopcache.storage.slots import SlotStore

if TYPE_CHECKING:
    from coopcache.environment.server import CachingServer

logger = logging.getLogger(__name__)


class CachingClient(ABC):
    """A client node taking part in cooperative caching.

    Holds a small private cache with one aging counter per slot. A request
    is first checked against the local cache; on a miss it goes to the
    coordinator, which may route it to a peer client whose summary claims
    the block. Peers answer forwarded requests directly to the original
    requester.

    Subclasses decide how a block fetched from the coordinator is inserted
    by implementing accept_insert().
    """

    def __init__(self,
                 client_id: int,
                 cache_size: int,
                 cache_reference_ticks: int,
                 network_hop_ticks: int,
                 server: "CachingServer",
                 rng: Optional[np.random.Generator] = None):
        """
        Args:
            client_id: Unique id of this client on the coordinator roster
            cache_size: Number of cache slots, at least 1
            cache_reference_ticks: Cost of one local cache reference
            network_hop_ticks: Cost of sending a block over the network
            server: The coordinator this client escalates misses to
            rng: Generator for aging-counter draws
        """
        if cache_size < 1:
            raise InvalidConfigurationError(f"client cache_size must be >= 1, got {cache_size}")
        if cache_reference_ticks < 0 or network_hop_ticks < 0:
            raise InvalidConfigurationError("tick costs must be non-negative")

        self.client_id = client_id
        self.cache_size = cache_size
        self.cache_reference_ticks = cache_reference_ticks
        self.network_hop_ticks = network_hop_ticks
        self.server = server
        self.rng = rng if rng is not None else np.random.default_rng()

        self.cache = SlotStore(cache_size)
        self.counters = AgingCounters(cache_size)
        self.warmed_up = False

        self.response: Optional[Response] = None

    def warm_up(self, contents: Iterable[Any], rng: Optional[np.random.Generator] = None) -> bool:
        """Fill the cache, draw initial counters and resync the coordinator summary."""
        if rng is not None:
            self.rng = rng
        self.cache.warm_up(contents)
        occupied = [self.cache.is_occupied(i) for i in range(self.cache_size)]
        self.counters.refresh(self.rng, occupied=occupied)
        self.warmed_up = True
        self.server.refresh_summary(self.server.index_of(self))
        return True

    def cache_blocks(self) -> List[Block]:
        return self.cache.blocks()

    def lookup_local(self, value: Any) -> Optional[int]:
        return self.cache.lookup(value)

    def age(self, referenced: Optional[int]) -> None:
        self.counters.age(referenced)

    def set_response(self, block: Block, record: RequestRecord) -> None:
        self.response = Response.from_record(block, record)

    def resolve(self,
                value: Any,
                record: Optional[RequestRecord] = None,
                requester: Optional["CachingClient"] = None,
                forwarded: bool = False) -> bool:
        """Find `value` for `requester`, starting at this node's cache.

        Args:
            value: Payload (or Block) being requested
            record: Accounting so far; a fresh record when None
            requester: Client the response goes to; self when None
            forwarded: True when the coordinator is probing this node as a
                peer. A forwarded miss never escalates; it asks the
                coordinator to refresh this node's summary and returns False.

        Returns:
            True once the requester has a response, False on a failed probe.
        """
        if not self.warmed_up:
            raise NotWarmedUpError(f"client {self.client_id} has not been warmed up")
        if record is None:
            record = RequestRecord()
        if requester is None:
            requester = self

        index = self.lookup_local(value)
        record = record.charge(self.cache_reference_ticks)
        self.age(index)

        if index is not None:
            record = record.charge(self.network_hop_ticks)
            if requester.client_id == self.client_id:
                record = record.with_local_hit()
            else:
                record = record.with_global_hit()
            requester.set_response(self.cache.get_block(index), record)
            return True

        if forwarded:
            logger.debug("client %s: stale summary entry for %r", self.client_id, value)
            self.server.refresh_summary(self.server.index_of(self))
            return False

        record = record.charge(self.network_hop_ticks)
        return self.server.resolve_cluster(value, record, requester)

    @abstractmethod
    def accept_insert(self, block: Block) -> None:
        """Insert a block fetched from the coordinator into the local cache."""

    # Response accessors read by workload drivers
    @property
    def response_block(self) -> Optional[Block]:
        return self.response.block if self.response else None

    @property
    def response_cost(self) -> int:
        return self.response.cost if self.response else 0

    @property
    def local_cache_hit(self) -> int:
        return self.response.local_hit if self.response else 0

    @property
    def global_cache_hit(self) -> int:
        return self.response.global_hit if self.response else 0

    @property
    def cache_miss(self) -> int:
        return self.response.cache_miss if self.response else 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.client_id}, cache={self.cache!r})"


class AgingClient(CachingClient):
    """Client that replaces the slot with the lowest aging counter."""

    def accept_insert(self, block: Block) -> None:
        index = evict(self.cache, self.counters, block, self.rng)
        if index is None:
            logger.debug("client %s: every slot hot, dropped %r", self.client_id, block)
        else:
            logger.debug("client %s: inserted %r at slot %d", self.client_id, block, index)
