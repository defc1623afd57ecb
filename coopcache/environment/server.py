import logging
from typing import Any, Iterable, List, Optional, Sequence, Set

import numpy as np

from coopcache.environment.accounting import RequestRecord
from coopcache.environment.aging import AgingCounters, evict
from coopcache.exceptions import (
    BlockNotFoundError,
    InvalidConfigurationError,
    NotRegisteredError,
    NotWarmedUpError,
)
from coopcache.storage.block import Block, content_id
from coopcache.storage.slots import SlotStore

logger = logging.getLogger(__name__)


class CachingServer:
    """Coordinator for a group of cooperating clients.

    Owns a cache, the authoritative disk, the client roster and one content
    summary per client. A summary is the set of content identities the
    coordinator believes that client caches; it is only rewritten by
    refresh_summary(), so between refreshes it may claim blocks the client
    has evicted or miss blocks it has since inserted.

    Routing order for a client miss: peers whose summary matches (roster
    order, first answer wins), then the coordinator cache, then disk.
    """

    def __init__(self,
                 server_id: int,
                 cache_size: int,
                 disk_size: int,
                 cache_reference_ticks: int,
                 disk_to_cache_ticks: int,
                 network_hop_ticks: int,
                 rng: Optional[np.random.Generator] = None):
        """
        Args:
            server_id: Identifier of the coordinator
            cache_size: Coordinator cache slots; 0 sends every miss to disk
            disk_size: Disk slots, at least 1
            cache_reference_ticks: Cost of one coordinator cache reference
            disk_to_cache_ticks: Cost of reading a block from disk
            network_hop_ticks: Cost of one network transfer
            rng: Generator for aging-counter draws
        """
        if cache_size < 0:
            raise InvalidConfigurationError(f"server cache_size must be >= 0, got {cache_size}")
        if disk_size < 1:
            raise InvalidConfigurationError(f"disk_size must be >= 1, got {disk_size}")
        if min(cache_reference_ticks, disk_to_cache_ticks, network_hop_ticks) < 0:
            raise InvalidConfigurationError("tick costs must be non-negative")

        self.server_id = server_id
        self.cache_size = cache_size
        self.disk_size = disk_size
        self.cache_reference_ticks = cache_reference_ticks
        self.disk_to_cache_ticks = disk_to_cache_ticks
        self.network_hop_ticks = network_hop_ticks
        self.rng = rng if rng is not None else np.random.default_rng()

        self.cache = SlotStore(cache_size)
        self.disk = SlotStore(disk_size)
        self.counters = AgingCounters(cache_size)
        self.warmed_up = False

        self.clients: Optional[List] = None
        self._summaries: List[Set[int]] = []

    # ------------------------------------------------------------------
    # Roster and summaries
    # ------------------------------------------------------------------

    def register_clients(self, clients: Sequence) -> None:
        """Record the roster and give every client an empty summary.

        Clients are told apart by client_id, so ids must be unique.
        """
        clients = list(clients)
        seen = set()
        for client in clients:
            if client.client_id in seen:
                raise InvalidConfigurationError(
                    f"duplicate client_id {client.client_id!r} in roster")
            seen.add(client.client_id)
        self.clients = clients
        self._summaries = [set() for _ in self.clients]
        logger.debug("server %s: registered %d clients", self.server_id, len(self.clients))

    def _require_roster(self) -> List:
        if self.clients is None:
            raise NotRegisteredError(f"server {self.server_id} has no registered clients")
        return self.clients

    def index_of(self, client) -> int:
        for i, member in enumerate(self._require_roster()):
            if member.client_id == client.client_id:
                return i
        raise NotRegisteredError(f"client {client.client_id} is not on the roster")

    def refresh_summary(self, index: int) -> None:
        """Resync one client's summary with what it actually caches now."""
        client = self._require_roster()[index]
        self._summaries[index] = {b.identity for b in client.cache_blocks()}
        logger.debug("server %s: refreshed summary of client %s (%d entries)",
                     self.server_id, client.client_id, len(self._summaries[index]))

    def refresh_all_summaries(self) -> None:
        for i in range(len(self._require_roster())):
            self.refresh_summary(i)

    def summary(self, index: int) -> frozenset:
        self._require_roster()
        return frozenset(self._summaries[index])

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def warm_up(self,
                cache_contents: Iterable[Any],
                disk_contents: Iterable[Any],
                rng: Optional[np.random.Generator] = None) -> bool:
        """Load the disk, fill the cache and draw initial counters."""
        if rng is not None:
            self.rng = rng
        self.disk.warm_up(disk_contents)
        self.cache.warm_up(cache_contents)
        occupied = [self.cache.is_occupied(i) for i in range(self.cache_size)]
        self.counters.refresh(self.rng, occupied=occupied)
        self.warmed_up = True
        return True

    def evict(self, block: Block) -> Optional[int]:
        """Insert `block` over the coldest cache slot.

        When every counter sits at the maximum the block is not cached.
        """
        index = evict(self.cache, self.counters, block, self.rng)
        if index is None:
            logger.debug("server %s: every slot hot, dropped %r", self.server_id, block)
        return index

    def accept_insert(self, block: Block) -> None:
        self.evict(block)

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def resolve_cluster(self, value: Any, record: RequestRecord, requester) -> bool:
        """Resolve a client miss across peers, the coordinator cache and disk.

        The requester always ends up with a response, so this returns True
        unless the disk does not hold `value`, which raises.
        """
        clients = self._require_roster()
        if not self.warmed_up:
            raise NotWarmedUpError(f"server {self.server_id} has not been warmed up")

        wanted = content_id(value)
        for i, peer in enumerate(clients):
            if peer.client_id == requester.client_id or wanted not in self._summaries[i]:
                continue
            # the hop stays charged even if the probe turns out stale
            record = record.charge(self.network_hop_ticks)
            logger.debug("server %s: probing client %s for %r", self.server_id, peer.client_id, value)
            if peer.resolve(value, record, requester, forwarded=True):
                return True

        record = record.charge(self.cache_reference_ticks)
        index = self.cache.lookup(value)
        if index is not None:
            record = record.charge(self.network_hop_ticks).with_global_hit()
            self.counters.bump(index)
            requester.set_response(self.cache.get_block(index), record)
            return True

        record = record.with_miss().charge(self.disk_to_cache_ticks)
        index = self.disk.lookup(value)
        if index is None:
            raise BlockNotFoundError(value)
        block = self.disk.get_block(index)
        requester.set_response(block, record)
        requester.accept_insert(block)
        return True

    def __repr__(self) -> str:
        roster = len(self.clients) if self.clients is not None else 0
        return (f"CachingServer(id={self.server_id}, cache={self.cache!r}, "
                f"disk={self.disk!r}, clients={roster})")
