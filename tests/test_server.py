"""
Tests for the coordinator: roster, summaries, routing fallbacks, eviction.

Run with: pytest tests/test_server.py -v
"""

import numpy as np
import pytest

from coopcache.environment.accounting import RequestRecord
from coopcache.environment.aging import MAX_COUNT
from coopcache.environment.client import AgingClient
from coopcache.environment.server import CachingServer
from coopcache.exceptions import (
    BlockNotFoundError,
    InvalidConfigurationError,
    NotRegisteredError,
    NotWarmedUpError,
)
from coopcache.storage.block import Block, content_id


class StubRequester:
    """Minimal requester that is not on any roster."""

    def __init__(self, client_id=99):
        self.client_id = client_id
        self.response = None
        self.inserted = []

    def set_response(self, block, record):
        self.response = (block, record)

    def accept_insert(self, block):
        self.inserted.append(block)


def make_server(cache_size=2, disk=("x", "y", "z", "w")):
    return CachingServer(server_id=0, cache_size=cache_size, disk_size=len(disk),
                         cache_reference_ticks=1, disk_to_cache_ticks=3,
                         network_hop_ticks=1, rng=np.random.default_rng(0))


class TestConstruction:

    def test_zero_disk_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            CachingServer(0, 2, 0, 1, 3, 1)

    def test_negative_cache_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            CachingServer(0, -1, 4, 1, 3, 1)

    def test_negative_ticks_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            CachingServer(0, 2, 4, 1, -3, 1)

    def test_routing_before_register(self):
        server = make_server()
        server.warm_up([], ["x"])

        with pytest.raises(NotRegisteredError):
            server.resolve_cluster("x", RequestRecord(), StubRequester())

    def test_routing_before_warm_up(self):
        server = make_server()
        server.register_clients([])

        with pytest.raises(NotWarmedUpError):
            server.resolve_cluster("x", RequestRecord(), StubRequester())


class TestSummaries:
    """Tests for the coordinator's view of client caches."""

    def test_register_allocates_empty_summaries(self, make_cluster):
        server, clients = make_cluster([("x", "y"), ("z", "w")])
        server.register_clients(clients)

        assert server.summary(0) == frozenset()
        assert server.summary(1) == frozenset()

    def test_warm_up_refreshes_summary(self, scenario):
        server, a, b = scenario

        assert server.summary(0) == {content_id("x"), content_id("y")}
        assert server.summary(1) == {content_id("z"), content_id("w")}

    def test_summary_not_updated_automatically(self, scenario):
        """Cache changes are invisible until an explicit refresh."""
        server, a, _ = scenario
        a.cache.update(0, Block("q"))

        assert content_id("x") in server.summary(0)
        assert content_id("q") not in server.summary(0)

        server.refresh_summary(0)

        assert server.summary(0) == {content_id("q"), content_id("y")}

    def test_refresh_all_summaries(self, scenario):
        server, a, b = scenario
        a.cache.update(0, Block("q"))
        b.cache.update(1, Block("r"))

        server.refresh_all_summaries()

        assert content_id("q") in server.summary(0)
        assert content_id("r") in server.summary(1)

    def test_duplicate_client_ids_rejected(self):
        """Two clients sharing an id would share one summary slot."""
        server = make_server()
        first = AgingClient(1, 2, 1, 1, server)
        second = AgingClient(1, 2, 1, 1, server)

        with pytest.raises(InvalidConfigurationError):
            server.register_clients([first, second])
        assert server.clients is None

    def test_index_of_unknown_client(self, scenario):
        server, _, _ = scenario

        with pytest.raises(NotRegisteredError):
            server.index_of(StubRequester())

    def test_summary_is_read_only(self, scenario):
        server, _, _ = scenario

        assert isinstance(server.summary(0), frozenset)


class TestFallthrough:
    """Tests for the coordinator cache and disk paths."""

    def test_coordinator_cache_hit(self, make_cluster):
        server, (a, _) = make_cluster([("x", "y"), ("z", "w")],
                                      server_cache=("v",),
                                      disk=("x", "y", "z", "w", "v"))
        server.counters[0] = 6

        a.resolve("v")

        # 1 (A ref) + 1 (A->coord) + 1 (coord ref) + 1 (coord->A)
        assert a.response_cost == 4
        assert a.global_cache_hit == 1
        assert a.cache_miss == 0
        assert server.counters[0] == 7
        assert a.lookup_local("v") is None

    def test_coordinator_hit_counter_capped(self, make_cluster):
        server, (a, _) = make_cluster([("x", "y"), ("z", "w")],
                                      server_cache=("v",),
                                      disk=("x", "y", "z", "w", "v"))
        server.counters[0] = MAX_COUNT

        a.resolve("v")

        assert server.counters[0] == MAX_COUNT

    def test_empty_roster_goes_to_disk(self):
        server = make_server()
        server.register_clients([])
        server.warm_up([], ["x", "y", "z", "w"])
        requester = StubRequester()

        assert server.resolve_cluster("z", RequestRecord(), requester) is True

        block, record = requester.response
        assert block == Block("z")
        assert record.cost == 1 + 3
        assert record.cache_miss == 1
        assert requester.inserted == [Block("z")]

    def test_zero_capacity_cache_goes_to_disk(self):
        server = make_server(cache_size=0)
        server.register_clients([])
        server.warm_up(["x"], ["x", "y"])
        requester = StubRequester()

        server.resolve_cluster("x", RequestRecord(cost=2), requester)

        block, record = requester.response
        assert block == Block("x")
        assert record.cost == 2 + 1 + 3
        assert record.cache_miss == 1

    def test_failed_probe_hop_stays_charged(self, scenario):
        server, a, b = scenario
        b.cache.update(0, Block("v"))

        server.resolve_cluster("z", RequestRecord(), a)

        assert a.response.cost == 1 + 1 + 3

    def test_unknown_block_raises(self, scenario):
        _, a, _ = scenario

        with pytest.raises(BlockNotFoundError):
            a.resolve("not-on-disk")


class TestEvict:
    """Tests for coordinator cache replacement."""

    def warm(self, cache=("a", "b", "c")):
        server = make_server(cache_size=3, disk=("a", "b", "c", "d"))
        server.register_clients([])
        server.warm_up(list(cache), ["a", "b", "c", "d"])
        return server

    def test_replaces_lowest_counter(self):
        server = self.warm()
        for i, v in enumerate([7, 3, 5]):
            server.counters[i] = v

        assert server.evict(Block("d")) == 1
        assert server.cache.lookup("d") == 1
        assert server.cache.lookup("b") is None
        assert server.counters[0] == 7
        assert server.counters[2] == 5

    def test_tie_goes_to_lowest_index(self):
        server = self.warm()
        for i, v in enumerate([4, 2, 2]):
            server.counters[i] = v

        assert server.evict(Block("d")) == 1

    def test_all_hot_is_dropped(self):
        server = self.warm()
        for i in range(3):
            server.counters[i] = MAX_COUNT

        server.accept_insert(Block("d"))

        assert server.cache.lookup("d") is None
        assert [b.data for b in server.cache.blocks()] == ["a", "b", "c"]
        assert server.counters.tolist() == [MAX_COUNT] * 3

    def test_fills_empty_slot_first(self):
        server = self.warm(cache=("a", "b"))

        assert server.evict(Block("d")) == 2
