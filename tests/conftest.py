import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from coopcache.config import Config
from coopcache.environment.client import AgingClient
from coopcache.environment.server import CachingServer

SCENARIO_DISK = ("x", "y", "z", "w")


@pytest.fixture
def make_cluster():
    """Factory building a registered, warmed-up coordinator and clients.

    Defaults follow the two-client example: ref=1, disk=3, hop=1, caches of 2.
    """
    def _make(client_contents,
              server_cache=(),
              disk=SCENARIO_DISK,
              server_cache_size=2,
              client_cache_size=2,
              cache_ref=1,
              disk_ticks=3,
              hop=1,
              seed=1234,
              client_cls=AgingClient):
        rng = np.random.default_rng(seed)
        server = CachingServer(server_id=0,
                               cache_size=server_cache_size,
                               disk_size=len(disk),
                               cache_reference_ticks=cache_ref,
                               disk_to_cache_ticks=disk_ticks,
                               network_hop_ticks=hop,
                               rng=rng)
        clients = [client_cls(client_id=i + 1,
                              cache_size=client_cache_size,
                              cache_reference_ticks=cache_ref,
                              network_hop_ticks=hop,
                              server=server,
                              rng=rng)
                   for i in range(len(client_contents))]
        server.register_clients(clients)
        server.warm_up(list(server_cache), list(disk))
        for client, contents in zip(clients, client_contents):
            client.warm_up(list(contents))
        return server, clients

    return _make


@pytest.fixture
def scenario(make_cluster):
    """Coordinator plus A={x,y} and B={z,w}, disk={x,y,z,w}."""
    server, (a, b) = make_cluster([("x", "y"), ("z", "w")])
    return server, a, b


class SmallConfig(Config):
    n_clients = 3
    client_cache_size = 4
    server_cache_size = 8
    server_disk_size = 32
    n_blocks = 32
    trace_length = 300
    trace_pattern = 'random'
    seed = 3
    plot = False


@pytest.fixture
def small_config():
    return SmallConfig()
