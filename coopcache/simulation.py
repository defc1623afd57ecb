"""Workload driver: build a cluster, replay requests, aggregate statistics."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from coopcache.environment.client import AgingClient
from coopcache.environment.server import CachingServer
from coopcache.exceptions import InvalidConfigurationError
from coopcache.utils.trace_generator import block_name

logger = logging.getLogger(__name__)


@dataclass
class SimulationStats:
    """Aggregated results of one run."""
    requests: int = 0
    total_cost: int = 0
    local_hits: int = 0
    global_hits: int = 0
    misses: int = 0
    costs: List[int] = field(default_factory=list)

    def record(self, response) -> None:
        self.requests += 1
        self.total_cost += response.cost
        self.local_hits += response.local_hit
        self.global_hits += response.global_hit
        self.misses += response.cache_miss
        self.costs.append(response.cost)

    def _ratio(self, n: int) -> float:
        return n / self.requests if self.requests > 0 else 0.0

    @property
    def hit_rate(self) -> float:
        return self._ratio(self.local_hits + self.global_hits)

    @property
    def local_hit_rate(self) -> float:
        return self._ratio(self.local_hits)

    @property
    def global_hit_rate(self) -> float:
        return self._ratio(self.global_hits)

    @property
    def miss_rate(self) -> float:
        return self._ratio(self.misses)

    @property
    def avg_cost(self) -> float:
        return self._ratio(self.total_cost)

    def as_dict(self) -> Dict[str, float]:
        return {
            'requests': self.requests,
            'total_cost': self.total_cost,
            'avg_cost': self.avg_cost,
            'hit_rate': self.hit_rate,
            'local_hit_rate': self.local_hit_rate,
            'global_hit_rate': self.global_hit_rate,
            'miss_rate': self.miss_rate,
        }


def build_cluster(config, rng: np.random.Generator,
                  client_cls=AgingClient) -> Tuple[CachingServer, List[AgingClient]]:
    """Create, register and warm up a coordinator and its clients.

    The disk holds the whole block universe; the coordinator cache and every
    client cache start with independent random samples of it.
    """
    if config.n_blocks > config.server_disk_size:
        raise InvalidConfigurationError(
            f"disk ({config.server_disk_size}) cannot hold {config.n_blocks} blocks")

    universe = [block_name(i) for i in range(config.n_blocks)]

    server = CachingServer(server_id=0,
                           cache_size=config.server_cache_size,
                           disk_size=config.server_disk_size,
                           cache_reference_ticks=config.cache_reference_ticks,
                           disk_to_cache_ticks=config.disk_to_cache_ticks,
                           network_hop_ticks=config.network_hop_ticks,
                           rng=rng)
    clients = [client_cls(client_id=i + 1,
                          cache_size=config.client_cache_size,
                          cache_reference_ticks=config.cache_reference_ticks,
                          network_hop_ticks=config.network_hop_ticks,
                          server=server,
                          rng=rng)
               for i in range(config.n_clients)]
    server.register_clients(clients)

    def sample(n):
        n = min(n, len(universe))
        return [universe[i] for i in rng.choice(len(universe), size=n, replace=False)]

    server.warm_up(sample(config.server_cache_size), universe)
    for client in clients:
        client.warm_up(sample(config.client_cache_size))
    return server, clients


class CooperativeCacheSimulation:
    """Replays a request sequence against one cooperative cluster.

    Example:
        sim = CooperativeCacheSimulation(Config())
        stats = sim.run_trace(generate_request_trace(128, 500, 'zipf'))
        print(stats.avg_cost, stats.hit_rate)
    """

    def __init__(self, config, rng: Optional[np.random.Generator] = None,
                 client_cls=AgingClient):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(getattr(config, 'seed', None))
        self.server, self.clients = build_cluster(config, self.rng, client_cls=client_cls)

    def request(self, client_index: int, value: Any):
        """Resolve one request from clients[client_index] and return its response."""
        if not 0 <= client_index < len(self.clients):
            raise ValueError(f"client index {client_index} out of range "
                             f"for {len(self.clients)} clients")
        client = self.clients[client_index]
        client.resolve(value)
        return client.response

    def run(self, requests: Iterable[Tuple[Optional[int], Any]]) -> SimulationStats:
        """Issue (client_index, value) requests in order.

        A client index of None picks a random requester.
        """
        stats = SimulationStats()
        for client_index, value in requests:
            if client_index is None:
                client_index = int(self.rng.integers(0, len(self.clients)))
            stats.record(self.request(client_index, value))
        logger.info("simulation finished: %s", stats.as_dict())
        return stats

    def run_trace(self, trace: Iterable[int]) -> SimulationStats:
        """Run a trace of block indices, each issued by a random client."""
        return self.run((None, block_name(b)) for b in trace)
