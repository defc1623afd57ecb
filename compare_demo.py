"""Quick CLI demo comparing workload patterns on the same cluster shape, no plots.

Run from project root:
    python compare_demo.py
"""
import numpy as np

from coopcache.config import Config
from coopcache.simulation import CooperativeCacheSimulation
from coopcache.utils.trace_generator import generate_request_trace

PATTERNS = ('sequential', 'random', 'mixed', 'loop', 'zipf')


def run_demo(trace_size=2000, seed=7):
    cfg = Config()
    results = {}
    for pattern in PATTERNS:
        # fresh cluster per pattern so every run starts from the same warm state
        rng = np.random.default_rng(seed)
        sim = CooperativeCacheSimulation(cfg, rng=rng)
        trace = generate_request_trace(cfg.n_blocks, size=trace_size, pattern=pattern, rng=rng)
        results[pattern] = sim.run_trace(trace)

    print(f"Trace size: {trace_size}, clients: {cfg.n_clients}, blocks: {cfg.n_blocks}")
    for pattern, stats in results.items():
        print(f"{pattern:>10}: avg cost {stats.avg_cost:6.2f}, "
              f"local {stats.local_hit_rate*100:5.1f}%, "
              f"global {stats.global_hit_rate*100:5.1f}%, "
              f"miss {stats.miss_rate*100:5.1f}%")
    return results


if __name__ == '__main__':
    run_demo()
