"""Main script to run a cooperative caching simulation and plot the results.

Run this script after installing the package (pip install -e .).
"""
import logging

import numpy as np

from coopcache.config import Config
from coopcache.simulation import CooperativeCacheSimulation
from coopcache.utils.plotter import Plotter
from coopcache.utils.trace_generator import generate_request_trace, load_trace, save_trace
from coopcache.utils.workload_loader import WorkloadLoader


def run(cfg=None):
    cfg = cfg or Config()
    if cfg.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    rng = np.random.default_rng(cfg.seed)
    sim = CooperativeCacheSimulation(cfg, rng=rng)

    if cfg.trace_path and str(cfg.trace_path).endswith(".npy"):
        trace = load_trace(cfg.trace_path)
        print(f"Loaded block trace from {cfg.trace_path}: {len(trace)} requests")
        stats = sim.run_trace(trace)
    elif cfg.trace_path:
        requests = WorkloadLoader().load_trace(cfg.trace_path)
        print(f"Loaded trace from {cfg.trace_path}: {len(requests)} requests")
        stats = sim.run(requests)
    else:
        trace = generate_request_trace(cfg.n_blocks, size=cfg.trace_length,
                                       pattern=cfg.trace_pattern, rng=rng,
                                       zipf_exponent=cfg.zipf_exponent,
                                       loop_length=cfg.loop_length)
        print(f"Using synthetic trace: length={len(trace)}, pattern={cfg.trace_pattern}, blocks={cfg.n_blocks}")
        if cfg.save_trace_path:
            save_trace(trace, cfg.save_trace_path)
        stats = sim.run_trace(trace)

    print(f"Clients: {cfg.n_clients} x {cfg.client_cache_size} slots, "
          f"server cache: {cfg.server_cache_size}, disk: {cfg.server_disk_size}")
    print(f"Requests: {stats.requests}, total cost: {stats.total_cost}, avg cost: {stats.avg_cost:.2f}")
    print(f"Local hit rate: {stats.local_hit_rate:.3f}")
    print(f"Global hit rate: {stats.global_hit_rate:.3f}")
    print(f"Miss rate: {stats.miss_rate:.3f}")

    if cfg.plot:
        Plotter().plot_results(stats.costs, stats.as_dict(),
                               title=f"Cooperative caching ({cfg.trace_pattern} trace)",
                               save_path=cfg.plot_path)
    return stats


if __name__ == '__main__':
    run()
