import numpy as np


def block_name(index):
    """Payload used for block number `index` of the universe."""
    return f"block-{int(index)}"


def generate_request_trace(n_blocks, size=1000, pattern='mixed', rng=None,
                           zipf_exponent=1.1, loop_length=32):
    """Generate a sequence of block indices in [0, n_blocks).

    Patterns:
    - sequential: 0, 1, 2, ... wrapping at n_blocks
    - random: uniform draws
    - mixed: half sequential, half random, shuffled together
    - loop: a short working set of loop_length blocks repeated
    - zipf: rank-frequency skew, block 0 most popular
    """
    if n_blocks < 1:
        raise ValueError(f"n_blocks must be >= 1, got {n_blocks}")
    rng = rng if rng is not None else np.random.default_rng()

    if pattern == 'sequential':
        return np.arange(size) % n_blocks

    elif pattern == 'random':
        return rng.integers(0, n_blocks, size)

    elif pattern == 'mixed':
        trace = np.concatenate([
            np.arange(size // 2) % n_blocks,
            rng.integers(0, n_blocks, size - size // 2),
        ])
        rng.shuffle(trace)
        return trace

    elif pattern == 'loop':
        base_pattern = np.arange(min(loop_length, n_blocks))
        repeats = size // len(base_pattern) + 1
        return np.tile(base_pattern, repeats)[:size]

    elif pattern == 'zipf':
        ranks = np.arange(1, n_blocks + 1, dtype=np.float64)
        weights = 1.0 / np.power(ranks, zipf_exponent)
        return rng.choice(n_blocks, size=size, p=weights / weights.sum())

    else:
        raise ValueError(f"Unknown pattern type: {pattern}")


def save_trace(trace, path):
    """Write a block-index trace as an integer .npy array."""
    np.save(path, np.asarray(trace, dtype=np.int64))


def load_trace(path):
    """Read a block-index trace written by save_trace()."""
    trace = np.load(path)
    if trace.ndim != 1 or not np.issubdtype(trace.dtype, np.integer):
        raise ValueError(f"{path}: expected a 1-d integer trace, got {trace.dtype} {trace.shape}")
    return trace
