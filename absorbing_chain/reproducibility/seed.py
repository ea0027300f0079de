"""Seedable random order generation for tie-breaking.

Majority assignment scans absorbing indices in a random permutation per
transient node so exact ties do not systematically favour the lowest
index. Fixing the seed makes the resolution of ties reproducible.
"""

import numpy as np


def make_rng(seed: int | np.random.Generator | None = None) -> np.random.Generator:
    """Return a numpy Generator; an existing Generator is passed through.

    Args:
        seed: Master seed, a Generator to reuse, or None for OS entropy.
    """
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def random_orders(rng: np.random.Generator, k: int, count: int) -> np.ndarray:
    """Draw `count` independent permutations of range(k), one per row."""
    if count == 0 or k == 0:
        return np.zeros((count, k), dtype=np.int64)
    return rng.permuted(np.tile(np.arange(k, dtype=np.int64), (count, 1)), axis=1)
