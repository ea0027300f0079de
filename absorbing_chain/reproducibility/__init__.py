"""Reproducibility infrastructure: seeded tie-break ordering."""

from absorbing_chain.reproducibility.seed import make_rng, random_orders

__all__ = [
    "make_rng",
    "random_orders",
]
