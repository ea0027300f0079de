"""Absorbing Markov chain type, constructors and structural validation."""

from absorbing_chain.chain.markov import (
    AbsorbingMarkovChain,
    chain_from_adjacency,
    chain_from_csr,
    infer_absorbing,
)
from absorbing_chain.chain.validation import (
    check_absorbing_shape,
    check_closure,
    check_reachability,
    checked_weight,
    validate_chain,
)

__all__ = [
    "AbsorbingMarkovChain",
    "chain_from_adjacency",
    "chain_from_csr",
    "check_absorbing_shape",
    "check_closure",
    "check_reachability",
    "checked_weight",
    "infer_absorbing",
    "validate_chain",
]
