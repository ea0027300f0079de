"""Absorption probabilities of large absorbing Markov chains.

The chain is validated, encoded as a sparse PETSc linear system, solved by
an external GMRES process, and decoded back into per-node probabilities
and majority assignments.
"""

from absorbing_chain.chain import (
    AbsorbingMarkovChain,
    chain_from_adjacency,
    chain_from_csr,
    validate_chain,
)
from absorbing_chain.config import DEFAULT_CONFIG, ChainConfig, SolverConfig, load_config
from absorbing_chain.errors import (
    AbsorbingChainError,
    ChainIOError,
    ChainValidationError,
    DanglingEdgeError,
    InvalidAbsorbingNodeError,
    SolutionFormatError,
    SolverCancelledError,
    SolverError,
    TranslationError,
    UnreachableNodeError,
    WeightError,
)
from absorbing_chain.graph import IDTranslator, NodeIDSet
from absorbing_chain.pipeline import (
    absorption_assignments,
    absorption_probabilities,
    solve_absorption,
)
from absorbing_chain.results import AbsorptionResult

__all__ = [
    "AbsorbingChainError",
    "AbsorbingMarkovChain",
    "AbsorptionResult",
    "ChainConfig",
    "ChainIOError",
    "ChainValidationError",
    "DEFAULT_CONFIG",
    "DanglingEdgeError",
    "IDTranslator",
    "InvalidAbsorbingNodeError",
    "NodeIDSet",
    "SolutionFormatError",
    "SolverCancelledError",
    "SolverConfig",
    "SolverError",
    "TranslationError",
    "UnreachableNodeError",
    "WeightError",
    "absorption_assignments",
    "absorption_probabilities",
    "chain_from_adjacency",
    "chain_from_csr",
    "load_config",
    "solve_absorption",
    "validate_chain",
]
