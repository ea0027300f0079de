"""Shared fixtures: the reference chain and a solver config running the stub."""

import sys
from pathlib import Path

import pytest

from absorbing_chain.chain.markov import AbsorbingMarkovChain, chain_from_adjacency
from absorbing_chain.config.settings import ChainConfig, SolverConfig

STUB = Path(__file__).parent / "solver_stub.py"

# Transient nodes 2..7, absorbing nodes 0 and 1, uniform weights.
GOLDEN_ADJACENCY = {
    2: [0, 4],
    3: [1, 4],
    4: [0, 1, 2],
    5: [3],
    6: [2, 4],
    7: [1, 3, 4],
}

# transient node -> [(absorbing node, probability)], likeliest first
GOLDEN_PROBABILITIES = {
    2: [(0, 0.8), (1, 0.2)],
    3: [(1, 0.7), (0, 0.3)],
    4: [(0, 0.6), (1, 0.4)],
    5: [(1, 0.7), (0, 0.3)],
    6: [(0, 0.7), (1, 0.3)],
    7: [(1, 0.7), (0, 0.3)],
}


@pytest.fixture
def golden_chain() -> AbsorbingMarkovChain:
    return chain_from_adjacency(GOLDEN_ADJACENCY)


@pytest.fixture
def stub_solver() -> SolverConfig:
    return SolverConfig(
        command=(sys.executable, str(STUB), "{infile}", "{outfile}", "{imax}"),
        timeout=60.0,
    )


@pytest.fixture
def stub_config(tmp_path: Path, stub_solver: SolverConfig) -> ChainConfig:
    return ChainConfig(solver=stub_solver, scratch_root=str(tmp_path), seed=7)
