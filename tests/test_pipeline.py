"""End-to-end tests: validation, encoding, the stub solver, decoding, projection."""

import sys
from pathlib import Path

import pytest

from absorbing_chain import (
    AbsorbingChainError,
    AbsorptionResult,
    ChainConfig,
    IDTranslator,
    NodeIDSet,
    SolutionFormatError,
    SolverConfig,
    SolverError,
    TranslationError,
    UnreachableNodeError,
    absorption_assignments,
    absorption_probabilities,
    chain_from_adjacency,
    solve_absorption,
)
from absorbing_chain.petsc.decoder import read_solution

from conftest import GOLDEN_ADJACENCY, GOLDEN_PROBABILITIES

# The stub solves with a direct sparse factorization, not GMRES.
TOLERANCE = 1e-12
# Decoding the exact PETSc stream loses nothing beyond float64 rounding.
GOLDEN_TOLERANCE = 1e-15


class TestGoldenChain:
    """Reference chain with transient nodes 2..7 and absorbing nodes 0, 1."""

    def test_probabilities(self, golden_chain, stub_config: ChainConfig) -> None:
        lookup = absorption_probabilities(golden_chain, stub_config)
        for source, expected in GOLDEN_PROBABILITIES.items():
            for target, probability in expected:
                assert lookup(source, target) == pytest.approx(probability, abs=TOLERANCE)

    def test_columns_sum_to_one(self, golden_chain, stub_config: ChainConfig) -> None:
        result = solve_absorption(golden_chain, stub_config)
        assert result.matrix.shape == (2, 6)
        assert result.matrix.sum(axis=0) == pytest.approx([1.0] * 6, abs=TOLERANCE)

    def test_assignments(self, golden_chain, stub_config: ChainConfig) -> None:
        assigned = absorption_assignments(golden_chain, stub_config)
        assert assigned == {source: expected[0][0] for source, expected in GOLDEN_PROBABILITIES.items()}

    def test_lookup_rejects_non_transient_source(self, golden_chain, stub_config: ChainConfig) -> None:
        lookup = absorption_probabilities(golden_chain, stub_config)
        with pytest.raises(TranslationError):
            lookup(0, 1)

    def test_factory_input(self, stub_config: ChainConfig) -> None:
        lookup = absorption_probabilities(lambda: chain_from_adjacency(GOLDEN_ADJACENCY), stub_config)
        assert lookup(2, 0) == pytest.approx(0.8, abs=TOLERANCE)

    def test_scratch_directory_removed(self, golden_chain, stub_config: ChainConfig, tmp_path: Path) -> None:
        solve_absorption(golden_chain, stub_config)
        assert list(tmp_path.iterdir()) == []

    def test_decoded_golden_stream(self, tmp_path: Path) -> None:
        # Solver output as PETSc prints it: one vector per absorbing node,
        # transient nodes in ascending order.
        transient = sorted(GOLDEN_PROBABILITIES)
        absorbing = [0, 1]
        expected = {(s, t): p for s, pairs in GOLDEN_PROBABILITIES.items() for t, p in pairs}
        blocks = []
        for i, target in enumerate(absorbing):
            values = "".join(f"{expected[source, target]:.16e}\n" for source in transient)
            blocks.append(f"%Vec Object: 1 MPI processes\nVec_0x84000000_{i} = [\n{values}];\n")
        path = tmp_path / "sol.matlab"
        path.write_text("".join(blocks))

        matrix = read_solution(path, shape=(len(absorbing), len(transient)))
        result = AbsorptionResult(matrix, IDTranslator(NodeIDSet(transient)), IDTranslator(NodeIDSet(absorbing)))
        for (source, target), probability in expected.items():
            assert result.probability(source, target) == pytest.approx(probability, abs=GOLDEN_TOLERANCE)
        assert result.assignments(seed=0) == {s: pairs[0][0] for s, pairs in GOLDEN_PROBABILITIES.items()}


class TestWeightedChain:
    """Weights are normalized per source before solving."""

    def test_biased_walk(self, stub_config: ChainConfig) -> None:
        # From 2: weight 3 to absorbing 0, weight 1 to absorbing 1.
        chain = chain_from_adjacency({2: [0, 1], 0: [0], 1: []}, weights={(2, 0): 3.0, (2, 1): 1.0})
        lookup = absorption_probabilities(chain, stub_config)
        assert lookup(2, 0) == pytest.approx(0.75, abs=TOLERANCE)
        assert lookup(2, 1) == pytest.approx(0.25, abs=TOLERANCE)

    def test_transient_self_loop(self, stub_config: ChainConfig) -> None:
        chain = chain_from_adjacency({2: [0, 1, 2]}, weights={(2, 2): 2.0})
        lookup = absorption_probabilities(chain, stub_config)
        assert lookup(2, 0) == pytest.approx(0.5, abs=TOLERANCE)


class TestFailures:
    """Every failure aborts the call and leaves no scratch files behind."""

    def test_validation_error(self, stub_config: ChainConfig, tmp_path: Path) -> None:
        chain = chain_from_adjacency({1: [2], 2: [1], 3: []})
        with pytest.raises(UnreachableNodeError):
            solve_absorption(chain, stub_config)
        assert list(tmp_path.iterdir()) == []

    def test_factory_failure(self, stub_config: ChainConfig) -> None:
        def factory():
            raise ValueError("no chain today")

        with pytest.raises(AbsorbingChainError, match="chain factory failed") as exc_info:
            solve_absorption(factory, stub_config)
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_solver_failure(self, golden_chain, tmp_path: Path) -> None:
        failing = SolverConfig(command=(sys.executable, "-c", "import sys; sys.exit('gmres diverged')"))
        config = ChainConfig(solver=failing, scratch_root=str(tmp_path))
        with pytest.raises(SolverError, match="gmres diverged"):
            solve_absorption(golden_chain, config)
        assert list(tmp_path.iterdir()) == []

    def test_non_numeric_solver_output(self, golden_chain, tmp_path: Path) -> None:
        code = "import sys; open(sys.argv[2], 'w').write('[\\n1.0\\ntrue\\n]\\n')"
        solver = SolverConfig(command=(sys.executable, "-c", code, "{infile}", "{outfile}", "{imax}"))
        config = ChainConfig(solver=solver, scratch_root=str(tmp_path))
        with pytest.raises(SolutionFormatError, match="non-numeric token true"):
            solve_absorption(golden_chain, config)
        assert list(tmp_path.iterdir()) == []


class TestDegenerateChains:
    """Chains without transient nodes never reach the solver."""

    def test_only_absorbing_nodes(self, tmp_path: Path) -> None:
        never = SolverConfig(command=(sys.executable, "-c", "import sys; sys.exit(1)"))
        config = ChainConfig(solver=never, scratch_root=str(tmp_path))
        result = solve_absorption(chain_from_adjacency({1: [], 2: [2]}), config)
        assert result.matrix.shape == (2, 0)
        assert result.assignments() == {}
