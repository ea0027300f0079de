"""Tests for AbsorptionResult: probability lookup and majority assignment."""

import numpy as np
import pytest

from absorbing_chain.errors import TranslationError
from absorbing_chain.graph.translator import IDTranslator
from absorbing_chain.graph.types import NodeIDSet
from absorbing_chain.reproducibility import make_rng, random_orders
from absorbing_chain.results import AbsorptionResult


def make_result(matrix, transient, absorbing) -> AbsorptionResult:
    return AbsorptionResult(
        np.asarray(matrix, dtype=np.float64),
        IDTranslator(NodeIDSet(transient)),
        IDTranslator(NodeIDSet(absorbing)),
    )


@pytest.fixture
def result() -> AbsorptionResult:
    # transient 10, 20, 30; absorbing 5, 7
    return make_result([[0.9, 0.25, 0.5], [0.1, 0.75, 0.5]], [10, 20, 30], [5, 7])


class TestProbability:
    """Lookups are keyed by original node IDs."""

    def test_lookup(self, result: AbsorptionResult) -> None:
        lookup = result.probability_lookup()
        assert lookup(10, 5) == 0.9
        assert lookup(20, 7) == 0.75
        assert lookup(30, 5) == 0.5

    def test_node_views(self, result: AbsorptionResult) -> None:
        assert result.transient_nodes.tolist() == [10, 20, 30]
        assert result.absorbing_nodes.tolist() == [5, 7]

    def test_unknown_target(self, result: AbsorptionResult) -> None:
        with pytest.raises(TranslationError):
            result.probability(10, 6)

    def test_source_is_absorbing(self, result: AbsorptionResult) -> None:
        with pytest.raises(TranslationError):
            result.probability(5, 7)


class TestAssignments:
    """Each transient node goes to its likeliest absorbing node."""

    def test_distinct_probabilities(self, result: AbsorptionResult) -> None:
        assigned = result.assignments(seed=0)
        assert assigned[10] == 5
        assert assigned[20] == 7
        assert assigned[30] in (5, 7)

    def test_seed_fixes_ties(self, result: AbsorptionResult) -> None:
        assert result.assignments(seed=3) == result.assignments(seed=3)

    def test_ties_reach_every_candidate(self) -> None:
        n = 200
        tied = make_result(np.full((2, n), 0.5), range(n), [0, 1])
        chosen = set(tied.assignments(seed=1).values())
        assert chosen == {0, 1}

    def test_assigner_returns_none_for_unknown(self, result: AbsorptionResult) -> None:
        assign = result.assigner(seed=0)
        assert assign(10) == 5
        assert assign(5) is None

    def test_chunked_assignment(self) -> None:
        n = 10_000
        matrix = np.zeros((3, n))
        matrix[np.arange(n) % 3, np.arange(n)] = 1.0
        assigned = make_result(matrix, range(100, 100 + n), [1, 2, 3]).assignments(seed=5)
        assert len(assigned) == n
        assert all(target == (source - 100) % 3 + 1 for source, target in assigned.items())

    def test_no_transient_nodes(self) -> None:
        assert make_result(np.zeros((2, 0)), [], [1, 2]).assignments() == {}

    def test_no_absorbing_nodes(self) -> None:
        with pytest.raises(ValueError, match="no absorbing nodes"):
            make_result(np.zeros((0, 2)), [1, 2], []).assignments()


class TestRandomOrders:
    """Per-row permutations used for tie-breaking."""

    def test_rows_are_permutations(self) -> None:
        orders = random_orders(make_rng(0), 5, 4)
        assert orders.shape == (4, 5)
        for row in orders:
            assert sorted(row.tolist()) == [0, 1, 2, 3, 4]

    def test_generator_passthrough(self) -> None:
        rng = np.random.default_rng(0)
        assert make_rng(rng) is rng

    def test_empty(self) -> None:
        assert random_orders(make_rng(0), 0, 3).shape == (3, 0)
