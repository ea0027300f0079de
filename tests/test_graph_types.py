"""Tests for NodeIDSet and directed graph views."""

import numpy as np
import pytest

from absorbing_chain.graph.types import (
    DirectedGraph,
    NodeIDSet,
    WeightedDirectedGraph,
    format_graph,
    iter_edges,
)


class TestNodeIDSet:
    """Membership, rank and ordering of node-ID sets."""

    def test_sorted_and_deduplicated(self) -> None:
        s = NodeIDSet([7, 3, 3, 10, 0])
        assert list(s) == [0, 3, 7, 10]
        assert s.cardinality() == 4
        assert len(s) == 4

    def test_contains(self) -> None:
        s = NodeIDSet([2, 5, 9])
        assert s.contains(5)
        assert not s.contains(4)
        assert not s.contains(-1)
        assert 9 in s
        assert 10 not in s

    def test_rank_counts_elements_at_most_x(self) -> None:
        s = NodeIDSet([2, 5, 9])
        assert s.rank(1) == 0
        assert s.rank(2) == 1
        assert s.rank(6) == 2
        assert s.rank(9) == 3
        assert s.rank(-5) == 0
        assert s.rank(2**40) == 3

    def test_select(self) -> None:
        s = NodeIDSet([40, 10, 20])
        assert s.select(0) == 10
        assert s.select(2) == 40

    def test_contains_many(self) -> None:
        s = NodeIDSet([1, 4, 6])
        mask = s.contains_many(np.array([0, 1, 4, 5, 7], dtype=np.uint32))
        assert mask.tolist() == [False, True, True, False, False]

    def test_contains_many_on_empty_set(self) -> None:
        mask = NodeIDSet().contains_many(np.array([1, 2], dtype=np.uint32))
        assert mask.tolist() == [False, False]

    def test_set_algebra(self) -> None:
        a = NodeIDSet(range(6))
        b = NodeIDSet([1, 3, 8])
        assert list(a.difference(b)) == [0, 2, 4, 5]
        assert list(a.intersection(b)) == [1, 3]
        assert NodeIDSet([1, 3]).issubset(a)
        assert not b.issubset(a)

    def test_immutable_backing_array(self) -> None:
        s = NodeIDSet([1, 2])
        with pytest.raises(ValueError):
            s.to_array()[0] = 5

    def test_rejects_ids_beyond_32_bits(self) -> None:
        with pytest.raises(ValueError, match="32 unsigned bits"):
            NodeIDSet([0, 2**32])
        with pytest.raises(ValueError):
            NodeIDSet([-1])

    def test_range_and_equality(self) -> None:
        assert NodeIDSet.range(3) == NodeIDSet([2, 1, 0])
        assert NodeIDSet.range(0) == NodeIDSet()


class TestDirectedGraph:
    """Successor lookup through caller-supplied functions."""

    def test_successors_sorted_and_unique(self) -> None:
        g = DirectedGraph(NodeIDSet([1, 2, 3]), lambda n: {1: [3, 2, 3]}.get(n, []))
        assert g.successors(1).tolist() == [2, 3]
        assert g.successors(1).dtype == np.uint32

    def test_unknown_node_has_no_successors(self) -> None:
        calls = []

        def successors(node: int) -> list[int]:
            calls.append(node)
            return [1]

        g = DirectedGraph(NodeIDSet([1]), successors)
        assert g.successors(42).size == 0
        assert calls == []

    def test_weighted_graph_defaults_to_unit_weight(self) -> None:
        g = WeightedDirectedGraph(NodeIDSet([0, 1]), lambda n: [1] if n == 0 else [])
        assert g.weight(0, 1) == 1.0

    def test_iter_edges_and_format(self) -> None:
        g = WeightedDirectedGraph(
            NodeIDSet([0, 1, 2]),
            lambda n: {0: [1, 2], 1: [2]}.get(n, []),
            lambda s, t: float(s + t),
        )
        assert list(iter_edges(g)) == [(0, 1), (0, 2), (1, 2)]
        assert format_graph(g) == ["0 [1, 2] [1.0, 2.0]", "1 [2] [3.0]", "2 [] []"]

    def test_format_unweighted(self) -> None:
        g = DirectedGraph(NodeIDSet([0, 1]), lambda n: [1] if n == 0 else [])
        assert format_graph(g) == ["0 [1]", "1 []"]
