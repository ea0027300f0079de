"""Absorbing Markov chain value type and constructors."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

import numpy as np
import scipy.sparse

from absorbing_chain.graph.sources import AdjacencySource, CSRSource
from absorbing_chain.graph.types import (
    EMPTY,
    GraphSource,
    NodeIDSet,
    SuccessorFn,
    WeightedDirectedGraph,
    WeightFn,
)


@dataclass(frozen=True)
class AbsorbingMarkovChain(WeightedDirectedGraph):
    """Weighted directed graph plus the subset of absorbing nodes.

    Absorbing nodes must have no successors or only a self-loop; every
    other node must reach some absorbing node. Both invariants are checked
    by validate_chain, not at construction.
    """

    absorbing_nodes: NodeIDSet = field(default_factory=NodeIDSet)

    @property
    def transient_nodes(self) -> NodeIDSet:
        return self.nodes.difference(self.absorbing_nodes)

    @classmethod
    def create(
        cls,
        nodes: NodeIDSet | Iterable[int],
        absorbing_nodes: NodeIDSet | Iterable[int],
        successors: SuccessorFn,
        weight: WeightFn,
    ) -> "AbsorbingMarkovChain":
        """Build a chain from plain successor and weight callables."""
        if not isinstance(nodes, NodeIDSet):
            nodes = NodeIDSet(nodes)
        if not isinstance(absorbing_nodes, NodeIDSet):
            absorbing_nodes = NodeIDSet(absorbing_nodes)
        return cls(
            nodes=nodes,
            successor_fn=successors,
            weight_fn=weight,
            absorbing_nodes=absorbing_nodes,
        )

    @classmethod
    def from_source(
        cls,
        nodes: NodeIDSet | Iterable[int],
        absorbing_nodes: NodeIDSet | Iterable[int],
        source: GraphSource,
    ) -> "AbsorbingMarkovChain":
        """Build a chain from any object exposing successors() and weight()."""
        return cls.create(nodes, absorbing_nodes, source.successors, source.weight)


def infer_absorbing(nodes: NodeIDSet, source: GraphSource) -> NodeIDSet:
    """Nodes whose successors are empty or exactly themselves."""
    absorbing = []
    for node in nodes:
        targets = np.asarray(source.successors(node))
        if targets.size == 0 or (targets.size == 1 and int(targets[0]) == node):
            absorbing.append(node)
    return NodeIDSet(absorbing)


def chain_from_adjacency(
    adjacency: Mapping[int, Sequence[int]],
    weights: Mapping[tuple[int, int], float] | None = None,
    absorbing: Iterable[int] | None = None,
) -> AbsorbingMarkovChain:
    """Build a chain from a successor mapping.

    The node set is every ID appearing as a key or a successor. When
    `absorbing` is omitted it is inferred with infer_absorbing.
    """
    source = AdjacencySource(adjacency, weights)
    nodes = NodeIDSet(source.node_ids() if adjacency else EMPTY)
    absorbing_nodes = (
        infer_absorbing(nodes, source) if absorbing is None else NodeIDSet(absorbing)
    )
    return AbsorbingMarkovChain.from_source(nodes, absorbing_nodes, source)


def chain_from_csr(
    adjacency: scipy.sparse.spmatrix,
    absorbing: Iterable[int] | None = None,
) -> AbsorbingMarkovChain:
    """Build a chain over [0, n) from a weighted sparse adjacency matrix."""
    source = CSRSource(adjacency)
    nodes = NodeIDSet.range(source.n)
    absorbing_nodes = (
        infer_absorbing(nodes, source) if absorbing is None else NodeIDSet(absorbing)
    )
    return AbsorbingMarkovChain.from_source(nodes, absorbing_nodes, source)
