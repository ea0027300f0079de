"""Lazy, composable transforms over directed graph views.

Each transform is a small frozen object holding its input view and its
parameters; successors and weights are recomputed on every call so no
transform materializes the adjacency of the whole graph. Transforms of a
weighted view are weighted views themselves.

Provided transforms:
1. filter_nodes: drop a blacklist from the universe and from every successor list
2. add_self_loops: every node becomes its own successor; weighted views
   subtract 1 from the self-loop weight (builds Q - I)
3. normalized_ids: dense renumbering to [0, n) plus the IDTranslator
4. normalized_weights: rescale outgoing weights to sum to 1 per node
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from absorbing_chain.graph.summation import pairwise_sum
from absorbing_chain.graph.translator import IDTranslator
from absorbing_chain.graph.types import (
    EMPTY,
    NODE_DTYPE,
    Graph,
    NodeIDSet,
    WeightedGraph,
)

log = logging.getLogger(__name__)


# ── Filter ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class FilteredGraph:
    """Graph without the blacklisted nodes; blacklisted nodes have no successors."""

    base: Graph
    blacklist: NodeIDSet
    nodes: NodeIDSet = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", self.base.nodes.difference(self.blacklist))

    def successors(self, node: int) -> np.ndarray:
        if self.blacklist.contains(node):
            return EMPTY
        targets = self.base.successors(node)
        if targets.size == 0 or len(self.blacklist) == 0:
            return targets
        return targets[~self.blacklist.contains_many(targets)]


@dataclass(frozen=True)
class WeightedFilteredGraph(FilteredGraph):
    """FilteredGraph of a weighted view; weights pass through unchanged."""

    def weight(self, source: int, target: int) -> float:
        return self.base.weight(source, target)


def filter_nodes(graph: Graph, blacklist: NodeIDSet) -> FilteredGraph:
    """Remove blacklist from the node set and from every successor list."""
    if isinstance(graph, WeightedGraph):
        return WeightedFilteredGraph(graph, blacklist)
    return FilteredGraph(graph, blacklist)


# ── Self-loops ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SelfLoopGraph:
    """Graph in which every node is its own successor."""

    base: Graph

    @property
    def nodes(self) -> NodeIDSet:
        return self.base.nodes

    def successors(self, node: int) -> np.ndarray:
        targets = self.base.successors(node)
        pos = int(np.searchsorted(targets, node))
        if pos < targets.size and int(targets[pos]) == node:
            return targets
        return np.insert(targets, pos, np.asarray(node, dtype=NODE_DTYPE))


@dataclass(frozen=True)
class WeightedSelfLoopGraph(SelfLoopGraph):
    """SelfLoopGraph whose self-loop weight is shifted by -1.

    A pre-existing self-loop of weight w becomes w - 1; an inserted one
    has weight -1.
    """

    def weight(self, source: int, target: int) -> float:
        if source != target:
            return self.base.weight(source, target)
        targets = self.base.successors(source)
        pos = int(np.searchsorted(targets, source))
        if pos < targets.size and int(targets[pos]) == source:
            return self.base.weight(source, target) - 1.0
        return -1.0


def add_self_loops(graph: Graph) -> SelfLoopGraph:
    """Ensure every successor list contains its own node, in sorted position."""
    if isinstance(graph, WeightedGraph):
        return WeightedSelfLoopGraph(graph)
    return SelfLoopGraph(graph)


# ── Dense renumbering ─────────────────────────────────────────────────


@dataclass(frozen=True)
class RenumberedGraph:
    """Graph over [0, n) mirroring `base` through `translator`."""

    base: Graph
    translator: IDTranslator
    nodes: NodeIDSet = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", NodeIDSet.range(len(self.translator)))

    def successors(self, node: int) -> np.ndarray:
        if not 0 <= node < len(self.translator):
            return EMPTY
        old_ids = self.translator.old_ids
        targets = self.base.successors(int(old_ids[node]))
        # Ascending targets map to ascending positions, one binary search each.
        return np.searchsorted(old_ids, targets).astype(NODE_DTYPE)


@dataclass(frozen=True)
class WeightedRenumberedGraph(RenumberedGraph):
    """RenumberedGraph of a weighted view; weights are looked up by old IDs."""

    def weight(self, source: int, target: int) -> float:
        return self.base.weight(
            self.translator.to_old(source), self.translator.to_old(target)
        )


def normalized_ids(graph: Graph) -> tuple[RenumberedGraph, IDTranslator]:
    """Renumber the node set densely by ascending original ID.

    Successors of a node must be nodes of the graph (validated chains
    guarantee this).

    Returns:
        (renumbered graph, translator from original to dense IDs).
    """
    translator = IDTranslator(graph.nodes)
    if isinstance(graph, WeightedGraph):
        return WeightedRenumberedGraph(graph, translator), translator
    return RenumberedGraph(graph, translator), translator


# ── Weight normalization ──────────────────────────────────────────────


@dataclass(frozen=True)
class NormalizedWeightGraph:
    """Weighted view whose outgoing weights sum to 1 for every node.

    Per-node totals are computed once at construction with pairwise
    summation; individual weights are divided lazily.
    """

    base: WeightedGraph
    totals: np.ndarray

    @property
    def nodes(self) -> NodeIDSet:
        return self.base.nodes

    def successors(self, node: int) -> np.ndarray:
        return self.base.successors(node)

    def weight(self, source: int, target: int) -> float:
        nodes = self.base.nodes
        if not nodes.contains(source):
            raise KeyError(f"{source} is not a node of the graph")
        raw = self.base.weight(source, target)
        return raw / float(self.totals[nodes.rank(source) - 1])


def normalized_weights(graph: WeightedGraph) -> NormalizedWeightGraph:
    """Rescale every node's outgoing weights to sum to 1.

    Touches every edge weight once; errors raised by the weight function
    propagate.
    """
    totals = np.zeros(len(graph.nodes), dtype=np.float64)
    for index, source in enumerate(graph.nodes):
        targets = graph.successors(source).tolist()
        if targets:
            totals[index] = pairwise_sum([graph.weight(source, t) for t in targets])
    log.debug("Normalized weights over %d nodes", totals.size)
    return NormalizedWeightGraph(graph, totals)
