"""Node-ID sets, directed graph views, dense renumbering and lazy transforms."""

from absorbing_chain.graph.sources import AdjacencySource, CSRSource
from absorbing_chain.graph.summation import pairwise_sum
from absorbing_chain.graph.transforms import (
    add_self_loops,
    filter_nodes,
    normalized_ids,
    normalized_weights,
)
from absorbing_chain.graph.translator import IDTranslator
from absorbing_chain.graph.types import (
    DirectedGraph,
    Graph,
    GraphSource,
    NodeIDSet,
    WeightedDirectedGraph,
    WeightedGraph,
    format_graph,
    iter_edges,
)

__all__ = [
    "AdjacencySource",
    "CSRSource",
    "DirectedGraph",
    "Graph",
    "GraphSource",
    "IDTranslator",
    "NodeIDSet",
    "WeightedDirectedGraph",
    "WeightedGraph",
    "add_self_loops",
    "filter_nodes",
    "format_graph",
    "iter_edges",
    "normalized_ids",
    "normalized_weights",
    "pairwise_sum",
]
