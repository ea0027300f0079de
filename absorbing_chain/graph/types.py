"""Node-ID sets and directed graph views.

Graphs are value-like: a NodeIDSet universe plus a successor function,
optionally a weight function. Successor sequences are numpy uint32 arrays,
sorted ascending and duplicate-free, so callers may binary-search them.
"""

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np

NODE_DTYPE = np.uint32
MAX_NODE_ID = int(np.iinfo(NODE_DTYPE).max)

EMPTY = np.zeros(0, dtype=NODE_DTYPE)
EMPTY.setflags(write=False)


def as_node_array(ids: Iterable[int] | np.ndarray) -> np.ndarray:
    """Convert ids to a uint32 array, rejecting values outside 32 bits."""
    if isinstance(ids, np.ndarray) and ids.dtype == NODE_DTYPE:
        return ids
    raw = np.asarray(ids if isinstance(ids, (np.ndarray, Sequence)) else list(ids), dtype=np.int64)
    if raw.ndim != 1:
        raw = raw.reshape(-1)
    if raw.size and (raw.min() < 0 or raw.max() > MAX_NODE_ID):
        raise ValueError(f"node ids must fit in 32 unsigned bits, got range [{raw.min()}, {raw.max()}]")
    return raw.astype(NODE_DTYPE)


class NodeIDSet:
    """Immutable ordered set of 32-bit node identifiers.

    Backed by a sorted, duplicate-free, read-only uint32 array; membership
    and rank are binary searches.
    """

    __slots__ = ("_ids",)

    def __init__(self, ids: Iterable[int] | np.ndarray = ()) -> None:
        arr = np.unique(as_node_array(ids))
        arr.setflags(write=False)
        self._ids = arr

    @classmethod
    def range(cls, n: int) -> "NodeIDSet":
        """Dense set [0, n)."""
        return cls(np.arange(n, dtype=NODE_DTYPE))

    def contains(self, node: int) -> bool:
        if node < 0 or node > MAX_NODE_ID:
            return False
        pos = int(np.searchsorted(self._ids, node))
        return pos < self._ids.size and int(self._ids[pos]) == node

    def contains_many(self, nodes: np.ndarray) -> np.ndarray:
        """Vectorized membership mask for a uint32 array."""
        nodes = as_node_array(nodes)
        if self._ids.size == 0:
            return np.zeros(nodes.shape, dtype=bool)
        pos = np.searchsorted(self._ids, nodes)
        pos = np.minimum(pos, self._ids.size - 1)
        return self._ids[pos] == nodes

    def cardinality(self) -> int:
        return int(self._ids.size)

    def rank(self, node: int) -> int:
        """Number of elements <= node."""
        if node < 0:
            return 0
        if node > MAX_NODE_ID:
            return int(self._ids.size)
        return int(np.searchsorted(self._ids, node, side="right"))

    def select(self, index: int) -> int:
        """The index-th smallest element."""
        return int(self._ids[index])

    def to_array(self) -> np.ndarray:
        return self._ids

    def difference(self, other: "NodeIDSet") -> "NodeIDSet":
        return NodeIDSet(self._ids[~other.contains_many(self._ids)])

    def intersection(self, other: "NodeIDSet") -> "NodeIDSet":
        return NodeIDSet(self._ids[other.contains_many(self._ids)])

    def issubset(self, other: "NodeIDSet") -> bool:
        return bool(other.contains_many(self._ids).all())

    def __contains__(self, node: object) -> bool:
        return isinstance(node, (int, np.integer)) and self.contains(int(node))

    def __len__(self) -> int:
        return int(self._ids.size)

    def __iter__(self) -> Iterator[int]:
        return iter(self._ids.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeIDSet):
            return NotImplemented
        return np.array_equal(self._ids, other._ids)

    def __hash__(self) -> int:
        return hash(self._ids.tobytes())

    def __repr__(self) -> str:
        if self._ids.size <= 8:
            return f"NodeIDSet({self._ids.tolist()})"
        return f"NodeIDSet(<{self._ids.size} ids {int(self._ids[0])}..{int(self._ids[-1])}>)"


@runtime_checkable
class Graph(Protocol):
    """Directed graph view: a node universe plus sorted successor arrays."""

    nodes: NodeIDSet

    def successors(self, node: int) -> np.ndarray: ...


@runtime_checkable
class WeightedGraph(Graph, Protocol):
    """Directed graph view whose edges carry float64 weights."""

    def weight(self, source: int, target: int) -> float: ...


@runtime_checkable
class GraphSource(Protocol):
    """Capability implemented by whatever structure backs a caller's graph."""

    def successors(self, node: int) -> Sequence[int] | np.ndarray: ...

    def weight(self, source: int, target: int) -> float: ...


SuccessorFn = Callable[[int], "Sequence[int] | np.ndarray"]
WeightFn = Callable[[int, int], float]


@dataclass(frozen=True)
class DirectedGraph:
    """Graph over `nodes` whose edges come from a caller-supplied function.

    Unknown nodes resolve to an empty successor array. Successor arrays
    are returned sorted and duplicate-free.
    """

    nodes: NodeIDSet
    successor_fn: SuccessorFn

    def successors(self, node: int) -> np.ndarray:
        if not self.nodes.contains(node):
            return EMPTY
        raw = self.successor_fn(node)
        if raw is None:
            return EMPTY
        arr = as_node_array(raw)
        if arr.size > 1 and not (arr[1:] > arr[:-1]).all():
            arr = np.unique(arr)
        return arr


@dataclass(frozen=True)
class WeightedDirectedGraph(DirectedGraph):
    """DirectedGraph plus a weight function defined on its edges."""

    weight_fn: WeightFn = lambda source, target: 1.0

    def weight(self, source: int, target: int) -> float:
        return float(self.weight_fn(source, target))


def iter_edges(graph: Graph) -> Iterator[tuple[int, int]]:
    """Yield (source, target) pairs in ascending source order."""
    for source in graph.nodes:
        for target in graph.successors(source).tolist():
            yield source, target


def format_graph(graph: Graph) -> list[str]:
    """Render one `node [successors] [weights]` line per node for debugging."""
    lines = []
    weighted = isinstance(graph, WeightedGraph)
    for source in graph.nodes:
        targets = graph.successors(source).tolist()
        line = f"{source} {targets}"
        if weighted:
            weights = [graph.weight(source, t) for t in targets]
            line += f" {weights}"
        lines.append(line)
    return lines
