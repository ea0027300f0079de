"""Adapters turning common in-memory graph structures into GraphSources."""

from collections.abc import Mapping, Sequence

import numpy as np
import scipy.sparse

from absorbing_chain.graph.types import EMPTY, NODE_DTYPE, as_node_array


class AdjacencySource:
    """GraphSource over a mapping node -> successor IDs.

    Weights come from an optional mapping keyed by (source, target);
    edges missing from it weigh `default_weight`.
    """

    def __init__(
        self,
        adjacency: Mapping[int, Sequence[int]],
        weights: Mapping[tuple[int, int], float] | None = None,
        default_weight: float = 1.0,
    ) -> None:
        self._adjacency = {
            int(k): np.unique(as_node_array(v)) for k, v in adjacency.items()
        }
        self._weights = dict(weights or {})
        self._default_weight = default_weight

    def node_ids(self) -> np.ndarray:
        """Every ID appearing as a key or as a successor."""
        parts = [np.asarray(list(self._adjacency), dtype=NODE_DTYPE)]
        parts.extend(self._adjacency.values())
        return np.unique(np.concatenate(parts))

    def successors(self, node: int) -> np.ndarray:
        return self._adjacency.get(int(node), EMPTY)

    def weight(self, source: int, target: int) -> float:
        return self._weights.get((int(source), int(target)), self._default_weight)


class CSRSource:
    """GraphSource over a square scipy CSR matrix; stored values are weights.

    Explicitly stored zeros count as edges (and fail weight validation).
    """

    def __init__(self, adjacency: scipy.sparse.spmatrix) -> None:
        csr = scipy.sparse.csr_matrix(adjacency)
        if csr.shape[0] != csr.shape[1]:
            raise ValueError(f"adjacency must be square, got shape {csr.shape}")
        csr.sort_indices()
        self._csr = csr

    @property
    def n(self) -> int:
        return int(self._csr.shape[0])

    def successors(self, node: int) -> np.ndarray:
        if not 0 <= node < self.n:
            return EMPTY
        start, end = self._csr.indptr[node], self._csr.indptr[node + 1]
        return self._csr.indices[start:end].astype(NODE_DTYPE)

    def weight(self, source: int, target: int) -> float:
        start, end = self._csr.indptr[source], self._csr.indptr[source + 1]
        row = self._csr.indices[start:end]
        pos = int(np.searchsorted(row, target))
        if pos >= row.size or int(row[pos]) != target:
            raise KeyError(f"arc ({source},{target}) is not in the adjacency matrix")
        return float(self._csr.data[start + pos])
