"""Bijection between a sparse node-ID subset and the dense range [0, k)."""

import numpy as np

from absorbing_chain.errors import TranslationError
from absorbing_chain.graph.types import NODE_DTYPE, NodeIDSet, as_node_array


class IDTranslator:
    """Dense renumbering of a NodeIDSet, ordered by ascending old ID.

    new ID i corresponds to the i-th smallest old ID. Both directions raise
    TranslationError on IDs outside the domain.
    """

    __slots__ = ("_new_to_old",)

    def __init__(self, nodes: NodeIDSet) -> None:
        self._new_to_old = nodes.to_array()

    def __len__(self) -> int:
        return int(self._new_to_old.size)

    @property
    def old_ids(self) -> np.ndarray:
        """Read-only array mapping new ID -> old ID."""
        return self._new_to_old

    def to_new(self, old_id: int) -> int:
        ids = self._new_to_old
        if 0 <= old_id <= np.iinfo(NODE_DTYPE).max:
            pos = int(np.searchsorted(ids, old_id))
            if pos < ids.size and int(ids[pos]) == old_id:
                return pos
        raise TranslationError(old_id, "old")

    def to_old(self, new_id: int) -> int:
        if not 0 <= new_id < self._new_to_old.size:
            raise TranslationError(new_id, "new")
        return int(self._new_to_old[new_id])

    def to_new_many(self, old_ids: np.ndarray) -> np.ndarray:
        """Vectorized to_new; raises on the first unknown ID."""
        old_ids = as_node_array(old_ids)
        ids = self._new_to_old
        pos = np.searchsorted(ids, old_ids)
        if ids.size == 0:
            found = np.zeros(old_ids.shape, dtype=bool)
        else:
            found = ids[np.minimum(pos, ids.size - 1)] == old_ids
        if not found.all():
            raise TranslationError(int(old_ids[~found][0]), "old")
        return pos.astype(np.int64)

    def to_old_many(self, new_ids: np.ndarray) -> np.ndarray:
        """Vectorized to_old; raises on the first out-of-range ID."""
        new_ids = np.asarray(new_ids, dtype=np.int64)
        bad = (new_ids < 0) | (new_ids >= self._new_to_old.size)
        if bad.any():
            raise TranslationError(int(new_ids[bad][0]), "new")
        return self._new_to_old[new_ids]

    def __repr__(self) -> str:
        return f"IDTranslator(size={len(self)})"
