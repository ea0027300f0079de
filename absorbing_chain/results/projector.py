"""Projection of the decoded solution onto original node IDs."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from absorbing_chain.graph.translator import IDTranslator
from absorbing_chain.reproducibility.seed import make_rng, random_orders

log = logging.getLogger(__name__)

ASSIGNMENT_CHUNK = 4096  # transient nodes per vectorized tie-break batch


@dataclass(frozen=True)
class AbsorptionResult:
    """Absorption probabilities of a chain, keyed by original node IDs.

    matrix[a, t] is the probability that transient node ttn.to_old(t) is
    absorbed in node tan.to_old(a). Columns sum to 1 up to the solver's
    tolerance; this is not re-checked.
    """

    matrix: np.ndarray  # float64, shape (absorbing count, transient count)
    ttn: IDTranslator
    tan: IDTranslator

    @property
    def transient_nodes(self) -> np.ndarray:
        return self.ttn.old_ids

    @property
    def absorbing_nodes(self) -> np.ndarray:
        return self.tan.old_ids

    def probability(self, source: int, target: int) -> float:
        """Probability that transient `source` is absorbed in `target`.

        Raises:
            TranslationError: If `target` is not absorbing or `source` not transient.
        """
        a = self.tan.to_new(target)
        t = self.ttn.to_new(source)
        return float(self.matrix[a, t])

    def probability_lookup(self) -> Callable[[int, int], float]:
        """The (source, target) -> probability function."""
        return self.probability

    def assignments(self, seed: int | np.random.Generator | None = None) -> dict[int, int]:
        """Majority assignment: each transient node -> its likeliest absorbing node.

        Absorbing indices are scanned in a fresh random order per node and
        the first strictly-greatest probability wins, so exact ties are
        broken at random. Distinct probabilities are unaffected.

        Args:
            seed: Seed or Generator fixing the tie-break order.

        Returns:
            Mapping from original transient ID to original absorbing ID.
        """
        k, n = self.matrix.shape
        if n == 0:
            return {}
        if k == 0:
            raise ValueError("no absorbing nodes to assign transient nodes to")
        rng = make_rng(seed)
        winners = np.empty(n, dtype=np.int64)
        columns = self.matrix.T
        for start in range(0, n, ASSIGNMENT_CHUNK):
            block = columns[start : start + ASSIGNMENT_CHUNK]
            orders = random_orders(rng, k, block.shape[0])
            ordered = np.take_along_axis(block, orders, axis=1)
            picks = np.argmax(ordered, axis=1)
            winners[start : start + block.shape[0]] = orders[np.arange(block.shape[0]), picks]

        targets = self.tan.to_old_many(winners)
        log.debug("Assigned %d transient nodes over %d absorbing nodes", n, k)
        return dict(zip(self.ttn.old_ids.tolist(), targets.tolist()))

    def assigner(self, seed: int | np.random.Generator | None = None) -> Callable[[int], int | None]:
        """The source -> target function of assignments(); None for non-transient IDs."""
        return self.assignments(seed).get
