"""Structural validation of absorbing Markov chains.

Three passes, each a hard precondition before encoding:
1. Graph closure: every successor is itself a node
2. Absorbing-node shape: out-degree 0, or a single self-loop
3. Reachability closure: every transient node reaches an absorbing node

The third pass is the requirement that I - Q be invertible. On success the
chain's weight function is wrapped so that weights are re-checked lazily,
each time an edge is touched.
"""

import logging
import math
from dataclasses import replace

import numpy as np

from absorbing_chain.chain.markov import AbsorbingMarkovChain
from absorbing_chain.errors import (
    DanglingEdgeError,
    InvalidAbsorbingNodeError,
    UnreachableNodeError,
    WeightError,
)
from absorbing_chain.graph.types import WeightFn

log = logging.getLogger(__name__)


def checked_weight(weight_fn: WeightFn) -> WeightFn:
    """Wrap a weight function to reject non-positive, infinite and NaN weights.

    Exceptions raised by the wrapped function surface as WeightError with
    the original exception chained.
    """

    def weight(source: int, target: int) -> float:
        try:
            value = float(weight_fn(source, target))
        except WeightError:
            raise
        except Exception as exc:
            raise WeightError(source, target, None, f"weight unavailable: {exc}") from exc
        if math.isnan(value):
            raise WeightError(source, target, value, "has NaN weight")
        if math.isinf(value):
            raise WeightError(source, target, value, "has infinite weight")
        if value <= 0:
            raise WeightError(source, target, value, "hasn't positive weight")
        return value

    weight.__wrapped__ = weight_fn  # type: ignore[attr-defined]
    return weight


def check_closure(chain: AbsorbingMarkovChain) -> None:
    """Raise DanglingEdgeError on the first successor that is not a node."""
    nodes = chain.nodes
    for source in nodes:
        targets = chain.successors(source)
        if targets.size == 0:
            continue
        inside = nodes.contains_many(targets)
        if not inside.all():
            raise DanglingEdgeError(source, int(targets[~inside][0]))


def check_absorbing_shape(chain: AbsorbingMarkovChain) -> None:
    """Raise InvalidAbsorbingNodeError unless each absorbing node is terminal."""
    for node in chain.absorbing_nodes:
        if not chain.nodes.contains(node):
            raise InvalidAbsorbingNodeError(node, "not a graph node")
        targets = chain.successors(node)
        if targets.size > 1 or (targets.size == 1 and int(targets[0]) != node):
            raise InvalidAbsorbingNodeError(node, f"successors {targets.tolist()}")


def check_reachability(chain: AbsorbingMarkovChain) -> None:
    """Raise UnreachableNodeError for a node that cannot reach absorption.

    Fixed point: starting from the absorbing set, mark every transient
    node with at least one marked successor until nothing changes.
    """
    nodes = chain.nodes
    all_ids = nodes.to_array()
    marked = chain.absorbing_nodes.contains_many(all_ids)
    pending = [int(i) for i in np.flatnonzero(~marked)]

    passes = 0
    changed = True
    while changed and pending:
        changed = False
        passes += 1
        still_pending = []
        for index in pending:
            targets = chain.successors(int(all_ids[index]))
            if targets.size and marked[np.searchsorted(all_ids, targets)].any():
                marked[index] = True
                changed = True
            else:
                still_pending.append(index)
        pending = still_pending
    log.debug("Reachability fixed point reached after %d passes", passes)

    if pending:
        raise UnreachableNodeError(int(all_ids[pending[0]]))


def validate_chain(chain: AbsorbingMarkovChain) -> AbsorbingMarkovChain:
    """Check all structural invariants of `chain`.

    Args:
        chain: Chain to validate.

    Returns:
        A copy of the chain whose weight function re-validates every weight.

    Raises:
        DanglingEdgeError, InvalidAbsorbingNodeError, UnreachableNodeError.
    """
    check_closure(chain)
    check_absorbing_shape(chain)
    check_reachability(chain)
    log.info(
        "Chain valid: %d nodes, %d absorbing",
        len(chain.nodes),
        len(chain.absorbing_nodes),
    )
    return replace(chain, weight_fn=checked_weight(chain.weight_fn))
