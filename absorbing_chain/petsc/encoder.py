"""Encode a validated chain as a PETSc binary linear system.

The file holds the sparse matrix A = Q - I over transient nodes followed by
one right-hand-side vector b = -R[:, a] per absorbing node a, so that the
solution of A x = b is the column of absorption probabilities into a.

Layout (big-endian, 8-byte IEEE-754 floats):
- matrix: int32 MAT_FILE_CLASSID, uint32 rows, uint32 cols, uint32 nnz,
  uint32[rows] nnz per row, column indices row by row, values row by row
- vector (once per absorbing node, ascending original ID):
  int32 VEC_FILE_CLASSID, uint32 length, float64[length] values
"""

import bisect
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

import numpy as np

from absorbing_chain.chain.markov import AbsorbingMarkovChain
from absorbing_chain.errors import ChainIOError
from absorbing_chain.graph.translator import IDTranslator
from absorbing_chain.graph.transforms import (
    add_self_loops,
    filter_nodes,
    normalized_ids,
    normalized_weights,
)
from absorbing_chain.graph.types import NodeIDSet, WeightedGraph

log = logging.getLogger(__name__)

MAT_FILE_CLASSID = 1211216
VEC_FILE_CLASSID = 1211214

INT32 = np.dtype(">i4")
UINT32 = np.dtype(">u4")
FLOAT64 = np.dtype(">f8")


@dataclass(frozen=True, slots=True)
class ImplicitWeightedEdge:
    """Right-hand-side contribution: row `to` of the vector gets `weight`."""

    to: int
    weight: float


@dataclass(frozen=True)
class LinearSystemLayout:
    """What the encoder wrote and how to read the solution back.

    Row i of the solution corresponds to absorbing node tan.to_old(i);
    column j to transient node ttn.to_old(j).
    """

    ttn: IDTranslator  # transient node translator (system rows/columns)
    tan: IDTranslator  # absorbing node translator (one vector each)
    nnz: int

    @property
    def n(self) -> int:
        return len(self.ttn)

    @property
    def k(self) -> int:
        return len(self.tan)


def compressed_rhs(
    weights: WeightedGraph, transient: np.ndarray, absorbing: NodeIDSet
) -> dict[int, list[ImplicitWeightedEdge]]:
    """Transpose transient -> absorbing edges into per-absorbing-node lists.

    Each list is keyed by the transient source, kept sorted by insertion at
    the binary-search position, and holds the negated normalized weight.
    """
    rhs: dict[int, list[ImplicitWeightedEdge]] = {}
    for source in transient.tolist():
        targets = weights.successors(source)
        if targets.size == 0:
            continue
        for target in targets[absorbing.contains_many(targets)].tolist():
            edge = ImplicitWeightedEdge(to=source, weight=-weights.weight(source, target))
            bisect.insort(rhs.setdefault(target, []), edge, key=lambda e: e.to)
    return rhs


def _write(out: BinaryIO, values, dtype: np.dtype) -> None:
    out.write(np.asarray(values).astype(dtype, copy=False).tobytes())


def _encode(chain: AbsorbingMarkovChain, out: BinaryIO, path: Path) -> LinearSystemLayout:
    absorbing = chain.absorbing_nodes

    # 1. Matrix graph: transient nodes only, self-loops added, dense IDs.
    matrix_graph = add_self_loops(filter_nodes(chain, absorbing))
    row_nnz = np.fromiter(
        (matrix_graph.successors(node).size for node in matrix_graph.nodes),
        dtype=np.int64,
        count=len(matrix_graph.nodes),
    )
    nnz = int(row_nnz.sum())
    dense_graph, ttn = normalized_ids(matrix_graph)
    n = len(ttn)

    # 2. Matrix weights: normalize over all successors (absorbing included),
    # shift self-loops by -1, then restrict to transient nodes.
    weights = normalized_weights(chain)
    rhs = compressed_rhs(weights, ttn.old_ids, absorbing)
    matrix_weights = filter_nodes(add_self_loops(weights), absorbing)

    log.info("Encoding linear system: n=%d, nnz=%d, rhs=%d", n, nnz, len(absorbing))

    # 3. Matrix block.
    phase = "writing matrix header"
    try:
        _write(out, [MAT_FILE_CLASSID], INT32)
        _write(out, [n, n, nnz], UINT32)
        _write(out, row_nnz, UINT32)

        phase = "writing matrix column indices"
        for node in dense_graph.nodes:
            columns = dense_graph.successors(node)
            if columns.size:
                _write(out, columns, UINT32)

        phase = "writing matrix values"
        for source in matrix_weights.nodes:
            targets = matrix_weights.successors(source).tolist()
            if targets:
                _write(out, [matrix_weights.weight(source, t) for t in targets], FLOAT64)

        # 4-5. One dense vector per absorbing node.
        phase = "writing right-hand-side vectors"
        b = np.zeros(n, dtype=np.float64)
        for target in absorbing:
            b[:] = 0.0
            edges = rhs.get(target, [])
            if edges:
                rows = ttn.to_new_many(np.array([e.to for e in edges], dtype=np.int64))
                b[rows] = [e.weight for e in edges]
            _write(out, [VEC_FILE_CLASSID], INT32)
            _write(out, [n], UINT32)
            _write(out, b, FLOAT64)
    except OSError as exc:
        raise ChainIOError(path, phase) from exc

    # 6. Absorbing translator: vector order.
    return LinearSystemLayout(ttn=ttn, tan=IDTranslator(absorbing), nnz=nnz)


def write_linear_system(chain: AbsorbingMarkovChain, path: str | Path) -> LinearSystemLayout:
    """Write the linear system of a validated chain to `path`.

    The file is fully flushed on success and removed on any failure.

    Args:
        chain: Chain returned by validate_chain.
        path: Output file path.

    Returns:
        LinearSystemLayout with the transient and absorbing translators.

    Raises:
        ChainIOError: On file creation, write or flush failure.
        WeightError: On an invalid weight anywhere in the chain.
    """
    path = Path(path)
    try:
        out = open(path, "wb")
    except OSError as exc:
        raise ChainIOError(path, "creating linear system file") from exc

    try:
        with out:
            layout = _encode(chain, out, path)
            out.flush()
    except OSError as exc:
        path.unlink(missing_ok=True)
        raise ChainIOError(path, "flushing linear system file") from exc
    except BaseException:
        path.unlink(missing_ok=True)
        raise

    log.debug("Linear system written to %s (%d bytes)", path, path.stat().st_size)
    return layout
