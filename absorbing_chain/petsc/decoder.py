"""Decode the solver's streamed output into a dense probability matrix."""

import json
import logging
from pathlib import Path

import numpy as np

from absorbing_chain.errors import ChainIOError, SolutionFormatError
from absorbing_chain.petsc.matlab import EXCERPT_LENGTH, MatlabToJSONReader

log = logging.getLogger(__name__)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def decode_rows(reader: MatlabToJSONReader, name: object = "<stream>") -> list[np.ndarray]:
    """Parse each converted block as one float64 row, in read order.

    Only JSON numbers are accepted; `true`, `null` or quoted tokens in a
    block raise SolutionFormatError like any unparsable token.
    """
    rows: list[np.ndarray] = []
    for block in reader:
        excerpt = block[-EXCERPT_LENGTH:]
        try:
            values = json.loads(block)
        except json.JSONDecodeError as exc:
            raise SolutionFormatError(
                name, f"error while decoding row {len(rows)}: {exc.msg}", excerpt
            ) from exc
        bad = [v for v in values if not _is_number(v)]
        if bad:
            raise SolutionFormatError(
                name, f"error while decoding row {len(rows)}: non-numeric token {json.dumps(bad[0])}", excerpt
            )
        try:
            rows.append(np.asarray(values, dtype=np.float64))
        except (OverflowError, TypeError, ValueError) as exc:
            raise SolutionFormatError(
                name, f"error while decoding row {len(rows)}: {exc}", excerpt
            ) from exc
    return rows


def read_solution(
    path: str | Path, shape: tuple[int, int] | None = None
) -> np.ndarray:
    """Read a solver output file into a (rows, columns) float64 matrix.

    Row i is the solution for the i-th right-hand side, i.e. absorbing
    index i; column j is transient index j.

    Args:
        path: Solver output file in ASCII-matlab format.
        shape: Expected (absorbing count, transient count), checked if given.

    Returns:
        Dense matrix of absorption probabilities.

    Raises:
        ChainIOError: If the file cannot be opened or read.
        SolutionFormatError: On a malformed block, token, or shape mismatch.
    """
    path = Path(path)
    try:
        handle = open(path, encoding="ascii", errors="strict")
    except OSError as exc:
        raise ChainIOError(path, "opening solver output") from exc

    with handle:
        try:
            rows = decode_rows(MatlabToJSONReader(handle, name=path), name=path)
        except UnicodeDecodeError as exc:
            raise SolutionFormatError(path, f"non-ascii solver output: {exc.reason}") from exc

    lengths = {row.size for row in rows}
    if len(lengths) > 1:
        raise SolutionFormatError(path, f"rows have differing lengths {sorted(lengths)}")
    columns = lengths.pop() if lengths else (shape[1] if shape else 0)
    matrix = np.vstack(rows) if rows else np.zeros((0, columns), dtype=np.float64)

    if shape is not None and matrix.shape != tuple(shape):
        raise SolutionFormatError(
            path, f"expected a {shape[0]}x{shape[1]} solution, got {matrix.shape[0]}x{matrix.shape[1]}"
        )
    log.debug("Decoded %d solution rows from %s", matrix.shape[0], path)
    return matrix
