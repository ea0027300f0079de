"""Pairwise (tree) summation for per-node weight totals."""

from collections.abc import Sequence

import numpy as np


def pairwise_sum(values: Sequence[float] | np.ndarray) -> float:
    """Sum values by repeatedly folding the list in half.

    Each round adds element len-1-i onto element i, so the rounding error
    grows with log(len) rather than len as in left-to-right accumulation.
    The input is never modified.

    Args:
        values: Summands.

    Returns:
        The sum as a Python float; 0.0 for an empty input.
    """
    buf = np.array(values, dtype=np.float64)
    if buf.size == 0:
        return 0.0
    while buf.size > 1:
        half = buf.size // 2
        head = buf[:half]
        head += buf[buf.size - half:][::-1]
        buf = buf[: buf.size - half]
    return float(buf[0])
