"""End-to-end absorption probability computation.

Chains all stages for one chain:
validation -> encoding -> external solver -> decoding -> projection.

Each call owns a scratch directory under config.scratch_root that is
removed on every exit path. The chain and its derived views are only
referenced while encoding; by the time the blocking solver call starts
the pipeline holds nothing but the two translators.
"""

import logging
import threading
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from pathlib import Path

import numpy as np

from absorbing_chain.chain.markov import AbsorbingMarkovChain
from absorbing_chain.chain.validation import validate_chain
from absorbing_chain.config.defaults import DEFAULT_CONFIG
from absorbing_chain.config.settings import ChainConfig
from absorbing_chain.errors import AbsorbingChainError
from absorbing_chain.petsc.decoder import read_solution
from absorbing_chain.petsc.encoder import LinearSystemLayout, write_linear_system
from absorbing_chain.results.projector import AbsorptionResult
from absorbing_chain.solver.external import run_solver
from absorbing_chain.solver.workspace import scratch_directory

log = logging.getLogger(__name__)

ChainInput = AbsorbingMarkovChain | Callable[[], AbsorbingMarkovChain]


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that logs stage boundaries with elapsed time."""
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    log.info("Completed: %s in %.3fs", name, time.monotonic() - t0)


def _encode(chain_input: ChainInput, path: Path) -> LinearSystemLayout:
    """Validate and encode; the chain does not outlive this frame."""
    try:
        chain = chain_input() if callable(chain_input) else chain_input
    except AbsorbingChainError:
        raise
    except Exception as exc:
        raise AbsorbingChainError("chain factory failed") from exc

    try:
        with stage_timer("Validation"):
            chain = validate_chain(chain)
        with stage_timer("Encoding"):
            return write_linear_system(chain, path)
    except AbsorbingChainError:
        raise
    except Exception as exc:
        raise AbsorbingChainError(f"failed to encode chain into {path}") from exc


def solve_absorption(
    chain: ChainInput,
    config: ChainConfig = DEFAULT_CONFIG,
    cancel: threading.Event | None = None,
) -> AbsorptionResult:
    """Compute the absorption probabilities of an absorbing Markov chain.

    Args:
        chain: The chain, or a zero-argument factory building it. With a
            factory the chain is released before the solver runs.
        config: Scratch root, file names and solver invocation.
        cancel: Event aborting the solver wait when set.

    Returns:
        AbsorptionResult with the full probability matrix.

    Raises:
        AbsorbingChainError: Any failure; no partial result is returned.
    """
    with scratch_directory(config.scratch_root) as workdir:
        matrix_path = workdir / config.matrix_filename
        solution_path = workdir / config.solution_filename

        layout = _encode(chain, matrix_path)
        del chain

        ttn, tan = layout.ttn, layout.tan
        log.info("Linear system: n=%d transient, k=%d absorbing, nnz=%d", layout.n, layout.k, layout.nnz)
        if layout.n == 0:
            return AbsorptionResult(np.zeros((layout.k, 0), dtype=np.float64), ttn, tan)

        with stage_timer("External solver"):
            run_solver(
                config.solver,
                matrix_path,
                solution_path,
                imax=layout.k,
                cwd=workdir,
                cancel=cancel,
            )

        with stage_timer("Decoding"):
            matrix = read_solution(solution_path, shape=(layout.k, layout.n))

    return AbsorptionResult(matrix, ttn, tan)


def absorption_probabilities(
    chain: ChainInput,
    config: ChainConfig = DEFAULT_CONFIG,
    cancel: threading.Event | None = None,
) -> Callable[[int, int], float]:
    """(source, target) -> probability that `source` is absorbed in `target`."""
    return solve_absorption(chain, config, cancel).probability_lookup()


def absorption_assignments(
    chain: ChainInput,
    config: ChainConfig = DEFAULT_CONFIG,
    cancel: threading.Event | None = None,
) -> dict[int, int]:
    """Majority assignment of every transient node, ties broken with config.seed."""
    return solve_absorption(chain, config, cancel).assignments(config.seed)
