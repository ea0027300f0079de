"""External solver invocation and scratch directory management."""

from absorbing_chain.solver.external import build_command, run_solver
from absorbing_chain.solver.workspace import scratch_directory

__all__ = [
    "build_command",
    "run_solver",
    "scratch_directory",
]
