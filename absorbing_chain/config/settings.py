"""Pipeline configuration dataclasses, frozen and slotted."""

from dataclasses import dataclass, field
from pathlib import PurePath

# PETSc GMRES wrapper: `make run IFPATH=... OFPATH=... IMAX=...`
DEFAULT_SOLVER_COMMAND: tuple[str, ...] = (
    "make",
    "run",
    "IFPATH={infile}",
    "OFPATH={outfile}",
    "IMAX={imax}",
)


@dataclass(frozen=True, slots=True)
class SolverConfig:
    """External solver invocation parameters."""

    command: tuple[str, ...] = DEFAULT_SOLVER_COMMAND  # argv template
    working_dir: str | None = None  # None: run in the per-call scratch dir
    timeout: float | None = None  # seconds; None waits indefinitely
    poll_interval: float = 0.05  # cancellation check period in seconds

    def __post_init__(self) -> None:
        if not self.command:
            raise ValueError("command must not be empty")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.poll_interval <= 0:
            raise ValueError(
                f"poll_interval must be positive, got {self.poll_interval}"
            )


@dataclass(frozen=True, slots=True)
class ChainConfig:
    """Top-level configuration for absorption probability computations.

    Cross-field validation runs in __post_init__ to reject invalid
    configurations early.
    """

    solver: SolverConfig = field(default_factory=SolverConfig)
    scratch_root: str = "."  # caller-supplied writable root for temp dirs
    matrix_filename: str = "Ab.ptsc"
    solution_filename: str = "sol.matlab"
    seed: int | None = None  # tie-break seed for majority assignment

    def __post_init__(self) -> None:
        for name in ("matrix_filename", "solution_filename"):
            value = getattr(self, name)
            if not value or PurePath(value).name != value:
                raise ValueError(f"{name} must be a plain file name, got {value!r}")
        if self.matrix_filename == self.solution_filename:
            raise ValueError(
                f"matrix_filename and solution_filename must differ, "
                f"both are {self.matrix_filename!r}"
            )
