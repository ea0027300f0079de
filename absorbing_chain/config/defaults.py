"""Default configuration used when callers pass none."""

from absorbing_chain.config.settings import ChainConfig

# PETSc GMRES via `make run` in the scratch directory, no timeout,
# unseeded tie-breaking.
DEFAULT_CONFIG = ChainConfig()
