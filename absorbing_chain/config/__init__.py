"""Pipeline configuration with frozen, serializable dataclasses."""

from absorbing_chain.config.settings import (
    DEFAULT_SOLVER_COMMAND,
    ChainConfig,
    SolverConfig,
)
from absorbing_chain.config.defaults import DEFAULT_CONFIG
from absorbing_chain.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
    load_config,
)

__all__ = [
    "ChainConfig",
    "SolverConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_SOLVER_COMMAND",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "config_to_json",
    "load_config",
]
