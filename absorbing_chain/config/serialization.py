"""ChainConfig <-> JSON text, plain dicts and config files."""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from dacite import from_dict, Config as DaciteConfig

from absorbing_chain.config.settings import ChainConfig

_DACITE_CONFIG = DaciteConfig(
    cast=[tuple],
    check_types=True,
    strict=True,
)


def config_to_json(config: ChainConfig) -> str:
    """ChainConfig as indented JSON with sorted keys, readable by load_config."""
    return json.dumps(asdict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> ChainConfig:
    """Parse a ChainConfig; unknown keys and mistyped values raise dacite errors.

    The solver command comes back as a tuple of argument templates.
    """
    return from_dict(data_class=ChainConfig, data=json.loads(json_str), config=_DACITE_CONFIG)


def config_to_dict(config: ChainConfig) -> dict[str, Any]:
    """Plain nested dict of a ChainConfig, e.g. for embedding in a larger JSON document."""
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> ChainConfig:
    """Inverse of config_to_dict; missing keys take their defaults."""
    return from_dict(data_class=ChainConfig, data=d, config=_DACITE_CONFIG)


def load_config(path: str | Path) -> ChainConfig:
    """Read a ChainConfig from a JSON file."""
    return config_from_json(Path(path).read_text())
