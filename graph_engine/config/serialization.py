"""Reading and writing run configs as JSON documents."""

import json
from dataclasses import asdict
from pathlib import Path

from dacite import from_dict, Config as DaciteConfig

from graph_engine.config.run import RunConfig

# strict rejects unknown keys; tags come back as tuples and an integer
# mean_connectivity such as 2 is accepted as 2.0
_DACITE_CONFIG = DaciteConfig(
    cast=[tuple, float],
    check_types=True,
    strict=True,
)


def config_to_json(config: RunConfig) -> str:
    """Serialize a RunConfig with sorted keys and 2-space indent."""
    return json.dumps(asdict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> RunConfig:
    """Parse and validate a RunConfig from a JSON string.

    Raises:
        dacite.DaciteError: On unknown keys or wrongly typed values.
        ConfigurationError: If the values fail RunConfig validation.
    """
    return from_dict(
        data_class=RunConfig, data=json.loads(json_str), config=_DACITE_CONFIG
    )


def load_config(path: str | Path) -> RunConfig:
    return config_from_json(Path(path).read_text())


def save_config(config: RunConfig, path: str | Path) -> Path:
    """Write config as JSON to path, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config_to_json(config) + "\n")
    return path
