"""Generation configuration system with frozen, hashable, serializable dataclasses."""

from graph_engine.config.run import GraphConfig, RunConfig
from graph_engine.config.defaults import DEFAULT_CONFIG
from graph_engine.config.hashing import (
    LABEL_FIELDS,
    config_hash,
    full_config_hash,
    graph_config_hash,
)
from graph_engine.config.serialization import (
    config_from_json,
    config_to_json,
    load_config,
    save_config,
)

__all__ = [
    "GraphConfig",
    "RunConfig",
    "DEFAULT_CONFIG",
    "LABEL_FIELDS",
    "config_hash",
    "graph_config_hash",
    "full_config_hash",
    "config_to_json",
    "config_from_json",
    "load_config",
    "save_config",
]
