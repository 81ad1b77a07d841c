"""Deterministic config hashing using SHA-256 over canonical JSON.

A hash identifies what a config generates. Fields that only label a run
(description, tags) never reach the generator and are left out of run hashes,
so relabelling a run does not change its identity.
"""

import hashlib
import json
from collections.abc import Iterable
from dataclasses import asdict
from typing import Any

from graph_engine.config.run import RunConfig

# RunConfig fields that label a run without changing the graph it produces
LABEL_FIELDS: tuple[str, ...] = ("description", "tags")


def _canonical_json(data: dict[str, Any]) -> str:
    return json.dumps(data, sort_keys=True, ensure_ascii=True, separators=(",", ":"))


def config_hash(config: Any, exclude: Iterable[str] = ()) -> str:
    """Deterministic hash of a config dataclass.

    Args:
        config: GraphConfig, RunConfig, or any other dataclass instance.
        exclude: Top-level field names left out of the hash.

    Returns:
        First 16 hex characters of the SHA-256 digest.
    """
    data = asdict(config)
    for name in exclude:
        data.pop(name, None)
    return hashlib.sha256(_canonical_json(data).encode("utf-8")).hexdigest()[:16]


def graph_config_hash(config: RunConfig) -> str:
    """Hash of the generation parameters alone (seed and labels excluded)."""
    return config_hash(config.graph)


def full_config_hash(config: RunConfig) -> str:
    """Hash of everything that decides the generated graph: parameters and seed."""
    return config_hash(config, exclude=LABEL_FIELDS)
