"""Graph caching by config hash with JSON storage.

Caches generated graphs to disk so repeated runs with the same graph
parameters and seed skip regeneration. Adjacency lists are stored as vertex
indices in their original order, so a loaded graph traverses identically to
the generated one.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from graph_engine.config.run import RunConfig
from graph_engine.config.hashing import graph_config_hash
from graph_engine.graph.connectivity import ConnectivityPolicy, build_graph
from graph_engine.graph.generator import GenerationResult, generate_graph
from graph_engine.graph.types import DegreeEntry
from graph_engine.reproducibility.random_source import RandomSource

log = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path(".cache/graphs")


def graph_cache_key(config: RunConfig) -> str:
    """Compute cache key for a graph configuration.

    Key = graph_config_hash + seed. Same graph params + same seed = cache hit.
    Description and tags don't affect the key.

    Returns:
        Cache key string like "a1b2c3d4e5f6g7h8_s42".
    """
    return f"{graph_config_hash(config)}_s{config.seed}"


def _cache_path(config: RunConfig, cache_dir: Path = DEFAULT_CACHE_DIR) -> Path:
    """Compute the directory path for a cached graph."""
    return Path(cache_dir) / graph_cache_key(config)


def save_graph(
    result: GenerationResult,
    config: RunConfig,
    cache_dir: Path = DEFAULT_CACHE_DIR,
) -> Path:
    """Save a generated graph to the cache.

    Stores:
    - metadata.json: vertices, target degrees, policy, isolated vertex
    - adjacency.json: per-vertex neighbour index lists

    Vertices must be JSON-serializable (integers or strings).

    Returns:
        Path to the cache directory for this graph.
    """
    cache_path = _cache_path(config, cache_dir)
    cache_path.mkdir(parents=True, exist_ok=True)

    vertices = list(result.degree_map)
    index = {v: i for i, v in enumerate(vertices)}

    metadata = {
        "vertices": vertices,
        "target_degrees": [e.target_degree for e in result.degree_map.values()],
        "policy": result.policy.value,
        "isolated_vertex": result.isolated_vertex,
        "config_hash": graph_config_hash(config),
        "seed": config.seed,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    with open(cache_path / "metadata.json", "w") as f:
        json.dump(metadata, f, indent=2)

    adjacency = [
        [index[n] for n in entry.neighbors]
        for entry in result.degree_map.values()
    ]
    with open(cache_path / "adjacency.json", "w") as f:
        json.dump(adjacency, f)

    log.info("Graph cached at %s", cache_path)
    return cache_path


def load_graph(
    config: RunConfig, cache_dir: Path = DEFAULT_CACHE_DIR
) -> GenerationResult | None:
    """Load a cached graph if it exists.

    Returns:
        GenerationResult if cache hit, None if cache miss.
    """
    cache_path = _cache_path(config, cache_dir)

    required_files = ["metadata.json", "adjacency.json"]
    for fname in required_files:
        if not (cache_path / fname).exists():
            return None

    with open(cache_path / "metadata.json") as f:
        metadata = json.load(f)
    with open(cache_path / "adjacency.json") as f:
        adjacency = json.load(f)

    vertices = metadata["vertices"]
    degree_map = {
        vertex: DegreeEntry(
            target_degree=degree,
            neighbors=[vertices[i] for i in neighbor_ids],
        )
        for vertex, degree, neighbor_ids in zip(
            vertices, metadata["target_degrees"], adjacency
        )
    }

    log.info("Graph loaded from cache: %s", cache_path)
    return GenerationResult(
        graph=build_graph(degree_map),
        degree_map=degree_map,
        policy=ConnectivityPolicy(metadata["policy"]),
        isolated_vertex=metadata["isolated_vertex"],
    )


def generate_or_load_graph(
    config: RunConfig,
    cache_dir: Path = DEFAULT_CACHE_DIR,
    random_source: RandomSource | None = None,
) -> GenerationResult:
    """Generate a graph or load it from cache if available.

    On cache miss: generates the graph from random_source (see
    generate_graph) and saves it to cache. The cache key covers only the
    config, so random_source must be seeded from config.seed.
    On cache hit: loads from disk without regeneration.
    """
    key = graph_cache_key(config)

    cached = load_graph(config, cache_dir)
    if cached is not None:
        log.info("Cache hit for %s", key)
        return cached

    log.info("Cache miss for %s, generating...", key)
    result = generate_graph(config, random_source)
    save_graph(result, config, cache_dir)
    return result
