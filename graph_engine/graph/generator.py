"""Randomized graph generator with Poisson-sampled target degrees.

Generation runs as a single pipeline whose state is passed explicitly:

1. Draw vertices from the caller's factory, rejecting duplicates, until N
   distinct vertices exist, each with a Poisson(mean) target degree clamped
   into [1, N - 1].
2. Wire edges under a ConnectivityPolicy (see connectivity.py).
3. Freeze the resulting directed adjacency graph.
"""

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

from graph_engine.config.run import RunConfig
from graph_engine.errors import ConfigurationError, GeneratorExhaustionError
from graph_engine.graph.connectivity import (
    ConnectivityPolicy,
    build_graph,
    link_incoherent,
    link_weakly_connected,
)
from graph_engine.graph.types import AdjacencyGraph, DegreeEntry
from graph_engine.reproducibility.random_source import (
    NumpyRandomSource,
    RandomSource,
)

log = logging.getLogger(__name__)

# Factory calls allowed before declaring the factory unable to supply N vertices
MAX_FACTORY_ATTEMPTS = 10_000_000

VertexFactory = Callable[[], Hashable]


@dataclass(frozen=True)
class GenerationResult:
    """A generated graph together with the degree map it was built from.

    isolated_vertex is set only for the incoherent policy.
    """

    graph: AdjacencyGraph
    degree_map: dict[Any, DegreeEntry]
    policy: ConnectivityPolicy
    isolated_vertex: Any = None

    @property
    def target_degrees(self) -> dict[Any, int]:
        return {v: entry.target_degree for v, entry in self.degree_map.items()}


def clamp_degree(sample: int, n_vertices: int) -> int:
    """Clamp a sampled degree: non-positive -> 1, >= n_vertices -> n_vertices - 1."""
    if sample <= 0:
        return 1
    if sample >= n_vertices:
        return n_vertices - 1
    return sample


def sample_degree_map(
    n_vertices: int,
    mean_connectivity: float,
    vertex_factory: VertexFactory,
    random_source: RandomSource,
    max_attempts: int = MAX_FACTORY_ATTEMPTS,
) -> dict[Any, DegreeEntry]:
    """Collect n_vertices distinct vertices with sampled target degrees.

    Vertices returned by the factory that are already present are rejected,
    never replaced. A degree is sampled only for accepted vertices.

    Args:
        n_vertices: Number of distinct vertices required.
        mean_connectivity: Poisson mean for target degrees.
        vertex_factory: Zero-argument callable producing candidate vertices.
        random_source: Source of Poisson draws.
        max_attempts: Factory call bound.

    Returns:
        Ordered mapping vertex -> DegreeEntry with empty neighbours.

    Raises:
        ConfigurationError: If n_vertices < 2, where [1, N - 1] is empty.
        GeneratorExhaustionError: If the factory is called more than
            max_attempts times without yielding n_vertices distinct values.
    """
    if n_vertices < 2:
        raise ConfigurationError(
            f"Degrees in [1, N - 1] need at least 2 vertices, got {n_vertices}"
        )
    degree_map: dict[Any, DegreeEntry] = {}
    attempts = 0

    while len(degree_map) < n_vertices:
        if attempts >= max_attempts:
            raise GeneratorExhaustionError(
                f"Vertex factory produced only {len(degree_map)} distinct "
                f"vertices of {n_vertices} in {max_attempts} calls"
            )
        attempts += 1
        vertex = vertex_factory()
        if vertex in degree_map:
            continue
        degree = clamp_degree(random_source.poisson(mean_connectivity), n_vertices)
        degree_map[vertex] = DegreeEntry(target_degree=degree)

    log.debug(
        "Sampled %d vertices in %d factory calls", n_vertices, attempts
    )
    return degree_map


class GraphGenerator:
    """Builds random directed graphs with Poisson target degrees.

    Args:
        n_vertices: Number of vertices (N).
        mean_connectivity: Mean target out-degree (Poisson mean).
        vertex_factory: Zero-argument callable producing candidate vertices.
            May return duplicates; they are rejected.
        random_source: Source of uniform and Poisson draws. Defaults to an
            unseeded NumpyRandomSource.

    Raises:
        ConfigurationError: For a non-positive vertex count or mean, or a
            missing factory.
    """

    def __init__(
        self,
        n_vertices: int,
        mean_connectivity: float,
        vertex_factory: VertexFactory,
        random_source: RandomSource | None = None,
    ) -> None:
        if vertex_factory is None:
            raise ConfigurationError("vertex_factory is required")
        if n_vertices < 1:
            raise ConfigurationError(
                f"n_vertices must be positive, got {n_vertices}"
            )
        if mean_connectivity <= 0:
            raise ConfigurationError(
                f"mean_connectivity must be positive, got {mean_connectivity}"
            )
        self.n_vertices = n_vertices
        self.mean_connectivity = mean_connectivity
        self.vertex_factory = vertex_factory
        self.random_source = (
            random_source if random_source is not None else NumpyRandomSource()
        )

    def sample_degrees(self) -> dict[Any, DegreeEntry]:
        return sample_degree_map(
            self.n_vertices,
            self.mean_connectivity,
            self.vertex_factory,
            self.random_source,
        )

    def generate(
        self,
        policy: ConnectivityPolicy | str = ConnectivityPolicy.WEAKLY_CONNECTED,
        graph_factory: Callable[[], AdjacencyGraph] = AdjacencyGraph,
    ) -> GenerationResult:
        """Sample vertices and degrees, wire edges, and freeze the graph.

        graph_factory supplies the empty graph the edges are written into;
        pass TransportNetwork to get a unit-capacity network.

        Raises:
            ConfigurationError: If N is too small for the policy.
            GeneratorExhaustionError: If the factory cannot supply N vertices.
        """
        policy = ConnectivityPolicy(policy)
        if self.n_vertices < policy.min_vertices:
            raise ConfigurationError(
                f"{policy.value} policy needs at least {policy.min_vertices} "
                f"vertices, got {self.n_vertices}"
            )

        degree_map = self.sample_degrees()
        isolated = None
        if policy is ConnectivityPolicy.WEAKLY_CONNECTED:
            link_weakly_connected(degree_map, self.random_source)
        else:
            isolated = link_incoherent(degree_map, self.random_source)

        graph = build_graph(degree_map, graph_factory)
        log.info(
            "Generated %s graph (n=%d, mean=%.2f, edges=%d)",
            policy.value,
            len(graph),
            self.mean_connectivity,
            graph.edge_count,
        )
        return GenerationResult(
            graph=graph,
            degree_map=degree_map,
            policy=policy,
            isolated_vertex=isolated,
        )


def generate_weakly_connected_graph(
    n_vertices: int,
    mean_connectivity: float,
    vertex_factory: VertexFactory,
    random_source: RandomSource | None = None,
) -> GenerationResult:
    """Generate a weakly connected directed graph."""
    generator = GraphGenerator(
        n_vertices, mean_connectivity, vertex_factory, random_source
    )
    return generator.generate(ConnectivityPolicy.WEAKLY_CONNECTED)


def generate_incoherent_graph(
    n_vertices: int,
    mean_connectivity: float,
    vertex_factory: VertexFactory,
    random_source: RandomSource | None = None,
) -> GenerationResult:
    """Generate a directed graph with one isolated vertex."""
    generator = GraphGenerator(
        n_vertices, mean_connectivity, vertex_factory, random_source
    )
    return generator.generate(ConnectivityPolicy.INCOHERENT)


def sequential_vertex_factory(prefix: str = "v") -> VertexFactory:
    """Factory producing prefix0, prefix1, ... (never repeats)."""
    counter = 0

    def factory() -> str:
        nonlocal counter
        vertex = f"{prefix}{counter}"
        counter += 1
        return vertex

    return factory


def integer_vertex_factory(
    random_source: RandomSource, domain: int
) -> VertexFactory:
    """Factory drawing integers uniformly from [0, domain); repeats are likely."""
    if domain < 1:
        raise ConfigurationError(f"domain must be positive, got {domain}")

    def factory() -> int:
        return random_source.uniform_int(domain)

    return factory


def generate_graph(
    config: RunConfig, random_source: RandomSource | None = None
) -> GenerationResult:
    """Generate the graph described by a RunConfig.

    Vertices are integers drawn from [0, config.graph.vertex_domain). All
    draws come from random_source, by default a NumpyRandomSource seeded
    with config.seed, so the same config always yields the same graph.
    """
    if random_source is None:
        random_source = NumpyRandomSource(config.seed)
    factory = integer_vertex_factory(random_source, config.graph.vertex_domain)
    generator = GraphGenerator(
        config.graph.n_vertices,
        config.graph.mean_connectivity,
        factory,
        random_source,
    )
    return generator.generate(config.graph.policy)
