"""Edge wiring policies for generated graphs.

Both policies consume a degree map produced by sample_degree_map() and fill
each entry's neighbours by rejection sampling from the vertex list:

- weakly connected: a deterministic chain of back-references first makes the
  undirected closure connected, then random neighbours top every vertex up
  to its target degree.
- incoherent: one vertex chosen at random is isolated (it neither sends nor
  receives edges), so the result is never fully connected.
"""

import logging
from collections.abc import Callable, Hashable, Sequence
from enum import Enum
from typing import Any

from graph_engine.errors import ConfigurationError, GeneratorExhaustionError
from graph_engine.graph.types import AdjacencyGraph, BuildableGraph, DegreeEntry
from graph_engine.reproducibility.random_source import RandomSource

log = logging.getLogger(__name__)

# Draw bound per vertex; only a broken random source can reach it
MAX_DRAW_ATTEMPTS = 10_000_000


class ConnectivityPolicy(str, Enum):
    """How a generated graph's edges are wired."""

    WEAKLY_CONNECTED = "weak"
    INCOHERENT = "incoherent"

    @property
    def min_vertices(self) -> int:
        return 2 if self is ConnectivityPolicy.WEAKLY_CONNECTED else 3


def _check_size(degree_map: dict, policy: ConnectivityPolicy) -> None:
    if len(degree_map) < policy.min_vertices:
        raise ConfigurationError(
            f"{policy.value} policy needs at least {policy.min_vertices} "
            f"vertices, got {len(degree_map)}"
        )


def fill_neighbors(
    vertex: Hashable,
    entry: DegreeEntry,
    candidates: Sequence[Any],
    random_source: RandomSource,
    excluded: Hashable | None = None,
    max_attempts: int = MAX_DRAW_ATTEMPTS,
) -> None:
    """Draw uniform candidates until entry holds target_degree neighbours.

    Draws are with replacement; self, the excluded vertex and vertices
    already in entry.neighbors are rejected.

    Raises:
        GeneratorExhaustionError: If max_attempts draws do not fill the entry.
    """
    attempts = 0
    while not entry.is_full:
        if attempts >= max_attempts:
            raise GeneratorExhaustionError(
                f"Could not pick {entry.target_degree} neighbours for "
                f"{vertex!r} within {max_attempts} draws "
                f"(got {len(entry.neighbors)})"
            )
        attempts += 1
        candidate = candidates[random_source.uniform_int(len(candidates))]
        if candidate == vertex or (excluded is not None and candidate == excluded):
            continue
        entry.add(candidate)
    log.debug(
        "Vertex %r filled to degree %d after %d draws",
        vertex,
        entry.target_degree,
        attempts,
    )


def link_weakly_connected(
    degree_map: dict[Any, DegreeEntry], random_source: RandomSource
) -> None:
    """Wire degree_map in place so the graph is weakly connected.

    Each vertex first links back to its predecessor in vertex order, which
    chains every vertex into a single undirected component.
    """
    _check_size(degree_map, ConnectivityPolicy.WEAKLY_CONNECTED)
    vertices = list(degree_map)

    for previous, current in zip(vertices, vertices[1:]):
        degree_map[current].add(previous)

    for vertex, entry in degree_map.items():
        fill_neighbors(vertex, entry, vertices, random_source)


def link_incoherent(
    degree_map: dict[Any, DegreeEntry], random_source: RandomSource
) -> Any:
    """Wire degree_map in place leaving one random vertex isolated.

    Only N - 2 vertices are eligible neighbours for any non-isolated vertex,
    so a target degree of N - 1 is lowered to N - 2 before filling.

    Returns:
        The isolated vertex.
    """
    _check_size(degree_map, ConnectivityPolicy.INCOHERENT)
    vertices = list(degree_map)
    isolated = vertices[random_source.uniform_int(len(vertices))]
    max_degree = len(vertices) - 2

    for vertex, entry in degree_map.items():
        if vertex == isolated:
            continue
        if entry.target_degree > max_degree:
            log.debug(
                "Lowering target degree of %r from %d to %d",
                vertex,
                entry.target_degree,
                max_degree,
            )
            entry.target_degree = max_degree
        fill_neighbors(vertex, entry, vertices, random_source, excluded=isolated)

    log.debug("Isolated vertex: %r", isolated)
    return isolated


def build_graph(
    degree_map: dict[Any, DegreeEntry],
    graph_factory: Callable[[], BuildableGraph] = AdjacencyGraph,
) -> BuildableGraph:
    """Materialise a frozen graph from a filled degree map.

    graph_factory builds the empty graph to populate, e.g. TransportNetwork
    for a unit-capacity network. Vertex order follows the degree map.
    """
    graph = graph_factory()
    for vertex in degree_map:
        graph.add_vertex(vertex)
    for vertex, entry in degree_map.items():
        for neighbor in entry.neighbors:
            graph.add_edge(vertex, neighbor)
    return graph.freeze()
