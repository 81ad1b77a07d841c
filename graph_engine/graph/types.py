"""Graph data structures: adjacency-list graphs, edges, and degree entries."""

from collections.abc import Hashable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import numpy as np
import scipy.sparse

from graph_engine.errors import GraphFrozenError

# Marks a terminal that was not given, so None stays usable as a vertex
_UNSET: Any = object()


class EdgeKind(str, Enum):
    """Whether edges of a graph are ordered pairs or unordered pairs."""

    DIRECTED = "Directed"
    UNDIRECTED = "Undirected"


@dataclass(frozen=True, slots=True)
class Edge:
    """Immutable view of a single edge derived from a graph.

    For transport networks the weight is the edge capacity.
    """

    source: Any
    target: Any
    weight: float = 1.0


@dataclass(slots=True)
class DegreeEntry:
    """Target degree of a vertex and the neighbours chosen for it so far.

    target_degree is fixed when the entry is sampled; neighbors only grows,
    in insertion order, until it holds target_degree distinct vertices.
    """

    target_degree: int
    neighbors: list = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return len(self.neighbors) >= self.target_degree

    def add(self, vertex: Hashable) -> bool:
        """Append vertex unless already present. Returns True if added."""
        if vertex in self.neighbors:
            return False
        self.neighbors.append(vertex)
        return True


class GraphView(Protocol):
    """Capability interface the generators and engines are written against."""

    @property
    def vertices(self) -> Sequence[Any]: ...

    def __contains__(self, vertex: object) -> bool: ...

    def neighbors_of(self, vertex: Any) -> Sequence[Any]: ...

    def add_edge(self, source: Any, target: Any, weight: float = 1.0) -> None: ...


class BuildableGraph(GraphView, Protocol):
    """GraphView that can be populated vertex by vertex and then frozen."""

    def add_vertex(self, vertex: Any) -> None: ...

    def freeze(self) -> "BuildableGraph": ...


class AdjacencyGraph:
    """Graph stored as ordered adjacency lists.

    Vertex order is insertion order and every adjacency list keeps the order
    edges were added in, so traversals over the same graph are reproducible.
    Self-loops are rejected and duplicate edges are ignored. An undirected
    edge is recorded in both endpoints' lists.

    Once freeze() is called the graph is read-only; engines never mutate it.
    """

    def __init__(self, edge_kind: EdgeKind = EdgeKind.DIRECTED) -> None:
        self.edge_kind = EdgeKind(edge_kind)
        self._adjacency: dict[Any, list[Any]] = {}
        self._weights: dict[tuple[Any, Any], float] = {}
        self._frozen = False

    @classmethod
    def from_adjacency(
        cls,
        adjacency: Mapping[Any, Iterable[Any]],
        edge_kind: EdgeKind = EdgeKind.DIRECTED,
        vertices: Iterable[Any] | None = None,
    ) -> "AdjacencyGraph":
        """Build a graph from a vertex -> neighbours mapping.

        Args:
            adjacency: Mapping of each source vertex to its neighbours.
            edge_kind: Directed or undirected edges.
            vertices: Optional explicit vertex order. Vertices only mentioned
                in adjacency are appended after these.
        """
        graph = cls(edge_kind)
        for vertex in vertices or ():
            graph.add_vertex(vertex)
        for source, targets in adjacency.items():
            graph.add_vertex(source)
            for target in targets:
                graph.add_edge(source, target)
        return graph

    @property
    def vertices(self) -> list[Any]:
        return list(self._adjacency)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def is_directed(self) -> bool:
        return self.edge_kind is EdgeKind.DIRECTED

    def __len__(self) -> int:
        return len(self._adjacency)

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._adjacency

    def __iter__(self) -> Iterator[Any]:
        return iter(self._adjacency)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(vertices={len(self)}, "
            f"edges={self.edge_count}, kind={self.edge_kind.value})"
        )

    def freeze(self) -> "AdjacencyGraph":
        """Mark the graph read-only and return it."""
        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise GraphFrozenError(f"{type(self).__name__} is frozen")

    def add_vertex(self, vertex: Any) -> None:
        self._check_mutable()
        self._adjacency.setdefault(vertex, [])

    def add_edge(self, source: Any, target: Any, weight: float = 1.0) -> None:
        """Add an edge, creating missing endpoints.

        Raises:
            ValueError: If source == target.
            GraphFrozenError: If the graph is frozen.
        """
        self._check_mutable()
        if source == target:
            raise ValueError(f"Self-loop on vertex {source!r} is not allowed")
        self.add_vertex(source)
        self.add_vertex(target)
        self._link(source, target, weight)
        if not self.is_directed:
            self._link(target, source, weight)

    def _link(self, source: Any, target: Any, weight: float) -> None:
        if (source, target) in self._weights:
            return
        self._adjacency[source].append(target)
        self._weights[(source, target)] = weight

    def neighbors_of(self, vertex: Any) -> list[Any]:
        """Return the adjacency list of vertex (KeyError if absent)."""
        return self._adjacency[vertex]

    def has_edge(self, source: Any, target: Any) -> bool:
        return (source, target) in self._weights

    def weight(self, source: Any, target: Any) -> float:
        return self._weights[(source, target)]

    @property
    def adjacency(self) -> dict[Any, list[Any]]:
        """Copy of the vertex -> neighbours mapping."""
        return {v: list(targets) for v, targets in self._adjacency.items()}

    @property
    def edge_count(self) -> int:
        """Number of edges (undirected edges counted once)."""
        if self.is_directed:
            return len(self._weights)
        return len(self._weights) // 2

    def edges(self) -> Iterator[Edge]:
        """Yield every edge in vertex then adjacency order.

        Undirected edges are produced once, from the endpoint that comes
        first in vertex order.
        """
        position = {v: i for i, v in enumerate(self._adjacency)}
        for source, targets in self._adjacency.items():
            for target in targets:
                if not self.is_directed and position[target] < position[source]:
                    continue
                yield Edge(source, target, self._weights[(source, target)])

    def out_degree(self, vertex: Any) -> int:
        return len(self._adjacency[vertex])

    def in_degrees(self) -> dict[Any, int]:
        counts = dict.fromkeys(self._adjacency, 0)
        for targets in self._adjacency.values():
            for target in targets:
                counts[target] += 1
        return counts

    def to_undirected(self) -> "AdjacencyGraph":
        """Return the undirected closure, keeping the lighter of two antiparallel weights."""
        closure = AdjacencyGraph(EdgeKind.UNDIRECTED)
        for vertex in self._adjacency:
            closure.add_vertex(vertex)
        for (source, target), weight in self._weights.items():
            if closure.has_edge(source, target):
                if weight < closure.weight(source, target):
                    closure._weights[(source, target)] = weight
                    closure._weights[(target, source)] = weight
                continue
            closure.add_edge(source, target, weight)
        return closure

    def to_sparse(self) -> scipy.sparse.csr_matrix:
        """Weighted adjacency as a CSR matrix indexed by vertex order."""
        index = {v: i for i, v in enumerate(self._adjacency)}
        n = len(index)
        rows = [index[s] for s, _ in self._weights]
        cols = [index[t] for _, t in self._weights]
        data = list(self._weights.values())
        return scipy.sparse.csr_matrix(
            (np.asarray(data, dtype=np.float64), (rows, cols)), shape=(n, n)
        )


class TransportNetwork(AdjacencyGraph):
    """Directed graph whose edge weights are capacities.

    Capacities are stored as given; the flow engine rejects negative ones.
    Source and sink default to the first and last vertex in vertex order
    (None for an empty network). Any hashable value, None included, can be
    named as a terminal explicitly.
    """

    def __init__(self, source: Any = _UNSET, sink: Any = _UNSET) -> None:
        super().__init__(EdgeKind.DIRECTED)
        self._source = source
        self._sink = sink

    @property
    def source(self) -> Any:
        if self._source is not _UNSET:
            return self._source
        return next(iter(self._adjacency), None)

    @property
    def sink(self) -> Any:
        if self._sink is not _UNSET:
            return self._sink
        return next(reversed(self._adjacency), None)

    def add_capacity(self, source: Any, target: Any, capacity: float) -> None:
        self.add_edge(source, target, capacity)

    def capacity(self, source: Any, target: Any) -> float:
        return self.weight(source, target)
