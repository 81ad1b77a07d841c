"""Minimum spanning tree via Prim's frontier growth.

Edges are produced lazily in the order they are selected. On a disconnected
graph the default is a spanning forest: Prim restarts from the first
untouched vertex of each remaining component, in vertex order. Pass
require_connected=True to get DisconnectedGraphError instead.
"""

import heapq
import itertools
from collections.abc import Iterable, Iterator

from graph_engine.algorithms.traversal import bfs
from graph_engine.errors import DisconnectedGraphError
from graph_engine.graph.types import AdjacencyGraph, Edge


def minimum_spanning_tree(
    graph: AdjacencyGraph, require_connected: bool = False
) -> Iterator[Edge]:
    """Return an iterator over the edges of a minimum spanning tree (or forest).

    Ties between equal-weight candidate edges go to the one pushed onto the
    frontier first, which keeps the output reproducible.

    Args:
        graph: Undirected weighted graph (unit weights by default).
        require_connected: Raise instead of producing a forest when the
            graph has more than one component.

    Raises:
        ValueError: If the graph is directed.
        DisconnectedGraphError: If require_connected and the graph is
            disconnected. Checked before the first edge is produced.
    """
    if graph.is_directed:
        raise ValueError(
            "Minimum spanning tree needs an undirected graph; "
            "use graph.to_undirected()"
        )
    if require_connected and len(graph):
        reached = sum(1 for _ in bfs(graph))
        if reached != len(graph):
            raise DisconnectedGraphError(
                f"Graph is disconnected: {reached} of {len(graph)} vertices "
                f"reachable from {graph.vertices[0]!r}"
            )
    return _prim(graph)


def _prim(graph: AdjacencyGraph) -> Iterator[Edge]:
    in_tree: set = set()
    order = itertools.count()

    for root in graph.vertices:
        if root in in_tree:
            continue
        in_tree.add(root)
        frontier: list = []
        _push_edges(graph, root, in_tree, frontier, order)

        while frontier:
            weight, _, source, target = heapq.heappop(frontier)
            if target in in_tree:
                continue
            in_tree.add(target)
            yield Edge(source, target, weight)
            _push_edges(graph, target, in_tree, frontier, order)


def _push_edges(graph, vertex, in_tree, frontier, order) -> None:
    for neighbor in graph.neighbors_of(vertex):
        if neighbor not in in_tree:
            heapq.heappush(
                frontier,
                (graph.weight(vertex, neighbor), next(order), vertex, neighbor),
            )


def total_weight(edges: Iterable[Edge]) -> float:
    """Sum of edge weights."""
    return sum(edge.weight for edge in edges)
