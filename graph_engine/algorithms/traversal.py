"""Breadth-first and depth-first traversal as lazy vertex sequences.

Both traversals start from the first vertex unless a start is given, yield
each reachable vertex exactly once, and never produce vertices unreachable
from the start. Abandoning the iterator early just drops its visited set
and frontier.
"""

from collections import deque
from collections.abc import Iterator
from typing import Any

from graph_engine.graph.types import GraphView

# Start not given (or empty graph with no first vertex)
_NO_START: Any = object()


def _resolve_start(graph: GraphView, start: Any) -> Any:
    if start is _NO_START:
        return next(iter(graph.vertices), _NO_START)
    if start not in graph:
        raise KeyError(f"Start vertex {start!r} is not in the graph")
    return start


def bfs(graph: GraphView, start: Any = _NO_START) -> Iterator[Any]:
    """Return a breadth-first iterator over vertices reachable from start.

    Vertices are yielded when first discovered (enqueue order), so every
    vertex at distance d comes before any vertex at distance d + 1.

    Raises:
        KeyError: If start is given and not in the graph.
    """
    return _bfs(graph, _resolve_start(graph, start))


def _bfs(graph: GraphView, start: Any) -> Iterator[Any]:
    if start is _NO_START:
        return
    visited = {start}
    frontier = deque([start])
    yield start
    while frontier:
        vertex = frontier.popleft()
        for neighbor in graph.neighbors_of(vertex):
            if neighbor not in visited:
                visited.add(neighbor)
                frontier.append(neighbor)
                yield neighbor


def dfs(graph: GraphView, start: Any = _NO_START) -> Iterator[Any]:
    """Return a depth-first (pre-order) iterator over vertices reachable from start.

    Descends into the first unvisited neighbour and backtracks when a vertex
    has none left. Uses an explicit stack of neighbour iterators, so deep
    graphs don't hit the recursion limit.

    Raises:
        KeyError: If start is given and not in the graph.
    """
    return _dfs(graph, _resolve_start(graph, start))


def _dfs(graph: GraphView, start: Any) -> Iterator[Any]:
    if start is _NO_START:
        return
    visited = {start}
    yield start
    stack = [iter(graph.neighbors_of(start))]
    while stack:
        for neighbor in stack[-1]:
            if neighbor not in visited:
                visited.add(neighbor)
                yield neighbor
                stack.append(iter(graph.neighbors_of(neighbor)))
                break
        else:
            stack.pop()
