"""Strongly connected components (Tarjan's algorithm, iterative)."""

from collections.abc import Iterator
from typing import Any

from graph_engine.graph.types import GraphView


def strongly_connected_components(graph: GraphView) -> Iterator[list[Any]]:
    """Yield the strongly connected components of a directed graph.

    Roots are taken in vertex order, so for a fixed graph the output is
    deterministic. Components come out in reverse topological order of the
    condensation (a component is emitted after every component it reaches);
    vertices inside a component are listed in discovery order. Vertices on
    no cycle are emitted as singleton components.
    """
    index: dict[Any, int] = {}
    lowlink: dict[Any, int] = {}
    on_stack: set = set()
    stack: list = []
    counter = 0

    for root in graph.vertices:
        if root in index:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work = [(root, iter(graph.neighbors_of(root)))]

        while work:
            vertex, neighbors = work[-1]
            for neighbor in neighbors:
                if neighbor not in index:
                    index[neighbor] = lowlink[neighbor] = counter
                    counter += 1
                    stack.append(neighbor)
                    on_stack.add(neighbor)
                    work.append((neighbor, iter(graph.neighbors_of(neighbor))))
                    break
                if neighbor in on_stack:
                    lowlink[vertex] = min(lowlink[vertex], index[neighbor])
            else:
                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[vertex])
                if lowlink[vertex] == index[vertex]:
                    component = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == vertex:
                            break
                    component.reverse()
                    yield component
