"""Maximum flow on transport networks (Edmonds-Karp).

Augmenting paths are found breadth-first over a residual-capacity map, so
each augmentation uses a shortest path and the loop terminates after
O(V * E) augmentations. The vertices still reachable from the source in the
final residual network form the source side of a minimum cut.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from graph_engine.errors import InvalidNetworkError
from graph_engine.graph.types import TransportNetwork

log = logging.getLogger(__name__)

# Terminal argument left out: fall back to the network's own terminal
_NETWORK_TERMINAL: Any = object()


@dataclass(frozen=True)
class FlowResult:
    """Maximum flow value with the per-edge flow that achieves it."""

    value: float
    edge_flows: dict[tuple[Any, Any], float] = field(default_factory=dict)
    source_side: frozenset = frozenset()


def _check_capacities(network: TransportNetwork) -> None:
    for edge in network.edges():
        if edge.weight < 0:
            raise InvalidNetworkError(
                f"Edge {edge.source!r} -> {edge.target!r} has negative "
                f"capacity {edge.weight}"
            )


def _build_residual(network: TransportNetwork) -> dict[Any, dict[Any, float]]:
    residual: dict[Any, dict[Any, float]] = {v: {} for v in network.vertices}
    for edge in network.edges():
        forward = residual[edge.source]
        forward[edge.target] = forward.get(edge.target, 0) + edge.weight
        residual[edge.target].setdefault(edge.source, 0)
    return residual


def _find_augmenting_path(
    residual: dict[Any, dict[Any, float]], source: Any, sink: Any
) -> dict[Any, Any] | None:
    """BFS over positive residual edges; returns the parent map or None."""
    parents = {source: None}
    frontier = deque([source])
    while frontier:
        vertex = frontier.popleft()
        for neighbor, capacity in residual[vertex].items():
            if capacity > 0 and neighbor not in parents:
                parents[neighbor] = vertex
                if neighbor == sink:
                    return parents
                frontier.append(neighbor)
    return None


def _reachable(residual: dict[Any, dict[Any, float]], source: Any) -> frozenset:
    seen = {source}
    frontier = deque([source])
    while frontier:
        vertex = frontier.popleft()
        for neighbor, capacity in residual[vertex].items():
            if capacity > 0 and neighbor not in seen:
                seen.add(neighbor)
                frontier.append(neighbor)
    return frozenset(seen)


def compute_max_flow(
    network: TransportNetwork,
    source: Any = _NETWORK_TERMINAL,
    sink: Any = _NETWORK_TERMINAL,
) -> FlowResult:
    """Compute the maximum flow from source to sink.

    Args:
        network: Capacitated directed network.
        source: Source vertex (defaults to network.source, the first vertex).
        sink: Sink vertex (defaults to network.sink, the last vertex).

    Returns:
        FlowResult with the flow value (0 when source == sink or the sink is
        unreachable), the flow carried by each network edge, and the source
        side of a minimum cut.

    Raises:
        InvalidNetworkError: If any capacity is negative.
        KeyError: If source or sink is not in the network.
    """
    _check_capacities(network)

    if not len(network):
        return FlowResult(value=0)
    if source is _NETWORK_TERMINAL:
        source = network.source
    if sink is _NETWORK_TERMINAL:
        sink = network.sink
    for vertex in (source, sink):
        if vertex not in network:
            raise KeyError(f"Vertex {vertex!r} is not in the network")

    residual = _build_residual(network)
    if source == sink:
        return FlowResult(value=0, source_side=_reachable(residual, source))

    value = 0
    augmentations = 0
    while True:
        parents = _find_augmenting_path(residual, source, sink)
        if parents is None:
            break

        path = []
        vertex = sink
        while vertex != source:
            path.append((parents[vertex], vertex))
            vertex = parents[vertex]
        bottleneck = min(residual[u][v] for u, v in path)

        for u, v in path:
            residual[u][v] -= bottleneck
            residual[v][u] += bottleneck
        value += bottleneck
        augmentations += 1

    # Antiparallel edges share one residual pair, so this is the net flow.
    edge_flows = {
        (e.source, e.target): max(0, e.weight - residual[e.source][e.target])
        for e in network.edges()
    }

    log.debug(
        "Max flow %s -> %s = %s after %d augmentations",
        source,
        sink,
        value,
        augmentations,
    )
    return FlowResult(
        value=value,
        edge_flows=edge_flows,
        source_side=_reachable(residual, source),
    )


def max_flow(
    network: TransportNetwork,
    source: Any = _NETWORK_TERMINAL,
    sink: Any = _NETWORK_TERMINAL,
) -> float:
    """Maximum flow value from source to sink (see compute_max_flow)."""
    return compute_max_flow(network, source, sink).value
