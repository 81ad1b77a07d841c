"""Structural checks for generated graphs.

validate_graph() returns a list of human-readable problems (empty = valid),
checked cheapest first:
1. Vertex count matches the degree map
2. No self-loops or duplicate edges
3. Realized out-degree equals target degree
4. Policy property: one weak component, or an untouched isolated vertex
"""

import logging

import numpy as np
from scipy.sparse.csgraph import connected_components

from graph_engine.graph.connectivity import ConnectivityPolicy
from graph_engine.graph.generator import GenerationResult
from graph_engine.graph.types import AdjacencyGraph

log = logging.getLogger(__name__)


def count_components(graph: AdjacencyGraph, connection: str = "weak") -> int:
    """Number of weak or strong components, computed with scipy csgraph."""
    if len(graph) == 0:
        return 0
    n_components, _ = connected_components(
        graph.to_sparse(), directed=True, connection=connection
    )
    return int(n_components)


def validate_graph(result: GenerationResult) -> list[str]:
    """Validate a generated graph against its degree map and policy.

    Args:
        result: Output of GraphGenerator.generate().

    Returns:
        List of error strings (empty = valid graph).
    """
    errors: list[str] = []
    graph = result.graph

    # 1. Vertex count
    if len(graph) != len(result.degree_map):
        errors.append(
            f"Vertex count {len(graph)} != degree map size "
            f"{len(result.degree_map)}"
        )

    # 2. No self-loops
    adj = graph.to_sparse()
    diag_sum = adj.diagonal().sum()
    if diag_sum != 0:
        errors.append(f"Self-loops detected: diagonal sum = {diag_sum}")
    for vertex, targets in graph.adjacency.items():
        if len(set(targets)) != len(targets):
            errors.append(f"Duplicate edges leaving {vertex!r}")

    # 3. Realized degree == target degree
    out_degrees = np.asarray((adj != 0).sum(axis=1)).ravel()
    for i, (vertex, entry) in enumerate(result.degree_map.items()):
        if vertex == result.isolated_vertex:
            continue
        if out_degrees[i] != entry.target_degree:
            errors.append(
                f"Vertex {vertex!r} has out-degree {out_degrees[i]}, "
                f"expected {entry.target_degree}"
            )

    # 4. Policy property
    if result.policy is ConnectivityPolicy.WEAKLY_CONNECTED:
        n_components = count_components(graph, "weak")
        if n_components != 1:
            errors.append(
                f"Not weakly connected: {n_components} components found"
            )
    else:
        isolated = result.isolated_vertex
        if isolated not in graph:
            errors.append(f"Isolated vertex {isolated!r} missing from graph")
        else:
            in_degree = graph.in_degrees()[isolated]
            out_degree = graph.out_degree(isolated)
            if in_degree or out_degree:
                errors.append(
                    f"Isolated vertex {isolated!r} has in-degree "
                    f"{in_degree} and out-degree {out_degree}"
                )

    if errors:
        log.warning("Graph validation failed: %s", "; ".join(errors))
    return errors
