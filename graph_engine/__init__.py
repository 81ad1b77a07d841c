"""Graph construction, randomized generation, and classical graph algorithms."""

from graph_engine.algorithms import (
    FlowResult,
    bfs,
    compute_max_flow,
    dfs,
    max_flow,
    minimum_spanning_tree,
    strongly_connected_components,
    total_weight,
)
from graph_engine.errors import (
    ConfigurationError,
    DisconnectedGraphError,
    GeneratorExhaustionError,
    GraphError,
    GraphFrozenError,
    InvalidNetworkError,
)
from graph_engine.graph import (
    AdjacencyGraph,
    ConnectivityPolicy,
    DegreeEntry,
    Edge,
    EdgeKind,
    GenerationResult,
    GraphGenerator,
    TransportNetwork,
    generate_incoherent_graph,
    generate_weakly_connected_graph,
)

__all__ = [
    "AdjacencyGraph",
    "ConfigurationError",
    "ConnectivityPolicy",
    "DegreeEntry",
    "DisconnectedGraphError",
    "Edge",
    "EdgeKind",
    "FlowResult",
    "GenerationResult",
    "GeneratorExhaustionError",
    "GraphError",
    "GraphFrozenError",
    "GraphGenerator",
    "InvalidNetworkError",
    "TransportNetwork",
    "bfs",
    "compute_max_flow",
    "dfs",
    "generate_incoherent_graph",
    "generate_weakly_connected_graph",
    "max_flow",
    "minimum_spanning_tree",
    "strongly_connected_components",
    "total_weight",
]
