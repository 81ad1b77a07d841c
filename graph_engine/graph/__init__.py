"""Graph representation, randomized generation, validation, and caching."""

from graph_engine.graph.cache import (
    generate_or_load_graph,
    graph_cache_key,
    load_graph,
    save_graph,
)
from graph_engine.graph.connectivity import (
    ConnectivityPolicy,
    build_graph,
    link_incoherent,
    link_weakly_connected,
)
from graph_engine.graph.generator import (
    MAX_FACTORY_ATTEMPTS,
    GenerationResult,
    GraphGenerator,
    clamp_degree,
    generate_graph,
    generate_incoherent_graph,
    generate_weakly_connected_graph,
    integer_vertex_factory,
    sample_degree_map,
    sequential_vertex_factory,
)
from graph_engine.graph.types import (
    AdjacencyGraph,
    BuildableGraph,
    DegreeEntry,
    Edge,
    EdgeKind,
    GraphView,
    TransportNetwork,
)
from graph_engine.graph.validation import count_components, validate_graph

__all__ = [
    "AdjacencyGraph",
    "BuildableGraph",
    "ConnectivityPolicy",
    "DegreeEntry",
    "Edge",
    "EdgeKind",
    "GenerationResult",
    "GraphGenerator",
    "GraphView",
    "MAX_FACTORY_ATTEMPTS",
    "TransportNetwork",
    "build_graph",
    "clamp_degree",
    "count_components",
    "generate_graph",
    "generate_incoherent_graph",
    "generate_or_load_graph",
    "generate_weakly_connected_graph",
    "graph_cache_key",
    "integer_vertex_factory",
    "link_incoherent",
    "link_weakly_connected",
    "load_graph",
    "sample_degree_map",
    "save_graph",
    "sequential_vertex_factory",
    "validate_graph",
]
