"""Graph analysis engines: traversal, spanning trees, components, and flow."""

from graph_engine.algorithms.components import strongly_connected_components
from graph_engine.algorithms.flow import FlowResult, compute_max_flow, max_flow
from graph_engine.algorithms.spanning_tree import minimum_spanning_tree, total_weight
from graph_engine.algorithms.traversal import bfs, dfs

__all__ = [
    "FlowResult",
    "bfs",
    "compute_max_flow",
    "dfs",
    "max_flow",
    "minimum_spanning_tree",
    "strongly_connected_components",
    "total_weight",
]
