"""Export graphs to and import graphs from xlsx edge tables.

Layout of the single worksheet (GRAPH_DUMP):

    Source | Target | (blank) | Type     | Label
    v0     | v3     |         | Directed | From 'v0' to 'v3'

One row per adjacency entry, so an undirected edge appears once per
direction. Vertices are written with str() and parsed back with a
caller-supplied converter. Vertices without any incident edge have no row
and are not restored.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd

from graph_engine.graph.types import AdjacencyGraph, EdgeKind

log = logging.getLogger(__name__)

SHEET_NAME = "GRAPH_DUMP"
COLUMNS = ["Source", "Target", "", "Type", "Label"]


def edge_label(source: Any, target: Any) -> str:
    return f"From '{source}' to '{target}'"


def edge_rows(graph: AdjacencyGraph) -> list[list[Any]]:
    """One table row per adjacency entry, in vertex then adjacency order."""
    return [
        [str(source), str(target), None, graph.edge_kind.value, edge_label(source, target)]
        for source, targets in graph.adjacency.items()
        for target in targets
    ]


def export_graph(graph: AdjacencyGraph, path: str | Path) -> Path:
    """Write graph to an xlsx file.

    Args:
        graph: Graph to export.
        path: Destination .xlsx path (overwritten if present).

    Returns:
        The path written.
    """
    path = Path(path)
    frame = pd.DataFrame(edge_rows(graph), columns=COLUMNS)
    frame.to_excel(path, sheet_name=SHEET_NAME, index=False, engine="openpyxl")
    log.info("Exported %d edge rows to %s", len(frame), path)
    return path


def import_graph(
    path: str | Path, convert: Callable[[str], Any] = str
) -> AdjacencyGraph:
    """Rebuild a graph from an xlsx file written by export_graph().

    Reads the first worksheet, skipping the header row. The edge kind is
    taken from the Type column (directed when the table is empty).

    Args:
        path: Source .xlsx path.
        convert: Parses a vertex from its string form.

    Returns:
        A new, unfrozen AdjacencyGraph.
    """
    frame = pd.read_excel(
        Path(path),
        sheet_name=0,
        header=0,
        dtype=str,
        keep_default_na=False,
        engine="openpyxl",
    )

    kinds = {kind for kind in frame.iloc[:, 3] if kind} if len(frame) else set()
    edge_kind = (
        EdgeKind.UNDIRECTED if EdgeKind.UNDIRECTED.value in kinds else EdgeKind.DIRECTED
    )

    graph = AdjacencyGraph(edge_kind)
    for source, target in zip(frame.iloc[:, 0], frame.iloc[:, 1]):
        graph.add_edge(convert(source), convert(target))

    log.info("Imported %d vertices from %s", len(graph), path)
    return graph
