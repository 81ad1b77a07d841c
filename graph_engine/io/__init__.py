"""Spreadsheet persistence for adjacency graphs."""

from graph_engine.io.spreadsheet import (
    COLUMNS,
    SHEET_NAME,
    edge_label,
    edge_rows,
    export_graph,
    import_graph,
)

__all__ = [
    "COLUMNS",
    "SHEET_NAME",
    "edge_label",
    "edge_rows",
    "export_graph",
    "import_graph",
]
