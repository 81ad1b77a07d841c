#!/usr/bin/env python3
"""Entry point for generating and analysing a random graph.

Chains the pipeline stages into a single command:
graph generation (or cache load) -> validation -> traversal -> components
-> spanning tree -> max flow -> optional xlsx export.

Usage:
    python run_generation.py --config config.json
    python run_generation.py --config config.json --dry-run
    python run_generation.py --config config.json --export graph.xlsx --verbose
"""

import argparse
import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from dacite import DaciteError

from graph_engine.config import (
    RunConfig,
    full_config_hash,
    graph_config_hash,
    load_config,
)
from graph_engine.errors import GraphError

log = logging.getLogger(__name__)


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that prints stage banners with elapsed time."""
    print(f"\n=== {name} ===")
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    print(f"... done in {elapsed:.3f}s")
    log.info("Completed: %s in %.3fs", name, elapsed)


def run_pipeline(
    config: RunConfig,
    cache_dir: Path | None = None,
    export_path: Path | None = None,
) -> dict[str, Any]:
    """Execute the generation and analysis pipeline.

    Args:
        config: Run configuration.
        cache_dir: Graph cache directory; None disables caching.
        export_path: Optional xlsx destination for the generated graph.

    Returns:
        Summary dict of the computed statistics.
    """
    # Lazy imports to keep --dry-run fast
    from graph_engine.algorithms import (
        bfs,
        dfs,
        max_flow,
        minimum_spanning_tree,
        strongly_connected_components,
        total_weight,
    )
    from graph_engine.graph import (
        TransportNetwork,
        build_graph,
        generate_graph,
        generate_or_load_graph,
        validate_graph,
    )
    from graph_engine.io import export_graph
    from graph_engine.reproducibility import NumpyRandomSource

    pipeline_start = time.monotonic()

    # ── Stage 1: Random Source ─────────────────────────────────────
    with stage_timer("Random Source"):
        random_source = NumpyRandomSource(config.seed)
        log.info("Random source seeded with %d", config.seed)

    # ── Stage 2: Graph Generation ──────────────────────────────────
    with stage_timer("Graph Generation"):
        if cache_dir is None:
            result = generate_graph(config, random_source)
        else:
            result = generate_or_load_graph(config, cache_dir, random_source)
        graph = result.graph
        log.info(
            "Graph: n=%d, edges=%d, policy=%s",
            len(graph), graph.edge_count, result.policy.value,
        )

    # ── Stage 3: Validation ────────────────────────────────────────
    with stage_timer("Validation"):
        errors = validate_graph(result)
        if errors:
            raise GraphError("Generated graph is invalid: " + "; ".join(errors))

    # ── Stage 4: Traversal ─────────────────────────────────────────
    with stage_timer("Traversal"):
        bfs_reach = sum(1 for _ in bfs(graph))
        dfs_reach = sum(1 for _ in dfs(graph))
        log.info("BFS reached %d, DFS reached %d vertices", bfs_reach, dfs_reach)

    # ── Stage 5: Strongly Connected Components ─────────────────────
    with stage_timer("Strongly Connected Components"):
        components = list(strongly_connected_components(graph))
        largest = max((len(c) for c in components), default=0)
        log.info("SCCs: %d (largest %d)", len(components), largest)

    # ── Stage 6: Minimum Spanning Forest ───────────────────────────
    with stage_timer("Minimum Spanning Forest"):
        forest = list(minimum_spanning_tree(graph.to_undirected()))
        log.info("Spanning forest: %d edges", len(forest))

    # ── Stage 7: Max Flow ──────────────────────────────────────────
    with stage_timer("Max Flow"):
        network = build_graph(result.degree_map, TransportNetwork)
        flow = max_flow(network)
        log.info(
            "Unit-capacity max flow %s -> %s = %s",
            network.source, network.sink, flow,
        )

    # ── Stage 8: Export ────────────────────────────────────────────
    if export_path is not None:
        with stage_timer("Export"):
            export_graph(graph, export_path)

    summary = {
        "vertices": len(graph),
        "edges": graph.edge_count,
        "policy": result.policy.value,
        "isolated_vertex": result.isolated_vertex,
        "bfs_reach": bfs_reach,
        "dfs_reach": dfs_reach,
        "scc_count": len(components),
        "largest_scc": largest,
        "forest_edges": len(forest),
        "forest_weight": total_weight(forest),
        "max_flow": flow,
    }

    total_elapsed = time.monotonic() - pipeline_start
    print(f"\n{'=' * 60}")
    print(f"Pipeline complete in {total_elapsed:.3f}s")
    for key, value in summary.items():
        print(f"  {key + ':':<16}{value}")
    print(f"{'=' * 60}")

    return summary


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Generate a random graph and run the analysis engines"
    )
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to run config JSON file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show pipeline plan without running it",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    parser.add_argument(
        "--export",
        type=str,
        default=None,
        help="Write the generated graph to this .xlsx file",
    )
    parser.add_argument(
        "--cache-dir",
        type=str,
        default=None,
        help="Cache generated graphs under this directory",
    )
    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = load_config(config_path)
    except (DaciteError, GraphError, ValueError) as exc:
        print(f"Error: invalid config: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Config hash:   {full_config_hash(config)}")
    print(f"Graph hash:    {graph_config_hash(config)}")
    print()
    print(f"Graph:    n={config.graph.n_vertices}, "
          f"mean_connectivity={config.graph.mean_connectivity}, "
          f"policy={config.graph.policy}")
    print(f"Seed:     {config.seed}")

    if args.dry_run:
        print("\nPipeline plan:")
        print(f"  1. Seed random source: {config.seed}")
        print(f"  2. Graph generation: n={config.graph.n_vertices}, "
              f"policy={config.graph.policy}")
        print("  3. Validation: degrees, self-loops, connectivity policy")
        print("  4. Traversal: BFS + DFS from first vertex")
        print("  5. Strongly connected components")
        print("  6. Minimum spanning forest of undirected closure")
        print("  7. Unit-capacity max flow first -> last vertex")
        if args.export:
            print(f"  8. Export: {args.export}")
        print("\n[dry-run] Config loaded successfully. Exiting.")
        return

    try:
        run_pipeline(
            config,
            cache_dir=Path(args.cache_dir) if args.cache_dir else None,
            export_path=Path(args.export) if args.export else None,
        )
    except Exception:
        log.exception("Pipeline failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
