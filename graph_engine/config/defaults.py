"""Default configuration: single source of truth for generation parameters."""

from graph_engine.config.run import RunConfig

# n_vertices=100, mean_connectivity=3.0, policy="weak",
# vertex_domain=1_000_000, seed=42.
DEFAULT_CONFIG = RunConfig()
