"""Run configuration dataclasses, all frozen and slotted for immutability."""

from dataclasses import dataclass, field

from graph_engine.errors import ConfigurationError

POLICIES: tuple[str, ...] = ("weak", "incoherent")


@dataclass(frozen=True, slots=True)
class GraphConfig:
    """Random graph generation parameters."""

    n_vertices: int = 100  # N
    mean_connectivity: float = 3.0  # Poisson mean of target out-degree
    policy: str = "weak"  # "weak" or "incoherent"
    vertex_domain: int = 1_000_000  # integer vertices are drawn from [0, domain)

    def __post_init__(self) -> None:
        if self.n_vertices < 1:
            raise ConfigurationError(
                f"n_vertices must be positive, got {self.n_vertices}"
            )
        if self.mean_connectivity <= 0:
            raise ConfigurationError(
                f"mean_connectivity must be positive, got {self.mean_connectivity}"
            )
        if self.policy not in POLICIES:
            raise ConfigurationError(
                f"policy must be one of {POLICIES}, got {self.policy!r}"
            )
        if self.vertex_domain < self.n_vertices:
            raise ConfigurationError(
                f"vertex_domain ({self.vertex_domain}) must be "
                f">= n_vertices ({self.n_vertices})"
            )


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Top-level configuration for a generation run.

    Cross-parameter validation runs in __post_init__ to reject invalid
    configurations early.
    """

    graph: GraphConfig = field(default_factory=GraphConfig)
    seed: int = 42
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        min_vertices = 2 if self.graph.policy == "weak" else 3
        if self.graph.n_vertices < min_vertices:
            raise ConfigurationError(
                f"{self.graph.policy} policy needs n_vertices >= "
                f"{min_vertices}, got {self.graph.n_vertices}"
            )
