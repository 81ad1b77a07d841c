"""Exception hierarchy shared by graph construction and the analysis engines."""


class GraphError(Exception):
    """Base class for all errors raised by graph_engine."""


class ConfigurationError(GraphError, ValueError):
    """Raised for invalid constructor arguments or configuration values."""


class GeneratorExhaustionError(GraphError):
    """Raised when rejection sampling cannot finish within its attempt bound.

    Typically the vertex factory cannot produce enough distinct vertices
    (a finite domain smaller than the requested vertex count, or a
    constant-returning factory). Never retried internally.
    """


class InvalidNetworkError(GraphError, ValueError):
    """Raised when a transport network carries a negative edge capacity."""


class DisconnectedGraphError(GraphError):
    """Raised when a single spanning tree is required but the graph is disconnected."""


class GraphFrozenError(GraphError, RuntimeError):
    """Raised when a frozen graph is mutated."""
