"""Reproducibility infrastructure: seeded random sources."""

from graph_engine.reproducibility.random_source import (
    NumpyRandomSource,
    RandomSource,
)

__all__ = [
    "NumpyRandomSource",
    "RandomSource",
]
