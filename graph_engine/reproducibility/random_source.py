"""Random draws consumed by graph generation.

Generation only needs two primitives: a uniform integer below a bound and a
Poisson sample. Anything implementing RandomSource can be plugged in, which
is how tests force specific draws.
"""

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class RandomSource(Protocol):
    """Capability interface for the draws used by the generator."""

    def uniform_int(self, bound: int) -> int:
        """Return an integer uniformly distributed in [0, bound)."""
        ...

    def poisson(self, mean: float) -> int:
        """Return a Poisson-distributed sample with the given mean."""
        ...


class NumpyRandomSource:
    """RandomSource backed by a numpy Generator.

    Args:
        seed: Seed for np.random.default_rng. None draws fresh OS entropy.
        rng: Existing Generator to wrap instead of creating one.
    """

    def __init__(
        self, seed: int | None = None, rng: np.random.Generator | None = None
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def uniform_int(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        return int(self.rng.integers(0, bound))

    def poisson(self, mean: float) -> int:
        return int(self.rng.poisson(mean))
