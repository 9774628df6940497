"""Uniform random source shared by every stochastic step of a run.

A run draws all of its randomness through a single :class:`RandomSource`
so that a seed reproduces the whole system.  Anything exposing a
``uniform()`` method returning values in ``[0, 1)`` can be wrapped, which
lets tests script exact draw sequences.
"""
from __future__ import annotations

from typing import Optional, Protocol

import numpy as np

__all__ = ["UniformSource", "RandomSource", "ECCENTRICITY_EXPONENT", "MAX_ECCENTRICITY"]

# Exponent of the low-biased eccentricity draw ``1 - U**k``
ECCENTRICITY_EXPONENT: float = 0.077
# Largest eccentricity returned; a zero draw would otherwise give a parabolic orbit
MAX_ECCENTRICITY: float = 1.0 - float(np.finfo(float).eps)


class UniformSource(Protocol):
    def uniform(self) -> float: ...


class _GeneratorSource:
    def __init__(self, generator: np.random.Generator) -> None:
        self._generator = generator

    def uniform(self) -> float:
        return float(self._generator.random())


class RandomSource:
    """Derived random draws on top of a uniform ``[0, 1)`` source."""

    def __init__(self, source: UniformSource) -> None:
        self._source = source

    @classmethod
    def from_seed(cls, seed: Optional[int] = None) -> "RandomSource":
        """Return a source backed by :func:`numpy.random.default_rng`."""

        return cls(_GeneratorSource(np.random.default_rng(seed)))

    def uniform(self) -> float:
        return self._source.uniform()

    def between(self, lower: float, upper: float) -> float:
        """Return a uniform draw in ``[lower, upper)``."""

        return lower + (upper - lower) * self.uniform()

    def eccentricity(self, exponent: float = ECCENTRICITY_EXPONENT) -> float:
        """Return ``1 - U**k``, biased towards small eccentricities."""

        return min(1.0 - self.uniform() ** exponent, MAX_ECCENTRICITY)

    def about(self, value: float, variation: float) -> float:
        """Return ``value`` perturbed by a fraction in ``[-variation, variation)``."""

        return value + value * self.between(-variation, variation)
