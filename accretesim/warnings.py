"""Structured warning classes for the :mod:`accretesim` package."""
from __future__ import annotations


class AccreteWarning(UserWarning):
    """Base warning class for accretesim."""


class PhysicsWarning(AccreteWarning):
    """Physical parameter or regime warnings."""


class NumericalWarning(AccreteWarning):
    """Numerical cut-offs or truncated loops."""


class TableWarning(AccreteWarning):
    """Reference table rows dropped or repaired during loading."""


__all__ = [
    "AccreteWarning",
    "PhysicsWarning",
    "NumericalWarning",
    "TableWarning",
]
