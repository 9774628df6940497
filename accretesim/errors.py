"""Custom exceptions for the :mod:`accretesim` package."""
from __future__ import annotations


class AccreteError(Exception):
    """Base exception for planetary-system generation errors."""


class ConfigurationError(AccreteError, ValueError):
    """Invalid configuration values or stellar template parameters."""


class PhysicsError(AccreteError, ValueError):
    """A physical quantity is outside the domain of a formula."""


class InvariantError(AccreteError, RuntimeError):
    """An internal invariant of the generated planet tree was broken."""


class TableLoadError(AccreteError, RuntimeError):
    """Reference table loading failed fatally."""


__all__ = [
    "AccreteError",
    "ConfigurationError",
    "PhysicsError",
    "InvariantError",
    "TableLoadError",
]
