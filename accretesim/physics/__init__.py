"""Physics modules for dust accretion, coalescence and planetary environments."""
from . import (
    disk,
    accretion,
    coalescence,
    reconciliation,
    structure,
    climate,
    atmosphere,
    environment,
)

__all__ = [
    "disk",
    "accretion",
    "coalescence",
    "reconciliation",
    "structure",
    "climate",
    "atmosphere",
    "environment",
]
