"""Core package for accretion-based planetary system generation."""
from . import constants
from .errors import AccreteError
from .orchestrator import SystemResult, generate_system
from .random_source import RandomSource

__all__ = ["constants", "AccreteError", "RandomSource", "SystemResult", "generate_system"]
