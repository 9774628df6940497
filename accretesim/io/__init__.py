"""I/O helper subpackage."""
from . import tables, writer

__all__ = ["tables", "writer"]
