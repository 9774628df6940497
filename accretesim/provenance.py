"""Runtime provenance helpers.

The snapshot records what is needed to reproduce a generated system from
its summary: the seed, the package versions and the interpreter.
Collectors never raise; unavailable values are ``None``.
"""

from __future__ import annotations

import datetime as dt
import platform
import sys
from importlib import metadata
from typing import Any, Dict, Optional, Sequence, Tuple

_DEFAULT_PACKAGE_DISTS: Tuple[str, ...] = (
    "accretesim",
    "numpy",
    "pandas",
    "pyarrow",
    "pydantic",
    "ruamel.yaml",
)


def _utc_timestamp_iso() -> str:
    stamp = dt.datetime.now(dt.timezone.utc).replace(microsecond=0).isoformat()
    return stamp.replace("+00:00", "Z")


def _safe_package_version(dist_name: str) -> Optional[str]:
    try:
        return metadata.version(dist_name)
    except metadata.PackageNotFoundError:
        return None


def collect_provenance(
    *,
    seed: Optional[int] = None,
    config: Optional[Dict[str, Any]] = None,
    package_dists: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """Return a JSON-serialisable provenance snapshot of the current run."""

    return {
        "timestamp_utc": _utc_timestamp_iso(),
        "seed": seed,
        "config": config,
        "argv": list(sys.argv),
        "python": {
            "version": platform.python_version(),
            "executable": sys.executable,
        },
        "platform": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "packages": {
            dist: _safe_package_version(dist) for dist in (package_dists or _DEFAULT_PACKAGE_DISTS)
        },
    }
