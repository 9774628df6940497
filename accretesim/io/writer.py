"""Output helper utilities.

Generated systems are flattened into one :mod:`pandas` row per body
(planets followed by their moons) and written as CSV or Parquet.  Run
summaries go to JSON.  All functions create destination directories when
necessary.
"""
from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from .. import constants
from ..orchestrator import SystemResult
from ..planet import Planet

__all__ = [
    "PLANET_COLUMN_UNITS",
    "planets_frame",
    "system_summary",
    "write_planet_table",
    "write_summary",
]

PLANET_COLUMN_UNITS: Dict[str, str] = {
    "index": "count",
    "parent_index": "count",
    "is_moon": "bool",
    "sma_au": "AU",
    "eccentricity": "dimensionless",
    "moon_sma_au": "AU",
    "moon_eccentricity": "dimensionless",
    "mass_earth": "M_Earth",
    "dust_mass_earth": "M_Earth",
    "gas_mass_earth": "M_Earth",
    "planet_type": "category",
    "gas_giant": "bool",
    "orbital_zone": "category",
    "radius_km": "km",
    "core_radius_km": "km",
    "density": "g cm^-3",
    "surface_gravity": "g_Earth",
    "escape_velocity": "m s^-1",
    "orbital_period_days": "d",
    "day_length_hours": "h",
    "tidally_locked": "bool",
    "axial_tilt_deg": "deg",
    "surface_pressure_mb": "mbar",
    "boiling_point_k": "K",
    "surface_temperature_k": "K",
    "greenhouse_rise_k": "K",
    "albedo": "dimensionless",
    "hydrosphere": "dimensionless",
    "cloud_cover": "dimensionless",
    "ice_cover": "dimensionless",
    "breathability": "category",
    "habitable": "bool",
    "earthlike": "bool",
    "atmosphere": "species:mbar list",
}


_EARTH_MASSES_PER_SUN: float = constants.SUN_MASS / constants.EARTH_MASS


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _format_atmosphere(planet: Planet) -> str:
    return ";".join(f"{gas.symbol}:{gas.pressure:.4g}" for gas in planet.atmosphere)


def _body_row(planet: Planet, index: int, parent_index: int) -> Dict[str, Any]:
    return {
        "index": index,
        "parent_index": parent_index,
        "is_moon": planet.is_moon,
        "sma_au": planet.sma,
        "eccentricity": planet.eccentricity,
        "moon_sma_au": planet.moon_sma if planet.is_moon else float("nan"),
        "moon_eccentricity": planet.moon_eccentricity if planet.is_moon else float("nan"),
        "mass_earth": planet.earth_masses,
        "dust_mass_earth": planet.dust_mass * _EARTH_MASSES_PER_SUN,
        "gas_mass_earth": planet.gas_mass * _EARTH_MASSES_PER_SUN,
        "planet_type": planet.planet_type.value,
        "gas_giant": planet.gas_giant,
        "orbital_zone": planet.orbital_zone,
        "radius_km": planet.radius,
        "core_radius_km": planet.core_radius,
        "density": planet.density,
        "surface_gravity": planet.surface_gravity,
        "escape_velocity": planet.escape_velocity,
        "orbital_period_days": planet.orbital_period_days,
        "day_length_hours": planet.day_length,
        "tidally_locked": planet.is_tidally_locked,
        "axial_tilt_deg": planet.axial_tilt,
        "surface_pressure_mb": planet.surface_pressure,
        "boiling_point_k": planet.boiling_point,
        "surface_temperature_k": planet.surface_temperature,
        "greenhouse_rise_k": planet.greenhouse_rise,
        "albedo": planet.albedo,
        "hydrosphere": planet.hydrosphere,
        "cloud_cover": planet.cloud_cover,
        "ice_cover": planet.ice_cover,
        "breathability": planet.breathability.value,
        "habitable": planet.habitable,
        "earthlike": planet.earthlike,
        "atmosphere": _format_atmosphere(planet),
    }


def planets_frame(result: SystemResult) -> pd.DataFrame:
    """Return one row per planet and moon of ``result``.

    Moons follow their parent and carry the parent's ``index`` in
    ``parent_index``; planets have ``parent_index == -1``.
    """
    rows: List[Dict[str, Any]] = []
    for planet in result.planets:
        planet_index = len(rows)
        rows.append(_body_row(planet, planet_index, -1))
        for moon in planet.moons:
            rows.append(_body_row(moon, len(rows), planet_index))
    return pd.DataFrame(rows, columns=list(PLANET_COLUMN_UNITS))


def _finite_or_none(value: float) -> Any:
    return value if math.isfinite(value) else None


def system_summary(result: SystemResult) -> Dict[str, Any]:
    """Return a JSON-friendly summary of the star and the planet counts."""

    star = result.star
    inner, outer = star.conservative_habitable_zone
    return {
        "star": {
            "name": star.name,
            "spectral_class": star.spectral_class,
            "mass_msun": star.mass,
            "luminosity_lsun": star.luminosity,
            "radius_rsun": star.radius,
            "temperature_k": star.temperature,
            "age_yr": star.age,
            "lifetime_yr": _finite_or_none(star.lifetime),
            "ecosphere_radius_au": star.ecosphere_radius,
            "habitable_zone_au": [inner, outer],
        },
        "planet_count": len(result.planets),
        "moon_count": result.moon_count,
        "gas_giant_count": sum(1 for planet in result.planets if planet.gas_giant),
        "failed_planetesimals": len(result.failed_planetesimals),
        "escaped_moons": len(result.escaped_moons),
        "injections": result.injections,
        "habitable": result.habitable,
        "planet_types": sorted({planet.planet_type.value for planet in result.bodies()}),
    }


def write_planet_table(
    df: pd.DataFrame,
    path: Path,
    *,
    fmt: Literal["csv", "parquet"] = "csv",
    compression: str = "snappy",
) -> None:
    """Write the per-body table as CSV or Parquet.

    Parquet files carry the column units in the schema metadata.
    """
    path = Path(path)
    _ensure_parent(path)
    if fmt == "csv":
        df.to_csv(path, index=False)
        return
    if fmt != "parquet":
        raise ValueError(f"unsupported table format {fmt!r}")
    units = {column: PLANET_COLUMN_UNITS.get(column, "") for column in df.columns}
    table = pa.Table.from_pandas(df, preserve_index=False)
    metadata = dict(table.schema.metadata or {})
    metadata[b"units"] = json.dumps(units, sort_keys=True).encode("utf-8")
    table = table.replace_schema_metadata(metadata)
    compression_arg = None if compression == "none" else compression
    pq.write_table(table, path, compression=compression_arg)


def write_summary(summary: Mapping[str, Any], path: Path) -> None:
    """Write a summary dictionary to ``summary.json``."""

    path = Path(path)
    _ensure_parent(path)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(summary, fh, indent=2, sort_keys=True)
