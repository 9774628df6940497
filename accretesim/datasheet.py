"""Plain-text datasheet of a generated system."""
from __future__ import annotations

import math
from typing import List

from . import constants
from .orchestrator import SystemResult
from .planet import Planet

__all__ = ["render_system", "describe_body"]


def _value(value: float, fmt: str, unit: str = "") -> str:
    if not math.isfinite(value):
        return "n/a"
    return f"{value:{fmt}}{unit}"


def describe_body(body: Planet) -> str:
    """Return a one-line description of a planet or moon."""

    parts = [
        body.planet_type.value,
        f"{body.earth_masses:.4g} Earth masses",
        f"radius {body.radius:,.0f} km",
        f"density {body.density:.2f} g/cc",
        f"gravity {_value(body.surface_gravity, '.2f', ' g')}",
        f"pressure {_value(body.surface_pressure, ',.1f', ' mb')}",
        f"surface {_value(body.surface_temperature, '.1f', ' K')}",
        f"day {_value(body.day_length, '.1f', ' h')}",
    ]
    if body.atmosphere:
        parts.append("atmosphere " + ", ".join(gas.symbol for gas in body.atmosphere))
    flags = []
    if body.is_tidally_locked:
        flags.append("tidally locked")
    if body.habitable:
        flags.append("habitable")
    if body.earthlike:
        flags.append("earthlike")
    if body.habitable_jovian:
        flags.append("habitable jovian")
    if flags:
        parts.append("[" + ", ".join(flags) + "]")
    return "; ".join(parts)


def render_system(result: SystemResult) -> str:
    """Render ``result`` as the classic accrete datasheet text."""

    star = result.star
    inner, outer = star.conservative_habitable_zone
    lines: List[str] = [
        f"Primary: {star}",
        f"Habitable zone: {inner:.3f} - {outer:.3f} AU",
        f"Planets: {len(result.planets)}",
        f"Captured Moons: {result.moon_count}",
        f"Habitable system: {'yes' if result.habitable else 'no'}",
        "",
    ]
    for number, planet in enumerate(result.planets, start=1):
        lines.append(
            f"  Planet {number:02d}: a={planet.sma:.4f} AU e={planet.eccentricity:.4f} "
            f"period {planet.orbital_period_days:,.1f} d"
        )
        lines.append(f"    {describe_body(planet)}")
        for moon_number, moon in enumerate(planet.moons, start=1):
            lines.append(
                f"    Moon {number:02d}.{moon_number:02d}: a={moon.moon_sma * constants.KM_PER_AU:,.0f} km "
                f"e={moon.moon_eccentricity:.4f}"
            )
            lines.append(f"      {describe_body(moon)}")
    return "\n".join(lines) + "\n"
