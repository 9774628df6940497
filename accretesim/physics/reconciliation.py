"""Post-accretion clean-up of failed planetesimals and escaped moons."""
from __future__ import annotations

import logging
from typing import List, Optional

from ..errors import InvariantError
from ..planet import Planet, sort_bodies
from ..random_source import RandomSource
from .accretion import critical_mass
from .coalescence import Coalescer

__all__ = [
    "MAX_ESCAPED_ECCENTRICITY",
    "widen_escaped_orbits",
    "promote_heavier_moons",
    "mark_moons",
    "validate_moons",
    "reconcile",
]

logger = logging.getLogger(__name__)

# Escaped bodies stay on bound orbits
MAX_ESCAPED_ECCENTRICITY: float = 0.99


def widen_escaped_orbits(escaped: List[Planet], rng: RandomSource, exponent: float) -> None:
    """Raise each escaped body's eccentricity by ``(U(0.1, 0.9) a)**k``.

    The bump closes the gap to a parabolic orbit proportionally, so the
    result stays below :data:`MAX_ESCAPED_ECCENTRICITY`.
    """
    for body in escaped:
        bump = min((rng.between(0.1, 0.9) * body.sma) ** exponent, MAX_ESCAPED_ECCENTRICITY)
        body.eccentricity += (1.0 - body.eccentricity) * bump
        body.eccentricity = min(body.eccentricity, MAX_ESCAPED_ECCENTRICITY)


def promote_heavier_moons(planets: List[Planet]) -> List[Planet]:
    """Return the planet list with every planet heavier than all its moons.

    When a moon outweighs its planet, the moon takes the planet's orbit and
    the former planet joins the remaining moons around it.
    """
    result: List[Planet] = []
    for planet in planets:
        heaviest = max(planet.moons, key=lambda moon: moon.mass, default=None)
        if heaviest is None or heaviest.mass <= planet.mass:
            result.append(planet)
            continue
        logger.debug(
            "Moon of %.4f Earth masses outweighs its planet at %.4f AU; swapping",
            heaviest.earth_masses,
            planet.sma,
        )
        siblings = [moon for moon in planet.moons if moon is not heaviest]
        planet.moons = []
        heaviest.sma = planet.sma
        heaviest.eccentricity = planet.eccentricity
        heaviest.is_moon = False
        heaviest.parent = None
        heaviest.gas_giant = heaviest.gas_giant or planet.gas_giant
        for moon in siblings + [planet]:
            heaviest.adopt_moon(moon)
        result.append(heaviest)
    return result


def mark_moons(planets: List[Planet], is_moon: bool = False, parent: Optional[Planet] = None) -> None:
    """Set ``is_moon`` and ``parent`` recursively over the planet tree."""

    for body in planets:
        body.is_moon = is_moon
        body.parent = parent
        mark_moons(body.moons, True, body)


def validate_moons(planets: List[Planet], negligible_mass: float) -> None:
    """Fail fast if a moon's mass is at or below the negligible threshold."""

    for planet in planets:
        for moon in planet.moons:
            if moon.mass <= negligible_mass:
                raise InvariantError(
                    f"moon of planet at {planet.sma:.4f} AU has negligible mass {moon.mass!r}"
                )
        validate_moons(planet.moons, negligible_mass)


def reconcile(
    coalescer: Coalescer,
    failed: List[Planet],
    rng: RandomSource,
    eccentricity_exponent: float,
    negligible_mass: float,
) -> List[Planet]:
    """Re-inject leftovers and return the final, validated planet list."""

    escaped = list(coalescer.escaped_moons)
    coalescer.escaped_moons.clear()
    widen_escaped_orbits(escaped, rng, eccentricity_exponent)

    luminosity = coalescer.star.luminosity
    b_coefficient = coalescer.params.b_coefficient
    for body in list(failed) + escaped:
        crit = critical_mass(body.sma, body.eccentricity, luminosity, b_coefficient)
        coalescer.inject(body, crit)
    logger.info(
        "Re-injected %d failed planetesimals and %d escaped moons", len(failed), len(escaped)
    )

    planets = promote_heavier_moons(coalescer.planets)
    sort_bodies(planets)
    for planet in planets:
        sort_bodies(planet.moons)
    mark_moons(planets)
    validate_moons(planets, negligible_mass)
    coalescer.planets = planets
    return planets
