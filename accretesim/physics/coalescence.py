"""Collision, capture and escape of grown protoplanets.

Each grown body is compared against the existing planets.  If the orbits
overlap (the separation of the semi-major axes is within either body's
influence-inflated reach) the two interact: the smaller may be captured as
a moon, may escape, or the two merge into one planet on a mass-weighted
orbit.  Otherwise the body becomes a new planet.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..planet import Planet, sort_bodies
from ..star import Star
from .accretion import AccretionParameters, critical_mass, dust_density, grow_protoplanet, reduced_mass
from .disk import DustDisk

__all__ = [
    "MoonCapture",
    "Outcome",
    "Coalescer",
    "find_overlap",
    "merged_orbit",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoonCapture:
    """Moon capture settings.

    Attributes
    ----------
    enabled:
        Whether interacting bodies may be captured as moons at all.
    min_earth_masses, max_earth_masses:
        Open mass window (Earth masses) for a capturable body.
    max_mass_fraction:
        Captured moons of a planet may total at most this fraction of its mass.
    """

    enabled: bool = True
    min_earth_masses: float = 1.0e-4
    max_earth_masses: float = 2.5
    max_mass_fraction: float = 0.05


class Outcome(Enum):
    NEW_PLANET = "new planet"
    MERGED = "merged"
    CAPTURED = "captured"
    ESCAPED = "escaped"


def _reach(body: Planet, outward: bool) -> float:
    mu = reduced_mass(body.mass)
    if outward:
        return body.sma * (1.0 + body.eccentricity) * (1.0 + mu) - body.sma
    return body.sma - body.sma * (1.0 - body.eccentricity) * (1.0 - mu)


def find_overlap(planets: List[Planet], candidate: Planet) -> Optional[Planet]:
    """Return the first planet whose orbit overlaps ``candidate``, if any."""

    for planet in planets:
        diff = planet.sma - candidate.sma
        outward = diff > 0.0
        candidate_reach = _reach(candidate, outward)
        planet_reach = _reach(planet, not outward)
        if abs(diff) <= abs(candidate_reach) or abs(diff) <= abs(planet_reach):
            return planet
    return None


def merged_orbit(first: Planet, second: Planet) -> Tuple[float, float]:
    """Return ``(sma, eccentricity)`` of the combined body.

    The semi-major axis is the mass-weighted harmonic mean; the eccentricity
    follows from summing ``m sqrt(a (1 - e^2))``.  A squared term outside
    ``[0, 1)`` is floored to zero.
    """
    total = first.mass + second.mass
    sma = total / (first.mass / first.sma + second.mass / second.sma)
    momentum = first.mass * math.sqrt(first.sma) * math.sqrt(1.0 - first.eccentricity**2)
    momentum += second.mass * math.sqrt(second.sma) * math.sqrt(1.0 - second.eccentricity**2)
    momentum /= total * math.sqrt(sma)
    term = 1.0 - momentum**2
    if term < 0.0 or term >= 1.0:
        term = 0.0
    return sma, math.sqrt(term)


class Coalescer:
    """Maintains the sorted planet list while protoplanets are added.

    Parameters
    ----------
    star:
        Primary of the system.
    disk:
        Disk swept again when two planets merge.
    params:
        Accretion coefficients.
    moons:
        Moon capture settings.
    """

    def __init__(
        self,
        star: Star,
        disk: DustDisk,
        params: AccretionParameters,
        moons: Optional[MoonCapture] = None,
    ) -> None:
        self.star = star
        self.disk = disk
        self.params = params
        self.moons = moons or MoonCapture()
        self.planets: List[Planet] = []
        self.escaped_moons: List[Planet] = []

    def coalesce(self, candidate: Planet, crit_mass: float) -> Outcome:
        """Add a freshly grown body, sweeping the disk again on merges."""

        return self._add(candidate, crit_mass, sweep=True)

    def inject(self, candidate: Planet, crit_mass: float) -> Outcome:
        """Add a leftover body without any further dust sweep."""

        return self._add(candidate, crit_mass, sweep=False)

    def _add(self, candidate: Planet, crit_mass: float, sweep: bool) -> Outcome:
        target = find_overlap(self.planets, candidate)
        if target is None:
            candidate.star = self.star
            candidate.gas_giant = candidate.mass >= crit_mass
            self.planets.append(candidate)
            outcome = Outcome.NEW_PLANET
        else:
            outcome = self._interact(target, candidate, crit_mass, sweep)
        sort_bodies(self.planets)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s: a=%.4f AU, %.4f Earth masses (%d planets)",
                outcome.value,
                candidate.sma,
                candidate.earth_masses,
                len(self.planets),
            )
        return outcome

    def _capturable(self, planet: Planet, candidate: Planet) -> bool:
        earth_masses = candidate.earth_masses
        # A seed-mass planet swapped into a moon would be a negligible moon
        if planet.mass <= self.params.protoplanet_mass:
            return False
        return (
            self.moons.min_earth_masses < earth_masses < self.moons.max_earth_masses
            and planet.moon_mass < planet.mass * self.moons.max_mass_fraction
        )

    def _interact(self, planet: Planet, candidate: Planet, crit_mass: float, sweep: bool) -> Outcome:
        new_sma, new_eccentricity = merged_orbit(planet, candidate)

        if self.moons.enabled and candidate.mass < crit_mass:
            if self._capturable(planet, candidate):
                self._capture(planet, candidate, new_eccentricity)
                return Outcome.CAPTURED
            if sweep:
                escaped = Planet(
                    sma=candidate.sma,
                    eccentricity=new_eccentricity,
                    mass=candidate.dust_mass + candidate.gas_mass,
                    dust_mass=candidate.dust_mass,
                    gas_mass=candidate.gas_mass,
                    star=self.star,
                )
                self.escaped_moons.append(escaped)
                return Outcome.ESCAPED

        merged_crit = critical_mass(
            new_sma, new_eccentricity, self.star.luminosity, self.params.b_coefficient
        )
        if sweep:
            combined = planet.mass + candidate.mass
            density = dust_density(self.star.mass, new_sma, self.params)
            result = grow_protoplanet(
                self.disk, combined, new_sma, new_eccentricity, merged_crit, density, self.params
            )
            planet.mass = result.mass
            planet.dust_mass += candidate.dust_mass + result.swept_dust
            planet.gas_mass += candidate.gas_mass + result.swept_gas
        else:
            planet.mass += candidate.mass
            planet.dust_mass += candidate.dust_mass
            planet.gas_mass += candidate.gas_mass
        planet.sma = new_sma
        planet.eccentricity = new_eccentricity
        if planet.mass >= merged_crit:
            planet.gas_giant = True
        return Outcome.MERGED

    def _capture(self, planet: Planet, candidate: Planet, eccentricity: float) -> None:
        moon = Planet(
            sma=candidate.sma,
            eccentricity=eccentricity,
            mass=candidate.mass,
            dust_mass=candidate.dust_mass,
            gas_mass=candidate.gas_mass,
            star=self.star,
        )
        if moon.dust_mass + moon.gas_mass > planet.dust_mass + planet.gas_mass:
            planet.dust_mass, moon.dust_mass = moon.dust_mass, planet.dust_mass
            planet.gas_mass, moon.gas_mass = moon.gas_mass, planet.gas_mass
            planet.mass, moon.mass = moon.mass, planet.mass
        planet.adopt_moon(moon)
