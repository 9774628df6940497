"""Planet and moon records of a generated system.

A moon is a :class:`Planet` with ``is_moon`` set and its orbit around the
parent stored in ``moon_sma``/``moon_eccentricity``.  A planet exclusively
owns its ``moons`` list; each moon keeps a non-owning ``parent`` reference
used for Roche limit and Hill sphere calculations.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from . import constants
from .bodies import CentralBody, seconds_to_hours
from .chemistry import AtmosphericConstituent
from .star import Star

logger = logging.getLogger(__name__)

__all__ = [
    "PlanetType",
    "Breathability",
    "Planet",
    "sort_bodies",
    "iter_bodies",
]


class PlanetType(Enum):
    """Classification assigned by the environment finalizer."""

    UNKNOWN = "Unknown"
    ROCK = "Rock"
    VENUSIAN = "Venusian"
    TERRESTRIAL = "Terrestrial"
    SUB_SUB_GAS_GIANT = "semi Gas Giant"
    SUB_GAS_GIANT = "sub Gas Giant"
    GAS_GIANT = "Gas Giant"
    MARTIAN = "Martian"
    WATER = "Water"
    ICE = "Ice"
    ASTEROIDS = "Asteroids"
    TIDALLY_LOCKED = "Tidally Locked"
    SUPER_EARTH = "Super Earth"

    @property
    def is_gas_giant(self) -> bool:
        return self in (
            PlanetType.SUB_SUB_GAS_GIANT,
            PlanetType.SUB_GAS_GIANT,
            PlanetType.GAS_GIANT,
        )


class Breathability(Enum):
    NONE = "none"
    BREATHABLE = "breathable"
    UNBREATHABLE = "unbreathable"
    POISONOUS = "poisonous"


@dataclass(eq=False)
class Planet(CentralBody):
    """Mutable state of a planet or moon.

    Attributes
    ----------
    dust_mass, gas_mass:
        Accreted dust and gas in solar masses.
    radius, core_radius:
        Equatorial and Kothari core radius in km.
    density:
        Bulk density in g/cm^3.
    orbital_zone:
        Insolation zone 1 (hot), 2 (temperate) or 3 (cold).
    orbital_period:
        Period around the star in seconds.
    day_length:
        Rotation period in hours.
    axial_tilt:
        Obliquity in degrees.
    surface_acceleration, surface_gravity:
        Surface acceleration in m/s^2 and in Earth gravities.
    escape_velocity, rms_velocity:
        Escape velocity and N2 RMS velocity in m/s.
    molecular_weight:
        Smallest molecular weight retained over the star's age.
    volatile_gas_inventory:
        Dimensionless volatile inventory.
    surface_pressure, boiling_point:
        Surface pressure in millibars and water boiling point in K.
    greenhouse_rise:
        Surface warming over the initial estimated temperature (K).
    hydrosphere, cloud_cover, ice_cover:
        Surface fractions in ``[0, 1]``.
    """

    dust_mass: float = 0.0
    gas_mass: float = 0.0
    gas_giant: bool = False
    is_moon: bool = False

    orbital_zone: int = 0
    orbital_period: float = 0.0
    day_length: float = 0.0
    axial_tilt: float = 0.0
    resonant_period: bool = False

    radius: float = 0.0
    core_radius: float = 0.0
    density: float = 0.0
    surface_acceleration: float = 0.0
    surface_gravity: float = 0.0
    escape_velocity: float = 0.0
    rms_velocity: float = 0.0
    molecular_weight: float = 0.0

    volatile_gas_inventory: float = 0.0
    surface_pressure: float = 0.0
    boiling_point: float = 0.0
    greenhouse_effect: bool = False
    greenhouse_rise: float = 0.0
    albedo: float = 0.0
    hydrosphere: float = 0.0
    cloud_cover: float = 0.0
    ice_cover: float = 0.0

    exospheric_temperature: float = 0.0
    estimated_temperature: float = 0.0
    estimated_terrestrial_temperature: float = 0.0
    surface_temperature: float = 0.0
    high_temperature: float = 0.0
    low_temperature: float = 0.0
    max_temperature: float = 0.0
    min_temperature: float = 0.0

    planet_type: PlanetType = PlanetType.UNKNOWN
    breathability: Breathability = Breathability.NONE
    habitable: bool = False
    habitable_jovian: bool = False
    habitable_moon: bool = False
    earthlike: bool = False

    star: Optional[Star] = field(default=None, repr=False)
    parent: Optional["Planet"] = field(default=None, repr=False)
    moons: List["Planet"] = field(default_factory=list, repr=False)
    atmosphere: List[AtmosphericConstituent] = field(default_factory=list, repr=False)

    # ------------------------------------------------------------------
    # Derived quantities
    # ------------------------------------------------------------------
    @property
    def radius_m(self) -> float:
        return self.radius * 1000.0

    @property
    def radius_cm(self) -> float:
        return self.radius * constants.CM_PER_KM

    @property
    def gas_fraction(self) -> float:
        """Fraction of the total mass held as accreted gas."""

        if self.mass <= 0.0:
            return 0.0
        return self.gas_mass / self.mass

    @property
    def moon_mass(self) -> float:
        return sum(moon.mass for moon in self.moons)

    @property
    def orbital_period_days(self) -> float:
        return self.orbital_period / (constants.SECONDS_PER_HOUR * constants.HOURS_PER_DAY)

    @property
    def is_tidally_locked(self) -> bool:
        """True if the rotation period equals the orbital period in whole hours."""

        period_hours = seconds_to_hours(self.orbital_period)
        return self.resonant_period or (
            math.isfinite(self.day_length) and int(self.day_length) == period_hours
        )

    def adopt_moon(self, moon: "Planet") -> None:
        moon.is_moon = True
        moon.parent = self
        self.moons.append(moon)

    def sort_key(self) -> float:
        return self.moon_sma if self.is_moon else self.sma


def sort_bodies(bodies: List[Planet]) -> None:
    """Sort ``bodies`` in place by orbit.

    Planets are ordered by semi-major axis around the star, moons by their
    semi-major axis around the parent.  Lists mixing planets and moons have
    no meaningful order and are left untouched.
    """
    if not bodies:
        return
    kinds = {body.is_moon for body in bodies}
    if len(kinds) > 1:
        logger.debug("Not sorting a mixed list of %d planets and moons", len(bodies))
        return
    bodies.sort(key=Planet.sort_key)


def iter_bodies(planets: List[Planet]) -> Iterator[Planet]:
    """Yield every planet followed by its moons, depth first."""

    for planet in planets:
        yield planet
        yield from iter_bodies(planet.moons)
