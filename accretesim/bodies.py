"""Orbital and mass arithmetic shared by stars, planets and moons.

Masses are stored in solar masses, semi-major axes in AU.  Every derived
quantity below is a pure function of the stored fields and is never cached
on the instance, so a body can be mutated freely during accretion and
reconciliation.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from . import constants

__all__ = [
    "CentralBody",
    "orbital_period",
    "seconds_to_hours",
]


def orbital_period(sma_m: float, mu: float) -> float:
    """Return the Keplerian orbital period.

    Parameters
    ----------
    sma_m:
        Semi-major axis in metres.
    mu:
        Standard gravitational parameter of the primary (m^3 s^-2).

    Returns
    -------
    float
        Period in seconds.
    """
    return 2.0 * math.pi * math.sqrt(sma_m**3 / mu)


def seconds_to_hours(seconds: float) -> int:
    """Return ``seconds`` expressed in whole hours (truncated)."""

    return int(seconds / constants.SECONDS_PER_HOUR)


@dataclass
class CentralBody:
    """Common orbital state of any body in a generated system.

    Attributes
    ----------
    mass:
        Mass in solar masses.
    sma:
        Semi-major axis around the star in AU.
    eccentricity:
        Orbital eccentricity, ``0 <= e < 1``.
    inclination:
        Orbital inclination in degrees.
    moon_sma:
        Semi-major axis around the parent planet in AU (moons only).
    moon_eccentricity:
        Eccentricity of the orbit around the parent planet (moons only).
    """

    mass: float = 0.0
    sma: float = 0.0
    eccentricity: float = 0.0
    inclination: float = 0.0
    moon_sma: float = 0.0
    moon_eccentricity: float = 0.0

    # ------------------------------------------------------------------
    # Mass conversions
    # ------------------------------------------------------------------
    @property
    def mass_kg(self) -> float:
        return self.mass * constants.SUN_MASS

    @property
    def mass_grams(self) -> float:
        return self.mass * constants.SUN_MASS_IN_GRAMS

    @property
    def earth_masses(self) -> float:
        return self.mass_kg / constants.EARTH_MASS

    @property
    def jupiter_masses(self) -> float:
        return self.mass_kg / constants.JUPITER_MASS

    @property
    def mu(self) -> float:
        """Standard gravitational parameter ``G M`` in m^3 s^-2."""

        return self.mass_kg * constants.G

    # ------------------------------------------------------------------
    # Orbit geometry
    # ------------------------------------------------------------------
    @property
    def sma_m(self) -> float:
        return self.sma * constants.AU

    @property
    def sma_km(self) -> float:
        return self.sma * constants.KM_PER_AU

    @property
    def apoapsis(self) -> float:
        return self.sma * (1.0 + self.eccentricity)

    @property
    def periapsis(self) -> float:
        return self.sma * (1.0 - self.eccentricity)

    @property
    def moon_apoapsis(self) -> float:
        return self.moon_sma * (1.0 + self.moon_eccentricity)

    @property
    def moon_periapsis(self) -> float:
        return self.moon_sma * (1.0 - self.moon_eccentricity)

    def period_around(self, primary_mu: float) -> float:
        """Return the orbital period (s) of this body around ``primary_mu``."""

        return orbital_period(self.sma_m, primary_mu)
