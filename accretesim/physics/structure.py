"""Bulk structure, rotation and gas retention of planets.

The functions here are pure: every input is passed explicitly so the same
arguments always produce the same result.  Units follow the conventions of
Fogg (1985): masses in solar masses, radii in km, accelerations and
velocities in SI.
"""
from __future__ import annotations

import logging
import math
from typing import Tuple

from .. import constants
from ..errors import PhysicsError
from ..random_source import RandomSource

__all__ = [
    "orbital_zone",
    "exospheric_temperature",
    "kothari_radius",
    "empirical_density",
    "volume_radius",
    "volume_density",
    "gravitational_acceleration",
    "gravity",
    "escape_velocity",
    "rms_velocity",
    "molecular_limit",
    "gas_life",
    "minimum_molecular_weight",
    "axial_tilt",
    "day_length",
]

logger = logging.getLogger(__name__)

# Kothari (1936) radius coefficients
A1: float = 6.485e12
A2: float = 4.0032e-8
BETA: float = 5.71e12
KOTHARI_EARTH_CORRECTION: float = 1.004

# (atomic weight, atomic number) by orbital zone, for rock and gas
_KOTHARI_COMPOSITION = {
    1: ((15.0, 8.0), (9.5, 4.5)),
    2: ((10.0, 5.0), (2.47, 2.0)),
    3: ((10.0, 5.0), (7.0, 4.0)),
}

# Rotation (Dole 1964, Goldreich & Soter 1966)
ANGULAR_MOMENTUM_J: float = 1.46e-19  # cm^2 s^-2 g^-1
EARTH_SPIN_DOWN: float = -1.3e-15  # rad s^-1 yr^-1
K2_GAS_GIANT: float = 0.24
K2_ROCKY: float = 0.33

# Largest argument accepted by math.exp
_MAX_EXPONENT: float = 700.0

MAX_BISECTION_STEPS: int = 25
BISECTION_TOLERANCE: float = 0.1


def orbital_zone(sma: float, luminosity: float) -> int:
    """Return the insolation zone (1, 2 or 3) at ``sma`` AU."""

    if sma < 4.0 * math.sqrt(luminosity):
        return 1
    if sma < 15.0 * math.sqrt(luminosity):
        return 2
    return 3


def exospheric_temperature(sma: float, ecosphere_radius: float) -> float:
    return constants.EARTH_EXOSPHERIC_TEMPERATURE / (sma / ecosphere_radius) ** 2


def kothari_radius(mass: float, zone: int, gas_giant: bool) -> float:
    """Return the radius of a cold body from Kothari's degenerate-matter model.

    Parameters
    ----------
    mass:
        Mass in solar masses.
    zone:
        Orbital zone selecting the mean atomic weight and number.
    gas_giant:
        Whether the composition is gas-dominated.

    Returns
    -------
    float
        Radius in km, normalised so that an Earth mass in zone 1 gives the
        Earth's radius.
    """
    if mass <= 0.0:
        raise PhysicsError(f"kothari_radius requires a positive mass, got {mass!r}")
    rock, gas = _KOTHARI_COMPOSITION.get(zone, _KOTHARI_COMPOSITION[3])
    atomic_weight, atomic_number = gas if gas_giant else rock

    sun_grams = constants.SUN_MASS_IN_GRAMS
    numerator = 2.0 * BETA * sun_grams ** (1.0 / 3.0) / (A1 * (atomic_weight * atomic_number) ** (1.0 / 3.0))
    denominator = 1.0 + (
        A2
        * atomic_weight ** (4.0 / 3.0)
        * sun_grams ** (2.0 / 3.0)
        * mass ** (2.0 / 3.0)
        / (A1 * atomic_number**2)
    )
    radius = numerator / denominator * mass ** (1.0 / 3.0) / constants.CM_PER_KM
    return radius / KOTHARI_EARTH_CORRECTION


def empirical_density(earth_masses: float, sma: float, ecosphere_radius: float, gas_giant: bool) -> float:
    """Return an empirical bulk density in g/cm^3."""

    density = earth_masses ** (1.0 / 8.0) * (ecosphere_radius / sma) ** 0.25
    return density * (1.2 if gas_giant else 5.5)


def volume_radius(mass_grams: float, density: float) -> float:
    """Return the radius (km) of a sphere of ``mass_grams`` at ``density``."""

    if density <= 0.0:
        raise PhysicsError(f"volume_radius requires a positive density, got {density!r}")
    return ((mass_grams / density) / math.pi * 0.75) ** (1.0 / 3.0) / constants.CM_PER_KM


def volume_density(mass_grams: float, radius_km: float) -> float:
    """Return the density (g/cm^3) of a sphere of ``radius_km``."""

    if radius_km <= 0.0:
        raise PhysicsError(f"volume_density requires a positive radius, got {radius_km!r}")
    radius_cm = radius_km * constants.CM_PER_KM
    return mass_grams / (4.0 * math.pi * radius_cm**3 / 3.0)


def gravitational_acceleration(mu: float, radius_m: float) -> float:
    return mu / radius_m**2


def gravity(acceleration: float) -> float:
    """Return ``acceleration`` in Earth gravities."""

    return acceleration / constants.EARTH_ACCELERATION


def escape_velocity(mu: float, radius_m: float) -> float:
    return math.sqrt(2.0 * mu / radius_m)


def rms_velocity(molecular_weight: float, exospheric_temp: float) -> float:
    """Return the RMS speed (m/s) of a molecule at the exobase."""

    return math.sqrt(3.0 * constants.MOLAR_GAS_CONST * exospheric_temp / (molecular_weight / 1000.0))


def molecular_limit(escape_vel: float, exospheric_temp: float) -> float:
    """Return the smallest molecular weight retained by the escape-velocity rule."""

    threshold = (escape_vel / constants.GAS_RETENTION_THRESHOLD) ** 2
    return 3000.0 * constants.MOLAR_GAS_CONST * exospheric_temp / threshold


def gas_life(molecular_weight: float, exospheric_temp: float, acceleration: float, radius_m: float) -> float:
    """Return the e-folding escape time (years) of a gas (Dole 1964, p. 34)."""

    velocity = rms_velocity(molecular_weight, exospheric_temp)
    exponent = 3.0 * acceleration * radius_m / velocity**2
    if exponent > _MAX_EXPONENT:
        return math.inf
    seconds = velocity**3 / (2.0 * acceleration**2 * radius_m) * math.exp(exponent)
    return seconds / (constants.SECONDS_PER_HOUR * constants.HOURS_PER_DAY * constants.DAYS_PER_YEAR)


def minimum_molecular_weight(
    age: float,
    exospheric_temp: float,
    acceleration: float,
    radius_m: float,
    escape_vel: float,
) -> float:
    """Return the lightest molecular weight whose escape time reaches ``age``.

    The bracket starts at :func:`molecular_limit` and is halved or doubled
    until it straddles the solution, then bisected to a width of 0.1.
    Each phase is limited to 25 steps.
    """
    guess_low = guess_high = molecular_limit(escape_vel, exospheric_temp)
    life = gas_life(guess_low, exospheric_temp, acceleration, radius_m)

    loops = 0
    if life > age:
        while life > age and loops < MAX_BISECTION_STEPS:
            loops += 1
            guess_low /= 2.0
            life = gas_life(guess_low, exospheric_temp, acceleration, radius_m)
    else:
        while life < age and loops < MAX_BISECTION_STEPS:
            loops += 1
            guess_high *= 2.0
            life = gas_life(guess_high, exospheric_temp, acceleration, radius_m)

    loops = 0
    while guess_high - guess_low > BISECTION_TOLERANCE and loops < MAX_BISECTION_STEPS:
        loops += 1
        middle = 0.5 * (guess_low + guess_high)
        if gas_life(middle, exospheric_temp, acceleration, radius_m) < age:
            guess_low = middle
        else:
            guess_high = middle
    return guess_high


def axial_tilt(sma: float, rng: RandomSource) -> float:
    """Return a random obliquity (degrees) growing weakly with distance."""

    return (sma**0.2 * rng.about(constants.EARTH_AXIAL_TILT, 0.4)) % 360.0


def day_length(
    mass: float,
    radius_km: float,
    density: float,
    sma: float,
    eccentricity: float,
    gas_giant: bool,
    star_mass: float,
    star_age: float,
    orbital_period: float,
) -> Tuple[float, bool]:
    """Return the rotation period in hours and whether it is spin-orbit resonant.

    The primordial spin rate follows Dole's eq. 12; tidal braking by the
    star scales the Earth's spin-down rate (Fogg's eq. 13).  A body whose
    day would reach its year is locked: to the year itself, or to the
    ``(1 - e)/(1 + e)`` resonance when ``e > 0.1``.

    Parameters
    ----------
    mass:
        Mass in solar masses.
    radius_km:
        Equatorial radius in km.
    density:
        Bulk density in g/cm^3.
    sma, eccentricity:
        Orbit around the star.
    gas_giant:
        Selects the Love number ``k2``.
    star_mass, star_age:
        Primary mass (solar masses) and age (years).
    orbital_period:
        Year length in seconds.
    """
    k2 = K2_GAS_GIANT if gas_giant else K2_ROCKY
    mass_grams = mass * constants.SUN_MASS_IN_GRAMS
    earth_masses = mass * constants.SUN_MASS / constants.EARTH_MASS
    radius_cm = radius_km * constants.CM_PER_KM
    radius_m = radius_km * 1000.0

    base_rate = math.sqrt(2.0 * ANGULAR_MOMENTUM_J * mass_grams / (k2 * radius_cm**2))
    spin_down = (
        EARTH_SPIN_DOWN
        * (density / constants.EARTH_DENSITY)
        * (radius_m / constants.EARTH_RADIUS)
        / earth_masses
        * star_mass**2
        / sma**6
    )
    rate = base_rate + spin_down * star_age
    stopped = rate <= 0.0
    day_seconds = math.inf if stopped else 2.0 * math.pi / rate

    if stopped or day_seconds >= orbital_period:
        if eccentricity > 0.1:
            resonance = (1.0 - eccentricity) / (1.0 + eccentricity)
            return resonance * orbital_period / constants.SECONDS_PER_HOUR, True
        return orbital_period / constants.SECONDS_PER_HOUR, False
    return day_seconds / constants.SECONDS_PER_HOUR, False
