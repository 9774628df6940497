"""Final physical state, classification and habitability of each body.

Architecture Overview
---------------------
:func:`finalize_planet` runs once per planet after reconciliation:

1. orbit-derived quantities (zone, period, tilt, exosphere, core radius)
2. gas giant test on a first empirical-density estimate
3. rocky bodies: Kothari radius, escape of accreted H2 and He
4. rotation and escape velocity
5. gas giants: fixed sentinel surface state; rocky bodies: volatiles,
   climate iteration, atmosphere and type decision table
6. moons (pinned to the parent's orbit, finalized non-recursively) with
   Roche/Hill orbit placement
7. breathability and the habitable/earthlike tests
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from .. import constants
from ..chemistry import ChemicalSpecies
from ..errors import InvariantError
from ..planet import Breathability, Planet, PlanetType, sort_bodies
from ..random_source import RandomSource
from . import atmosphere, climate, structure

__all__ = [
    "HabitabilityLimits",
    "gas_giant_type",
    "strip_light_gases",
    "rocky_type",
    "roche_limit",
    "hill_sphere",
    "is_earthlike",
    "finalize_planet",
]

logger = logging.getLogger(__name__)

# Sentinel for quantities that are undefined below a gas giant's clouds
UNBOUNDED: float = math.inf

GAS_GIANT_MIN_EARTH_MASSES: float = 1.0
GAS_GIANT_MIN_GAS_FRACTION: float = 0.05
GAS_GIANT_MAX_MOLECULAR_WEIGHT: float = 4.0
SUB_SUB_GAS_GIANT_GAS_FRACTION: float = 0.20
SUB_GAS_GIANT_MAX_EARTH_MASSES: float = 20.0

HYDROGEN_SHARE: float = 0.85
HELIUM_SHARE: float = 0.999

# Moons lighter than this (Earth masses) are not given an orbit of their own
MIN_MOON_EARTH_MASSES: float = 1.0e-6
ROCHE_COEFFICIENT: float = 2.44

HABITABLE_JOVIAN_MIN_AGE: float = 2.0e9


@dataclass(frozen=True)
class HabitabilityLimits:
    """Bounds of the earthlike test."""

    gravity: Tuple[float, float] = (0.8, 1.2)
    relative_temperature: Tuple[float, float] = (-2.0, 3.0)
    max_ice_cover: float = 0.1
    pressure_atm: Tuple[float, float] = (0.5, 2.0)
    cloud_cover: Tuple[float, float] = (0.4, 0.8)
    hydrosphere: Tuple[float, float] = (0.5, 0.8)


def gas_giant_type(earth_masses: float, gas_fraction: float) -> PlanetType:
    if gas_fraction < SUB_SUB_GAS_GIANT_GAS_FRACTION:
        return PlanetType.SUB_SUB_GAS_GIANT
    if earth_masses < SUB_GAS_GIANT_MAX_EARTH_MASSES:
        return PlanetType.SUB_GAS_GIANT
    return PlanetType.GAS_GIANT


def _update_gravity(planet: Planet) -> None:
    planet.surface_acceleration = structure.gravitational_acceleration(planet.mu, planet.radius_m)
    planet.surface_gravity = structure.gravity(planet.surface_acceleration)


def strip_light_gases(planet: Planet) -> None:
    """Remove the H2 and He lost to thermal escape over the star's age.

    Accreted gas is taken as 85% H2, the remainder almost all He.  Each
    gas whose escape time is shorter than the age loses the fraction
    ``1 - exp(-age / life)`` from both gas and total mass.
    """
    if planet.gas_fraction <= 1.0e-6:
        return
    age = planet.star.age
    hydrogen = planet.gas_mass * HYDROGEN_SHARE
    helium = (planet.gas_mass - hydrogen) * HELIUM_SHARE
    for weight, share in ((constants.MOL_HYDROGEN, hydrogen), (constants.HELIUM, helium)):
        life = structure.gas_life(
            weight, planet.exospheric_temperature, planet.surface_acceleration, planet.radius_m
        )
        if life < age:
            loss = (1.0 - math.exp(-age / life)) * share
            planet.gas_mass -= loss
            planet.mass -= loss
            _update_gravity(planet)


def rocky_type(planet: Planet) -> PlanetType:
    """Classify a finalized rocky body from its surface state.

    A thick hydrogen atmosphere over a low-density body reclassifies it as
    a small gas giant and removes its atmosphere; a dry body still holding
    accreted gas is frozen over completely.
    """

    if planet.surface_pressure < 1.0:
        if not planet.is_moon and planet.earth_masses < constants.ASTEROID_MASS_LIMIT:
            return PlanetType.ASTEROIDS
        return PlanetType.ROCK
    if planet.surface_pressure > 6000.0 and planet.molecular_weight <= 2.0:
        if planet.density < 2.0:
            planet.atmosphere = []
            return PlanetType.SUB_SUB_GAS_GIANT
        return PlanetType.SUPER_EARTH if planet.atmosphere else PlanetType.ROCK
    if planet.is_tidally_locked:
        return PlanetType.TIDALLY_LOCKED
    if planet.hydrosphere >= 0.95:
        return PlanetType.WATER
    if planet.ice_cover >= 0.95:
        return PlanetType.ICE
    if planet.hydrosphere > 0.05:
        return PlanetType.TERRESTRIAL
    if planet.max_temperature > planet.boiling_point:
        return PlanetType.VENUSIAN
    if planet.gas_fraction > 1.0e-4:
        planet.ice_cover = 1.0
        return PlanetType.ICE
    if planet.surface_pressure <= 250.0:
        return PlanetType.MARTIAN
    if planet.surface_temperature < constants.FREEZING_POINT_OF_WATER:
        return PlanetType.ICE
    return PlanetType.UNKNOWN


def roche_limit(planet_radius: float, planet_density: float, moon_density: float) -> float:
    """Return the fluid Roche limit in km."""

    return ROCHE_COEFFICIENT * planet_radius * (planet_density / moon_density) ** (1.0 / 3.0)


def hill_sphere(sma: float, planet_mass: float, star_mass: float) -> float:
    """Return the Hill sphere radius in km."""

    return sma * constants.KM_PER_AU * (planet_mass / (3.0 * star_mass)) ** (1.0 / 3.0)


def is_earthlike(planet: Planet, limits: HabitabilityLimits = HabitabilityLimits()) -> bool:
    relative_temp = (
        planet.surface_temperature
        - constants.FREEZING_POINT_OF_WATER
        - constants.EARTH_AVERAGE_CELSIUS
    )
    pressure = planet.surface_pressure / constants.EARTH_SURF_PRES_IN_MILLIBARS
    return (
        limits.gravity[0] <= planet.surface_gravity <= limits.gravity[1]
        and limits.relative_temperature[0] <= relative_temp <= limits.relative_temperature[1]
        and planet.ice_cover <= limits.max_ice_cover
        and limits.pressure_atm[0] <= pressure <= limits.pressure_atm[1]
        and limits.cloud_cover[0] <= planet.cloud_cover <= limits.cloud_cover[1]
        and limits.hydrosphere[0] <= planet.hydrosphere <= limits.hydrosphere[1]
        and planet.planet_type is not PlanetType.WATER
    )


def _reset(planet: Planet) -> None:
    planet.surface_temperature = 0.0
    planet.high_temperature = 0.0
    planet.low_temperature = 0.0
    planet.max_temperature = 0.0
    planet.min_temperature = 0.0
    planet.greenhouse_rise = 0.0
    planet.resonant_period = False
    planet.atmosphere = []


def _finalize_gas_giant(planet: Planet, rng: RandomSource) -> None:
    star = planet.star
    planet.greenhouse_effect = False
    planet.volatile_gas_inventory = UNBOUNDED
    planet.surface_pressure = UNBOUNDED
    planet.boiling_point = UNBOUNDED
    planet.surface_temperature = UNBOUNDED
    planet.greenhouse_rise = 0.0
    planet.albedo = rng.about(constants.GAS_GIANT_ALBEDO, 0.1)
    planet.hydrosphere = 1.0
    planet.cloud_cover = 1.0
    planet.ice_cover = 0.0
    planet.surface_gravity = UNBOUNDED
    planet.estimated_temperature = climate.estimated_temperature(
        star.ecosphere_radius, planet.sma, planet.albedo
    )
    planet.estimated_terrestrial_temperature = climate.estimated_terrestrial_temperature(
        star.ecosphere_radius, planet.sma
    )
    planet.habitable_jovian = (
        constants.FREEZING_POINT_OF_WATER
        <= planet.estimated_terrestrial_temperature
        <= constants.EARTH_AVERAGE_KELVIN + 10.0
        and star.age > HABITABLE_JOVIAN_MIN_AGE
    )


def _finalize_rocky(planet: Planet, chemicals: Sequence[ChemicalSpecies]) -> None:
    star = planet.star
    planet.estimated_temperature = climate.estimated_temperature(
        star.ecosphere_radius, planet.sma, planet.albedo
    )
    planet.estimated_terrestrial_temperature = climate.estimated_terrestrial_temperature(
        star.ecosphere_radius, planet.sma
    )
    planet.greenhouse_effect = climate.has_greenhouse(star.ecosphere_radius, planet.sma)
    planet.volatile_gas_inventory = climate.volatile_gas_inventory(
        planet.escape_velocity,
        planet.rms_velocity,
        planet.orbital_zone,
        planet.earth_masses,
        star.mass,
        planet.greenhouse_effect,
        planet.gas_fraction,
    )
    planet.surface_pressure = climate.surface_pressure(
        planet.volatile_gas_inventory, planet.surface_gravity, planet.radius
    )
    planet.boiling_point = climate.boiling_point(planet.surface_pressure)

    climate.iterate_surface_temperature(planet)

    if (
        planet.max_temperature >= constants.FREEZING_POINT_OF_WATER
        and planet.min_temperature <= planet.boiling_point
    ):
        planet.atmosphere = atmosphere.synthesize_atmosphere(
            chemicals,
            pressure=planet.surface_pressure,
            low_temperature=planet.low_temperature,
            surface_temperature=planet.surface_temperature,
            molecular_weight=planet.molecular_weight,
            exospheric_temperature=planet.exospheric_temperature,
            escape_velocity=planet.escape_velocity,
            gas_fraction=planet.gas_fraction,
            age=star.age,
        )

    planet.planet_type = rocky_type(planet)


def _place_moons(
    planet: Planet,
    rng: RandomSource,
    chemicals: Sequence[ChemicalSpecies],
    negligible_mass: float,
) -> None:
    for moon in planet.moons:
        if moon.mass <= negligible_mass:
            raise InvariantError(
                f"moon of planet at {planet.sma:.4f} AU has negligible mass {moon.mass!r}"
            )
        moon.is_moon = True
        moon.parent = planet
        moon.star = planet.star
        moon.sma = planet.sma
        moon.eccentricity = planet.eccentricity
        finalize_planet(moon, rng, chemicals, do_moons=False, negligible_mass=negligible_mass)

        if moon.earth_masses <= MIN_MOON_EARTH_MASSES:
            logger.debug("Moon of %.3e Earth masses left without an orbit", moon.earth_masses)
        else:
            roche = roche_limit(planet.radius, planet.density, moon.density)
            hill = hill_sphere(planet.sma, planet.mass, planet.star.mass)
            if roche * 3.0 < hill:
                moon.moon_sma = rng.between(roche * 1.5, hill / 2.0) / constants.KM_PER_AU
                moon.moon_eccentricity = rng.eccentricity()
        if moon.habitable:
            planet.habitable_moon = True
    sort_bodies(planet.moons)


def finalize_planet(
    planet: Planet,
    rng: RandomSource,
    chemicals: Sequence[ChemicalSpecies],
    do_moons: bool = True,
    negligible_mass: float = 1.0e-15,
) -> Planet:
    """Compute the final physical state of ``planet`` (and its moons) in place.

    Parameters
    ----------
    planet:
        Body with its orbit, masses and ``star`` set.
    rng:
        Random source for tilt, gas giant albedo and moon orbits.
    chemicals:
        Reference species for atmosphere synthesis.
    do_moons:
        Finalize and place the planet's moons.
    negligible_mass:
        Mass (solar masses) at or below which a moon is an invariant
        violation.

    Returns
    -------
    Planet
        The same, now finalized, instance.
    """
    star = planet.star
    _reset(planet)

    planet.orbital_zone = structure.orbital_zone(planet.sma, star.luminosity)
    planet.orbital_period = planet.period_around(star.mu)
    planet.axial_tilt = structure.axial_tilt(planet.sma, rng)
    planet.exospheric_temperature = structure.exospheric_temperature(planet.sma, star.ecosphere_radius)
    planet.rms_velocity = structure.rms_velocity(constants.MOL_NITROGEN, planet.exospheric_temperature)
    planet.core_radius = structure.kothari_radius(planet.mass, planet.orbital_zone, planet.gas_giant)

    planet.density = structure.empirical_density(
        planet.earth_masses, planet.sma, star.ecosphere_radius, planet.gas_giant
    )
    planet.radius = structure.volume_radius(planet.mass_grams, planet.density)
    _update_gravity(planet)
    planet.escape_velocity = structure.escape_velocity(planet.mu, planet.radius_m)
    planet.molecular_weight = structure.minimum_molecular_weight(
        star.age,
        planet.exospheric_temperature,
        planet.surface_acceleration,
        planet.radius_m,
        planet.escape_velocity,
    )

    gas_giant = (
        planet.earth_masses > GAS_GIANT_MIN_EARTH_MASSES
        and planet.gas_fraction > GAS_GIANT_MIN_GAS_FRACTION
        and planet.molecular_weight <= GAS_GIANT_MAX_MOLECULAR_WEIGHT
    )
    if gas_giant:
        planet.planet_type = gas_giant_type(planet.earth_masses, planet.gas_fraction)
    else:
        planet.planet_type = PlanetType.UNKNOWN
        planet.radius = structure.kothari_radius(planet.mass, planet.orbital_zone, planet.gas_giant)
        planet.density = structure.volume_density(planet.mass_grams, planet.radius)
        _update_gravity(planet)
        strip_light_gases(planet)

    planet.day_length, planet.resonant_period = structure.day_length(
        planet.mass,
        planet.radius,
        planet.density,
        planet.sma,
        planet.eccentricity,
        planet.gas_giant,
        star.mass,
        star.age,
        planet.orbital_period,
    )
    planet.escape_velocity = structure.escape_velocity(planet.mu, planet.radius_m)
    planet.molecular_weight = structure.minimum_molecular_weight(
        star.age,
        planet.exospheric_temperature,
        planet.surface_acceleration,
        planet.radius_m,
        planet.escape_velocity,
    )

    if gas_giant:
        _finalize_gas_giant(planet, rng)
    else:
        _finalize_rocky(planet, chemicals)

    if do_moons and not planet.is_moon:
        _place_moons(planet, rng, chemicals, negligible_mass)

    planet.gas_giant = planet.planet_type.is_gas_giant
    if planet.gas_giant:
        return planet

    planet.breathability = atmosphere.breathability(planet.atmosphere, planet.surface_pressure)
    if planet.breathability is Breathability.BREATHABLE and not planet.is_tidally_locked:
        planet.habitable = True
        planet.earthlike = is_earthlike(planet)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "finalized %s at a=%.4f AU: %.3f Earth masses, %.1f K, %.1f mb",
            planet.planet_type.value,
            planet.sma,
            planet.earth_masses,
            planet.surface_temperature,
            planet.surface_pressure,
        )
    return planet
