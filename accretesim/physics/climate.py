"""Volatiles, surface coverage and the surface-temperature solver.

The temperature model follows Fogg (1985) with Burdick's refinements:
an effective temperature from stellar flux and albedo, a greenhouse rise
from an optical depth set by the lightest retained molecule and the
surface pressure, and a damped fixed-point iteration coupling temperature
to hydrosphere, cloud and ice cover.

Architecture Overview
---------------------
Pure functions compute each quantity from explicit arguments.
:func:`iterate_surface_temperature` drives the fixed point on a
:class:`~accretesim.planet.Planet`, whose fields hold the iteration state.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import constants

if TYPE_CHECKING:
    from ..planet import Planet

__all__ = [
    "TemperatureRange",
    "effective_temperature",
    "estimated_temperature",
    "estimated_terrestrial_temperature",
    "has_greenhouse",
    "volatile_gas_inventory",
    "surface_pressure",
    "boiling_point",
    "water_coverage",
    "cloud_fraction",
    "ice_fraction",
    "optical_depth",
    "greenhouse_rise",
    "planet_albedo",
    "lim",
    "soft",
    "temperature_range",
    "iterate_surface_temperature",
]

logger = logging.getLogger(__name__)

EARTH_EFFECTIVE_TEMPERATURE: float = 250.0  # K

# Volatile inventory proportionality constant by orbital zone
_INVENTORY_CONSTANT = {1: 140000.0, 2: 75000.0, 3: 250.0}
INVENTORY_DRY_DIVISOR: float = 140.0

# Cloud model (Hart 1978)
CLOUD_TEMPERATURE_COEFF: float = 0.0698  # K^-1
CLOUD_COVERAGE_FACTOR: float = 1.839e-8  # km^2 kg^-1

# (upper molecular weight, optical depth) bands
_OPTICAL_DEPTH_BANDS = ((10.0, 3.0), (20.0, 2.34), (30.0, 1.0), (45.0, 0.15), (100.0, 0.05))
# (pressure in atmospheres, multiplier), highest first
_PRESSURE_MULTIPLIERS = ((70.0, 8.333), (50.0, 6.666), (30.0, 3.333), (10.0, 2.0), (5.0, 1.5))

MAX_TEMPERATURE_ITERATIONS: int = 25
TEMPERATURE_TOLERANCE: float = 0.25  # K


@dataclass(frozen=True)
class TemperatureRange:
    """Daily and seasonal temperature extremes in K."""

    high: float
    low: float
    max: float
    min: float


def effective_temperature(ecosphere_radius: float, sma: float, albedo: float) -> float:
    """Return the effective radiating temperature (Fogg's eq. 19)."""

    return (
        math.sqrt(ecosphere_radius / sma)
        * ((1.0 - albedo) / (1.0 - constants.EARTH_ALBEDO)) ** 0.25
        * EARTH_EFFECTIVE_TEMPERATURE
    )


def estimated_temperature(ecosphere_radius: float, sma: float, albedo: float) -> float:
    return (
        math.sqrt(ecosphere_radius / sma)
        * ((1.0 - albedo) / (1.0 - constants.EARTH_ALBEDO)) ** 0.25
        * constants.EARTH_AVERAGE_KELVIN
    )


def estimated_terrestrial_temperature(ecosphere_radius: float, sma: float) -> float:
    return math.sqrt(ecosphere_radius / sma) * constants.EARTH_AVERAGE_KELVIN


def has_greenhouse(ecosphere_radius: float, sma: float) -> bool:
    """True if water could never condense: hot even at the trigger albedo."""

    temperature = effective_temperature(ecosphere_radius, sma, constants.GREENHOUSE_TRIGGER_ALBEDO)
    return temperature > constants.FREEZING_POINT_OF_WATER


def volatile_gas_inventory(
    escape_vel: float,
    rms_vel: float,
    zone: int,
    earth_masses: float,
    star_mass: float,
    greenhouse: bool,
    gas_fraction: float,
) -> float:
    """Return Fogg's dimensionless volatile inventory (eq. 17).

    Bodies whose escape velocity is below six times the N2 RMS speed hold
    no volatiles.  Without a greenhouse or accreted gas most volatiles sit
    in surface reservoirs, reducing the inventory by a factor of 140.
    """
    if escape_vel / rms_vel < constants.GAS_RETENTION_THRESHOLD:
        return 0.0
    inventory = _INVENTORY_CONSTANT.get(zone, 0.0) * earth_masses / star_mass
    if greenhouse or gas_fraction > 1.0e-6:
        return inventory
    return inventory / INVENTORY_DRY_DIVISOR


def surface_pressure(inventory: float, surface_gravity: float, radius_km: float) -> float:
    """Return the surface pressure in millibars (Fogg's eq. 18)."""

    earth_ratio = constants.EARTH_RADIUS / (radius_km * 1000.0)
    return (
        inventory
        * surface_gravity
        * (constants.EARTH_SURF_PRES_IN_MILLIBARS / constants.MILLIBARS_PER_BAR)
        / earth_ratio**2
    )


def boiling_point(pressure: float) -> float:
    """Return the boiling point of water (K) at ``pressure`` millibars."""

    if pressure <= 0.0:
        return 0.0
    return 1.0 / (math.log(pressure / constants.MILLIBARS_PER_BAR) / -5050.5 + 1.0 / 373.0)


def water_coverage(inventory: float, radius_km: float) -> float:
    earth_ratio = constants.EARTH_RADIUS / (radius_km * 1000.0)
    return min(0.708 * inventory / 1000.0 * earth_ratio**2, 1.0)


def cloud_fraction(molecular_weight: float, radius_km: float, hydrosphere: float, surface_temp: float) -> float:
    """Return the cloud cover fraction produced by evaporated surface water."""

    if molecular_weight > constants.WATER_VAPOR:
        return 0.0
    surface_area = 4.0 * math.pi * radius_km**2
    hydro_mass = hydrosphere * surface_area * constants.EARTH_WATER_MASS_PER_AREA
    vapor = 1.0e-8 * hydro_mass * math.exp(
        CLOUD_TEMPERATURE_COEFF * (surface_temp - constants.EARTH_AVERAGE_KELVIN)
    )
    return min(CLOUD_COVERAGE_FACTOR * vapor / surface_area, 1.0)


def ice_fraction(hydrosphere: float, surface_temp: float) -> float:
    """Return the ice cover fraction (Fogg's eq. 24, Hart 1978)."""

    temperature = min(surface_temp, 328.0)
    ice = ((328.0 - temperature) / 90.0) ** 5
    return min(ice, 1.5 * hydrosphere, 1.0)


def optical_depth(molecular_weight: float, pressure: float) -> float:
    depth = 0.0
    lower = 0.0
    for upper, value in _OPTICAL_DEPTH_BANDS:
        if lower <= molecular_weight < upper:
            depth = value
            break
        lower = upper
    atmospheres = pressure / constants.EARTH_SURF_PRES_IN_MILLIBARS
    for threshold, multiplier in _PRESSURE_MULTIPLIERS:
        if atmospheres >= threshold:
            return depth * multiplier
    return depth


def greenhouse_rise(depth: float, effective_temp: float, pressure: float) -> float:
    """Return the greenhouse warming in K (Fogg's eq. 20)."""

    convection = constants.EARTH_CONVECTION_FACTOR * (
        pressure / constants.EARTH_SURF_PRES_IN_MILLIBARS
    ) ** 0.4
    rise = ((1.0 + 0.75 * depth) ** 0.25 - 1.0) * effective_temp * convection
    return max(rise, 0.0)


def planet_albedo(hydrosphere: float, cloud_cover: float, ice_cover: float, pressure: float) -> float:
    """Return the Bond albedo of a cloud, rock, water and ice surface mix.

    Cloud cover is spread evenly over the surface components present and
    hides the part of each component that lies beneath it.
    """
    rock = 1.0 - hydrosphere - ice_cover
    components = sum(1 for fraction in (hydrosphere, ice_cover, rock) if fraction > 0.0)
    adjustment = cloud_cover / components if components else 0.0

    rock = rock - adjustment if rock >= adjustment else 0.0
    water = hydrosphere - adjustment if hydrosphere > adjustment else 0.0
    ice = ice_cover - adjustment if ice_cover > adjustment else 0.0

    cloud_part = cloud_cover * constants.CLOUD_ALBEDO
    if pressure == 0.0:
        return cloud_part + rock * constants.ROCKY_AIRLESS_ALBEDO + ice * constants.AIRLESS_ICE_ALBEDO
    return (
        cloud_part
        + rock * constants.ROCKY_ALBEDO
        + water * constants.WATER_ALBEDO
        + ice * constants.ICE_ALBEDO
    )


def lim(x: float) -> float:
    """Soft limiter mapping the real line into ``(-1, 1)``."""

    return x / (1.0 + x**4) ** 0.25


def soft(value: float, upper: float, lower: float) -> float:
    """Softly limit ``value`` into ``[lower, upper]``."""

    span = upper - lower
    return (lim(2.0 * (value - lower) / span - 1.0) + 1.0) / 2.0 * span + lower


def temperature_range(
    surface_temp: float,
    pressure: float,
    axial_tilt: float,
    eccentricity: float,
    day_hours: float,
) -> TemperatureRange:
    """Return day/night and seasonal extremes around ``surface_temp``.

    Thick atmospheres damp the day/night swing; tilt and eccentricity drive
    the seasonal swing.  All four values are soft-limited between
    ``T / sqrt(day + 24)`` and ``T + 10 sqrt(T)``.
    """
    press_mod = 1.0 / math.sqrt(1.0 + 20.0 * pressure / 1000.0)
    pp_mod = 1.0 / math.sqrt(10.0 + 5.0 * pressure / 1000.0)
    tilt_mod = abs(math.cos(math.radians(axial_tilt)) * (1.0 + eccentricity) ** 2)
    day_mod = 1.0 / (200.0 / day_hours + 1.0)
    high_mod = (1.0 + day_mod) ** press_mod
    low_mod = (1.0 - day_mod) ** press_mod

    high = high_mod * surface_temp
    low = low_mod * surface_temp
    summer_high = high + ((100.0 + high) * tilt_mod) ** math.sqrt(pp_mod)
    winter_low = low - ((150.0 + low) * tilt_mod) ** math.sqrt(pp_mod)
    upper = surface_temp + math.sqrt(surface_temp) * 10.0
    lower = surface_temp / math.sqrt(day_hours + 24.0)

    low = max(low, lower)
    winter_low = max(winter_low, 0.0)
    return TemperatureRange(
        high=soft(high, upper, lower),
        low=soft(low, upper, lower),
        max=soft(summer_high, upper, lower),
        min=soft(winter_low, upper, lower),
    )


def _apply_range(planet: "Planet") -> None:
    limits = temperature_range(
        planet.surface_temperature,
        planet.surface_pressure,
        planet.axial_tilt,
        planet.eccentricity,
        planet.day_length,
    )
    planet.high_temperature = limits.high
    planet.low_temperature = limits.low
    planet.max_temperature = limits.max
    planet.min_temperature = limits.min


def _refresh_volatiles(planet: "Planet") -> None:
    planet.volatile_gas_inventory = volatile_gas_inventory(
        planet.escape_velocity,
        planet.rms_velocity,
        planet.orbital_zone,
        planet.earth_masses,
        planet.star.mass,
        planet.greenhouse_effect,
        planet.gas_fraction,
    )
    planet.surface_pressure = surface_pressure(
        planet.volatile_gas_inventory, planet.surface_gravity, planet.radius
    )
    planet.boiling_point = boiling_point(planet.surface_pressure)


def _surface_temperature(planet: "Planet", albedo: float) -> float:
    ecosphere = planet.star.ecosphere_radius
    effective = effective_temperature(ecosphere, planet.sma, albedo)
    depth = optical_depth(planet.molecular_weight, planet.surface_pressure)
    return effective + greenhouse_rise(depth, effective, planet.surface_pressure)


def _climate_step(planet: "Planet", first: bool) -> None:
    if first:
        planet.albedo = constants.EARTH_ALBEDO
        planet.surface_temperature = _surface_temperature(planet, planet.albedo)
        _apply_range(planet)

    last_water = planet.hydrosphere
    last_clouds = planet.cloud_cover
    last_ice = planet.ice_cover
    last_albedo = planet.albedo
    last_temperature = planet.surface_temperature

    if planet.greenhouse_effect and planet.max_temperature < planet.boiling_point:
        planet.greenhouse_effect = False
        _refresh_volatiles(planet)

    planet.hydrosphere = water_coverage(planet.volatile_gas_inventory, planet.radius)
    planet.cloud_cover = cloud_fraction(
        planet.molecular_weight, planet.radius, planet.hydrosphere, planet.surface_temperature
    )
    planet.ice_cover = ice_fraction(planet.hydrosphere, planet.surface_temperature)

    if planet.greenhouse_effect and planet.surface_pressure > 0.0:
        planet.cloud_cover = 1.0

    boil_off = False
    if planet.high_temperature >= planet.boiling_point and not first and not planet.is_tidally_locked:
        planet.hydrosphere = 0.0
        boil_off = True
        planet.cloud_cover = 0.0 if planet.molecular_weight > constants.WATER_VAPOR else 1.0

    if planet.surface_temperature < constants.FREEZING_POINT_OF_WATER - 3.0:
        planet.hydrosphere = 0.0

    planet.albedo = planet_albedo(
        planet.hydrosphere, planet.cloud_cover, planet.ice_cover, planet.surface_pressure
    )
    planet.surface_temperature = _surface_temperature(planet, planet.albedo)

    if not first:
        if not boil_off:
            planet.hydrosphere = (planet.hydrosphere + 2.0 * last_water) / 3.0
        planet.cloud_cover = (planet.cloud_cover + 2.0 * last_clouds) / 3.0
        planet.ice_cover = (planet.ice_cover + 2.0 * last_ice) / 3.0
        planet.albedo = (planet.albedo + 2.0 * last_albedo) / 3.0
        planet.surface_temperature = (planet.surface_temperature + 2.0 * last_temperature) / 3.0

    _apply_range(planet)


def iterate_surface_temperature(planet: "Planet") -> int:
    """Solve for the equilibrium climate of a rocky planet in place.

    The planet must already carry its orbit, zone, radius, gravity,
    velocities, molecular weight, volatile inventory, pressure, boiling
    point, day length and star.  After an initial step at the Earth's
    albedo, damped steps run until the surface temperature moves by less
    than 0.25 K or the step limit is reached; the last state is kept.

    Returns
    -------
    int
        Number of climate steps taken, including the initial one.
    """
    initial = estimated_temperature(planet.star.ecosphere_radius, planet.sma, planet.albedo)
    _climate_step(planet, first=True)
    steps = 1
    for _ in range(MAX_TEMPERATURE_ITERATIONS):
        previous = planet.surface_temperature
        _climate_step(planet, first=False)
        steps += 1
        if abs(planet.surface_temperature - previous) < TEMPERATURE_TOLERANCE:
            break
    planet.greenhouse_rise = planet.surface_temperature - initial
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "climate at a=%.4f AU converged to %.2f K after %d steps",
            planet.sma,
            planet.surface_temperature,
            steps,
        )
    return steps
