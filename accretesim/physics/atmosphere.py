"""Atmospheric composition and breathability.

Species that would condense at the planet's night-side temperature, or
are lighter than the lightest retained molecule, are dropped.  The rest
are weighted by solar abundance, retention against thermal escape,
chemical reactivity over the star's age and their margin above the
minimum molecular weight, then scaled to the surface pressure.
"""
from __future__ import annotations

import logging
import math
from typing import List, Sequence

from .. import chemistry, constants
from ..chemistry import AtmosphericConstituent, ChemicalSpecies
from ..planet import Breathability
from .structure import rms_velocity

__all__ = [
    "condensation_temperature",
    "species_amount",
    "synthesize_atmosphere",
    "inspired_partial_pressure",
    "breathability",
]

logger = logging.getLogger(__name__)


def condensation_temperature(boiling_point: float, pressure_bar: float) -> float:
    """Return the boiling point of a species scaled to ``pressure_bar``."""

    return boiling_point / (373.0 * (math.log(pressure_bar + 0.001) / -5050.5 + 1.0 / 373.0))


def _reactivity_factor(
    species: ChemicalSpecies,
    age: float,
    pressure_bar: float,
    surface_temp: float,
) -> float:
    retention = 1.0 / (1.0 + species.reactivity)
    temperate = age > 2.0e9 and 270.0 < surface_temp < 400.0
    if species.number == chemistry.ARGON:
        return 0.15 * age / 4.0e9
    if species.number == chemistry.HELIUM:
        return retention ** (age / 2.0e9 * (0.75 + pressure_bar))
    if species.number in (chemistry.OXYGEN, chemistry.MOLECULAR_OXYGEN) and temperate:
        return retention ** ((age / 2.0e9) ** 0.25 * (0.89 + pressure_bar / 4.0))
    if species.number == chemistry.CARBON_DIOXIDE and temperate:
        return retention ** ((age / 2.0e9) ** 0.5 * (0.75 + pressure_bar)) * 1.5
    return retention ** (age / 2.0e9 * (0.75 + pressure_bar))


def species_amount(
    species: ChemicalSpecies,
    *,
    pressure: float,
    low_temperature: float,
    surface_temperature: float,
    molecular_weight: float,
    exospheric_temperature: float,
    escape_velocity: float,
    gas_fraction: float,
    age: float,
) -> float:
    """Return the unnormalised abundance of ``species``, zero if absent."""

    pressure_bar = pressure / constants.MILLIBARS_PER_BAR
    condensation = condensation_temperature(species.boiling_point, pressure_bar)
    if not (0.0 <= condensation < low_temperature) or species.weight < molecular_weight:
        return 0.0

    velocity = rms_velocity(species.weight, exospheric_temperature)
    retained = (1.0 / (1.0 + velocity / escape_velocity)) ** (age / 1.0e9)
    abundance = species.abundance_s
    if species.number == chemistry.HELIUM:
        abundance *= 0.001 + gas_fraction
    react = _reactivity_factor(species, age, pressure_bar, surface_temperature)
    fraction = 1.0 - molecular_weight / species.weight
    return abundance * retained * react * fraction


def synthesize_atmosphere(
    table: Sequence[ChemicalSpecies],
    *,
    pressure: float,
    low_temperature: float,
    surface_temperature: float,
    molecular_weight: float,
    exospheric_temperature: float,
    escape_velocity: float,
    gas_fraction: float,
    age: float,
) -> List[AtmosphericConstituent]:
    """Return the constituents of an atmosphere at ``pressure`` millibars.

    The positive contributions of all species are normalised so that the
    partial pressures sum to the surface pressure.
    """
    if pressure <= 0.0:
        return []
    amounts = [
        species_amount(
            species,
            pressure=pressure,
            low_temperature=low_temperature,
            surface_temperature=surface_temperature,
            molecular_weight=molecular_weight,
            exospheric_temperature=exospheric_temperature,
            escape_velocity=escape_velocity,
            gas_fraction=gas_fraction,
            age=age,
        )
        for species in table
    ]
    total = sum(amount for amount in amounts if amount > 0.0)
    if total <= 0.0:
        return []
    atmosphere = [
        AtmosphericConstituent(species, pressure * amount / total)
        for species, amount in zip(table, amounts)
        if amount > 0.0
    ]
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "atmosphere at %.1f mb: %s",
            pressure,
            ", ".join(f"{c.symbol} {c.pressure:.2f}" for c in atmosphere),
        )
    return atmosphere


def inspired_partial_pressure(surface_pressure: float, gas_pressure: float) -> float:
    """Return the partial pressure of a gas after humidification in the airway."""

    fraction = gas_pressure / surface_pressure
    return (surface_pressure - constants.H20_ASSUMED_PRESSURE) * fraction


def breathability(atmosphere: Sequence[AtmosphericConstituent], surface_pressure: float) -> Breathability:
    """Classify an atmosphere against Dole's inspired partial pressure limits."""

    if not atmosphere:
        return Breathability.NONE
    oxygen_ok = False
    for constituent in atmosphere:
        ipp = inspired_partial_pressure(surface_pressure, constituent.pressure)
        if ipp > constituent.species.max_ipp:
            return Breathability.POISONOUS
        if constituent.species.number == chemistry.OXYGEN:
            oxygen_ok = constants.MIN_O2_IPP <= ipp <= constants.MAX_O2_IPP
    return Breathability.BREATHABLE if oxygen_ok else Breathability.UNBREATHABLE
