"""Reference chemical species and atmospheric constituents."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

__all__ = [
    "ChemicalSpecies",
    "AtmosphericConstituent",
    "ARGON",
    "HELIUM",
    "OXYGEN",
    "MOLECULAR_OXYGEN",
    "CARBON_DIOXIDE",
    "find_species",
]

# Identifiers of species with special reactivity handling
HELIUM: int = 2
OXYGEN: int = 8
ARGON: int = 18
CARBON_DIOXIDE: int = 902
MOLECULAR_OXYGEN: int = 912


@dataclass(frozen=True)
class ChemicalSpecies:
    """Immutable reference record for one atmospheric species.

    Attributes
    ----------
    number:
        Atomic number, or a code >= 900 for molecules.
    symbol, name:
        Chemical symbol and English name.
    weight:
        Molecular weight in g/mol.
    melting_point, boiling_point:
        Phase transition temperatures at one atmosphere (K).
    density:
        Density at standard conditions (g/cm^3).
    abundance_e, abundance_s:
        Abundance in the Earth's crust and in the solar system.
    reactivity:
        Relative chemical reactivity.
    max_ipp:
        Maximum safe inspired partial pressure in millibars.
    """

    number: int
    symbol: str
    name: str
    weight: float
    melting_point: float
    boiling_point: float
    density: float
    abundance_e: float
    abundance_s: float
    reactivity: float
    max_ipp: float


@dataclass(frozen=True)
class AtmosphericConstituent:
    """A species present in an atmosphere with its partial pressure (mbar)."""

    species: ChemicalSpecies
    pressure: float

    @property
    def symbol(self) -> str:
        return self.species.symbol


def find_species(table: Sequence[ChemicalSpecies], number: int) -> ChemicalSpecies:
    """Return the species with atomic number or code ``number``."""

    for species in table:
        if species.number == number:
            return species
    raise KeyError(number)
