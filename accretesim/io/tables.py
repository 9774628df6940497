"""Reference table loading.

Both tables ship with the package under ``io/data`` and are read with
pandas.  Missing files, missing columns and non-numeric values are fatal
and raise :class:`~accretesim.errors.TableLoadError`; individual stellar
templates with non-physical values are dropped with a
:class:`~accretesim.warnings.TableWarning`.
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .. import constants
from ..chemistry import ChemicalSpecies
from ..errors import ConfigurationError, TableLoadError
from ..random_source import RandomSource
from ..star import StellarTemplate
from ..warnings import TableWarning

__all__ = [
    "PACKAGE_DATA_DIR",
    "CHEMICALS_PATH",
    "STELLAR_TEMPLATES_PATH",
    "StellarCatalog",
    "load_chemicals",
    "load_stellar_catalog",
]

logger = logging.getLogger(__name__)

PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data"
CHEMICALS_PATH = PACKAGE_DATA_DIR / "chemicals.csv"
STELLAR_TEMPLATES_PATH = PACKAGE_DATA_DIR / "stellar_templates.csv"

_PRESSURE_UNITS = {
    "mb": 1.0,
    "mmhg": constants.MMHG_TO_MILLIBARS,
    "ppm": constants.PPM_PRESSURE,
}

_CHEMICAL_COLUMNS = (
    "number",
    "symbol",
    "name",
    "weight",
    "melting_point",
    "boiling_point",
    "density",
    "abundance_e",
    "abundance_s",
    "reactivity",
    "max_ipp",
    "max_ipp_unit",
)
_STAR_NUMERIC = ("mass", "luminosity", "radius", "temperature", "absolute_magnitude")
_STAR_COLUMNS = ("name", "spectral_class") + _STAR_NUMERIC + ("red", "green", "blue")

# Cumulative probability thresholds of the stellar population
MAIN_SEQUENCE_SHARE: float = 0.907
WHITE_DWARF_THRESHOLD: float = 0.969
GIANT_THRESHOLD: float = 0.998
# Cumulative main-sequence class thresholds
MAIN_SEQUENCE_CLASSES: Tuple[Tuple[float, str], ...] = (
    (0.751, "M"),
    (0.887, "K"),
    (0.960, "G"),
    (0.991, "F"),
    (1.000, "A"),
)
WHITE_DWARF_CLASS = "D"
GIANT_CLASS = "R"
B_STAR_SHARE: float = 0.785
# Nearest populated class when a drawn class has no rows
_FALLBACK_ORDER: Tuple[str, ...] = ("G", "K", "F", "M", "A", "B", "O", "D", "R")


def _read_csv(path: Path, columns: Sequence[str], label: str) -> pd.DataFrame:
    try:
        frame = pd.read_csv(path)
    except FileNotFoundError as exc:
        raise TableLoadError(f"{label} table not found: {path}") from exc
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise TableLoadError(f"{label} table {path} could not be parsed: {exc}") from exc
    missing = set(columns).difference(frame.columns)
    if missing:
        names = ", ".join(sorted(missing))
        raise TableLoadError(f"{label} table {path} is missing required columns: {names}")
    return frame


def _numeric(frame: pd.DataFrame, columns: Sequence[str], path: Path, label: str) -> pd.DataFrame:
    work = frame.copy()
    for column in columns:
        work[column] = pd.to_numeric(work[column], errors="coerce")
    if work[list(columns)].isna().any().any():
        raise TableLoadError(f"{label} table {path} contains non-numeric or missing values")
    return work


def load_chemicals(path: Optional[Union[str, Path]] = None) -> Tuple[ChemicalSpecies, ...]:
    """Load the chemical species reference table.

    Parameters
    ----------
    path:
        CSV file; defaults to the bundled table.

    Returns
    -------
    tuple of ChemicalSpecies
        Species in file order, with ``max_ipp`` converted to millibars.
    """
    path = Path(path) if path is not None else CHEMICALS_PATH
    frame = _read_csv(path, _CHEMICAL_COLUMNS, "chemical")
    numeric = [c for c in _CHEMICAL_COLUMNS if c not in ("symbol", "name", "max_ipp_unit")]
    frame = _numeric(frame, numeric, path, "chemical")
    if frame["number"].duplicated().any():
        raise TableLoadError(f"chemical table {path} has duplicate species numbers")

    table: List[ChemicalSpecies] = []
    for row in frame.itertuples(index=False):
        unit = str(row.max_ipp_unit).strip().lower()
        if unit not in _PRESSURE_UNITS:
            raise TableLoadError(f"chemical table {path}: unknown pressure unit {row.max_ipp_unit!r}")
        table.append(
            ChemicalSpecies(
                number=int(row.number),
                symbol=str(row.symbol),
                name=str(row.name),
                weight=float(row.weight),
                melting_point=float(row.melting_point),
                boiling_point=float(row.boiling_point),
                density=float(row.density),
                abundance_e=float(row.abundance_e),
                abundance_s=float(row.abundance_s),
                reactivity=float(row.reactivity),
                max_ipp=float(row.max_ipp) * _PRESSURE_UNITS[unit],
            )
        )
    logger.debug("Loaded %d chemical species from %s", len(table), path)
    return tuple(table)


@dataclass
class StellarCatalog:
    """Stellar templates grouped by spectral class letter."""

    templates: List[StellarTemplate]
    by_class: Dict[str, List[StellarTemplate]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.templates:
            raise TableLoadError("stellar catalog is empty")
        if not self.by_class:
            for template in self.templates:
                self.by_class.setdefault(template.spectral_class, []).append(template)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "StellarCatalog":
        templates: List[StellarTemplate] = []
        for row in df.itertuples(index=False):
            try:
                template = StellarTemplate(
                    name=str(row.name),
                    spectral_class=str(row.spectral_class).strip().upper(),
                    mass=float(row.mass),
                    luminosity=float(row.luminosity),
                    radius=float(row.radius),
                    temperature=float(row.temperature),
                    absolute_magnitude=float(row.absolute_magnitude),
                    color=(int(row.red), int(row.green), int(row.blue)),
                )
            except ConfigurationError as exc:
                warnings.warn(f"dropping stellar template: {exc}", TableWarning)
                continue
            templates.append(template)
        return cls(templates=templates)

    def get(self, name: str) -> StellarTemplate:
        for template in self.templates:
            if template.name == name:
                return template
        raise ConfigurationError(f"unknown stellar template {name!r}")

    def _pick(self, spectral_class: str, rng: RandomSource) -> StellarTemplate:
        candidates = self.by_class.get(spectral_class)
        if not candidates:
            for fallback in _FALLBACK_ORDER:
                if self.by_class.get(fallback):
                    logger.debug("No %s templates, falling back to %s", spectral_class, fallback)
                    candidates = self.by_class[fallback]
                    break
        index = min(int(rng.uniform() * len(candidates)), len(candidates) - 1)
        return candidates[index]

    def choose(self, rng: RandomSource, spectral_class: Optional[str] = None) -> StellarTemplate:
        """Return a template drawn from the stellar population.

        Without ``spectral_class`` the class itself is drawn: 90.7% main
        sequence (mostly M and K dwarfs), then white dwarfs, giants, and
        the rare hot B/O stars.
        """
        if spectral_class is None:
            spectral_class = self.draw_class(rng)
        return self._pick(spectral_class.upper(), rng)

    @staticmethod
    def draw_class(rng: RandomSource) -> str:
        draw = rng.uniform()
        if draw <= MAIN_SEQUENCE_SHARE:
            position = rng.uniform()
            for threshold, letter in MAIN_SEQUENCE_CLASSES:
                if position <= threshold:
                    return letter
            return MAIN_SEQUENCE_CLASSES[-1][1]
        if draw <= WHITE_DWARF_THRESHOLD:
            return WHITE_DWARF_CLASS
        if draw <= GIANT_THRESHOLD:
            return GIANT_CLASS
        return "B" if rng.uniform() <= B_STAR_SHARE else "O"


def load_stellar_catalog(path: Optional[Union[str, Path]] = None) -> StellarCatalog:
    """Load the stellar template catalog (bundled table by default)."""

    path = Path(path) if path is not None else STELLAR_TEMPLATES_PATH
    frame = _read_csv(path, _STAR_COLUMNS, "stellar template")
    frame = _numeric(frame, _STAR_NUMERIC + ("red", "green", "blue"), path, "stellar template")
    catalog = StellarCatalog.from_frame(frame)
    logger.debug("Loaded %d stellar templates from %s", len(catalog.templates), path)
    return catalog
