"""Star record used as the primary of a generated system.

The star is built once per run from a :class:`StellarTemplate`, perturbed
by :meth:`Star.deviate` and aged with :meth:`Star.assign_age`.  Ecosphere
radius, lifetime and the dust/planet limits are derived from mass and
luminosity on every access.
"""
from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from . import constants
from .bodies import CentralBody
from .errors import ConfigurationError
from .random_source import RandomSource
from .warnings import PhysicsWarning

logger = logging.getLogger(__name__)

__all__ = [
    "StellarTemplate",
    "Star",
    "STELLAR_DEVIATION",
    "MAX_AGE",
    "MIN_AGE",
    "HABITABLE_ZONE_COEFFICIENTS",
]

# ===========================================================================
# Stellar evolution limits
# ===========================================================================
STELLAR_DEVIATION: float = 0.05
MIN_AGE: float = 1.0e9  # yr
MAX_AGE: float = 6.0e9  # yr
MAIN_SEQUENCE_SCALE: float = 1.0e10  # yr for one solar mass per solar luminosity

# ===========================================================================
# Disk and planet limits (AU per cube root of solar mass)
# ===========================================================================
DUST_LIMIT_SCALE: float = 200.0
INNERMOST_PLANET_SCALE: float = 0.3
OUTERMOST_PLANET_SCALE: float = 50.0

# Kopparapu et al. (2013) effective-flux fits: (S_eff_sun, a, b, c, d)
HABITABLE_ZONE_COEFFICIENTS: Dict[str, Tuple[float, float, float, float, float]] = {
    "recent_venus": (1.776, 2.136e-4, 2.533e-8, -1.332e-11, -3.097e-15),
    "runaway_greenhouse": (1.107, 1.332e-4, 1.580e-8, -8.308e-12, -1.931e-15),
    "maximum_greenhouse": (0.356, 6.171e-5, 1.698e-9, -3.198e-12, -5.575e-16),
    "early_mars": (0.320, 5.547e-5, 1.526e-9, -2.874e-12, -5.011e-16),
}


@dataclass(frozen=True)
class StellarTemplate:
    """Immutable base star record supplied by a catalog or by configuration."""

    name: str
    spectral_class: str
    mass: float
    luminosity: float
    radius: float
    temperature: float
    absolute_magnitude: float = 0.0
    color: Tuple[int, int, int] = (255, 255, 255)

    def __post_init__(self) -> None:
        for label in ("mass", "luminosity", "radius", "temperature"):
            value = getattr(self, label)
            if not value > 0.0:
                raise ConfigurationError(
                    f"stellar template {self.name!r}: {label} must be positive, got {value!r}"
                )


@dataclass
class Star(CentralBody):
    """Primary star of a generated system.

    Attributes
    ----------
    luminosity:
        Luminosity in solar units.
    radius:
        Radius in solar radii.
    temperature:
        Effective temperature in K.
    absolute_magnitude:
        Absolute visual magnitude.
    spectral_class:
        Spectral tag such as ``"G2V"``.
    color:
        Display colour as an RGB triple.
    age:
        Age in years, assigned by :meth:`assign_age`.
    """

    name: str = ""
    luminosity: float = 1.0
    radius: float = 1.0
    temperature: float = constants.SUN_TEMPERATURE
    absolute_magnitude: float = 0.0
    spectral_class: str = "G"
    color: Tuple[int, int, int] = (255, 255, 255)
    age: float = 0.0

    @classmethod
    def from_template(cls, template: StellarTemplate) -> "Star":
        return cls(
            name=template.name,
            mass=template.mass,
            luminosity=template.luminosity,
            radius=template.radius,
            temperature=template.temperature,
            absolute_magnitude=template.absolute_magnitude,
            spectral_class=template.spectral_class,
            color=template.color,
        )

    # ------------------------------------------------------------------
    # Derived quantities
    # ------------------------------------------------------------------
    @property
    def lifetime(self) -> float:
        """Main-sequence lifetime in years, ``1e10 M / L``."""

        return MAIN_SEQUENCE_SCALE * (self.mass / self.luminosity)

    @property
    def ecosphere_radius(self) -> float:
        """Centre of the habitable zone in AU, ``sqrt(L)``."""

        return math.sqrt(self.luminosity)

    @property
    def stellar_dust_limit(self) -> float:
        return DUST_LIMIT_SCALE * self.mass ** (1.0 / 3.0)

    @property
    def innermost_planet(self) -> float:
        return INNERMOST_PLANET_SCALE * self.mass ** (1.0 / 3.0)

    @property
    def outermost_planet(self) -> float:
        return OUTERMOST_PLANET_SCALE * self.mass ** (1.0 / 3.0)

    def habitable_zone_edge(self, limit: str) -> float:
        """Return the distance (AU) of a Kopparapu habitable-zone limit.

        Parameters
        ----------
        limit:
            One of the keys of :data:`HABITABLE_ZONE_COEFFICIENTS`.
        """
        try:
            s_eff_sun, a, b, c, d = HABITABLE_ZONE_COEFFICIENTS[limit]
        except KeyError as exc:
            raise ConfigurationError(f"unknown habitable zone limit {limit!r}") from exc
        t_star = self.temperature - constants.SUN_TEMPERATURE
        s_eff = s_eff_sun + a * t_star + b * t_star**2 + c * t_star**3 + d * t_star**4
        return math.sqrt(self.luminosity / s_eff)

    @property
    def conservative_habitable_zone(self) -> Tuple[float, float]:
        return (
            self.habitable_zone_edge("runaway_greenhouse"),
            self.habitable_zone_edge("maximum_greenhouse"),
        )

    @property
    def optimistic_habitable_zone(self) -> Tuple[float, float]:
        return (
            self.habitable_zone_edge("recent_venus"),
            self.habitable_zone_edge("early_mars"),
        )

    # ------------------------------------------------------------------
    # Stochastic steps
    # ------------------------------------------------------------------
    def deviate(self, rng: RandomSource) -> "Star":
        """Return a perturbed copy scaled by ``1 + about(0.05, 1)``."""

        factor = 1.0 + rng.about(STELLAR_DEVIATION, 1.0)
        deviated = replace(
            self,
            mass=self.mass * factor,
            luminosity=self.luminosity * factor,
            radius=self.radius * factor,
            temperature=self.temperature * factor,
        )
        logger.debug("Deviated star %s by factor %.4f", self.name, factor)
        return deviated

    def assign_age(self, rng: RandomSource, max_age: Optional[float] = None) -> float:
        """Draw a random age no older than the lifetime (capped at 6 Gyr)."""

        upper = min(self.lifetime, MAX_AGE if max_age is None else max_age)
        lower = MIN_AGE
        if upper < lower:
            warnings.warn(
                f"star {self.name!r} lives {self.lifetime:.3e} yr, shorter than {MIN_AGE:.0e} yr",
                PhysicsWarning,
            )
            lower = 0.1 * upper
        self.age = rng.between(lower, upper)
        return self.age

    def __str__(self) -> str:
        return (
            f"{self.name or self.spectral_class}: mass {self.mass:.3f} Msun, "
            f"luminosity {self.luminosity:.3f} Lsun, radius {self.radius:.3f} Rsun, "
            f"temperature {self.temperature:.0f} K, age {self.age / 1.0e9:.2f} Gyr, "
            f"ecosphere {self.ecosphere_radius:.3f} AU"
        )
