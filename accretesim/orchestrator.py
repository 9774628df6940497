"""Generation of one planetary system around one star.

Architecture Overview
---------------------
:func:`generate_system` sequences the stages of the Dole/Fogg model:

1. **Star**: the template is perturbed and aged.
2. **Injection loop**: while dust remains between the innermost and
   outermost planet radii, a seed protoplanet is dropped on a random orbit
   and grown by the accretion engine when its zone still holds dust.
   Grown bodies go to the coalescence resolver; bodies that do not grow
   are kept as failed planetesimals.
3. **Reconciliation**: failed planetesimals and escaped moons are
   re-injected and planet/moon mass inversions are repaired.
4. **Environments**: every planet (and its moons) is finalized and the
   system is flagged habitable if any body is.

All randomness, the chemical table and the star come in as arguments;
nothing is read from module-level state.
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .chemistry import ChemicalSpecies
from .physics.accretion import (
    AccretionParameters,
    critical_mass,
    dust_density,
    grow_protoplanet,
    inner_effect_limit,
    outer_effect_limit,
)
from .physics.coalescence import Coalescer, MoonCapture
from .physics.disk import DustDisk
from .physics.environment import finalize_planet
from .physics.reconciliation import reconcile
from .planet import Planet, iter_bodies
from .random_source import RandomSource
from .star import Star, StellarTemplate
from .warnings import NumericalWarning

__all__ = [
    "SystemResult",
    "prepare_star",
    "distribute_planetary_masses",
    "generate_system",
]

logger = logging.getLogger(__name__)


@dataclass
class SystemResult:
    """Outcome of one generation run.

    Attributes
    ----------
    star:
        The perturbed, aged primary.
    planets:
        Finalized planets sorted by semi-major axis, each owning its moons.
    failed_planetesimals:
        Seeds that swept no dust (re-injected since).
    escaped_moons:
        Bodies that failed moon capture during accretion (re-injected since).
    habitable:
        True if any planet is habitable or hosts a habitable moon.
    injections:
        Number of protoplanets injected.
    """

    star: Star
    planets: List[Planet]
    failed_planetesimals: List[Planet] = field(default_factory=list)
    escaped_moons: List[Planet] = field(default_factory=list)
    habitable: bool = False
    injections: int = 0

    @property
    def moon_count(self) -> int:
        return sum(len(planet.moons) for planet in self.planets)

    def bodies(self) -> List[Planet]:
        return list(iter_bodies(self.planets))


def prepare_star(template: StellarTemplate, rng: RandomSource, deviate: bool = True) -> Star:
    """Return the working star: deviated from ``template`` and given an age."""

    star = Star.from_template(template)
    if deviate:
        star = star.deviate(rng)
    star.assign_age(rng)
    logger.info("Primary: %s", star)
    return star


def distribute_planetary_masses(
    star: Star,
    rng: RandomSource,
    params: AccretionParameters,
    moons: Optional[MoonCapture] = None,
    max_injections: Optional[int] = None,
) -> Tuple[Coalescer, List[Planet], int]:
    """Run the injection loop until no accessible dust remains.

    Returns
    -------
    tuple
        ``(coalescer, failed, injections)``: the resolver holding the
        planet list and escaped moons, the failed planetesimals and the
        number of injections made.
    """
    inner_bound = star.innermost_planet
    outer_bound = star.outermost_planet
    disk = DustDisk(star.stellar_dust_limit, inner_bound, outer_bound)
    coalescer = Coalescer(star, disk, params, moons)
    failed: List[Planet] = []
    injections = 0

    while disk.dust_left:
        if max_injections is not None and injections >= max_injections:
            warnings.warn(
                f"stopped after {injections} protoplanet injections with dust remaining",
                NumericalWarning,
            )
            break
        sma = rng.between(inner_bound, outer_bound)
        eccentricity = rng.eccentricity(params.eccentricity_exponent)
        seed = params.protoplanet_mass
        injections += 1

        inner = inner_effect_limit(sma, eccentricity, seed, params.cloud_eccentricity)
        outer = outer_effect_limit(sma, eccentricity, seed, params.cloud_eccentricity)
        if not disk.has_dust(inner, outer):
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("No dust left around a=%.4f AU; seed discarded", sma)
            continue

        density = dust_density(star.mass, sma, params)
        crit = critical_mass(sma, eccentricity, star.luminosity, params.b_coefficient)
        result = grow_protoplanet(disk, seed, sma, eccentricity, crit, density, params)
        body = Planet(
            sma=sma,
            eccentricity=eccentricity,
            mass=result.mass,
            dust_mass=seed + result.swept_dust,
            gas_mass=result.swept_gas,
            star=star,
        )
        if result.mass > seed:
            coalescer.coalesce(body, crit)
        else:
            failed.append(body)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Failed planetesimal at a=%.4f AU", sma)

    logger.info(
        "Accretion finished after %d injections: %d planets, %d failed, %d escaped moons",
        injections,
        len(coalescer.planets),
        len(failed),
        len(coalescer.escaped_moons),
    )
    return coalescer, failed, injections


def generate_system(
    template: StellarTemplate,
    rng: RandomSource,
    chemicals: Sequence[ChemicalSpecies],
    params: Optional[AccretionParameters] = None,
    moons: Optional[MoonCapture] = None,
    *,
    deviate: bool = True,
    max_injections: Optional[int] = None,
) -> SystemResult:
    """Generate a complete planetary system.

    Parameters
    ----------
    template:
        Base star record.
    rng:
        Random source; pass a fresh instance per concurrent run.
    chemicals:
        Chemical species reference table.
    params:
        Accretion coefficients (classic defaults when omitted).
    moons:
        Moon capture settings (enabled when omitted).
    deviate:
        Perturb the template before use.
    max_injections:
        Optional external cap on the injection loop.

    Returns
    -------
    SystemResult
        The star, the finalized planet tree and the habitability flag.
    """
    params = params or AccretionParameters()
    moons = moons or MoonCapture()
    star = prepare_star(template, rng, deviate=deviate)

    coalescer, failed, injections = distribute_planetary_masses(
        star, rng, params, moons, max_injections=max_injections
    )
    escaped = list(coalescer.escaped_moons)
    planets = reconcile(
        coalescer,
        failed,
        rng,
        params.eccentricity_exponent,
        params.protoplanet_mass,
    )

    habitable = False
    for planet in planets:
        finalize_planet(
            planet,
            rng,
            chemicals,
            do_moons=moons.enabled,
            negligible_mass=params.protoplanet_mass,
        )
        if planet.habitable or planet.habitable_moon:
            habitable = True

    logger.info(
        "Generated %d planets with %d moons around %s (habitable=%s)",
        len(planets),
        sum(len(planet.moons) for planet in planets),
        star.name or star.spectral_class,
        habitable,
    )
    return SystemResult(
        star=star,
        planets=planets,
        failed_planetesimals=failed,
        escaped_moons=escaped,
        habitable=habitable,
        injections=injections,
    )
