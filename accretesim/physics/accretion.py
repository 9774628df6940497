"""Dust and gas accretion onto a protoplanet (Dole 1970, Fogg 1985).

A seed body sweeps the disk material inside its gravitational influence
zone.  The zone grows with the accumulated mass, so the sweep is repeated
until the mass collected changes by less than the convergence tolerance.
Above the critical mass the body also captures gas, enhancing the swept
density by up to the gas/dust ratio ``K``.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from .disk import DustDisk

__all__ = [
    "AccretionParameters",
    "SweepResult",
    "AccretionResult",
    "reduced_mass",
    "inner_effect_limit",
    "outer_effect_limit",
    "inner_swept_limit",
    "outer_swept_limit",
    "critical_mass",
    "dust_density",
    "collect_dust",
    "grow_protoplanet",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccretionParameters:
    """Coefficients of the accretion model.

    Attributes
    ----------
    b_coefficient:
        Critical-mass coefficient ``B`` in solar masses.
    protoplanet_mass:
        Seed mass of an injected protoplanet in solar masses.
    dust_density_coefficient:
        Disk dust density coefficient ``A``.
    alpha, n:
        Radial fall-off of the dust density, ``exp(-alpha a^(1/n))``.
    gas_dust_ratio:
        Gas to dust ratio ``K`` of the disk.
    cloud_eccentricity:
        Eccentricity of the dust cloud particles.
    eccentricity_exponent:
        Exponent of the random eccentricity draw ``1 - U**k``.
    convergence_tolerance:
        Relative mass growth below which a sweep is considered converged.
    """

    b_coefficient: float = 1.2e-5
    protoplanet_mass: float = 1.0e-15
    dust_density_coefficient: float = 2.0e-3
    alpha: float = 5.0
    n: float = 3.0
    gas_dust_ratio: float = 50.0
    cloud_eccentricity: float = 0.2
    eccentricity_exponent: float = 0.077
    convergence_tolerance: float = 1.0e-4


@dataclass(frozen=True)
class SweepResult:
    """Material collected by one pass over the disk bands."""

    mass: float
    dust: float
    gas: float
    inner: float
    outer: float


@dataclass(frozen=True)
class AccretionResult:
    """Outcome of :func:`grow_protoplanet`.

    ``mass`` includes the seed; ``swept_dust`` and ``swept_gas`` only hold
    material collected from the disk.
    """

    mass: float
    swept_dust: float
    swept_gas: float
    inner: float
    outer: float
    iterations: int


def reduced_mass(mass: float) -> float:
    """Return ``(m / (1 + m))**(1/4)``, the influence-zone size term."""

    return (mass / (1.0 + mass)) ** 0.25


def inner_effect_limit(sma: float, eccentricity: float, mass: float, cloud_eccentricity: float) -> float:
    return sma * (1.0 - eccentricity) * (1.0 - mass) / (1.0 + cloud_eccentricity)


def outer_effect_limit(sma: float, eccentricity: float, mass: float, cloud_eccentricity: float) -> float:
    return sma * (1.0 + eccentricity) * (1.0 + mass) / (1.0 - cloud_eccentricity)


def inner_swept_limit(sma: float, eccentricity: float, mass: float, cloud_eccentricity: float) -> float:
    """Inner edge of the swept zone, clamped to be non-negative."""

    return max(inner_effect_limit(sma, eccentricity, mass, cloud_eccentricity), 0.0)


def outer_swept_limit(sma: float, eccentricity: float, mass: float, cloud_eccentricity: float) -> float:
    return outer_effect_limit(sma, eccentricity, mass, cloud_eccentricity)


def critical_mass(sma: float, eccentricity: float, luminosity: float, b_coefficient: float = 1.2e-5) -> float:
    """Return the mass above which a body retains gas.

    Parameters
    ----------
    sma:
        Semi-major axis in AU.
    eccentricity:
        Orbital eccentricity.
    luminosity:
        Stellar luminosity in solar units.
    b_coefficient:
        Scaling coefficient ``B`` in solar masses.

    Returns
    -------
    float
        ``B (q sqrt(L))^(-3/4)`` in solar masses, with ``q`` the periapsis.
    """
    periapsis = sma * (1.0 - eccentricity)
    temperature = periapsis * math.sqrt(luminosity)
    return b_coefficient * temperature ** -0.75


def dust_density(star_mass: float, sma: float, params: AccretionParameters) -> float:
    """Return the disk dust density at ``sma`` for a star of ``star_mass``."""

    return (
        params.dust_density_coefficient
        * math.sqrt(star_mass)
        * math.exp(-params.alpha * sma ** (1.0 / params.n))
    )


def collect_dust(
    disk: DustDisk,
    last_mass: float,
    sma: float,
    eccentricity: float,
    crit_mass: float,
    density: float,
    params: AccretionParameters,
) -> SweepResult:
    """Integrate the material inside the influence zone of ``last_mass``.

    Each band overlapping the zone contributes its overlapping width times
    the geometric factor ``4 pi a^2 mu (1 - e (t1 - t2) / w)`` times its
    density, where ``t1``/``t2`` are the parts of the zone beyond the band
    edges and ``w`` the zone width.
    """
    mu = reduced_mass(last_mass)
    inner = inner_swept_limit(sma, eccentricity, mu, params.cloud_eccentricity)
    outer = outer_swept_limit(sma, eccentricity, mu, params.cloud_eccentricity)
    zone_width = outer - inner
    total_mass = 0.0
    total_gas = 0.0
    if zone_width <= 0.0:
        return SweepResult(0.0, 0.0, 0.0, inner, outer)

    k = params.gas_dust_ratio
    for band in disk.bands:
        if band.outer <= inner or band.inner >= outer:
            continue
        band_dust = density if band.dust else 0.0
        if last_mass < crit_mass or not band.gas:
            mass_density = band_dust
            gas_density = 0.0
        else:
            mass_density = k * band_dust / (1.0 + math.sqrt(crit_mass / last_mass) * (k - 1.0))
            gas_density = mass_density - band_dust

        beyond_outer = max(outer - band.outer, 0.0)
        beyond_inner = max(band.inner - inner, 0.0)
        width = zone_width - beyond_outer - beyond_inner
        factor = (
            4.0
            * math.pi
            * sma**2
            * mu
            * (1.0 - eccentricity * (beyond_outer - beyond_inner) / zone_width)
        )
        volume = factor * width
        total_mass += volume * mass_density
        total_gas += volume * gas_density

    return SweepResult(total_mass, total_mass - total_gas, total_gas, inner, outer)


def grow_protoplanet(
    disk: DustDisk,
    seed_mass: float,
    sma: float,
    eccentricity: float,
    crit_mass: float,
    density: float,
    params: AccretionParameters,
) -> AccretionResult:
    """Grow ``seed_mass`` until the swept mass converges, then clear the disk.

    The loop has no iteration cap: the collected mass is bounded by the dust
    remaining in the disk, so successive sweeps converge.

    Returns
    -------
    AccretionResult
        Final mass (seed plus swept material) and the swept dust and gas.
    """
    swept = SweepResult(seed_mass, 0.0, 0.0, sma, sma)
    iterations = 0
    while True:
        previous = swept.mass
        swept = collect_dust(disk, previous, sma, eccentricity, crit_mass, density, params)
        iterations += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "accretion sweep %d at a=%.4f AU: %.6e -> %.6e Msun",
                iterations,
                sma,
                previous,
                swept.mass,
            )
        if swept.mass - previous < params.convergence_tolerance * previous:
            break

    total = seed_mass + swept.mass
    disk.consume(swept.inner, swept.outer, retain_gas=not total > crit_mass)
    return AccretionResult(
        mass=total,
        swept_dust=swept.dust,
        swept_gas=swept.gas,
        inner=swept.inner,
        outer=swept.outer,
        iterations=iterations,
    )
