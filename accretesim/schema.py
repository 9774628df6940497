"""Configuration schema for planetary-system generation.

The Pydantic models mirror the YAML configuration read by
:func:`accretesim.config_utils.load_config`.  Every section has defaults
reproducing the classic Dole/Fogg parameters, so an empty file (or no
file at all) generates a system around a randomly drawn star.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .errors import ConfigurationError
from .physics.accretion import AccretionParameters
from .physics.coalescence import MoonCapture


class Accretion(BaseModel):
    """Coefficients of the dust accretion model."""

    b_coefficient: float = Field(1.2e-5, gt=0, description="Critical mass coefficient B [Msun]")
    protoplanet_mass: float = Field(1.0e-15, gt=0, description="Seed mass of injected protoplanets [Msun]")
    dust_density_coefficient: float = Field(2.0e-3, gt=0, description="Dust density coefficient A")
    alpha: float = Field(5.0, gt=0, description="Radial fall-off coefficient of the dust density")
    n: float = Field(3.0, gt=0, description="Radial fall-off exponent denominator of the dust density")
    gas_dust_ratio: float = Field(50.0, ge=1, description="Gas to dust ratio K")
    cloud_eccentricity: float = Field(0.2, ge=0, lt=1, description="Eccentricity of dust cloud particles")
    eccentricity_exponent: float = Field(0.077, gt=0, description="Exponent k of the eccentricity draw 1 - U**k")
    convergence_tolerance: float = Field(1.0e-4, gt=0, description="Relative growth ending an accretion sweep")
    max_injections: Optional[int] = Field(
        None,
        gt=0,
        description="Optional cap on protoplanet injections; unlimited when omitted",
    )

    def to_parameters(self) -> AccretionParameters:
        return AccretionParameters(
            b_coefficient=self.b_coefficient,
            protoplanet_mass=self.protoplanet_mass,
            dust_density_coefficient=self.dust_density_coefficient,
            alpha=self.alpha,
            n=self.n,
            gas_dust_ratio=self.gas_dust_ratio,
            cloud_eccentricity=self.cloud_eccentricity,
            eccentricity_exponent=self.eccentricity_exponent,
            convergence_tolerance=self.convergence_tolerance,
        )


class Moons(BaseModel):
    """Moon capture settings."""

    enabled: bool = Field(True, description="Allow interacting bodies to be captured as moons")
    min_earth_masses: float = Field(1.0e-4, ge=0, description="Lower mass bound of capturable bodies [Earth masses]")
    max_earth_masses: float = Field(2.5, gt=0, description="Upper mass bound of capturable bodies [Earth masses]")
    max_mass_fraction: float = Field(0.05, gt=0, description="Maximum total moon mass relative to the planet")

    @model_validator(mode="after")
    def _check_window(self) -> "Moons":
        if self.min_earth_masses >= self.max_earth_masses:
            raise ConfigurationError("moons.min_earth_masses must be below moons.max_earth_masses")
        return self

    def to_capture(self) -> MoonCapture:
        return MoonCapture(
            enabled=self.enabled,
            min_earth_masses=self.min_earth_masses,
            max_earth_masses=self.max_earth_masses,
            max_mass_fraction=self.max_mass_fraction,
        )


class StarSelection(BaseModel):
    """How the primary star is chosen.

    A named ``template`` wins over ``spectral_class``; without either the
    class is drawn from the stellar population.  Explicit values override
    the corresponding template fields.
    """

    template: Optional[str] = Field(None, description="Name of a catalog template, e.g. 'G2V'")
    spectral_class: Optional[str] = Field(None, description="Single spectral class letter to draw from")
    mass: Optional[float] = Field(None, description="Override of the stellar mass [Msun]")
    luminosity: Optional[float] = Field(None, description="Override of the luminosity [Lsun]")
    radius: Optional[float] = Field(None, description="Override of the radius [Rsun]")
    temperature: Optional[float] = Field(None, description="Override of the effective temperature [K]")
    deviate: bool = Field(True, description="Apply the random stellar deviation to the template")

    @model_validator(mode="before")
    def _check_overrides(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        for key in ("mass", "luminosity", "radius", "temperature"):
            value = data.get(key)
            if value is not None and not float(value) > 0.0:
                raise ConfigurationError(f"star.{key} must be positive, got {value!r}")
        spectral_class = data.get("spectral_class")
        if spectral_class is not None and len(str(spectral_class).strip()) != 1:
            raise ConfigurationError("star.spectral_class must be a single letter")
        return data


class Tables(BaseModel):
    """Reference table locations; bundled tables are used when omitted."""

    chemicals: Optional[Path] = Field(None, description="Chemical species CSV")
    stars: Optional[Path] = Field(None, description="Stellar template catalog CSV")


class Output(BaseModel):
    """Optional files written by the command-line entry point."""

    outdir: Optional[Path] = Field(None, description="Directory for summary, datasheet and planet table")
    write_datasheet: bool = Field(True, description="Write datasheet.txt next to the summary")
    table_format: Literal["csv", "parquet"] = Field("csv", description="Planet table file format")


class Config(BaseModel):
    """Top-level configuration."""

    seed: Optional[int] = Field(None, description="Seed of the random source; random when omitted")
    accretion: Accretion = Field(default_factory=Accretion)
    moons: Moons = Field(default_factory=Moons)
    star: StarSelection = Field(default_factory=StarSelection)
    tables: Tables = Field(default_factory=Tables)
    output: Output = Field(default_factory=Output)
