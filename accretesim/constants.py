"""Physical constants and reference values for the accretion models.

Masses are tracked in solar masses and distances in AU throughout the
package; the conversion factors below bridge to SI and CGS where the
structural and atmospheric formulae need them.
"""
from __future__ import annotations

# Gravitational constant (m^3 kg^-1 s^-2)
G: float = 6.67408e-11

# Universal gas constant (J mol^-1 K^-1)
MOLAR_GAS_CONST: float = 8.3144621

# Solar reference values
SUN_MASS: float = 1.989e30  # kg
SUN_MASS_IN_GRAMS: float = 1.989e33
SUN_TEMPERATURE: float = 5780.0  # K

# Planetary reference values
JUPITER_MASS: float = 1.8982e27  # kg
EARTH_MASS: float = 5.97237e24  # kg
EARTH_RADIUS: float = 6.371e6  # m
EARTH_ACCELERATION: float = 9.80655  # m s^-2
EARTH_DENSITY: float = 5.514  # g cm^-3
EARTH_AXIAL_TILT: float = 23.5  # deg

# Lengths
AU: float = 149597870700.0  # m
KM_PER_AU: float = 149597870.7
CM_PER_KM: float = 1.0e5

# Time
SECONDS_PER_HOUR: float = 3600.0
DAYS_PER_YEAR: float = 365.256
HOURS_PER_DAY: float = 24.0

# Temperatures (K)
FREEZING_POINT_OF_WATER: float = 273.15
EARTH_AVERAGE_CELSIUS: float = 14.0
EARTH_AVERAGE_KELVIN: float = FREEZING_POINT_OF_WATER + EARTH_AVERAGE_CELSIUS
EARTH_EXOSPHERIC_TEMPERATURE: float = 1273.0

# Pressures (millibar)
EARTH_SURF_PRES_IN_MILLIBARS: float = 1013.25
MILLIBARS_PER_BAR: float = 1000.0
MMHG_TO_MILLIBARS: float = EARTH_SURF_PRES_IN_MILLIBARS / 760.0
PPM_PRESSURE: float = EARTH_SURF_PRES_IN_MILLIBARS / 1.0e6
H20_ASSUMED_PRESSURE: float = 47.0 * MMHG_TO_MILLIBARS
MIN_O2_IPP: float = 72.0 * MMHG_TO_MILLIBARS
MAX_O2_IPP: float = 400.0 * MMHG_TO_MILLIBARS

# Hydrosphere
EARTH_WATER_MASS_PER_AREA: float = 3.83e15  # grams per square km
EARTH_CONVECTION_FACTOR: float = 0.43
EARTH_ALBEDO: float = 0.3

# Gas retention
GAS_RETENTION_THRESHOLD: float = 6.0
ASTEROID_MASS_LIMIT: float = 0.001  # Earth masses

# Molecular weights (g/mol)
MOL_HYDROGEN: float = 2.0
HELIUM: float = 4.0
WATER_VAPOR: float = 18.0
MOL_NITROGEN: float = 28.0
ARGON: float = 39.9
CARBON_DIOXIDE: float = 44.0

# Albedos
ICE_ALBEDO: float = 0.7
CLOUD_ALBEDO: float = 0.52
GAS_GIANT_ALBEDO: float = 0.5
AIRLESS_ICE_ALBEDO: float = 0.5
GREENHOUSE_TRIGGER_ALBEDO: float = 0.20
ROCKY_ALBEDO: float = 0.15
ROCKY_AIRLESS_ALBEDO: float = 0.07
WATER_ALBEDO: float = 0.04
