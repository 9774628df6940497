import math

import pytest

from accretesim import constants
from accretesim.errors import InvariantError
from accretesim.io.tables import load_chemicals
from accretesim.physics import climate, environment
from accretesim.planet import Planet, PlanetType
from accretesim.star import Star, StellarTemplate

EARTH_IN_SUNS = constants.EARTH_MASS / constants.SUN_MASS


@pytest.fixture(scope="module")
def chemicals():
    return load_chemicals()


@pytest.fixture
def sun():
    star = Star.from_template(StellarTemplate("G2V", "G", 1.0, 1.0, 1.0, 5780.0))
    star.age = 4.5e9
    return star


def _jupiter(star):
    return Planet(
        sma=5.2,
        eccentricity=0.05,
        mass=1.0e-3,
        dust_mass=1.0e-4,
        gas_mass=9.0e-4,
        gas_giant=True,
        star=star,
    )


def test_roche_limit_and_hill_sphere():
    assert environment.roche_limit(1000.0, 5.0, 5.0) == pytest.approx(2440.0)
    assert environment.hill_sphere(1.0, 3.0e-6, 1.0) == pytest.approx(constants.KM_PER_AU * 1.0e-2)


def test_airless_bodies_are_rock_or_asteroids():
    body = Planet(mass=1.0e-10, surface_pressure=0.0)
    assert environment.rocky_type(body) is PlanetType.ASTEROIDS
    body.is_moon = True
    assert environment.rocky_type(body) is PlanetType.ROCK


def test_thick_hydrogen_envelope_is_small_gas_giant():
    body = Planet(mass=1.0e-5, surface_pressure=7000.0, molecular_weight=2.0, density=1.5)
    body.atmosphere = ["placeholder"]
    assert environment.rocky_type(body) is PlanetType.SUB_SUB_GAS_GIANT
    assert body.atmosphere == []


def test_dry_body_with_accreted_gas_freezes_over():
    body = Planet(
        mass=1.0e-5,
        gas_mass=1.0e-7,
        surface_pressure=500.0,
        molecular_weight=20.0,
        max_temperature=200.0,
        boiling_point=350.0,
        orbital_period=3.15e7,
        day_length=24.0,
    )
    assert environment.rocky_type(body) is PlanetType.ICE
    assert body.ice_cover == 1.0


def test_gas_giant_type_thresholds():
    assert environment.gas_giant_type(300.0, 0.1) is PlanetType.SUB_SUB_GAS_GIANT
    assert environment.gas_giant_type(10.0, 0.5) is PlanetType.SUB_GAS_GIANT
    assert environment.gas_giant_type(300.0, 0.5) is PlanetType.GAS_GIANT


def test_finalize_earth_analogue(sun, chemicals, seeded_rng):
    earth = Planet(sma=1.0, eccentricity=0.0167, mass=EARTH_IN_SUNS, dust_mass=EARTH_IN_SUNS, star=sun)
    environment.finalize_planet(earth, seeded_rng, chemicals)

    assert earth.orbital_zone == 1
    assert not earth.gas_giant
    assert earth.radius == pytest.approx(6371.0, rel=0.05)
    assert earth.density > 0.0
    assert earth.orbital_period_days == pytest.approx(365.25, rel=0.01)
    assert math.isfinite(earth.surface_temperature) and earth.surface_temperature > 0.0
    assert 0.0 <= earth.hydrosphere <= 1.0
    assert 0.0 <= earth.cloud_cover <= 1.0
    assert 0.0 <= earth.ice_cover <= 1.0
    if earth.atmosphere:
        assert sum(gas.pressure for gas in earth.atmosphere) == pytest.approx(earth.surface_pressure)


def test_climate_iteration_is_bounded(sun, chemicals, seeded_rng):
    earth = Planet(sma=1.0, eccentricity=0.0167, mass=EARTH_IN_SUNS, dust_mass=EARTH_IN_SUNS, star=sun)
    environment.finalize_planet(earth, seeded_rng, chemicals)
    initial = climate.estimated_temperature(sun.ecosphere_radius, earth.sma, earth.albedo)

    steps = climate.iterate_surface_temperature(earth)

    assert 2 <= steps <= climate.MAX_TEMPERATURE_ITERATIONS + 1
    assert earth.greenhouse_rise == pytest.approx(earth.surface_temperature - initial)


def test_finalize_gas_giant_uses_sentinels(sun, chemicals, seeded_rng):
    jupiter = environment.finalize_planet(_jupiter(sun), seeded_rng, chemicals)

    assert jupiter.gas_giant
    assert jupiter.planet_type is PlanetType.GAS_GIANT
    assert jupiter.surface_pressure == math.inf
    assert jupiter.surface_temperature == math.inf
    assert not jupiter.habitable
    assert jupiter.atmosphere == []


def test_moons_are_placed_between_roche_limit_and_hill_sphere(sun, chemicals, seeded_rng):
    jupiter = _jupiter(sun)
    moon = Planet(sma=5.0, mass=3.0e-8, dust_mass=3.0e-8)
    jupiter.adopt_moon(moon)

    environment.finalize_planet(jupiter, seeded_rng, chemicals)

    assert moon.sma == jupiter.sma
    assert moon.star is sun
    assert moon.density > 0.0
    roche = environment.roche_limit(jupiter.radius, jupiter.density, moon.density)
    hill = environment.hill_sphere(jupiter.sma, jupiter.mass, sun.mass)
    orbit_km = moon.moon_sma * constants.KM_PER_AU
    assert 1.5 * roche <= orbit_km <= hill / 2.0
    assert 0.0 <= moon.moon_eccentricity < 1.0


def test_light_moon_is_finalized_without_own_orbit(sun, chemicals, seeded_rng):
    jupiter = _jupiter(sun)
    moon = Planet(sma=5.0, mass=1.0e-7 * EARTH_IN_SUNS, dust_mass=1.0e-7 * EARTH_IN_SUNS)
    jupiter.adopt_moon(moon)

    environment.finalize_planet(jupiter, seeded_rng, chemicals)

    assert moon.earth_masses <= environment.MIN_MOON_EARTH_MASSES
    assert moon.sma == jupiter.sma
    assert moon.eccentricity == jupiter.eccentricity
    assert moon.density > 0.0
    assert moon.radius > 0.0
    assert moon.planet_type is PlanetType.ROCK
    assert moon.moon_sma == 0.0
    assert moon.moon_eccentricity == 0.0


def test_negligible_moon_is_an_invariant_violation(sun, chemicals, seeded_rng):
    jupiter = _jupiter(sun)
    jupiter.adopt_moon(Planet(sma=5.2, mass=1.0e-15, dust_mass=1.0e-15))
    with pytest.raises(InvariantError):
        environment.finalize_planet(jupiter, seeded_rng, chemicals, negligible_mass=1.0e-15)
