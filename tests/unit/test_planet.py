import pytest

from accretesim.bodies import seconds_to_hours
from accretesim.planet import Planet, iter_bodies, sort_bodies


def test_sort_bodies_orders_planets_by_sma():
    bodies = [Planet(sma=5.0), Planet(sma=0.4), Planet(sma=1.0)]
    sort_bodies(bodies)
    assert [body.sma for body in bodies] == [0.4, 1.0, 5.0]


def test_sort_bodies_orders_moons_by_moon_sma():
    planet = Planet(sma=1.0, mass=1.0e-5)
    for moon_sma in (3.0e-3, 1.0e-3, 2.0e-3):
        moon = Planet(sma=1.0, mass=1.0e-8)
        planet.adopt_moon(moon)
        moon.moon_sma = moon_sma
    sort_bodies(planet.moons)
    assert [moon.moon_sma for moon in planet.moons] == [1.0e-3, 2.0e-3, 3.0e-3]


def test_mixed_lists_are_left_in_place():
    moon = Planet(sma=0.1, is_moon=True, moon_sma=5.0)
    bodies = [Planet(sma=5.0), moon, Planet(sma=1.0)]
    sort_bodies(bodies)
    assert [body.sma for body in bodies] == [5.0, 0.1, 1.0]


def test_iter_bodies_walks_moons_after_their_planet():
    inner, outer = Planet(sma=1.0), Planet(sma=5.0)
    moon = Planet(sma=5.0)
    outer.adopt_moon(moon)
    assert list(iter_bodies([inner, outer])) == [inner, outer, moon]
    assert outer.moon_mass == moon.mass


def test_gas_fraction_and_tidal_lock():
    planet = Planet(mass=2.0e-6, dust_mass=1.5e-6, gas_mass=0.5e-6)
    assert planet.gas_fraction == 0.25
    planet.orbital_period = 86400.0 * 88.0
    planet.day_length = 24.0 * 88.0
    assert planet.is_tidally_locked
    planet.day_length = 24.0
    assert not planet.is_tidally_locked
    assert Planet().gas_fraction == 0.0


def test_tidal_lock_compares_whole_hours():
    assert seconds_to_hours(3599.0) == 0
    assert seconds_to_hours(7200.5) == 2
    planet = Planet(mass=2.0e-6)
    planet.orbital_period = 100.9 * 3600.0
    planet.day_length = 100.2
    assert planet.is_tidally_locked
    planet.day_length = 99.9
    assert not planet.is_tidally_locked


def test_central_body_conversions():
    jupiter = Planet(sma=5.2, eccentricity=0.05, mass=9.546e-4)
    assert jupiter.jupiter_masses == pytest.approx(1.0, rel=1.0e-2)
    assert jupiter.earth_masses == pytest.approx(318.0, rel=1.0e-2)
    assert jupiter.apoapsis == pytest.approx(5.46)
    assert jupiter.periapsis == pytest.approx(4.94)
    assert jupiter.sma_km == pytest.approx(5.2 * 149597870.7)


def test_moon_apsides_use_orbit_around_parent():
    moon = Planet(sma=1.0, mass=3.7e-8, moon_sma=2.57e-3, moon_eccentricity=0.0549)
    assert moon.moon_apoapsis == pytest.approx(2.57e-3 * 1.0549)
    assert moon.moon_periapsis == pytest.approx(2.57e-3 * 0.9451)
    assert moon.moon_periapsis < moon.moon_sma < moon.moon_apoapsis
