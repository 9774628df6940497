import pytest

from accretesim.physics.accretion import AccretionParameters, critical_mass
from accretesim.physics.coalescence import Coalescer, MoonCapture, Outcome, find_overlap, merged_orbit
from accretesim.physics.disk import DustDisk
from accretesim.planet import Planet
from accretesim.star import Star, StellarTemplate


def _star():
    star = Star.from_template(StellarTemplate("G2V", "G", 1.0, 1.0, 1.0, 5780.0))
    star.age = 4.5e9
    return star


def _body(sma, mass, eccentricity=0.0):
    return Planet(sma=sma, eccentricity=eccentricity, mass=mass, dust_mass=mass)


def _coalescer(moons=None):
    star = _star()
    disk = DustDisk(star.stellar_dust_limit, star.innermost_planet, star.outermost_planet)
    return Coalescer(star, disk, AccretionParameters(), moons)


def test_merged_orbit_lies_between_inputs():
    sma, eccentricity = merged_orbit(_body(1.0, 1.0e-6, 0.1), _body(2.0, 2.0e-6, 0.2))
    assert 1.0 < sma < 2.0
    assert 0.0 <= eccentricity < 1.0


def test_merged_orbit_of_equal_circular_orbits():
    sma, eccentricity = merged_orbit(_body(1.0, 1.0e-6), _body(1.0, 3.0e-6))
    assert sma == pytest.approx(1.0)
    assert eccentricity == pytest.approx(0.0, abs=1e-6)


def test_find_overlap_uses_influence_reach():
    planet = _body(1.0, 3.0e-6)
    assert find_overlap([planet], _body(1.01, 1.0e-7)) is planet
    assert find_overlap([planet], _body(3.0, 1.0e-7)) is None


def test_first_body_becomes_planet_and_gas_giant_flag_follows_critical_mass():
    coalescer = _coalescer()
    assert coalescer.coalesce(_body(1.0, 2.0e-5), crit_mass=1.5e-5) is Outcome.NEW_PLANET
    assert coalescer.coalesce(_body(10.0, 1.0e-6), crit_mass=1.5e-5) is Outcome.NEW_PLANET
    first, second = coalescer.planets
    assert first.gas_giant
    assert not second.gas_giant
    assert first.star is coalescer.star


def test_planets_stay_sorted_by_sma():
    coalescer = _coalescer()
    for sma in (5.0, 0.5, 20.0, 2.0):
        coalescer.coalesce(_body(sma, 1.0e-6), crit_mass=1.0)
    assert [planet.sma for planet in coalescer.planets] == [0.5, 2.0, 5.0, 20.0]


def test_merge_sweeps_again_and_can_make_gas_giant():
    coalescer = _coalescer(MoonCapture(enabled=False))
    coalescer.coalesce(_body(1.0, 1.0e-5), crit_mass=1.5e-5)
    outcome = coalescer.coalesce(_body(1.01, 1.0e-5), crit_mass=1.5e-5)

    assert outcome is Outcome.MERGED
    assert len(coalescer.planets) == 1
    planet = coalescer.planets[0]
    assert 1.0 < planet.sma < 1.01
    assert planet.mass >= 2.0e-5
    assert planet.gas_giant


def test_body_too_heavy_for_capture_escapes():
    coalescer = _coalescer()
    coalescer.coalesce(_body(1.0, 1.0e-5), crit_mass=1.5e-5)
    outcome = coalescer.coalesce(_body(1.01, 1.0e-5), crit_mass=1.5e-5)

    assert outcome is Outcome.ESCAPED
    assert len(coalescer.planets) == 1
    assert coalescer.planets[0].mass == pytest.approx(1.0e-5)
    escaped = coalescer.escaped_moons[0]
    assert escaped.sma == pytest.approx(1.01)
    assert escaped.mass == pytest.approx(escaped.dust_mass + escaped.gas_mass)


def test_small_body_is_captured_as_moon():
    coalescer = _coalescer()
    coalescer.coalesce(_body(1.0, 1.0e-5), crit_mass=1.5e-5)
    outcome = coalescer.coalesce(_body(1.01, 3.0e-7), crit_mass=1.5e-5)

    assert outcome is Outcome.CAPTURED
    planet = coalescer.planets[0]
    assert planet.mass == pytest.approx(1.0e-5)
    (moon,) = planet.moons
    assert moon.is_moon
    assert moon.parent is planet
    assert moon.mass == pytest.approx(3.0e-7)


def test_capture_respects_moon_mass_budget():
    coalescer = _coalescer()
    coalescer.coalesce(_body(1.0, 1.0e-5), crit_mass=1.5e-5)
    coalescer.coalesce(_body(1.01, 4.0e-7), crit_mass=1.5e-5)
    coalescer.coalesce(_body(0.99, 4.0e-7), crit_mass=1.5e-5)
    assert len(coalescer.planets[0].moons) == 2
    # 8e-7 exceeds 5% of the planet's mass
    assert coalescer.coalesce(_body(1.02, 4.0e-7), crit_mass=1.5e-5) is Outcome.ESCAPED


def test_inject_merges_without_sweeping():
    coalescer = _coalescer(MoonCapture(enabled=False))
    coalescer.coalesce(_body(1.0, 1.0e-6), crit_mass=1.0)
    bands_before = [(band.inner, band.outer) for band in coalescer.disk.bands]
    outcome = coalescer.inject(_body(1.01, 1.0e-7), crit_mass=1.0)

    assert outcome is Outcome.MERGED
    assert coalescer.planets[0].mass == pytest.approx(1.1e-6)
    assert [(band.inner, band.outer) for band in coalescer.disk.bands] == bands_before


def test_seed_mass_planet_never_captures():
    coalescer = _coalescer()
    coalescer.planets.append(_body(1.0, 1.0e-15))
    outcome = coalescer.inject(_body(1.0, 3.0e-7), crit_mass=1.0)
    assert outcome is Outcome.MERGED
    assert not coalescer.planets[0].moons


def _swept_coalescer():
    coalescer = _coalescer(MoonCapture(enabled=False))
    coalescer.disk.consume(0.0, coalescer.disk.outer_edge, retain_gas=False)
    planet = _body(1.0, 1.4e-5)
    planet.star = coalescer.star
    coalescer.planets.append(planet)
    return coalescer, planet


@pytest.mark.parametrize("inject", [False, True])
def test_merge_flags_gas_giant_from_merged_orbit(inject):
    coalescer, planet = _swept_coalescer()
    candidate = _body(1.02, 1.0e-6, eccentricity=0.6)
    candidate_crit = critical_mass(candidate.sma, candidate.eccentricity, coalescer.star.luminosity)
    add = coalescer.inject if inject else coalescer.coalesce

    assert add(candidate, crit_mass=candidate_crit) is Outcome.MERGED

    merged_crit = critical_mass(planet.sma, planet.eccentricity, coalescer.star.luminosity)
    assert merged_crit < planet.mass < candidate_crit
    assert planet.mass == pytest.approx(1.5e-5)
    assert planet.gas_giant
