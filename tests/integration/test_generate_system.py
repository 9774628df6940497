import math

import pytest

from accretesim.io.tables import load_chemicals, load_stellar_catalog
from accretesim.orchestrator import distribute_planetary_masses, generate_system, prepare_star
from accretesim.physics.accretion import AccretionParameters
from accretesim.physics.coalescence import MoonCapture
from accretesim.random_source import RandomSource
from accretesim.star import StellarTemplate
from accretesim.warnings import NumericalWarning

SEEDS = [1, 2, 3, 42]


@pytest.fixture(scope="module")
def chemicals():
    return load_chemicals()


@pytest.fixture(scope="module")
def sun_template():
    return load_stellar_catalog().get("G2V")


@pytest.mark.parametrize("seed", SEEDS)
def test_generated_system_invariants(seed, chemicals, sun_template):
    result = generate_system(sun_template, RandomSource.from_seed(seed), chemicals)

    assert result.planets
    assert result.injections > 0
    smas = [planet.sma for planet in result.planets]
    assert smas == sorted(smas)
    for body in result.bodies():
        assert 0.0 <= body.eccentricity < 1.0
        assert body.mass >= body.dust_mass + body.gas_mass - 1.0e-12
        assert body.density > 0.0
        if body.is_moon:
            assert body.parent is not None
            assert body.mass <= body.parent.mass
            assert body.sma == body.parent.sma
        if math.isinf(body.surface_pressure):
            assert body.gas_giant
    assert result.habitable == any(p.habitable or p.habitable_moon for p in result.planets)


def test_same_seed_reproduces_system(chemicals, sun_template):
    first = generate_system(sun_template, RandomSource.from_seed(9), chemicals)
    second = generate_system(sun_template, RandomSource.from_seed(9), chemicals)
    assert [p.sma for p in first.planets] == [p.sma for p in second.planets]
    assert [p.mass for p in first.planets] == [p.mass for p in second.planets]
    assert first.star.age == second.star.age


def test_disabled_moons_give_moonless_system(chemicals, sun_template):
    result = generate_system(
        sun_template, RandomSource.from_seed(4), chemicals, moons=MoonCapture(enabled=False)
    )
    assert result.moon_count == 0
    assert not result.escaped_moons


def test_single_protoplanet_at_one_au_grows_without_gas(scripted_rng):
    template = StellarTemplate("sun", "G", 1.0, 1.0, 1.0, 5780.0)
    # age, then the injection orbit, then the eccentricity draw
    rng = scripted_rng(0.5, (1.0 - 0.3) / (50.0 - 0.3), 1.0)
    star = prepare_star(template, rng, deviate=False)
    with pytest.warns(NumericalWarning):
        coalescer, failed, injections = distribute_planetary_masses(
            star, rng, AccretionParameters(), max_injections=1
        )

    assert injections == 1
    assert not failed
    (planet,) = coalescer.planets
    assert planet.sma == pytest.approx(1.0)
    assert planet.eccentricity == pytest.approx(0.0)
    assert 0.05 < planet.earth_masses < 4.0
    assert planet.gas_mass == 0.0
    assert not planet.gas_giant


def test_seed_in_swept_zone_is_discarded(scripted_rng):
    template = StellarTemplate("sun", "G", 1.0, 1.0, 1.0, 5780.0)
    at_one_au = (1.0 - 0.3) / (50.0 - 0.3)
    # age, then two injections at 1 AU on circular orbits
    rng = scripted_rng(0.5, at_one_au, 1.0, at_one_au, 1.0)
    star = prepare_star(template, rng, deviate=False)
    with pytest.warns(NumericalWarning):
        coalescer, failed, injections = distribute_planetary_masses(
            star, rng, AccretionParameters(), max_injections=2
        )

    assert injections == 2
    assert len(coalescer.planets) == 1
    assert failed == []
    assert coalescer.escaped_moons == []
    assert not coalescer.disk.has_dust(0.9, 1.1)


def test_injection_cap_warns_when_dust_remains(chemicals, sun_template):
    star = prepare_star(sun_template, RandomSource.from_seed(5))
    with pytest.warns(NumericalWarning):
        distribute_planetary_masses(star, RandomSource.from_seed(6), AccretionParameters(), max_injections=2)


def test_star_mass_drives_disk_extent(chemicals):
    template = load_stellar_catalog().get("M2V")
    result = generate_system(template, RandomSource.from_seed(8), chemicals)
    outermost = 50.0 * result.star.mass ** (1.0 / 3.0)
    assert all(planet.sma < 3.0 * outermost for planet in result.planets)
    assert result.star.age <= result.star.lifetime
    assert result.star.mass < 1.0
