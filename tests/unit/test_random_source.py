import pytest

from accretesim.random_source import MAX_ECCENTRICITY, RandomSource


def test_between_scales_uniform_draw(scripted_rng):
    rng = scripted_rng(0.25)
    assert rng.between(2.0, 6.0) == pytest.approx(3.0)


def test_eccentricity_is_biased_towards_circular_orbits(scripted_rng):
    rng = scripted_rng(0.5)
    e = rng.eccentricity(0.077)
    assert e == pytest.approx(1.0 - 0.5**0.077)
    assert 0.0 < e < 0.06


def test_eccentricity_of_zero_draw_stays_bound(scripted_rng):
    e = scripted_rng(0.0).eccentricity()
    assert e == MAX_ECCENTRICITY
    assert e < 1.0


def test_about_perturbs_symmetrically(scripted_rng):
    rng = scripted_rng(0.75, 0.25, 0.5)
    assert rng.about(10.0, 0.1) == pytest.approx(10.5)
    assert rng.about(10.0, 0.1) == pytest.approx(9.5)
    assert rng.about(10.0, 0.1) == pytest.approx(10.0)


def test_same_seed_reproduces_draws():
    first = RandomSource.from_seed(7)
    second = RandomSource.from_seed(7)
    assert [first.uniform() for _ in range(5)] == [second.uniform() for _ in range(5)]
    assert all(0.0 <= RandomSource.from_seed(3).uniform() < 1.0 for _ in range(3))
