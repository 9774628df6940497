import math

import pytest

from accretesim.physics import accretion
from accretesim.physics.accretion import AccretionParameters
from accretesim.physics.disk import DustDisk


def test_reduced_mass_of_seed():
    assert accretion.reduced_mass(1.0e-15) == pytest.approx(1.0e-15**0.25, rel=1e-9)


def test_critical_mass_falls_with_distance():
    assert accretion.critical_mass(1.0, 0.0, 1.0) == pytest.approx(1.2e-5)
    assert accretion.critical_mass(4.0, 0.0, 1.0) == pytest.approx(1.2e-5 * 4.0**-0.75)
    assert accretion.critical_mass(1.0, 0.5, 1.0) > accretion.critical_mass(1.0, 0.0, 1.0)


def test_inner_swept_limit_is_clamped_to_zero():
    assert accretion.inner_effect_limit(1.0, 0.0, 2.0, 0.2) < 0.0
    assert accretion.inner_swept_limit(1.0, 0.0, 2.0, 0.2) == 0.0


def test_dust_density_at_origin_scales_with_star_mass():
    params = AccretionParameters()
    assert accretion.dust_density(1.0, 0.0, params) == pytest.approx(2.0e-3)
    assert accretion.dust_density(4.0, 0.0, params) == pytest.approx(4.0e-3)
    assert accretion.dust_density(1.0, 1.0, params) == pytest.approx(2.0e-3 * math.exp(-5.0))


def test_collect_dust_on_swept_disk_is_empty():
    params = AccretionParameters()
    disk = DustDisk(200.0, 0.3, 50.0)
    disk.consume(0.0, 200.0, retain_gas=False)
    result = accretion.collect_dust(disk, 1.0e-6, 1.0, 0.0, 1.2e-5, 1.0e-4, params)
    assert result.mass == 0.0
    assert result.gas == 0.0


def test_grow_protoplanet_below_critical_mass_collects_dust_only():
    params = AccretionParameters()
    disk = DustDisk(200.0, 0.3, 50.0)
    density = accretion.dust_density(1.0, 1.0, params)
    crit = accretion.critical_mass(1.0, 0.0, 1.0)
    result = accretion.grow_protoplanet(disk, params.protoplanet_mass, 1.0, 0.0, crit, density, params)

    assert result.mass > params.protoplanet_mass
    assert result.mass < crit
    assert result.swept_gas == 0.0
    assert result.swept_dust + result.swept_gas == pytest.approx(result.mass - params.protoplanet_mass)
    assert result.iterations >= 2
    assert result.inner < 1.0 < result.outer
    assert not disk.has_dust(result.inner + 1.0e-9, result.outer - 1.0e-9)
    assert all(band.gas for band in disk.bands)
    assert disk.is_partition()


def test_grow_protoplanet_above_critical_mass_captures_gas():
    params = AccretionParameters(b_coefficient=1.0e-12)
    disk = DustDisk(200.0, 0.3, 50.0)
    density = accretion.dust_density(1.0, 5.0, params)
    crit = accretion.critical_mass(5.0, 0.0, 1.0, params.b_coefficient)
    result = accretion.grow_protoplanet(disk, params.protoplanet_mass, 5.0, 0.0, crit, density, params)

    assert result.mass > crit
    assert result.swept_gas > 0.0
    assert result.swept_dust > 0.0
    for band in disk.bands:
        if band.inner >= result.inner and band.outer <= result.outer:
            assert not band.dust
            assert not band.gas
    assert disk.is_partition()
