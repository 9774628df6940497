from accretesim.physics.disk import DustDisk


def _flags(disk):
    return [(band.inner, band.outer, band.dust, band.gas) for band in disk.bands]


def test_new_disk_is_single_dusty_band():
    disk = DustDisk(200.0, 0.3, 50.0)
    assert _flags(disk) == [(0.0, 200.0, True, True)]
    assert disk.dust_left
    assert disk.is_partition()


def test_consume_splits_band_and_keeps_gas_below_critical_mass():
    disk = DustDisk(200.0, 0.3, 50.0)
    disk.consume(1.0, 2.0, retain_gas=True)
    assert _flags(disk) == [
        (0.0, 1.0, True, True),
        (1.0, 2.0, False, True),
        (2.0, 200.0, True, True),
    ]
    assert disk.is_partition()
    assert not disk.has_dust(1.1, 1.9)
    assert disk.has_dust(0.5, 1.2)


def test_consume_merges_neighbours_with_equal_flags():
    disk = DustDisk(200.0, 0.3, 50.0)
    disk.consume(1.0, 2.0, retain_gas=True)
    disk.consume(1.5, 3.0, retain_gas=False)
    assert _flags(disk) == [
        (0.0, 1.0, True, True),
        (1.0, 1.5, False, True),
        (1.5, 3.0, False, False),
        (3.0, 200.0, True, True),
    ]
    disk.consume(1.0, 2.0, retain_gas=True)
    assert len(disk) == 4
    assert disk.is_partition()


def test_consume_clamps_negative_inner_edge():
    disk = DustDisk(200.0, 0.3, 50.0)
    disk.consume(-1.0, 0.5, retain_gas=True)
    assert _flags(disk)[0] == (0.0, 0.5, False, True)
    assert disk.is_partition()


def test_empty_range_leaves_disk_untouched():
    disk = DustDisk(200.0, 0.3, 50.0)
    disk.consume(2.0, 2.0, retain_gas=False)
    assert _flags(disk) == [(0.0, 200.0, True, True)]


def test_dust_left_only_counts_injection_range():
    disk = DustDisk(200.0, 0.3, 50.0)
    disk.consume(0.2, 60.0, retain_gas=True)
    assert disk.has_dust(0.0, 0.1)
    assert not disk.dust_left
