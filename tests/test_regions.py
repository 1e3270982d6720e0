"""Tests for PVT region lookup."""

import numpy as np
import pytest

from pvtcurves.errors import ValidationError
from pvtcurves.regions import RegionTable, pvtnum_vector
from pvtcurves.sources import ActiveCellGrid, InitData


def test_missing_pvtnum_defaults_to_region_one():
    table = pvtnum_vector(ActiveCellGrid(num_cells=5), InitData())

    assert len(table) == 5
    assert [table.resolve(cell) for cell in range(5)] == [1] * 5


def test_pvtnum_is_used_when_present():
    init = InitData(keywords={"PVTNUM": [1, 2, 2, 3]})

    table = pvtnum_vector(ActiveCellGrid(num_cells=4), init)

    assert [table.resolve(cell) for cell in range(4)] == [1, 2, 2, 3]
    assert table.num_regions == 3


def test_pvtnum_of_wrong_length_is_ignored(caplog):
    init = InitData(keywords={"PVTNUM": [2, 2]})

    table = pvtnum_vector(ActiveCellGrid(num_cells=3), init)

    assert list(table.region_ids) == [1, 1, 1]
    assert "PVTNUM" in caplog.text


@pytest.mark.parametrize(
    "cell, expected",
    [(0, True), (2, True), (3, False), (-1, False), (10**12, False), (1.0, False)],
)
def test_contains(cell, expected):
    table = RegionTable(region_ids=[1, 1, 2])

    assert table.contains(cell) is expected


def test_contains_accepts_numpy_integers():
    table = RegionTable(region_ids=[1, 1, 2])

    assert table.contains(np.int32(2))
    assert not table.contains(np.int64(-1))


def test_region_ids_are_one_based():
    with pytest.raises(ValidationError):
        RegionTable(region_ids=[0, 1])


def test_region_table_is_immutable():
    table = RegionTable(region_ids=[1, 2])

    with pytest.raises(ValueError):
        table.region_ids[0] = 5
