"""Tests for unit systems and quantity conversion."""

import numpy as np
import pytest

from pvtcurves.constants import Constants
from pvtcurves.errors import ValidationError
from pvtcurves.sources import InitData
from pvtcurves.types import Quantity, UnitConvention
from pvtcurves.units import (
    Convert,
    create_unit_system,
    internal_unit_conventions,
    serialised_unit_conventions,
)


def test_field_pressure_to_si():
    field = create_unit_system(UnitConvention.FIELD)
    si = internal_unit_conventions()

    pascals = Convert.pressure().from_(field).to(si).applied_to([1.0, 100.0])

    np.testing.assert_allclose(pascals, [6894.757293168361, 689475.7293168361])


def test_metric_to_field_viscosity_is_identity():
    metric = create_unit_system(UnitConvention.METRIC)
    field = create_unit_system(UnitConvention.FIELD)

    values = Convert.viscosity().from_(metric).to(field).applied_to([0.5, 1.5])

    np.testing.assert_allclose(values, [0.5, 1.5])


def test_field_gas_oil_ratios():
    field = create_unit_system(UnitConvention.FIELD)
    si = internal_unit_conventions()

    # 1000 scf/stb is roughly 178.1 sm3/sm3
    rs = Convert.dissolved_gas_oil_ratio().from_(field).to(si).applied_to([1000.0])
    np.testing.assert_allclose(rs, [178.1076], rtol=1e-5)

    # 1 stb/Mscf is roughly 0.005615 sm3/sm3
    rv = Convert.vaporised_oil_gas_ratio().from_(field).to(si).applied_to([1.0])
    np.testing.assert_allclose(rv, [0.0056146], rtol=1e-4)


@pytest.mark.parametrize("convention", list(UnitConvention))
@pytest.mark.parametrize("quantity", list(Quantity))
def test_round_trip_through_unit_system(convention, quantity):
    usys = create_unit_system(convention)
    si = internal_unit_conventions()
    values = np.array([0.0, 1.0e-3, 2.5, 1.0e7])

    there = Convert.quantity(quantity).from_(si).to(usys).applied_to(values)
    back = Convert.quantity(quantity).from_(usys).to(si).applied_to(there)

    np.testing.assert_allclose(back, values, rtol=1e-12)


def test_applied_to_leaves_input_untouched():
    field = create_unit_system(UnitConvention.FIELD)
    si = internal_unit_conventions()
    values = np.array([10.0, 20.0])

    converted = Convert.pressure().from_(field).to(si).applied_to(values)

    np.testing.assert_array_equal(values, [10.0, 20.0])
    assert converted is not values


def test_incomplete_conversion_raises():
    with pytest.raises(ValidationError):
        Convert.pressure().from_(internal_unit_conventions()).applied_to([1.0])
    with pytest.raises(ValidationError):
        Convert.pressure().to(internal_unit_conventions()).applied_to([1.0])


def test_unknown_convention_raises():
    with pytest.raises(ValidationError):
        create_unit_system(42)
    with pytest.raises(ValidationError):
        serialised_unit_conventions(InitData(unit_convention=42))


def test_serialised_units_follow_init_convention():
    usys = serialised_unit_conventions(InitData(unit_convention=2))

    assert usys.convention is UnitConvention.FIELD
    assert usys.name == "FIELD"


def test_unit_systems_read_constants_context():
    constants = Constants()
    constants.BAR_TO_PA = 2.0e5

    with constants():
        metric = create_unit_system(UnitConvention.METRIC)

    assert metric.scale(Quantity.PRESSURE) == 2.0e5
    assert create_unit_system(UnitConvention.METRIC).scale(Quantity.PRESSURE) == 1.0e5


def test_to_and_from_si():
    metric = create_unit_system(UnitConvention.METRIC)

    np.testing.assert_allclose(metric.to_si(Quantity.PRESSURE, [1.0]), [1.0e5])
    np.testing.assert_allclose(metric.from_si(Quantity.PRESSURE, [1.0e5]), [1.0])
