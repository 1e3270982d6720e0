"""Tests for curve unit conversion dispatch."""

import numpy as np
import pytest

from pvtcurves.conversions import CURVE_CONVERSIONS, convert_curve, curve_quantities
from pvtcurves.curves import Curve, classify_curve
from pvtcurves.errors import InternalLogicError
from pvtcurves.types import Miscibility, PhaseIndex, Quantity, RawCurve, UnitConvention
from pvtcurves.units import create_unit_system, internal_unit_conventions

from conftest import make_series


@pytest.fixture
def si():
    return internal_unit_conventions()


@pytest.fixture
def field():
    return create_unit_system(UnitConvention.FIELD)


def test_table_covers_every_curve_phase_and_miscibility():
    for curve in RawCurve:
        for phase in (PhaseIndex.LIQUID, PhaseIndex.VAPOUR):
            for miscibility in Miscibility:
                assert (curve, phase, miscibility) in CURVE_CONVERSIONS
    assert len(CURVE_CONVERSIONS) == 12


_LIQ, _VAP = PhaseIndex.LIQUID, PhaseIndex.VAPOUR
_IMM, _MIS = Miscibility.IMMISCIBLE, Miscibility.MISCIBLE
_P, _RS, _RV = (
    Quantity.PRESSURE,
    Quantity.DISSOLVED_GAS_OIL_RATIO,
    Quantity.VAPORISED_OIL_GAS_RATIO,
)


@pytest.mark.parametrize(
    "curve, phase, miscibility, expected",
    [
        (RawCurve.FVF, _LIQ, _MIS, (_P, Quantity.OIL_FVF)),
        (RawCurve.FVF, _VAP, _IMM, (_P, Quantity.GAS_FVF)),
        (RawCurve.FVF, _VAP, _MIS, (_RV, Quantity.GAS_FVF)),
        (RawCurve.VISCOSITY, _LIQ, _MIS, (_P, Quantity.VISCOSITY)),
        (RawCurve.VISCOSITY, _VAP, _IMM, (_P, Quantity.VISCOSITY)),
        (RawCurve.VISCOSITY, _VAP, _MIS, (_RV, Quantity.VISCOSITY)),
        (RawCurve.SATURATED_STATE, _LIQ, _MIS, (_P, _RS)),
        (RawCurve.SATURATED_STATE, _VAP, _MIS, (_P, _RV)),
        (RawCurve.SATURATED_STATE, _VAP, _IMM, (_P, _RV)),
    ],
)
def test_curve_quantities(curve, phase, miscibility, expected):
    assert curve_quantities(curve, phase, miscibility) == expected


def test_gas_fvf_x_axis_depends_on_series_count(si, field):
    x, y = make_series()
    immiscible = classify_curve([(x, y)])
    miscible = classify_curve([(x, y), (x, y), (x, y)])

    converted_immiscible = convert_curve(immiscible, RawCurve.FVF, PhaseIndex.VAPOUR, si, field)
    converted_miscible = convert_curve(miscible, RawCurve.FVF, PhaseIndex.VAPOUR, si, field)

    pressure_scale = field.scale(Quantity.PRESSURE)
    rv_scale = field.scale(Quantity.VAPORISED_OIL_GAS_RATIO)
    np.testing.assert_allclose(converted_immiscible[0].x, x / pressure_scale)
    for series in converted_miscible:
        np.testing.assert_allclose(series.x, x / rv_scale)
    assert not np.allclose(converted_immiscible[0].x, converted_miscible[0].x)

    # Bg column converts identically in both cases
    bg = y / field.scale(Quantity.GAS_FVF)
    np.testing.assert_allclose(converted_immiscible[0].y, bg)
    np.testing.assert_allclose(converted_miscible[1].y, bg)


def test_oil_saturated_state_converts_rs(si, field):
    x, y = make_series()
    curve = Curve.immiscible((x, y))

    converted = convert_curve(curve, RawCurve.SATURATED_STATE, PhaseIndex.LIQUID, si, field)

    np.testing.assert_allclose(converted[0].x, x / field.scale(Quantity.PRESSURE))
    np.testing.assert_allclose(
        converted[0].y, y / field.scale(Quantity.DISSOLVED_GAS_OIL_RATIO)
    )


def test_liquid_fvf_never_uses_mixing_ratio_axis(si, field):
    x, y = make_series()
    curve = Curve.miscible([(x, y), (x, y)])

    converted = convert_curve(curve, RawCurve.FVF, PhaseIndex.LIQUID, si, field)

    for series in converted:
        np.testing.assert_allclose(series.x, x / field.scale(Quantity.PRESSURE))
        np.testing.assert_allclose(series.y, y / field.scale(Quantity.OIL_FVF))


def test_round_trip_conversion_restores_values(si, field):
    curve = Curve.miscible([make_series(), make_series(offset=2.0)])

    there = convert_curve(curve, RawCurve.VISCOSITY, PhaseIndex.VAPOUR, si, field)
    back = convert_curve(there, RawCurve.VISCOSITY, PhaseIndex.VAPOUR, field, si)

    for original, restored in zip(curve, back):
        np.testing.assert_allclose(restored.x, original.x, rtol=1e-12)
        np.testing.assert_allclose(restored.y, original.y, rtol=1e-12)


def test_unrecognised_curve_kind_raises(si, field):
    with pytest.raises(InternalLogicError):
        convert_curve(Curve.empty(), "density", PhaseIndex.LIQUID, si, field)
    with pytest.raises(InternalLogicError):
        curve_quantities(RawCurve.FVF, PhaseIndex.AQUA, Miscibility.IMMISCIBLE)
