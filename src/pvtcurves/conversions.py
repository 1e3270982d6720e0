"""
Unit conversion of PVT curves and point-evaluated properties.

The physical meaning of each curve column depends on the raw curve kind, the
phase and, for gas FVF and viscosity, on whether the fluid is miscible: miscible
gas curves are tabulated against the vaporised oil-gas ratio instead of pressure.
"""

import typing

from pvtcurves.curves import Curve
from pvtcurves.errors import InternalLogicError
from pvtcurves.types import Miscibility, PhaseIndex, Quantity, RawCurve
from pvtcurves.units import Convert, UnitSystem

__all__ = [
    "CURVE_CONVERSIONS",
    "MIX_RATIO_QUANTITIES",
    "DYNAMIC_PROPERTY_QUANTITIES",
    "curve_quantities",
    "convert_curve",
]

_IMMISCIBLE = Miscibility.IMMISCIBLE
_MISCIBLE = Miscibility.MISCIBLE

CURVE_CONVERSIONS: typing.Dict[
    typing.Tuple[RawCurve, PhaseIndex, Miscibility], typing.Tuple[Quantity, Quantity]
] = {
    # Oil FVF: (Po, Bo)
    (RawCurve.FVF, PhaseIndex.LIQUID, _IMMISCIBLE): (Quantity.PRESSURE, Quantity.OIL_FVF),
    (RawCurve.FVF, PhaseIndex.LIQUID, _MISCIBLE): (Quantity.PRESSURE, Quantity.OIL_FVF),
    # Gas FVF: (Pg, Bg) when immiscible, (Rv, Bg) when miscible
    (RawCurve.FVF, PhaseIndex.VAPOUR, _IMMISCIBLE): (Quantity.PRESSURE, Quantity.GAS_FVF),
    (RawCurve.FVF, PhaseIndex.VAPOUR, _MISCIBLE): (
        Quantity.VAPORISED_OIL_GAS_RATIO,
        Quantity.GAS_FVF,
    ),
    # Oil viscosity: (Po, μo)
    (RawCurve.VISCOSITY, PhaseIndex.LIQUID, _IMMISCIBLE): (
        Quantity.PRESSURE,
        Quantity.VISCOSITY,
    ),
    (RawCurve.VISCOSITY, PhaseIndex.LIQUID, _MISCIBLE): (
        Quantity.PRESSURE,
        Quantity.VISCOSITY,
    ),
    # Gas viscosity: (Pg, μg) when immiscible, (Rv, μg) when miscible
    (RawCurve.VISCOSITY, PhaseIndex.VAPOUR, _IMMISCIBLE): (
        Quantity.PRESSURE,
        Quantity.VISCOSITY,
    ),
    (RawCurve.VISCOSITY, PhaseIndex.VAPOUR, _MISCIBLE): (
        Quantity.VAPORISED_OIL_GAS_RATIO,
        Quantity.VISCOSITY,
    ),
    # Saturated state: (Po, Rs) for oil, (Pg, Rv) for gas
    (RawCurve.SATURATED_STATE, PhaseIndex.LIQUID, _IMMISCIBLE): (
        Quantity.PRESSURE,
        Quantity.DISSOLVED_GAS_OIL_RATIO,
    ),
    (RawCurve.SATURATED_STATE, PhaseIndex.LIQUID, _MISCIBLE): (
        Quantity.PRESSURE,
        Quantity.DISSOLVED_GAS_OIL_RATIO,
    ),
    (RawCurve.SATURATED_STATE, PhaseIndex.VAPOUR, _IMMISCIBLE): (
        Quantity.PRESSURE,
        Quantity.VAPORISED_OIL_GAS_RATIO,
    ),
    (RawCurve.SATURATED_STATE, PhaseIndex.VAPOUR, _MISCIBLE): (
        Quantity.PRESSURE,
        Quantity.VAPORISED_OIL_GAS_RATIO,
    ),
}
"""(raw curve, phase, miscibility) -> (x-axis quantity, y-axis quantity)"""

MIX_RATIO_QUANTITIES: typing.Dict[PhaseIndex, Quantity] = {
    PhaseIndex.LIQUID: Quantity.DISSOLVED_GAS_OIL_RATIO,
    PhaseIndex.VAPOUR: Quantity.VAPORISED_OIL_GAS_RATIO,
}
"""Quantity of the mixing ratio input for each phase."""

DYNAMIC_PROPERTY_QUANTITIES: typing.Dict[
    typing.Tuple[RawCurve, PhaseIndex], Quantity
] = {
    (RawCurve.FVF, PhaseIndex.LIQUID): Quantity.OIL_FVF,
    (RawCurve.FVF, PhaseIndex.VAPOUR): Quantity.GAS_FVF,
    (RawCurve.VISCOSITY, PhaseIndex.LIQUID): Quantity.VISCOSITY,
    (RawCurve.VISCOSITY, PhaseIndex.VAPOUR): Quantity.VISCOSITY,
}
"""Quantity of point-evaluated property values, per (property, phase)."""


def curve_quantities(
    curve: RawCurve, phase: PhaseIndex, miscibility: Miscibility
) -> typing.Tuple[Quantity, Quantity]:
    """
    Return the physical quantities of the x and y columns of a curve.

    :raises InternalLogicError: If the combination does not identify a PVT curve
    """
    try:
        return CURVE_CONVERSIONS[(curve, phase, miscibility)]
    except KeyError:
        raise InternalLogicError(
            f"Internal logic error: no unit conversion for curve {curve!r}, "
            f"phase {phase!r}, miscibility {miscibility!r}"
        ) from None


def convert_curve(
    curve: Curve,
    curve_kind: RawCurve,
    phase: PhaseIndex,
    usys_from: UnitSystem,
    usys_to: UnitSystem,
) -> Curve:
    """
    Convert both columns of every series in `curve` between unit systems.

    :param curve: Miscibility-tagged curve in `usys_from` units
    :param curve_kind: Raw curve kind `curve` was produced for
    :param phase: Phase `curve` was produced for
    :param usys_from: Unit system of `curve`'s values
    :param usys_to: Requested unit system
    :return: New curve in `usys_to` units
    :raises InternalLogicError: If `curve_kind`/`phase` do not identify a PVT curve
    """
    x_quantity, y_quantity = curve_quantities(curve_kind, phase, curve.miscibility)
    cvrt_x = Convert.quantity(x_quantity).from_(usys_from).to(usys_to)
    cvrt_y = Convert.quantity(y_quantity).from_(usys_from).to(usys_to)
    return curve.map(x=cvrt_x.applied_to, y=cvrt_y.applied_to)
