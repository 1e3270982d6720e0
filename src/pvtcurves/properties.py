"""Evaluation of phase properties through optional phase interpolants."""

import logging
import typing

import numpy as np

from pvtcurves._precision import get_dtype
from pvtcurves.curves import Curve, classify_curve
from pvtcurves.errors import InternalLogicError
from pvtcurves.interpolants import PhaseInterpolant
from pvtcurves.types import ArrayLike, OneDimensionalArray, PhaseIndex, RawCurve

logger = logging.getLogger(__name__)

__all__ = ["raw_pvt_curve", "oil_property", "gas_property", "phase_property"]


def _empty_values() -> OneDimensionalArray:
    return np.zeros(0, dtype=get_dtype())


def raw_pvt_curve(
    pvt: typing.Optional[PhaseInterpolant], curve: RawCurve, region: int
) -> Curve:
    """
    Produce the raw (SI) curve of kind `curve` for zero-based `region`.

    :param pvt: Phase interpolant, or None if the result set does not define the phase
    :param curve: Raw curve kind
    :param region: Zero-based PVT region index
    :return: Miscibility-tagged curve, or the empty sentinel when `pvt` is None
    """
    if pvt is None:
        return Curve.empty()
    return classify_curve(pvt.get_pvt_curve(curve, region))


def phase_property(
    pvt: typing.Optional[PhaseInterpolant],
    property: RawCurve,
    region: int,
    pressure: ArrayLike,
    mix_ratio: ArrayLike,
) -> OneDimensionalArray:
    """
    Evaluate formation volume factor or viscosity at explicit pressures.

    An empty `mix_ratio` is taken to mean zero mixing ratio at every pressure.

    :param pvt: Phase interpolant, or None if the result set does not define the phase
    :param property: `RawCurve.FVF` or `RawCurve.VISCOSITY`
    :param region: Zero-based PVT region index
    :param pressure: Phase pressures (SI)
    :param mix_ratio: Mixing ratios (SI), or empty
    :return: One value per pressure, or an empty array when `pvt` is None
    """
    if pvt is None:
        return _empty_values()

    pressure = np.asarray(pressure, dtype=get_dtype())
    mix_ratio = np.asarray(mix_ratio, dtype=get_dtype())
    if mix_ratio.size == 0:
        mix_ratio = np.zeros_like(pressure)

    if property is RawCurve.FVF:
        values = pvt.formation_volume_factor(region, mix_ratio, pressure)
    elif property is RawCurve.VISCOSITY:
        values = pvt.viscosity(region, mix_ratio, pressure)
    else:
        raise InternalLogicError(
            f"Dynamic evaluation supports FVF and viscosity only, got {property!r}"
        )
    return np.asarray(values, dtype=get_dtype())


def oil_property(
    pvt: typing.Optional[PhaseInterpolant],
    property: RawCurve,
    region: int,
    pressure: ArrayLike,
    dissolved_gas: ArrayLike,
) -> OneDimensionalArray:
    """Evaluate an oil property at oil pressures and dissolved gas-oil ratios (Rs)."""
    if pvt is None:
        logger.debug(f"No oil PVT interpolant. Cannot evaluate {property!r}")
    return phase_property(pvt, property, region, pressure, dissolved_gas)


def gas_property(
    pvt: typing.Optional[PhaseInterpolant],
    property: RawCurve,
    region: int,
    pressure: ArrayLike,
    vaporised_oil: ArrayLike,
) -> OneDimensionalArray:
    """Evaluate a gas property at gas pressures and vaporised oil-gas ratios (Rv)."""
    if pvt is None:
        logger.debug(f"No gas PVT interpolant. Cannot evaluate {property!r}")
    return phase_property(pvt, property, region, pressure, vaporised_oil)


PHASE_PROPERTY_EVALUATORS: typing.Dict[
    PhaseIndex,
    typing.Callable[
        [typing.Optional[PhaseInterpolant], RawCurve, int, ArrayLike, ArrayLike],
        OneDimensionalArray,
    ],
] = {
    PhaseIndex.LIQUID: oil_property,
    PhaseIndex.VAPOUR: gas_property,
}
