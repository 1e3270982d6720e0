"""
Phase interpolants: per-region PVT property evaluation and raw curve production.

Concrete interpolants are looked up through a registry keyed by the result-file
keyword holding their tables, so miscible fluid models can be plugged in
without touching the curve collection.
"""

import logging
import threading
import typing

import attrs
import numpy as np
from scipy.interpolate import interp1d  # type: ignore[import-untyped]

from pvtcurves._precision import get_dtype
from pvtcurves.curves import Curve, Series
from pvtcurves.errors import InternalLogicError, ValidationError
from pvtcurves.sources import InitData
from pvtcurves.types import ArrayLike, OneDimensionalArray, PhaseIndex, Quantity, RawCurve
from pvtcurves.units import Convert, internal_unit_conventions, serialised_unit_conventions

logger = logging.getLogger(__name__)

__all__ = [
    "PhaseInterpolant",
    "DeadFluidPVT",
    "InterpolantFactory",
    "register_interpolant_factory",
    "create_oil_interpolant",
    "create_gas_interpolant",
]


@typing.runtime_checkable
class PhaseInterpolant(typing.Protocol):
    """
    Protocol for the PVT property interpolant of a single phase.

    Regions are zero-based. All inputs and outputs are in strict SI units.
    """

    def formation_volume_factor(
        self, region: int, mix_ratio: ArrayLike, pressure: ArrayLike
    ) -> OneDimensionalArray:
        """
        Evaluate the formation volume factor.

        :param region: Zero-based PVT region index
        :param mix_ratio: Mixing ratio (Rs for oil, Rv for gas), same length as `pressure`
        :param pressure: Phase pressure
        :return: Formation volume factor, one value per pressure
        """
        ...

    def viscosity(
        self, region: int, mix_ratio: ArrayLike, pressure: ArrayLike
    ) -> OneDimensionalArray:
        """
        Evaluate the phase viscosity.

        :param region: Zero-based PVT region index
        :param mix_ratio: Mixing ratio (Rs for oil, Rv for gas), same length as `pressure`
        :param pressure: Phase pressure
        :return: Viscosity, one value per pressure
        """
        ...

    def get_pvt_curve(
        self, curve: RawCurve, region: int
    ) -> typing.Union[Curve, typing.Sequence[typing.Tuple[ArrayLike, ArrayLike]]]:
        """
        Produce the tabulated curve of kind `curve` for `region`.

        May return a tagged `Curve` or a plain sequence of `(x, y)` series.

        :param curve: Raw curve kind
        :param region: Zero-based PVT region index
        """
        ...


_FVF_QUANTITIES: typing.Dict[PhaseIndex, Quantity] = {
    PhaseIndex.LIQUID: Quantity.OIL_FVF,
    PhaseIndex.VAPOUR: Quantity.GAS_FVF,
}


@attrs.frozen(eq=False)
class _DeadFluidRegion:
    pressure: np.ndarray
    fvf: np.ndarray
    viscosity: np.ndarray
    recip_fvf: typing.Callable[[np.ndarray], np.ndarray]
    recip_fvf_viscosity: typing.Callable[[np.ndarray], np.ndarray]


class DeadFluidPVT:
    """
    Interpolant for dead oil (PVDO) or dry gas (PVDG), fluids whose properties
    depend on pressure alone.

    Properties are interpolated linearly in 1/B and 1/(B·μ), extrapolating
    linearly beyond the tabulated pressure range.
    """

    def __init__(
        self,
        phase: PhaseIndex,
        tables: typing.Sequence[np.ndarray],
        column_scales: typing.Sequence[float] = (1.0, 1.0, 1.0),
    ) -> None:
        """
        Build the interpolant from per-region tables.

        :param phase: `PhaseIndex.LIQUID` for dead oil, `PhaseIndex.VAPOUR` for dry gas
        :param tables: One table per region, each with columns
            (pressure, formation volume factor, viscosity), sorted by pressure
        :param column_scales: Per-column factors taking the table values to strict SI
        :raises ValidationError: If a table is malformed
        """
        if phase not in _FVF_QUANTITIES:
            raise ValidationError(f"Dead fluid tables exist for oil and gas only, got {phase}")
        if len(tables) == 0:
            raise ValidationError("At least one PVT region table is required")

        self.phase = phase
        self._regions = [
            self._build_region(
                index, np.asarray(table, dtype=np.float64), np.asarray(column_scales)
            )
            for index, table in enumerate(tables)
        ]

    @classmethod
    def from_keyword(
        cls, phase: PhaseIndex, data: typing.Any, init: InitData
    ) -> "DeadFluidPVT":
        """
        Build the interpolant from keyword data stored in `init`'s native units.

        :param phase: Phase the keyword describes
        :param data: A single (n, 3) table or a sequence of tables, one per region
        :param init: Initialization data source, providing the native unit convention
        """
        if phase not in _FVF_QUANTITIES:
            raise ValidationError(f"Dead fluid tables exist for oil and gas only, got {phase}")
        if len(data) and np.ndim(data[0]) == 1:
            # A single table, first item is its first row
            data = [data]

        native = serialised_unit_conventions(init)
        internal = internal_unit_conventions()
        column_scales = (
            Convert.pressure().from_(native).to(internal).factor,
            Convert.quantity(_FVF_QUANTITIES[phase]).from_(native).to(internal).factor,
            Convert.viscosity().from_(native).to(internal).factor,
        )
        return cls(phase=phase, tables=data, column_scales=column_scales)

    @staticmethod
    def _build_region(
        index: int, table: np.ndarray, column_scales: np.ndarray
    ) -> _DeadFluidRegion:
        if table.ndim != 2 or table.shape[1] != 3:
            raise ValidationError(
                f"PVT table for region {index + 1} must have three columns "
                f"(pressure, FVF, viscosity), got shape {table.shape}"
            )
        if table.shape[0] < 2:
            raise ValidationError(
                f"PVT table for region {index + 1} has no interpolation interval of non-zero size"
            )

        table = table * column_scales
        pressure, fvf, viscosity = table[:, 0], table[:, 1], table[:, 2]
        if np.any(np.diff(pressure) <= 0.0):
            raise ValidationError(
                f"Pressures in PVT table for region {index + 1} must be strictly increasing"
            )
        if np.any(fvf <= 0.0) or np.any(viscosity <= 0.0):
            raise ValidationError(
                f"FVF and viscosity in PVT table for region {index + 1} must be positive"
            )

        recip_fvf = 1.0 / fvf
        return _DeadFluidRegion(
            pressure=pressure,
            fvf=fvf,
            viscosity=viscosity,
            recip_fvf=interp1d(pressure, recip_fvf, fill_value="extrapolate"),
            recip_fvf_viscosity=interp1d(
                pressure, recip_fvf / viscosity, fill_value="extrapolate"
            ),
        )

    @property
    def num_regions(self) -> int:
        return len(self._regions)

    def _region(self, region: int) -> _DeadFluidRegion:
        if not 0 <= region < len(self._regions):
            raise ValidationError(
                f"PVT region {region + 1} is not defined. "
                f"Result set defines {len(self._regions)} region(s)"
            )
        return self._regions[region]

    def formation_volume_factor(
        self, region: int, mix_ratio: ArrayLike, pressure: ArrayLike
    ) -> OneDimensionalArray:
        table = self._region(region)
        pressure = np.asarray(pressure, dtype=np.float64)
        return (1.0 / table.recip_fvf(pressure)).astype(get_dtype(), copy=False)

    def viscosity(
        self, region: int, mix_ratio: ArrayLike, pressure: ArrayLike
    ) -> OneDimensionalArray:
        table = self._region(region)
        pressure = np.asarray(pressure, dtype=np.float64)
        # (1/B) / (1/(B·μ))
        viscosity = table.recip_fvf(pressure) / table.recip_fvf_viscosity(pressure)
        return viscosity.astype(get_dtype(), copy=False)

    def get_pvt_curve(self, curve: RawCurve, region: int) -> Curve:
        table = self._region(region)
        if curve is RawCurve.FVF:
            return Curve.immiscible(Series(x=table.pressure, y=table.fvf))
        if curve is RawCurve.VISCOSITY:
            return Curve.immiscible(Series(x=table.pressure, y=table.viscosity))
        if curve is RawCurve.SATURATED_STATE:
            # No dissolved or vaporised component
            return Curve.empty()
        raise InternalLogicError(f"Unrecognised raw curve kind {curve!r}")


InterpolantFactory = typing.Callable[[typing.Any, InitData], PhaseInterpolant]
"""Builds an interpolant from a keyword's data and the initialization data source."""

_INTERPOLANT_FACTORIES: typing.Dict[
    PhaseIndex, typing.List[typing.Tuple[str, InterpolantFactory]]
] = {
    PhaseIndex.LIQUID: [
        ("PVDO", lambda data, init: DeadFluidPVT.from_keyword(PhaseIndex.LIQUID, data, init)),
    ],
    PhaseIndex.VAPOUR: [
        ("PVDG", lambda data, init: DeadFluidPVT.from_keyword(PhaseIndex.VAPOUR, data, init)),
    ],
}
"""Registry of interpolant factories, tried in order, per phase."""
_interpolant_factories_lock = threading.Lock()


def register_interpolant_factory(
    phase: PhaseIndex,
    keyword: str,
    factory: InterpolantFactory,
) -> None:
    """
    Register a factory building the `phase` interpolant from `keyword`'s data.

    Factories registered later for the same phase take precedence. Registering
    the same keyword twice replaces the earlier factory.

    :param phase: `PhaseIndex.LIQUID` or `PhaseIndex.VAPOUR`
    :param keyword: Result-file keyword holding the tables
    :param factory: Callable taking `(keyword_data, init)` and returning a `PhaseInterpolant`
    """
    if phase not in _INTERPOLANT_FACTORIES:
        raise ValidationError(f"PVT interpolants exist for oil and gas only, got {phase}")

    with _interpolant_factories_lock:
        factories = [
            entry for entry in _INTERPOLANT_FACTORIES[phase] if entry[0] != keyword
        ]
        factories.insert(0, (keyword, factory))
        _INTERPOLANT_FACTORIES[phase] = factories


def _create_interpolant(
    phase: PhaseIndex, init: InitData
) -> typing.Optional[PhaseInterpolant]:
    with _interpolant_factories_lock:
        factories = list(_INTERPOLANT_FACTORIES[phase])

    for keyword, factory in factories:
        data = init.keyword(keyword)
        if data is None:
            continue
        logger.debug(f"Building {phase.value} PVT interpolant from {keyword!r}")
        return factory(data, init)

    logger.debug(f"Result set defines no {phase.value} PVT tables")
    return None


def create_oil_interpolant(init: InitData) -> typing.Optional[PhaseInterpolant]:
    """
    Build the oil (liquid phase) interpolant from `init`.

    :return: The interpolant, or None if the result set defines no oil PVT tables
    """
    return _create_interpolant(PhaseIndex.LIQUID, init)


def create_gas_interpolant(init: InitData) -> typing.Optional[PhaseInterpolant]:
    """
    Build the gas (vapour phase) interpolant from `init`.

    :return: The interpolant, or None if the result set defines no gas PVT tables
    """
    return _create_interpolant(PhaseIndex.VAPOUR, init)
