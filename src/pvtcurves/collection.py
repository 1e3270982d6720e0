"""
Per-cell access to tabulated and point-evaluated PVT properties of a result set.
"""

import logging
import threading
import typing

import numpy as np

from pvtcurves._precision import get_dtype
from pvtcurves.config import Config
from pvtcurves.conversions import (
    DYNAMIC_PROPERTY_QUANTITIES,
    MIX_RATIO_QUANTITIES,
    convert_curve,
)
from pvtcurves.curves import Curve
from pvtcurves.errors import InternalLogicError, ValidationError
from pvtcurves.interpolants import (
    PhaseInterpolant,
    create_gas_interpolant,
    create_oil_interpolant,
)
from pvtcurves.properties import PHASE_PROPERTY_EVALUATORS, raw_pvt_curve
from pvtcurves.regions import RegionTable, pvtnum_vector
from pvtcurves.sources import CellGrid, InitData
from pvtcurves.types import ArrayLike, OneDimensionalArray, PhaseIndex, RawCurve
from pvtcurves.units import (
    Convert,
    UnitSystem,
    internal_unit_conventions,
    serialised_unit_conventions,
)

logger = logging.getLogger(__name__)

__all__ = ["PVTCurveCollection"]

_SUPPORTED_PHASES = (PhaseIndex.LIQUID, PhaseIndex.VAPOUR)
_DYNAMIC_PROPERTIES = (RawCurve.FVF, RawCurve.VISCOSITY)


class PVTCurveCollection:
    """
    PVT curves (FVF, viscosity, saturated state) of the oil and gas phases
    for the active cells of a result set.

    Curves and properties are evaluated in strict SI units and converted to the
    configured output unit system, if any. Invalid requests (unsupported phase,
    cell index out of range, phase not defined by the result set) produce
    empty results rather than errors, so callers may iterate over many cells
    without per-cell error handling.

    Queries are safe to run concurrently. `set_output_units` swaps the query
    configuration atomically; each query uses the configuration in effect when
    it starts.
    """

    def __init__(self, grid: CellGrid, init: InitData) -> None:
        """
        Build the collection from a grid and its initialization data.

        :param grid: Grid providing per-active-cell data
        :param init: Initialization data source holding PVT tables and region numbers
        """
        self._region_table = pvtnum_vector(grid, init)
        self._gas: typing.Optional[PhaseInterpolant] = create_gas_interpolant(init)
        self._oil: typing.Optional[PhaseInterpolant] = create_oil_interpolant(init)
        self._native_units = serialised_unit_conventions(init)
        self._internal_units = internal_unit_conventions()
        self._config = Config()
        self._config_lock = threading.Lock()
        self._check_region_coverage()

        logger.info(
            f"PVT curve collection: {len(self._region_table)} active cells in "
            f"{self._region_table.num_regions} region(s), "
            f"oil={'yes' if self._oil is not None else 'no'}, "
            f"gas={'yes' if self._gas is not None else 'no'}, "
            f"native units={self._native_units.name}"
        )

    def _check_region_coverage(self) -> None:
        for phase in _SUPPORTED_PHASES:
            interpolant = self._interpolant(phase)
            # Interpolants are not required to report their region count
            num_regions = getattr(interpolant, "num_regions", None)
            if num_regions is None:
                continue
            if self._region_table.num_regions > num_regions:
                raise ValidationError(
                    f"PVTNUM refers to region {self._region_table.num_regions} but the "
                    f"{phase.value} PVT tables define {num_regions} region(s)"
                )

    @property
    def region_table(self) -> RegionTable:
        return self._region_table

    @property
    def num_cells(self) -> int:
        return len(self._region_table)

    @property
    def native_units(self) -> UnitSystem:
        """Unit system the result set is stored in."""
        return self._native_units

    @property
    def internal_units(self) -> UnitSystem:
        """Strict SI unit system used for all evaluations."""
        return self._internal_units

    @property
    def config(self) -> Config:
        return self._config

    @property
    def output_units(self) -> typing.Optional[UnitSystem]:
        return self._config.output_units

    def set_output_units(self, usys: typing.Optional[UnitSystem]) -> None:
        """
        Install, or clear with None, the unit system of all subsequent query results.

        :param usys: Requested output unit system, or None for strict SI
        """
        with self._config_lock:
            self._config = self._config.with_output_units(usys)
        logger.debug(
            f"Output units set to {usys.name if usys is not None else 'SI (internal)'}"
        )

    def is_valid_request(self, phase: PhaseIndex, cell: int) -> bool:
        """
        Whether `phase` carries PVT curves and `cell` is a valid active cell index.

        :param phase: Requested phase
        :param cell: Zero-based active cell index
        """
        if phase not in _SUPPORTED_PHASES:
            return False
        return self._region_table.contains(cell)

    def _is_valid_property_request(
        self, property: RawCurve, phase: PhaseIndex, cell: int
    ) -> bool:
        if property is RawCurve.SATURATED_STATE:
            return False
        if property not in _DYNAMIC_PROPERTIES:
            raise InternalLogicError(f"Unrecognised dynamic property {property!r}")
        return self.is_valid_request(phase, cell)

    def _region_index(self, cell: int) -> int:
        # PVTNUM is one-based
        return self._region_table.resolve(cell) - 1

    def _interpolant(self, phase: PhaseIndex) -> typing.Optional[PhaseInterpolant]:
        if phase is PhaseIndex.LIQUID:
            return self._oil
        return self._gas

    def get_pvt_curve(self, curve: RawCurve, phase: PhaseIndex, cell: int) -> Curve:
        """
        Return the tabulated PVT curve of `phase` in the region of active cell `cell`.

        Miscible curves hold one series per tabulated mixing ratio.

        :param curve: Raw curve kind
        :param phase: `PhaseIndex.LIQUID` (oil) or `PhaseIndex.VAPOUR` (gas)
        :param cell: Zero-based active cell index
        :return: The curve in output units, or `Curve.empty()` for invalid requests
            and phases the result set does not define
        """
        config = self._config
        if not self.is_valid_request(phase, cell):
            logger.debug(f"Invalid PVT curve request: phase={phase!r}, cell={cell!r}")
            return Curve.empty()

        graph = raw_pvt_curve(self._interpolant(phase), curve, self._region_index(cell))
        return self._convert_to_output_units(graph, curve, phase, config)

    def get_dynamic_property_si(
        self,
        property: RawCurve,
        phase: PhaseIndex,
        cell: int,
        pressure: ArrayLike,
        mix_ratio: ArrayLike = (),
    ) -> OneDimensionalArray:
        """
        Evaluate FVF or viscosity at explicit pressures and mixing ratios,
        with inputs and outputs in strict SI units.

        :param property: `RawCurve.FVF` or `RawCurve.VISCOSITY`
        :param phase: `PhaseIndex.LIQUID` (oil) or `PhaseIndex.VAPOUR` (gas)
        :param cell: Zero-based active cell index; all values use its region
        :param pressure: Phase pressures [Pa]
        :param mix_ratio: Rs for oil or Rv for gas [m³/m³]. Empty means zero everywhere.
        :return: One value per pressure, or an empty array for invalid requests
        """
        if not self._is_valid_property_request(property, phase, cell):
            logger.debug(
                f"Invalid dynamic property request: property={property!r}, "
                f"phase={phase!r}, cell={cell!r}"
            )
            return np.zeros(0, dtype=get_dtype())

        evaluate = PHASE_PROPERTY_EVALUATORS[phase]
        return evaluate(
            self._interpolant(phase),
            property,
            self._region_index(cell),
            pressure,
            mix_ratio,
        )

    def get_dynamic_property_native(
        self,
        property: RawCurve,
        phase: PhaseIndex,
        cell: int,
        pressure: ArrayLike,
        mix_ratio: ArrayLike = (),
    ) -> OneDimensionalArray:
        """
        Evaluate FVF or viscosity with inputs in the result set's native units.

        Inputs are converted to SI, evaluated, and the result converted to the
        output unit system if one is set (returned in SI otherwise).

        :param property: `RawCurve.FVF` or `RawCurve.VISCOSITY`
        :param phase: `PhaseIndex.LIQUID` (oil) or `PhaseIndex.VAPOUR` (gas)
        :param cell: Zero-based active cell index; all values use its region
        :param pressure: Phase pressures in native units
        :param mix_ratio: Rs for oil or Rv for gas in native units. Empty means zero everywhere.
        :return: One value per pressure, or an empty array for invalid requests
        """
        config = self._config
        if not self._is_valid_property_request(property, phase, cell):
            logger.debug(
                f"Invalid dynamic property request: property={property!r}, "
                f"phase={phase!r}, cell={cell!r}"
            )
            return np.zeros(0, dtype=get_dtype())

        # 1) Native -> SI
        pressure = (
            Convert.pressure()
            .from_(self._native_units)
            .to(self._internal_units)
            .applied_to(pressure)
        )
        mix_ratio = (
            Convert.quantity(MIX_RATIO_QUANTITIES[phase])
            .from_(self._native_units)
            .to(self._internal_units)
            .applied_to(mix_ratio)
        )

        # 2) Evaluate in SI
        values = self.get_dynamic_property_si(property, phase, cell, pressure, mix_ratio)

        # 3) SI -> output
        if config.output_units is None:
            return values

        return (
            Convert.quantity(DYNAMIC_PROPERTY_QUANTITIES[(property, phase)])
            .from_(self._internal_units)
            .to(config.output_units)
            .applied_to(values)
        )

    def _convert_to_output_units(
        self, graph: Curve, curve: RawCurve, phase: PhaseIndex, config: Config
    ) -> Curve:
        if config.output_units is None:
            return graph
        return convert_curve(
            graph,
            curve_kind=curve,
            phase=phase,
            usys_from=self._internal_units,
            usys_to=config.output_units,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(num_cells={self.num_cells}, "
            f"native_units={self._native_units.name!r}, "
            f"output_units={self.output_units.name if self.output_units else None!r})"
        )
