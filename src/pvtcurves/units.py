"""Unit systems and conversion of physical quantities between them."""

import logging
import typing

import attrs
import numpy as np

from pvtcurves._precision import get_dtype
from pvtcurves.constants import c
from pvtcurves.errors import ValidationError
from pvtcurves.types import ArrayLike, OneDimensionalArray, Quantity, UnitConvention

if typing.TYPE_CHECKING:
    from pvtcurves.sources import InitData

logger = logging.getLogger(__name__)

__all__ = [
    "UnitSystem",
    "PhysicalQuantityConversion",
    "Convert",
    "create_unit_system",
    "internal_unit_conventions",
    "serialised_unit_conventions",
]


@attrs.frozen(eq=False)
class UnitSystem:
    """
    A system of units, described by how each supported physical quantity
    scales to its SI (strict, internal) equivalent.

    A value `v` expressed in this system equals `v * scales[q]` in SI units.
    """

    name: str
    """Human readable name of the unit system, e.g. 'FIELD'."""
    convention: UnitConvention
    """Result-file convention code this system corresponds to."""
    scales: typing.Mapping[Quantity, float] = attrs.field(repr=False)
    """Multiplicative factors taking values in this system to SI."""

    @scales.validator
    def _check_scales(self, attribute, value) -> None:
        missing = [q.value for q in Quantity if q not in value]
        if missing:
            raise ValidationError(
                f"Unit system '{self.name}' does not define scale factors for: {missing}"
            )
        for quantity, scale in value.items():
            if not np.isfinite(scale) or scale <= 0.0:
                raise ValidationError(
                    f"Scale factor for {quantity.value!r} in unit system "
                    f"'{self.name}' must be finite and positive, got {scale}"
                )

    def scale(self, quantity: Quantity) -> float:
        return self.scales[quantity]

    def to_si(self, quantity: Quantity, values: ArrayLike) -> OneDimensionalArray:
        """
        Convert values of `quantity` from this system to SI.

        :param quantity: Physical quantity the values represent
        :param values: Values expressed in this system
        :return: New array of values expressed in SI units
        """
        return np.asarray(values, dtype=get_dtype()) * self.scales[quantity]

    def from_si(self, quantity: Quantity, values: ArrayLike) -> OneDimensionalArray:
        """
        Convert SI values of `quantity` to this system.

        :param quantity: Physical quantity the values represent
        :param values: Values expressed in SI units
        :return: New array of values expressed in this system
        """
        return np.asarray(values, dtype=get_dtype()) / self.scales[quantity]


@attrs.frozen
class PhysicalQuantityConversion:
    """
    Conversion of a single physical quantity between two unit systems.

    Built fluently, `Convert.pressure().from_(native).to(internal)`, then applied
    to any number of value arrays.
    """

    quantity: Quantity
    source: typing.Optional[UnitSystem] = None
    target: typing.Optional[UnitSystem] = None

    def from_(self, usys: UnitSystem) -> "PhysicalQuantityConversion":
        return attrs.evolve(self, source=usys)

    def to(self, usys: UnitSystem) -> "PhysicalQuantityConversion":
        return attrs.evolve(self, target=usys)

    @property
    def factor(self) -> float:
        """Multiplicative factor taking values from `source` to `target`."""
        if self.source is None or self.target is None:
            raise ValidationError(
                f"Conversion of {self.quantity.value!r} needs both a source and a "
                "target unit system. Use `.from_(...)` and `.to(...)`."
            )
        return self.source.scale(self.quantity) / self.target.scale(self.quantity)

    def applied_to(self, values: ArrayLike) -> OneDimensionalArray:
        """
        Apply the conversion to `values`.

        The input is left untouched; a converted copy is returned.

        :param values: Values expressed in the source unit system
        :return: Values expressed in the target unit system
        """
        factor = self.factor
        converted = np.array(values, dtype=get_dtype(), copy=True)
        if factor != 1.0:
            converted *= factor
        return converted


class Convert:
    """Entry points for building `PhysicalQuantityConversion`s."""

    @staticmethod
    def quantity(quantity: Quantity) -> PhysicalQuantityConversion:
        return PhysicalQuantityConversion(quantity=quantity)

    @staticmethod
    def pressure() -> PhysicalQuantityConversion:
        return PhysicalQuantityConversion(quantity=Quantity.PRESSURE)

    @staticmethod
    def oil_fvf() -> PhysicalQuantityConversion:
        return PhysicalQuantityConversion(quantity=Quantity.OIL_FVF)

    @staticmethod
    def gas_fvf() -> PhysicalQuantityConversion:
        return PhysicalQuantityConversion(quantity=Quantity.GAS_FVF)

    @staticmethod
    def viscosity() -> PhysicalQuantityConversion:
        return PhysicalQuantityConversion(quantity=Quantity.VISCOSITY)

    @staticmethod
    def dissolved_gas_oil_ratio() -> PhysicalQuantityConversion:
        return PhysicalQuantityConversion(quantity=Quantity.DISSOLVED_GAS_OIL_RATIO)

    @staticmethod
    def vaporised_oil_gas_ratio() -> PhysicalQuantityConversion:
        return PhysicalQuantityConversion(quantity=Quantity.VAPORISED_OIL_GAS_RATIO)


def _si_scales() -> typing.Dict[Quantity, float]:
    return {quantity: 1.0 for quantity in Quantity}


def _metric_scales() -> typing.Dict[Quantity, float]:
    return {
        Quantity.PRESSURE: c.BAR_TO_PA,
        Quantity.OIL_FVF: 1.0,
        Quantity.GAS_FVF: 1.0,
        Quantity.VISCOSITY: c.CENTIPOISE_TO_PA_S,
        Quantity.DISSOLVED_GAS_OIL_RATIO: 1.0,
        Quantity.VAPORISED_OIL_GAS_RATIO: 1.0,
    }


def _field_scales() -> typing.Dict[Quantity, float]:
    return {
        Quantity.PRESSURE: c.PSI_TO_PA,
        Quantity.OIL_FVF: c.RB_PER_STB_TO_M3_PER_M3,
        Quantity.GAS_FVF: c.RB_PER_MSCF_TO_M3_PER_M3,
        Quantity.VISCOSITY: c.CENTIPOISE_TO_PA_S,
        Quantity.DISSOLVED_GAS_OIL_RATIO: c.SCF_PER_STB_TO_M3_PER_M3,
        Quantity.VAPORISED_OIL_GAS_RATIO: c.STB_PER_MSCF_TO_M3_PER_M3,
    }


def _lab_scales() -> typing.Dict[Quantity, float]:
    # Volumes are cm³ on both sides of every ratio, so only pressure and viscosity scale.
    return {
        Quantity.PRESSURE: c.ATM_TO_PA,
        Quantity.OIL_FVF: 1.0,
        Quantity.GAS_FVF: 1.0,
        Quantity.VISCOSITY: c.CENTIPOISE_TO_PA_S,
        Quantity.DISSOLVED_GAS_OIL_RATIO: 1.0,
        Quantity.VAPORISED_OIL_GAS_RATIO: 1.0,
    }


_UNIT_SYSTEM_SCALES: typing.Dict[
    UnitConvention, typing.Callable[[], typing.Dict[Quantity, float]]
] = {
    UnitConvention.SI: _si_scales,
    UnitConvention.METRIC: _metric_scales,
    UnitConvention.FIELD: _field_scales,
    UnitConvention.LAB: _lab_scales,
    UnitConvention.PVT_M: _lab_scales,
}

_UNIT_SYSTEM_NAMES: typing.Dict[UnitConvention, str] = {
    UnitConvention.SI: "SI",
    UnitConvention.METRIC: "METRIC",
    UnitConvention.FIELD: "FIELD",
    UnitConvention.LAB: "LAB",
    UnitConvention.PVT_M: "PVT-M",
}


def create_unit_system(
    convention: typing.Union[UnitConvention, int],
) -> UnitSystem:
    """
    Build the unit system for a result-file unit convention.

    Scale factors are read from the current constants context (`pvtcurves.c`).

    :param convention: Unit convention, or its integer code
    :return: The corresponding `UnitSystem`
    :raises ValidationError: If `convention` is not a known convention code
    """
    try:
        convention = UnitConvention(convention)
    except ValueError:
        raise ValidationError(
            f"Unsupported unit convention {convention!r}. Must be one of: "
            f"{[int(member) for member in UnitConvention]}"
        ) from None

    return UnitSystem(
        name=_UNIT_SYSTEM_NAMES[convention],
        convention=convention,
        scales=_UNIT_SYSTEM_SCALES[convention](),
    )


def internal_unit_conventions() -> UnitSystem:
    """Return the strict SI unit system used for all internal evaluations."""
    return create_unit_system(UnitConvention.SI)


def serialised_unit_conventions(init: "InitData") -> UnitSystem:
    """
    Return the unit system in which `init`'s data is stored.

    :param init: Initialization data source
    :return: The native unit system of the result set
    """
    usys = create_unit_system(init.unit_convention)
    logger.debug(f"Result set is stored in {usys.name} units")
    return usys
