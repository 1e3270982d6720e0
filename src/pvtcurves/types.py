import enum
import typing

import numpy as np
from typing_extensions import TypeAlias


__all__ = [
    "PhaseIndex",
    "RawCurve",
    "Miscibility",
    "Quantity",
    "UnitConvention",
    "ArrayLike",
    "OneDimensionalArray",
]

Numeric = typing.Union[int, float, np.floating, np.integer]

OneDimensionalArray: TypeAlias = np.typing.NDArray[np.floating]
"""1D array of property values"""

ArrayLike: TypeAlias = typing.Union[
    OneDimensionalArray, typing.Sequence[Numeric], typing.Iterable[Numeric]
]
"""Anything `numpy.asarray` accepts as a one-dimensional sequence of numbers"""


class PhaseIndex(enum.Enum):
    """
    Enum representing the fluid phases present in a result set.

    Only `LIQUID` (oil) and `VAPOUR` (gas) carry PVT curves.
    """

    AQUA = "water"
    LIQUID = "oil"
    VAPOUR = "gas"


class RawCurve(enum.Enum):
    """Enum selecting which tabulated property a PVT curve describes."""

    FVF = "fvf"
    """Formation volume factor"""
    VISCOSITY = "viscosity"
    SATURATED_STATE = "saturated_state"
    """Saturated mixing ratio (Rs for oil, Rv for gas) as a function of pressure"""


class Miscibility(enum.Enum):
    """Whether a curve varies with a secondary mixing-ratio axis."""

    IMMISCIBLE = "immiscible"
    MISCIBLE = "miscible"


class Quantity(enum.Enum):
    """Physical quantities the unit systems know how to convert."""

    PRESSURE = "pressure"
    OIL_FVF = "oil_fvf"
    GAS_FVF = "gas_fvf"
    VISCOSITY = "viscosity"
    DISSOLVED_GAS_OIL_RATIO = "dissolved_gas_oil_ratio"
    VAPORISED_OIL_GAS_RATIO = "vaporised_oil_gas_ratio"


class UnitConvention(enum.IntEnum):
    """
    Unit conventions as encoded in result-file headers.

    `SI` never appears in result files. It is the internal reference system.
    """

    SI = 0
    METRIC = 1
    FIELD = 2
    LAB = 3
    PVT_M = 4
