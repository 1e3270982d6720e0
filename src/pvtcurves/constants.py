"""Conversion factors between the unit conventions found in result files"""

from contextvars import ContextVar
import typing

import attrs


__all__ = ["Constant", "Constants", "c", "ConstantsContext"]


@attrs.frozen(slots=True)
class Constant:
    """
    A constant value with optional description and metadata.

    Wraps a constant value with context about what it represents and its units.
    """

    value: typing.Any
    """The actual value of the constant."""

    description: typing.Optional[str] = None
    """Optional description of what this constant represents."""

    unit: typing.Optional[str] = None
    """Optional unit of measurement for this constant."""


_STB_TO_M3 = 0.158987294928
_SCF_TO_SCM = 0.028316846592

DEFAULT_CONSTANTS: typing.Dict[str, Constant] = {
    # Pressure Conversions
    "PSI_TO_PA": Constant(
        value=6894.757293168361,
        description="Conversion factor from psi to Pascals",
        unit="Pa/psi",
    ),
    "BAR_TO_PA": Constant(
        value=1.0e5, description="Conversion factor from bar to Pascals", unit="Pa/bar"
    ),
    "ATM_TO_PA": Constant(
        value=101325.0,
        description="Conversion factor from standard atmospheres to Pascals",
        unit="Pa/atm",
    ),
    # Viscosity Conversions
    "CENTIPOISE_TO_PA_S": Constant(
        value=0.001,
        description="Conversion factor from centipoise to Pascal-seconds",
        unit="Pa·s/cP",
    ),
    # Volume Conversions
    "STB_TO_M3": Constant(
        value=_STB_TO_M3,
        description="Conversion factor from stock tank barrels to cubic meters",
        unit="m³/STB",
    ),
    "SCF_TO_SCM": Constant(
        value=_SCF_TO_SCM,
        description="Conversion factor from standard cubic feet to standard cubic meters",
        unit="m³/scf",
    ),
    # Gas-Oil Ratio Conversions
    "SCF_PER_STB_TO_M3_PER_M3": Constant(
        value=_SCF_TO_SCM / _STB_TO_M3,
        description="Conversion factor from scf/STB to m³/m³ (dissolved gas-oil ratio)",
        unit="(m³/m³)/(scf/STB)",
    ),
    "STB_PER_MSCF_TO_M3_PER_M3": Constant(
        value=_STB_TO_M3 / (1000.0 * _SCF_TO_SCM),
        description="Conversion factor from STB/Mscf to m³/m³ (vaporised oil-gas ratio)",
        unit="(m³/m³)/(STB/Mscf)",
    ),
    # Formation Volume Factor Conversions
    "RB_PER_STB_TO_M3_PER_M3": Constant(
        value=1.0,
        description="Conversion factor from RB/STB to m³/m³ (oil formation volume factor)",
        unit="(m³/m³)/(RB/STB)",
    ),
    "RB_PER_MSCF_TO_M3_PER_M3": Constant(
        value=_STB_TO_M3 / (1000.0 * _SCF_TO_SCM),
        description="Conversion factor from RB/Mscf to m³/m³ (gas formation volume factor)",
        unit="(m³/m³)/(RB/Mscf)",
    ),
}


class Constants:
    """
    Conversion factors used to build unit systems.

    All constants are stored in an internal dictionary and can be accessed via dot notation.
    Assigning a raw value wraps it in a `Constant`.
    """

    __slots__ = ("_store",)

    def __new__(cls) -> "Constants":
        instance = super().__new__(cls)
        instance._store = {}
        return instance

    def __init__(self) -> None:
        self._store.update(DEFAULT_CONSTANTS)

    def __getattr__(self, name: str) -> typing.Any:
        """Get a constant's value using dot notation.

        :param name: Name of the constant
        :return: Value of the constant (unwrapped from Constant object)
        :raises AttributeError: If the constant does not exist
        """
        if name.startswith("_"):
            return object.__getattribute__(self, name)

        try:
            return self._store[name].value
        except KeyError:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            ) from None

    def __setattr__(self, name: str, value: typing.Union[typing.Any, Constant]) -> None:
        """Set a constant value using dot notation.

        Accepts either a raw value (which will be wrapped in a Constant) or a Constant object.
        """
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        elif isinstance(value, Constant):
            self._store[name] = value
        else:
            self._store[name] = Constant(value=value)

    def __call__(self) -> "ConstantsContext":
        """
        Create a context manager that, within its context, overrides the constants
        accessed through the global proxy `pvtcurves.c` with this `Constants` instance.

        :return: `ConstantsContext` for temporary overrides
        """
        return ConstantsContext(self)


_constants_context: ContextVar[Constants] = ContextVar(
    "constants_context", default=Constants()
)


class ConstantsContext:
    """
    Context manager for temporary global `Constants` overrides.

    Upon exiting the context, the previous `Constants` instance is restored.
    """

    def __init__(self, constants: Constants) -> None:
        self._new_constants = constants
        self._token = None

    def __enter__(self) -> Constants:
        self._token = _constants_context.set(self._new_constants)
        return self._new_constants

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if self._token is not None:
            _constants_context.reset(self._token)


class _ConstantsProxy:
    """
    Proxy class to access the current context's `Constants` instance.

    Override the current `Constants` instance using the `ConstantsContext` context manager.
    """

    @property
    def _constants(self) -> Constants:
        return _constants_context.get()

    def __getattr__(self, name: str) -> typing.Any:
        return getattr(self._constants, name)


c = _ConstantsProxy()
"""Global proxy to access conversion factors."""

