import typing

import attrs

from pvtcurves.units import UnitSystem

__all__ = ["Config"]


@attrs.frozen(eq=False)
class Config:
    """Query configuration of a PVT curve collection."""

    output_units: typing.Optional[UnitSystem] = None
    """
    Unit system of returned curves and property values.

    None means values are returned in strict SI (internal) units.
    """

    def with_output_units(self, usys: typing.Optional[UnitSystem]) -> "Config":
        return attrs.evolve(self, output_units=usys)
