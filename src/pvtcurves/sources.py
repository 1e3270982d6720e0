"""Grid and initialization data sources consumed by the curve collection."""

import logging
import typing

import attrs
import numpy as np

from pvtcurves.types import UnitConvention

logger = logging.getLogger(__name__)

__all__ = ["InitData", "CellGrid", "ActiveCellGrid"]


def _as_convention(
    value: typing.Union[UnitConvention, int],
) -> typing.Union[UnitConvention, int]:
    try:
        return UnitConvention(value)
    except ValueError:
        # Left as-is, rejected when a unit system is requested for it
        return value


@attrs.frozen
class InitData:
    """
    Initialization data of a result set.

    Holds keyword data as read from the result file (e.g. 'PVTNUM', 'PVDO', 'PVDG')
    together with the unit convention the data is stored in.
    """

    keywords: typing.Mapping[str, typing.Any] = attrs.field(factory=dict)
    """Keyword name to keyword data."""
    unit_convention: typing.Union[UnitConvention, int] = attrs.field(
        default=UnitConvention.METRIC, converter=_as_convention
    )
    """Unit convention of the stored data."""

    def keyword(self, name: str) -> typing.Optional[typing.Any]:
        """
        Return the data stored for keyword `name`, or None if absent.

        :param name: Keyword name
        """
        return self.keywords.get(name)


@typing.runtime_checkable
class CellGrid(typing.Protocol):
    """Protocol for grids exposing per-active-cell data in linear order."""

    @property
    def num_cells(self) -> int:
        """Total number of active cells."""
        ...

    def raw_linearised_cell_data(
        self, init: InitData, keyword: str
    ) -> np.typing.NDArray[np.integer]:
        """
        Return integer data for `keyword`, one value per active cell.

        :param init: Initialization data source
        :param keyword: Keyword name
        :return: Array of length `num_cells`, or an empty array if the data is unavailable
        """
        ...


@attrs.frozen
class ActiveCellGrid:
    """A grid described solely by its number of active cells."""

    num_cells: int = attrs.field(validator=attrs.validators.ge(0))

    def raw_linearised_cell_data(
        self, init: InitData, keyword: str
    ) -> np.typing.NDArray[np.integer]:
        data = init.keyword(keyword)
        if data is None:
            return np.zeros(0, dtype=np.int64)

        data = np.asarray(data, dtype=np.int64).ravel()
        if data.size != self.num_cells:
            logger.warning(
                f"Keyword {keyword!r} holds {data.size} values but the grid has "
                f"{self.num_cells} active cells. Ignoring keyword."
            )
            return np.zeros(0, dtype=np.int64)
        return data
