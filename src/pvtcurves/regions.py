"""PVT region (PVTNUM) lookup for active cells."""

import logging
import typing

import attrs
import numpy as np

from pvtcurves.errors import ValidationError
from pvtcurves.sources import CellGrid, InitData

logger = logging.getLogger(__name__)

__all__ = ["RegionTable", "pvtnum_vector"]


def _as_region_ids(values: typing.Any) -> np.typing.NDArray[np.integer]:
    region_ids = np.array(values, dtype=np.int64, copy=True).ravel()
    if region_ids.size and region_ids.min() < 1:
        raise ValidationError(
            f"PVT region identifiers are one-based, got minimum {region_ids.min()}"
        )
    region_ids.setflags(write=False)
    return region_ids


@attrs.frozen(eq=False)
class RegionTable:
    """
    One-based PVT region identifier for every active cell.

    Immutable after construction.
    """

    region_ids: np.typing.NDArray[np.integer] = attrs.field(converter=_as_region_ids)

    @classmethod
    def uniform(cls, num_cells: int) -> "RegionTable":
        """Table placing all `num_cells` cells in region 1."""
        return cls(region_ids=np.ones(num_cells, dtype=np.int64))

    def __len__(self) -> int:
        return self.region_ids.size

    def contains(self, cell: typing.Any) -> bool:
        """
        Whether `cell` is a valid active cell index into this table.

        Negative indices are never valid.
        """
        if isinstance(cell, bool) or not isinstance(cell, (int, np.integer)):
            return False
        return 0 <= int(cell) < self.region_ids.size

    def resolve(self, cell: int) -> int:
        """
        Return the one-based region identifier of active cell `cell`.

        Performs no bounds checking. Callers check `contains` first.
        """
        return int(self.region_ids[cell])

    @property
    def num_regions(self) -> int:
        return int(self.region_ids.max()) if self.region_ids.size else 0


def pvtnum_vector(grid: CellGrid, init: InitData) -> RegionTable:
    """
    Build the region table from the 'PVTNUM' keyword.

    Cells are placed in region 1 when the keyword is missing.

    :param grid: Grid providing linearised per-cell data
    :param init: Initialization data source
    :return: `RegionTable` with one entry per active cell
    """
    pvtnum = grid.raw_linearised_cell_data(init, "PVTNUM")
    if len(pvtnum) == 0:
        logger.debug(
            f"PVTNUM unavailable. Placing all {grid.num_cells} cells in PVT region 1"
        )
        return RegionTable.uniform(grid.num_cells)
    return RegionTable(region_ids=pvtnum)
