"""
Two-column PVT curves and classification of their miscibility.

A curve is one or more `Series`. Miscible fluids produce one series per
fixed mixing-ratio value, immiscible fluids a single pressure-dependent series.
"""

import typing

import attrs
import numpy as np

from pvtcurves._precision import get_dtype
from pvtcurves.errors import ValidationError
from pvtcurves.types import ArrayLike, Miscibility, OneDimensionalArray

__all__ = ["Series", "Curve", "classify_curve"]


def _as_float_array(values: ArrayLike) -> OneDimensionalArray:
    array = np.array(values, dtype=get_dtype(), copy=True)
    if array.ndim != 1:
        raise ValidationError(
            f"Curve columns must be one-dimensional, got shape {array.shape}"
        )
    return array


@attrs.frozen(eq=False)
class Series:
    """A single two-column series of independent (x) and dependent (y) values."""

    x: np.ndarray = attrs.field(converter=_as_float_array)
    """Independent-axis values (pressure, or a mixing ratio for miscible gas)."""
    y: np.ndarray = attrs.field(converter=_as_float_array)
    """Dependent-axis values."""

    def __attrs_post_init__(self) -> None:
        if self.x.shape != self.y.shape:
            raise ValidationError(
                f"Series columns must have equal lengths, got {self.x.size} and {self.y.size}"
            )

    def __iter__(self) -> typing.Iterator[np.ndarray]:
        yield self.x
        yield self.y

    def __len__(self) -> int:
        return self.x.size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Series):
            return NotImplemented
        return np.array_equal(self.x, other.x) and np.array_equal(self.y, other.y)

    @property
    def is_empty(self) -> bool:
        return self.x.size == 0


SeriesLike = typing.Union[Series, typing.Tuple[ArrayLike, ArrayLike]]


def _as_series(value: SeriesLike) -> Series:
    if isinstance(value, Series):
        return value
    x, y = value
    return Series(x=x, y=y)


def _as_series_tuple(values: typing.Iterable[SeriesLike]) -> typing.Tuple[Series, ...]:
    return tuple(_as_series(value) for value in values)


@attrs.frozen(eq=False)
class Curve:
    """
    A PVT curve tagged with its miscibility.

    Behaves as a read-only sequence of `Series`. Immiscible curves hold at most
    one series, miscible curves hold more than one.
    """

    series: typing.Tuple[Series, ...] = attrs.field(converter=_as_series_tuple)
    miscibility: Miscibility = Miscibility.IMMISCIBLE

    def __attrs_post_init__(self) -> None:
        if self.miscibility is Miscibility.IMMISCIBLE and len(self.series) > 1:
            raise ValidationError(
                f"Immiscible curves hold at most one series, got {len(self.series)}"
            )
        if self.miscibility is Miscibility.MISCIBLE and len(self.series) < 2:
            raise ValidationError(
                f"Miscible curves hold more than one series, got {len(self.series)}"
            )

    @classmethod
    def immiscible(cls, series: SeriesLike) -> "Curve":
        return cls(series=(series,), miscibility=Miscibility.IMMISCIBLE)

    @classmethod
    def miscible(cls, series: typing.Iterable[SeriesLike]) -> "Curve":
        return cls(series=series, miscibility=Miscibility.MISCIBLE)

    @classmethod
    def empty(cls) -> "Curve":
        """
        The empty-result sentinel: an immiscible curve with exactly one empty series.

        Returned for invalid requests and for phases the result set does not define.
        """
        return cls.immiscible(Series(x=(), y=()))

    @property
    def is_miscible(self) -> bool:
        return self.miscibility is Miscibility.MISCIBLE

    @property
    def is_empty(self) -> bool:
        """Whether the curve carries no values at all."""
        return all(series.is_empty for series in self.series)

    def map(
        self,
        x: typing.Callable[[np.ndarray], np.ndarray],
        y: typing.Callable[[np.ndarray], np.ndarray],
    ) -> "Curve":
        """
        Return a new curve of the same miscibility with `x` and `y` applied
        to the respective columns of every series.
        """
        return Curve(
            series=tuple(Series(x=x(s.x), y=y(s.y)) for s in self.series),
            miscibility=self.miscibility,
        )

    def __len__(self) -> int:
        return len(self.series)

    def __iter__(self) -> typing.Iterator[Series]:
        return iter(self.series)

    def __getitem__(self, index: int) -> Series:
        return self.series[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Curve):
            return NotImplemented
        return self.miscibility is other.miscibility and self.series == other.series


def classify_curve(
    raw: typing.Union[Curve, typing.Sequence[SeriesLike]],
) -> Curve:
    """
    Tag a raw curve with its miscibility.

    Interpolants that return a `Curve` are trusted as-is. Plain sequences of
    series are classified by cardinality: more than one series means the
    curve varies with a secondary mixing-ratio axis, i.e. the fluid is miscible.

    :param raw: `Curve` or sequence of `(x, y)` pairs
    :return: The tagged `Curve`
    """
    if isinstance(raw, Curve):
        return raw

    series = _as_series_tuple(raw)
    if not series:
        return Curve.empty()
    if len(series) > 1:
        return Curve(series=series, miscibility=Miscibility.MISCIBLE)
    return Curve(series=series, miscibility=Miscibility.IMMISCIBLE)
