"""Conversion of curves to and from plain (JSON-compatible) data."""

import typing

import cattrs
import numpy as np

from pvtcurves._precision import get_dtype
from pvtcurves.curves import Curve, Series
from pvtcurves.errors import ValidationError

__all__ = ["converter", "dump_curve", "load_curve"]


converter = cattrs.Converter()

converter.register_unstructure_hook(np.ndarray, lambda array: array.tolist())
converter.register_structure_hook(
    np.ndarray, lambda value, _: np.asarray(value, dtype=get_dtype())
)


def dump_curve(curve: Curve) -> typing.Dict[str, typing.Any]:
    """
    Convert `curve` to plain data.

    :param curve: Curve to convert
    :return: Dictionary with 'series' (list of {'x': [...], 'y': [...]}) and 'miscibility'
    """
    return converter.unstructure(curve)


def load_curve(data: typing.Mapping[str, typing.Any]) -> Curve:
    """
    Rebuild a curve from data produced by `dump_curve`.

    :raises ValidationError: If `data` does not describe a valid curve
    """
    try:
        return converter.structure(data, Curve)
    except cattrs.BaseValidationError as exc:
        raise ValidationError(f"Invalid curve data: {exc}") from exc
