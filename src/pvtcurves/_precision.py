from contextlib import contextmanager
from contextvars import ContextVar

import numpy as np


__all__ = [
    "get_dtype",
    "set_dtype",
    "with_precision",
]

_pvtcurves_dtype: ContextVar[np.typing.DTypeLike] = ContextVar(
    "_pvtcurves_dtype", default=np.float64
)


def get_dtype() -> np.typing.DTypeLike:
    """
    Get the current data type used for property values and curves.

    :return: The current data type.
    """
    return _pvtcurves_dtype.get()


def set_dtype(dtype: np.typing.DTypeLike) -> None:
    """
    Set the default data type for property values and curves in the current context.

    :param dtype: The data type to set as default.
    """
    _pvtcurves_dtype.set(dtype)


@contextmanager
def with_precision(dtype: np.typing.DTypeLike):
    """
    Context manager to temporarily set the data type, and hence the precision of returned values.

    :param dtype: The data type to set within the context.
    """
    token = _pvtcurves_dtype.set(dtype)
    try:
        yield
    finally:
        _pvtcurves_dtype.reset(token)
