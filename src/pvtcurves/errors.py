__all__ = ["PVTCurvesError", "ValidationError", "InternalLogicError"]


class PVTCurvesError(Exception):
    """Base class for all pvtcurves-related errors."""

    pass


class ValidationError(PVTCurvesError, ValueError):
    """Raised when input data fails validation checks."""

    pass


class InternalLogicError(PVTCurvesError):
    """
    Raised when a value that cannot occur under correct enum usage reaches
    a dispatch point (e.g. an unrecognised raw curve kind).

    Signals a programming defect, not a data condition.
    """

    pass
