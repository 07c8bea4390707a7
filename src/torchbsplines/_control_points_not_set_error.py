from ._spline_error import SplineError


class ControlPointsNotSetError(SplineError, RuntimeError):
    """Raised when evaluating a B-spline before its control points are set."""

    pass
