from ._spline_error import SplineError


class ControlPointError(SplineError, ValueError):
    """Raised when the number of control points does not match the knots."""

    pass
