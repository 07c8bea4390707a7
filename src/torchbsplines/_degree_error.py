from ._spline_error import SplineError


class DegreeError(SplineError, ValueError):
    """Raised when degree is invalid for operation."""

    pass
