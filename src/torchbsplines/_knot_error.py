from ._spline_error import SplineError


class KnotError(SplineError, ValueError):
    """Raised for invalid knot vectors (too few, repeated, not increasing)."""

    pass
