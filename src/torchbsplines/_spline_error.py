class SplineError(Exception):
    """Base exception for B-spline operations."""

    pass
