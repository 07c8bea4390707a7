from .._control_point_error import ControlPointError
from .._degree_error import DegreeError
from ._b_spline import BSpline


def b_spline_regular(degree: int, num_control_points: int) -> BSpline:
    """
    Create a B-spline with evenly spaced knots for a number of control points.

    Parameters
    ----------
    degree : int
        Polynomial degree.
    num_control_points : int
        Number of control points, at least ``degree + 1``.

    Returns
    -------
    spline : BSpline
        B-spline with ``num_control_points - degree + 1`` knots evenly spaced
        on [0, 1]. Its control points still need to be set.

    Raises
    ------
    ControlPointError
        If num_control_points < degree + 1.

    Examples
    --------
    >>> spline = b_spline_regular(3, 6)
    >>> spline.knots
    (0.0, 0.3333333333333333, 0.6666666666666666, 1.0)
    >>> spline.num_control_points
    6
    """
    if isinstance(degree, bool) or not isinstance(degree, int) or degree < 0:
        raise DegreeError(f"Degree must be a non-negative integer, got {degree!r}")
    if num_control_points < degree + 1:
        raise ControlPointError(
            f"Need at least degree + 1 = {degree + 1} control points, "
            f"got {num_control_points}"
        )

    num_knots = num_control_points - degree + 1
    knots = [i / (num_knots - 1) for i in range(num_knots)]
    return BSpline(degree, knots)
