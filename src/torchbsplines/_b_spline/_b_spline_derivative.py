from .._degree_error import DegreeError
from ._b_spline import BSpline


def b_spline_derivative(spline: BSpline, order: int = 1) -> BSpline:
    """
    Differentiate a B-spline ``order`` times.

    Parameters
    ----------
    spline : BSpline
        B-spline with control points set. It is not modified.
    order : int
        How many times to differentiate, between 1 and ``spline.degree``.
        Default is 1.

    Returns
    -------
    derivative : BSpline
        New B-spline of degree ``spline.degree - order`` with
        ``spline.num_control_points - order`` control points.

    Raises
    ------
    ValueError
        If order is less than 1.
    DegreeError
        If order exceeds the degree, which would leave no polynomial to
        differentiate.
    ControlPointsNotSetError
        If the spline has no control points.

    Notes
    -----
    The knots given at construction are shared by every derivative; only the
    clamping repeats shrink with the degree.

    Extrapolation is remapped at every order. A linearly extrapolated spline
    has a first derivative extrapolated as a constant (the end slopes), and
    every higher derivative extrapolated as zero. Zero and constant
    extrapolation give zero from the first derivative on.

    Examples
    --------
    >>> spline = b_spline_regular(3, 6).with_control_points(
    ...     [1.0, 0.0, 1.0, 1.0, 0.0, -1.0]
    ... ).with_extrapolation("linear")
    >>> second = b_spline_derivative(spline, 2)
    >>> second.degree, second.extrapolation.value
    (1, 'zero')
    """
    if order < 1:
        raise ValueError(f"order must be at least 1, got {order}")
    if order > spline.degree:
        raise DegreeError(
            f"A degree-{spline.degree} B-spline has no derivative of order {order}"
        )

    derivative = spline
    for _ in range(order):
        derivative = derivative.derivative()
    return derivative
