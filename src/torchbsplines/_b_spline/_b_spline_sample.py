"""Sampling a B-spline over its knot range, for plotting."""

import torch
from tensordict.tensorclass import tensorclass
from torch import Tensor

from ._b_spline import BSpline


@tensorclass
class BSplineSamples:
    """A B-spline sampled on a regular grid.

    Attributes
    ----------
    x : Tensor
        Sample positions, shape (num_points,).
    y : Tensor
        Spline values at x, shape (num_points,).
    derivative : Tensor
        First derivative at x, shape (num_points,). Zero for degree-0 splines,
        whose derivative vanishes between knots.
    basis : Tensor
        Basis function values at x, shape (num_points, num_control_points).
    control_points_x : Tensor
        x-coordinate of each control point, shape (num_control_points,).
    control_points : Tensor
        Control points, shape (num_control_points,).
    degree : int
        Degree of the sampled spline (stored as metadata, not tensor).
    """

    x: Tensor
    y: Tensor
    derivative: Tensor
    basis: Tensor
    control_points_x: Tensor
    control_points: Tensor
    degree: int


def b_spline_sample(
    spline: BSpline,
    num_points: int = 1000,
    margin: float = 0.1,
) -> BSplineSamples:
    """Sample a B-spline, its derivative and its basis functions.

    Parameters
    ----------
    spline : BSpline
        B-spline with control points set.
    num_points : int, optional
        Number of samples, at least 2. Default is 1000.
    margin : float, optional
        Extra range sampled on each side of the knots, as a fraction of the
        knot range. Non-negative. Default is 0.1, which shows how the curve
        extrapolates.

    Returns
    -------
    samples : BSplineSamples
        Samples at ``first + (last - first) * i / num_points`` for
        ``i = 0, ..., num_points - 1``, where [first, last] is the knot range
        widened by the margin.

    Raises
    ------
    ValueError
        If num_points < 2 or margin < 0.
    ControlPointsNotSetError
        If the spline has no control points.
    """
    if num_points < 2:
        raise ValueError(f"num_points must be at least 2, got {num_points}")
    if margin < 0:
        raise ValueError(f"margin must be non-negative, got {margin}")

    knots = spline.knots
    first, last = knots[0], knots[len(knots) - 1]
    delta = last - first
    first, last = first - margin * delta, last + margin * delta

    xs = [first + (last - first) * i / num_points for i in range(num_points)]
    y = [spline.evaluate(x) for x in xs]

    if spline.degree > 0:
        derivative = spline.derivative()
        derivative_values = [derivative.evaluate(x) for x in xs]
    else:
        derivative_values = [0.0] * num_points

    basis = [
        [
            spline.basis_function(i, spline.degree, x)
            for i in range(spline.num_control_points)
        ]
        for x in xs
    ]

    return BSplineSamples(
        x=torch.tensor(xs, dtype=torch.float64),
        y=torch.tensor(y, dtype=torch.float64),
        derivative=torch.tensor(derivative_values, dtype=torch.float64),
        basis=torch.tensor(basis, dtype=torch.float64),
        control_points_x=torch.tensor(
            spline.control_points_x(), dtype=torch.float64
        ),
        control_points=torch.tensor(spline.control_points, dtype=torch.float64),
        degree=spline.degree,
        batch_size=[],
    )
