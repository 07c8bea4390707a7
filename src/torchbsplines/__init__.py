"""torchbsplines: one-dimensional B-splines for Python floats and PyTorch tensors.

B-Splines
---------
BSpline
    B-spline over clamped knots: control points, evaluation, derivative.
b_spline_regular
    Create a B-spline with evenly spaced knots on [0, 1].
b_spline_derivative
    Compute derivatives of a B-spline.
Extrapolation
    Behavior outside the knots: zero, constant or linear.

Batched Evaluation
------------------
b_spline_basis
    Evaluate B-spline basis functions on tensors.
b_spline_evaluate
    Evaluate many B-splines on a batch of inputs.

Sampling
--------
BSplineSamples
    B-spline, derivative and basis sampled on a grid.
b_spline_sample
    Sample a B-spline for plotting.

Submodules
----------
nn
    ``BSplineLayer``, learnable B-splines as a ``torch.nn.Module``.
plotly
    ``plot_b_spline``, Plotly figures (requires the ``plot`` extra).

Exceptions
----------
SplineError
    Base exception for spline operations.
KnotError
    Invalid knot vector.
DegreeError
    Invalid degree.
ControlPointError
    Wrong number of control points.
ControlPointsNotSetError
    Evaluation before control points are set.
ShapeError
    Mismatched tensor dtypes or shapes in batched evaluation.
"""

from . import nn
from ._b_spline import (
    BSpline,
    BSplineSamples,
    b_spline_basis,
    b_spline_derivative,
    b_spline_evaluate,
    b_spline_regular,
    b_spline_sample,
)
from ._control_point_error import ControlPointError
from ._control_points_not_set_error import ControlPointsNotSetError
from ._degree_error import DegreeError
from ._extrapolation import DEFAULT_EXTRAPOLATION, Extrapolation
from ._knot_error import KnotError
from ._shape_error import ShapeError
from ._spline_error import SplineError

__all__ = [
    "BSpline",
    "BSplineSamples",
    "ControlPointError",
    "ControlPointsNotSetError",
    "DEFAULT_EXTRAPOLATION",
    "DegreeError",
    "Extrapolation",
    "KnotError",
    "ShapeError",
    "SplineError",
    "b_spline_basis",
    "b_spline_derivative",
    "b_spline_evaluate",
    "b_spline_regular",
    "b_spline_sample",
    "nn",
]

__version__ = "0.1.0"
