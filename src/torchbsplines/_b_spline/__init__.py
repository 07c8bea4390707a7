from ._b_spline import BSpline
from ._b_spline_basis import b_spline_basis
from ._b_spline_derivative import b_spline_derivative
from ._b_spline_evaluate import b_spline_evaluate
from ._b_spline_regular import b_spline_regular
from ._b_spline_sample import BSplineSamples, b_spline_sample

__all__ = [
    "BSpline",
    "BSplineSamples",
    "b_spline_basis",
    "b_spline_derivative",
    "b_spline_evaluate",
    "b_spline_regular",
    "b_spline_sample",
]
