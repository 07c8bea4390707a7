"""Neural network layers built on batched B-spline evaluation."""

from ._b_spline_layer import BSplineLayer

__all__ = [
    "BSplineLayer",
]
