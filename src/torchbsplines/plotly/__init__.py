"""Plotting B-splines with Plotly.

Figures show the B-spline and its control points. The first derivative and
every basis function are added as hidden traces that can be switched on from
the legend.
"""

from ._plot_b_spline import plot_b_spline

__all__ = [
    "plot_b_spline",
]
