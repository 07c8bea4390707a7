from __future__ import annotations

from typing import TYPE_CHECKING

import plotly.graph_objects as go

from .._b_spline import b_spline_sample

if TYPE_CHECKING:
    from .._b_spline import BSpline


def plot_b_spline(
    spline: BSpline,
    num_points: int = 1000,
    margin: float = 0.1,
    title: str = "B-spline",
) -> go.Figure:
    """Build a Plotly figure of a B-spline.

    Parameters
    ----------
    spline : BSpline
        B-spline with control points set.
    num_points : int, optional
        Number of samples of the curve. Default is 1000.
    margin : float, optional
        Range plotted beyond the knots, as a fraction of the knot range.
        Default is 0.1, which shows how the curve extrapolates.
    title : str, optional
        Figure title.

    Returns
    -------
    fig : plotly.graph_objects.Figure
        Call ``fig.show()`` to display it, also inside a notebook.
    """
    samples = b_spline_sample(spline, num_points=num_points, margin=margin)
    x = samples.x.tolist()

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=samples.control_points_x.tolist(),
            y=samples.control_points.tolist(),
            mode="markers",
            name="Control points",
            marker=dict(size=10, color="red"),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=x,
            y=samples.y.tolist(),
            mode="lines",
            name="B-spline",
            line=dict(width=2),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=x,
            y=samples.derivative.tolist(),
            mode="lines",
            name="1st derivative",
            line=dict(width=2),
            visible="legendonly",
        )
    )
    control_points = samples.control_points.tolist()
    for i in range(samples.basis.shape[1]):
        fig.add_trace(
            go.Scatter(
                x=x,
                y=samples.basis[:, i].tolist(),
                mode="lines",
                name=(
                    f"Basis(idx={i}, control[idx]={control_points[i]:f}, "
                    f"degree={samples.degree})"
                ),
                line=dict(width=0.5),
                visible="legendonly",
            )
        )
    fig.update_layout(title=title, showlegend=True)
    return fig
