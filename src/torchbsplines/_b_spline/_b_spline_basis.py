from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import torch
from torch import Tensor

from .._degree_error import DegreeError
from .._shape_error import ShapeError

if TYPE_CHECKING:
    from ._b_spline import BSpline


def b_spline_basis(
    spline: BSpline,
    x: Tensor,
    degree: Optional[int] = None,
) -> Tensor:
    """
    Evaluate all B-spline basis functions of a degree using Cox-de Boor recursion.

    Parameters
    ----------
    spline : BSpline
        B-spline providing the expanded knots. Its control points are not used.
    x : Tensor
        Evaluation points, shape (*query_shape). Must be floating point.
    degree : int, optional
        Degree of the basis functions. Defaults to ``spline.degree``.

    Returns
    -------
    basis : Tensor
        Shape (*query_shape, n_basis) where n_basis = n_expanded_knots - degree - 1.
        For the spline's own degree n_basis equals ``spline.num_control_points``.

    Raises
    ------
    DegreeError
        If degree is negative or too high for the expanded knots.
    ShapeError
        If x is not floating point.

    Notes
    -----
    For degree 0:
        B_{i,0}(x) = 1 if t_i <= x < t_{i+1}, else 0

    For degree k > 0:
        B_{i,k}(x) = ((x - t_i) / (t_{i+k} - t_i)) * B_{i,k-1}(x)
                   + ((t_{i+k+1} - x) / (t_{i+k+1} - t_{i+1})) * B_{i+1,k-1}(x)

    Terms with a zero knot difference (0/0 at the clamped ends) are 0.

    Each degree level is computed once for every basis index and every query
    point with whole-tensor operations, and the next level is built from it.
    Points outside [t_0, t_last) get all-zero basis values; extrapolation is
    handled by :func:`b_spline_evaluate`.
    """
    if degree is None:
        degree = spline.degree
    if not x.is_floating_point():
        raise ShapeError(f"x must be floating point, got dtype {x.dtype}")

    knots = torch.as_tensor(spline.expanded_knots, dtype=x.dtype, device=x.device)
    n_knots = knots.shape[0]

    if degree < 0:
        raise DegreeError(f"Degree must be non-negative, got {degree}")
    if n_knots < degree + 2:
        raise DegreeError(
            f"Need at least {degree + 2} knots for degree {degree}, got {n_knots}"
        )

    x_expanded = x.unsqueeze(-1)  # (*query_shape, 1)

    # Degree 0: shape (*query_shape, n_knots - 1)
    basis = ((x_expanded >= knots[:-1]) & (x_expanded < knots[1:])).to(
        dtype=x.dtype
    )

    for k in range(1, degree + 1):
        # knots_delta[i] = t_{i+k} - t_i, shape (n_knots - k,).
        # The left term uses knots_delta[i], the right term knots_delta[i+1].
        knots_delta = knots[k:] - knots[:-k]
        delta_is_zero = knots_delta == 0
        knots_delta = torch.where(
            delta_is_zero, torch.ones_like(knots_delta), knots_delta
        )

        weights_left = (x_expanded - knots[: -k - 1]) / knots_delta[:-1]
        weights_left = weights_left.masked_fill(delta_is_zero[:-1], 0.0)

        weights_right = (knots[k + 1 :] - x_expanded) / knots_delta[1:]
        weights_right = weights_right.masked_fill(delta_is_zero[1:], 0.0)

        # shape (*query_shape, n_knots - k - 1)
        basis = weights_left * basis[..., :-1] + weights_right * basis[..., 1:]

    return basis
