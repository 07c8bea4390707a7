from __future__ import annotations

import warnings
from typing import TYPE_CHECKING, Optional, Union

import torch
from torch import Tensor

from .._control_point_error import ControlPointError
from .._control_points_not_set_error import ControlPointsNotSetError
from .._extrapolation import Extrapolation
from .._shape_error import ShapeError
from ._b_spline_basis import b_spline_basis

if TYPE_CHECKING:
    from ._b_spline import BSpline

_LOW_PRECISION_DTYPES = (torch.float16, torch.bfloat16)


def b_spline_evaluate(
    spline: BSpline,
    inputs: Union[Tensor, float],
    control_points: Optional[Tensor] = None,
) -> Tensor:
    """
    Evaluate a batch of B-splines sharing the knots of ``spline``.

    Parameters
    ----------
    spline : BSpline
        Provides degree, knots and extrapolation mode.
    inputs : Tensor
        Shape (batch_size, num_inputs). Each of the num_inputs values of an
        example gets its own B-splines. A scalar is treated as shape (1, 1).
    control_points : Tensor, optional
        Shape (num_inputs, num_outputs, num_control_points): one B-spline per
        (input, output) pair. Rank 1 is expanded to (1, 1, num_control_points).
        num_control_points must match ``spline.num_control_points``, and the
        dtype must match inputs. Defaults to the control points of ``spline``.

    Returns
    -------
    y : Tensor
        Shape (batch_size, num_outputs, num_inputs). If inputs was a scalar
        and num_outputs == 1, a scalar.

    Raises
    ------
    ShapeError
        If dtypes, ranks or dimensions of inputs and control points mismatch.
    ControlPointError
        If the last dimension of control_points is not ``spline.num_control_points``.
    ControlPointsNotSetError
        If control_points is omitted and the spline has none.

    Notes
    -----
    Values outside [t_0, t_last) follow ``spline.extrapolation`` exactly as
    :meth:`BSpline.evaluate` does, including extrapolation at x == t_last.

    The result is differentiable with respect to both inputs and control points.

    Examples
    --------
    >>> spline = b_spline_regular(3, 6)
    >>> control_points = torch.randn(2, 4, 6)  # 2 inputs, 4 outputs
    >>> b_spline_evaluate(spline, torch.rand(8, 2), control_points).shape
    torch.Size([8, 4, 2])
    """
    if control_points is None:
        if spline.control_points is None:
            raise ControlPointsNotSetError(
                "b_spline_evaluate() requires control_points, or a spline with "
                "control points set with BSpline.with_control_points()"
            )
        dtype = (
            inputs.dtype
            if isinstance(inputs, Tensor) and inputs.is_floating_point()
            else torch.get_default_dtype()
        )
        device = inputs.device if isinstance(inputs, Tensor) else None
        control_points = torch.tensor(
            spline.control_points, dtype=dtype, device=device
        )
    if not isinstance(inputs, Tensor):
        inputs = torch.as_tensor(
            inputs, dtype=control_points.dtype, device=control_points.device
        )

    if inputs.dtype != control_points.dtype:
        raise ShapeError(
            f"inputs.dtype={inputs.dtype} and control_points.dtype="
            f"{control_points.dtype} must be the same"
        )
    if control_points.dim() == 1:
        control_points = control_points.reshape(1, 1, -1)
    if control_points.dim() != 3:
        raise ShapeError(
            f"control_points must have rank 3, shape (num_inputs, num_outputs, "
            f"num_control_points), got shape {tuple(control_points.shape)}"
        )
    num_inputs, num_outputs, num_control_points = control_points.shape
    if num_control_points != spline.num_control_points:
        raise ControlPointError(
            f"control_points shape {tuple(control_points.shape)} last dimension "
            f"does not match the {spline.num_control_points} control points "
            f"of the B-spline"
        )

    is_scalar = inputs.dim() == 0
    if is_scalar:
        if num_inputs != 1:
            raise ShapeError(
                f"inputs is a scalar but control_points shape "
                f"{tuple(control_points.shape)} has num_inputs={num_inputs}"
            )
        inputs = inputs.reshape(1, 1)
    elif inputs.dim() == 2:
        if inputs.shape[1] != num_inputs:
            raise ShapeError(
                f"inputs shape {tuple(inputs.shape)} has num_inputs={inputs.shape[1]}, "
                f"control_points shape {tuple(control_points.shape)} has "
                f"num_inputs={num_inputs}"
            )
    else:
        raise ShapeError(
            f"inputs must be a scalar or have rank 2, shape (batch_size, "
            f"num_inputs), got shape {tuple(inputs.shape)}"
        )

    # Skip check during torch.compile
    if (
        inputs.dtype in _LOW_PRECISION_DTYPES
        and not torch.compiler.is_compiling()
    ):
        warnings.warn(
            f"B-spline evaluation with {inputs.dtype} loses precision when "
            f"comparing inputs against knots. Consider using float32 or float64.",
            RuntimeWarning,
            stacklevel=2,
        )

    knots = spline.expanded_knots
    first, last = knots[0], knots[len(knots) - 1]
    below = inputs < first
    above = inputs >= last

    # Out-of-range inputs are extrapolated below and must not reach the
    # basis: inf there turns into NaN in the control-point gradients.
    basis_inputs = torch.where(below | above, first, inputs)

    # (batch_size, num_inputs, num_control_points)
    basis = b_spline_basis(spline, basis_inputs)

    # - i: batch_size, preserved
    # - j: num_inputs, matched
    # - k: num_control_points, summed
    # - l: num_outputs
    y = torch.einsum("ijk,jlk->ilj", basis, control_points)

    # (batch_size, 1, num_inputs)
    y = _extrapolate(
        spline,
        inputs.unsqueeze(1),
        below.unsqueeze(1),
        above.unsqueeze(1),
        control_points,
        y,
    )

    if is_scalar and num_outputs == 1:
        y = y.reshape(())
    return y


def _extrapolate(
    spline: BSpline,
    x: Tensor,
    below: Tensor,
    above: Tensor,
    control_points: Tensor,
    y: Tensor,
) -> Tensor:
    knots = spline.expanded_knots
    first, last = knots[0], knots[len(knots) - 1]

    if spline.extrapolation is Extrapolation.ZERO:
        return y.masked_fill(below | above, 0.0)

    # (num_outputs, num_inputs, num_control_points)
    c = control_points.permute(1, 0, 2)
    low = c[..., 0]
    high = c[..., -1]

    if (
        spline.extrapolation is Extrapolation.LINEAR
        and spline.second_control_point_x is not None
    ):
        slope_low = (c[..., 1] - c[..., 0]) / (
            spline.second_control_point_x - first
        )
        slope_high = (c[..., -1] - c[..., -2]) / (
            last - spline.second_to_last_control_point_x
        )
        # Each tangent only sees the inputs on its own side.
        low = low + (torch.where(below, x, first) - first) * slope_low
        high = high + (torch.where(above, x, last) - last) * slope_high

    return torch.where(below, low, torch.where(above, high, y))
