"""Learnable B-spline layer."""

from __future__ import annotations

from typing import Literal, Optional, Union

import torch
import torch.nn as nn
from torch import Tensor

from .._b_spline import b_spline_evaluate, b_spline_regular
from .._extrapolation import Extrapolation


class BSplineLayer(nn.Module):
    """Layer of learnable one-dimensional B-splines.

    Every input feature is mapped through ``num_outputs`` B-splines, each with
    its own control points, all sharing evenly spaced knots on [0, 1]. This is
    the building block of calibration layers and Kolmogorov-Arnold networks,
    where the control points are the trained weights.

    Parameters
    ----------
    num_inputs : int
        Number of input features.
    num_outputs : int
        Number of B-splines per input feature.
    num_control_points : int
        Control points per B-spline, at least ``degree + 1``.
    degree : int, default=3
        Polynomial degree of the B-splines.
    extrapolation : Extrapolation or str, default="linear"
        Behavior for inputs outside [0, 1].
    init : {"identity", "zeros", "normal"}, default="identity"
        Initial control points. ``"identity"`` places each control point at
        its x-coordinate so every spline starts as f(x) = x; ``"normal"``
        draws them from N(0, 0.1^2).
    dtype : torch.dtype, optional
        Dtype of the control points.
    device : torch.device, optional
        Device of the control points.

    Examples
    --------
    >>> layer = BSplineLayer(num_inputs=4, num_outputs=2, num_control_points=8)
    >>> layer(torch.rand(16, 4)).shape
    torch.Size([16, 2, 4])

    Notes
    -----
    The output is shaped (batch_size, num_outputs, num_inputs); a
    Kolmogorov-Arnold layer sums it over the last dimension.
    """

    def __init__(
        self,
        num_inputs: int,
        num_outputs: int,
        num_control_points: int,
        degree: int = 3,
        extrapolation: Union[Extrapolation, str] = Extrapolation.LINEAR,
        init: Literal["identity", "zeros", "normal"] = "identity",
        dtype: Optional[torch.dtype] = None,
        device: Optional[torch.device] = None,
    ):
        super().__init__()
        if init not in ("identity", "zeros", "normal"):
            raise ValueError(
                f"init must be 'identity', 'zeros' or 'normal', got {init!r}"
            )
        self.num_inputs = num_inputs
        self.num_outputs = num_outputs
        self.init = init

        self.spline = b_spline_regular(
            degree, num_control_points
        ).with_extrapolation(extrapolation)

        self.control_points = nn.Parameter(
            torch.empty(
                num_inputs,
                num_outputs,
                num_control_points,
                dtype=dtype,
                device=device,
            )
        )
        self.reset_parameters()

    def reset_parameters(self) -> None:
        with torch.no_grad():
            if self.init == "identity":
                xs = torch.tensor(
                    self.spline.control_points_x(),
                    dtype=self.control_points.dtype,
                    device=self.control_points.device,
                )
                self.control_points.copy_(xs.expand_as(self.control_points))
            elif self.init == "zeros":
                nn.init.zeros_(self.control_points)
            else:
                nn.init.normal_(self.control_points, std=0.1)

    def forward(self, inputs: Tensor) -> Tensor:
        """Evaluate the B-splines.

        Args:
            inputs: Shape (batch_size, num_inputs).

        Returns:
            Shape (batch_size, num_outputs, num_inputs).
        """
        return b_spline_evaluate(self.spline, inputs, self.control_points)

    def extra_repr(self) -> str:
        return (
            f"num_inputs={self.num_inputs}, num_outputs={self.num_outputs}, "
            f"num_control_points={self.spline.num_control_points}, "
            f"degree={self.spline.degree}, "
            f"extrapolation={self.spline.extrapolation.value}"
        )
