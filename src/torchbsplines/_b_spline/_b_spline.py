"""Scalar B-spline: knots, control points, evaluation and derivative."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple, Type, Union

from torch import Tensor

from .._control_point_error import ControlPointError
from .._control_points_not_set_error import ControlPointsNotSetError
from .._degree_error import DegreeError
from .._extrapolation import (
    DEFAULT_EXTRAPOLATION,
    Extrapolation,
    _as_extrapolation,
)
from .._knot_error import KnotError
from .._spline_error import SplineError


def _as_floats(
    values: Union[Sequence[float], Tensor],
    name: str,
    error: Type[SplineError],
) -> list:
    if isinstance(values, (str, bytes)):
        raise error(f"{name} must be a sequence of numbers, got {values!r}")
    if isinstance(values, Tensor):
        if values.dim() != 1:
            raise error(
                f"{name} must be one-dimensional, got shape {tuple(values.shape)}"
            )
        return [float(v) for v in values.tolist()]
    return [float(v) for v in values]


class BSpline:
    """One-dimensional B-spline over a clamped knot vector.

    The knots given by the caller are expanded by repeating the first and
    last knot ``degree`` times, which forces the curve through the first and
    last control points. Knots and degree are fixed at construction; control
    points and extrapolation mode are cheap to swap, so one instance can be
    reused for many control-point sets.

    Parameters
    ----------
    degree : int
        Polynomial degree (0=constant, 1=linear, 2=quadratic, 3=cubic).
    knots : sequence of float or Tensor
        At least 2 strictly increasing knots. Repeated knots are rejected.

    Raises
    ------
    DegreeError
        If degree is negative or not an integer.
    KnotError
        If there are fewer than 2 knots, they are not strictly increasing,
        or knots is a string or a tensor that is not one-dimensional.

    Examples
    --------
    >>> spline = BSpline(2, [0.0, 0.5, 1.0]).with_control_points(
    ...     [0.0, 1.0, 1.0, 0.0]
    ... )
    >>> spline.num_control_points
    4
    >>> spline.evaluate(0.0)
    0.0
    """

    def __init__(self, degree: int, knots: Union[Sequence[float], Tensor]):
        if isinstance(degree, bool) or not isinstance(degree, int):
            raise DegreeError(f"Degree must be an integer, got {degree!r}")
        if degree < 0:
            raise DegreeError(f"Degree must be non-negative, got {degree}")

        knots = _as_floats(knots, "knots", KnotError)
        if len(knots) < 2:
            raise KnotError(f"Need at least 2 knots, got {len(knots)}")
        if not all(math.isfinite(k) for k in knots):
            raise KnotError(f"Knots must be finite, got {knots}")
        if not all(a < b for a, b in zip(knots[:-1], knots[1:])):
            raise KnotError(
                f"Knots must be strictly increasing (no repeats), got {knots}"
            )

        self._degree = degree
        self._expanded_knots = (
            (knots[0],) * degree + tuple(knots) + (knots[-1],) * degree
        )
        self._control_points: Optional[Tuple[float, ...]] = None
        self._extrapolation = DEFAULT_EXTRAPOLATION

        # x of the 2nd and 2nd-to-last control points, for linear extrapolation
        xs = self.control_points_x()
        if len(xs) >= 2:
            self._x_control_point_1 = xs[1]
            self._x_control_point_m2 = xs[len(xs) - 2]
        else:
            self._x_control_point_1 = None
            self._x_control_point_m2 = None

    @classmethod
    def regular(cls, degree: int, num_control_points: int) -> "BSpline":
        """B-spline with evenly spaced knots on [0, 1], see :func:`b_spline_regular`."""
        from ._b_spline_regular import b_spline_regular

        return b_spline_regular(degree, num_control_points)

    def with_control_points(
        self, control_points: Union[Sequence[float], Tensor]
    ) -> "BSpline":
        """Set the control points used for evaluation.

        There must be exactly ``len(knots) + degree - 1`` of them. Swapping
        control points does not touch the knots, so it is cheap to do before
        every evaluation.

        Returns the spline itself, so configuration calls can be chained.

        Raises
        ------
        ControlPointError
            If the number of control points does not match, or they are given
            as a string or a tensor that is not one-dimensional.
        """
        control_points = _as_floats(
            control_points, "control_points", ControlPointError
        )
        expected = self.num_control_points
        if len(control_points) != expected:
            raise ControlPointError(
                f"B-spline with {len(self.knots)} knots and degree {self._degree} "
                f"expects {expected} control points (len(knots) + degree - 1), "
                f"got {len(control_points)}"
            )
        self._control_points = tuple(control_points)
        return self

    def with_extrapolation(
        self, extrapolation: Union[Extrapolation, str]
    ) -> "BSpline":
        """Set how to evaluate before the first knot or after the last one.

        Defaults to :attr:`Extrapolation.CONSTANT`. Returns the spline itself.
        """
        self._extrapolation = _as_extrapolation(extrapolation)
        return self

    @property
    def degree(self) -> int:
        return self._degree

    @property
    def knots(self) -> Tuple[float, ...]:
        """Knots as given at construction, without the clamping repeats."""
        n = len(self._expanded_knots)
        return self._expanded_knots[self._degree : n - self._degree]

    @property
    def expanded_knots(self) -> Tuple[float, ...]:
        """Knots with the first and last value repeated ``degree`` extra times."""
        return self._expanded_knots

    @property
    def num_control_points(self) -> int:
        return len(self.knots) + self._degree - 1

    @property
    def control_points(self) -> Optional[Tuple[float, ...]]:
        """Control points, or None if they have not been set yet."""
        return self._control_points

    @property
    def extrapolation(self) -> Extrapolation:
        return self._extrapolation

    @property
    def second_control_point_x(self) -> Optional[float]:
        """x of the 2nd control point, or None with a single control point."""
        return self._x_control_point_1

    @property
    def second_to_last_control_point_x(self) -> Optional[float]:
        """x of the 2nd-to-last control point, or None with a single control point."""
        return self._x_control_point_m2

    def control_points_x(self) -> Tuple[float, ...]:
        """x-coordinate of each control point (Greville abscissae).

        Not used for evaluation: it places each control point at the center
        of its area of influence, which is handy for plotting.
        """
        t = self._expanded_knots
        p = self._degree
        n = self.num_control_points
        xs = []
        for i in range(n):
            if i == 0:
                xs.append(t[0])
            elif i == n - 1:
                xs.append(t[len(t) - 1])
            elif p == 0:
                # Midpoint of the support [t_i, t_{i+1}).
                xs.append((t[i] + t[i + 1]) / 2.0)
            else:
                xs.append(sum(t[i + 1 : i + 1 + p]) / p)
        return tuple(xs)

    def basis_function(self, i: int, degree: int, x: float) -> float:
        """Value of the i-th basis function of the given degree at x.

        Cox-de Boor recursion over the expanded knots t:

            B_{i,0}(x) = 1 if t_i <= x < t_{i+1}, else 0

            B_{i,p}(x) = (x - t_i) / (t_{i+p} - t_i) * B_{i,p-1}(x)
                       + (t_{i+p+1} - x) / (t_{i+p+1} - t_{i+1}) * B_{i+1,p-1}(x)

        A term whose knot difference is zero (repeated knots at the clamped
        ends) contributes 0.
        """
        t = self._expanded_knots
        if degree == 0:
            return 1.0 if t[i] <= x < t[i + 1] else 0.0

        left = 0.0
        if t[i + degree] != t[i]:
            left = (
                (x - t[i])
                / (t[i + degree] - t[i])
                * self.basis_function(i, degree - 1, x)
            )

        right = 0.0
        if t[i + degree + 1] != t[i + 1]:
            right = (
                (t[i + degree + 1] - x)
                / (t[i + degree + 1] - t[i + 1])
                * self.basis_function(i + 1, degree - 1, x)
            )
        return left + right

    def evaluate(self, x: float) -> float:
        """Evaluate the B-spline at x.

        Values below the first knot, and from the last knot onwards, are
        extrapolated according to :attr:`extrapolation`.

        Raises
        ------
        ControlPointsNotSetError
            If :meth:`with_control_points` was never called.
        """
        control_points = self._require_control_points("evaluate")
        x = float(x)
        t = self._expanded_knots
        if x < t[0] or x >= t[len(t) - 1]:
            return self._extrapolate(x)
        result = 0.0
        for i, c in enumerate(control_points):
            result += c * self.basis_function(i, self._degree, x)
        return result

    __call__ = evaluate

    def _extrapolate(self, x: float) -> float:
        c = self._control_points
        t = self._expanded_knots
        first, last = t[0], t[len(t) - 1]

        if self._extrapolation is Extrapolation.ZERO:
            return 0.0
        if self._extrapolation is Extrapolation.CONSTANT:
            return c[0] if x < first else c[len(c) - 1]

        # A single control point has no slope.
        if len(c) < 2:
            return c[0]
        if x < first:
            slope = (c[1] - c[0]) / (self._x_control_point_1 - first)
            return c[0] + (x - first) * slope
        slope = (c[len(c) - 1] - c[len(c) - 2]) / (
            last - self._x_control_point_m2
        )
        return c[len(c) - 1] + (x - last) * slope

    def derivative(self) -> "BSpline":
        """First derivative as a new B-spline of degree ``degree - 1``.

        The derivative shares the knots of this spline and has one control
        point less:

            q_i = p * (c_{i+1} - c_i) / (t_{i+p+1} - t_{i+1})

        Its extrapolation is zero, unless this spline extrapolates linearly,
        in which case the derivative extrapolates with the constant slope.

        Raises
        ------
        ControlPointsNotSetError
            If the control points have not been set.
        DegreeError
            If the spline has degree 0.
        """
        c = self._require_control_points("derivative")
        p = self._degree
        if p == 0:
            raise DegreeError("Cannot differentiate a degree-0 B-spline")
        t = self._expanded_knots

        new_control_points = [
            p * (c[i + 1] - c[i]) / (t[i + 1 + p] - t[i + 1])
            for i in range(len(c) - 1)
        ]

        if self._extrapolation is Extrapolation.LINEAR:
            extrapolation = Extrapolation.CONSTANT
        else:
            extrapolation = Extrapolation.ZERO

        return (
            BSpline(p - 1, self.knots)
            .with_extrapolation(extrapolation)
            .with_control_points(new_control_points)
        )

    def _require_control_points(self, operation: str) -> Tuple[float, ...]:
        if self._control_points is None:
            raise ControlPointsNotSetError(
                f"BSpline.{operation}() requires control points, "
                f"set them with BSpline.with_control_points()"
            )
        return self._control_points

    def __repr__(self) -> str:
        return (
            f"BSpline(degree={self._degree}, knots={list(self.knots)}, "
            f"extrapolation={self._extrapolation.value}, "
            f"control_points={self._control_points})"
        )
