"""Tests for b_spline_derivative."""

import pytest

from torchbsplines import (
    BSpline,
    DegreeError,
    Extrapolation,
    b_spline_derivative,
    b_spline_regular,
)


class TestBSplineDerivative:
    """Tests for b_spline_derivative."""

    @pytest.fixture
    def spline(self):
        return (
            b_spline_regular(3, 6)
            .with_control_points([1.0, 0.0, 1.0, 1.0, 0.0, -1.0])
            .with_extrapolation(Extrapolation.LINEAR)
        )

    def test_first_order_is_derivative(self, spline):
        derivative = b_spline_derivative(spline)

        assert derivative.degree == 2
        assert derivative.control_points == pytest.approx(
            spline.derivative().control_points
        )

    def test_second_order(self, spline):
        second = b_spline_derivative(spline, order=2)

        assert second.degree == 1
        assert second.knots == spline.knots
        assert second.num_control_points == 4
        assert second.extrapolation is Extrapolation.ZERO

    @pytest.mark.parametrize("x", [0.1, 0.5, 0.9])
    def test_second_order_matches_finite_difference(self, spline, x):
        first = b_spline_derivative(spline, order=1)
        second = b_spline_derivative(spline, order=2)

        h = 1e-7
        finite_difference = (first.evaluate(x + h) - first.evaluate(x)) / h

        assert finite_difference == pytest.approx(second.evaluate(x), abs=1e-3)

    def test_full_order_is_piecewise_constant(self, spline):
        third = b_spline_derivative(spline, order=3)

        assert third.degree == 0
        assert third.evaluate(0.1) == third.evaluate(0.2)

    def test_order_above_degree(self, spline):
        with pytest.raises(DegreeError):
            b_spline_derivative(spline, order=4)

    def test_order_below_one(self, spline):
        with pytest.raises(ValueError):
            b_spline_derivative(spline, order=0)

    def test_original_unchanged(self, spline):
        b_spline_derivative(spline, order=2)

        assert spline.degree == 3
        assert spline.extrapolation is Extrapolation.LINEAR
        assert spline.control_points == (1.0, 0.0, 1.0, 1.0, 0.0, -1.0)

    def test_linear_spline_derivative_values(self):
        spline = BSpline(1, [0.0, 0.5, 2.0]).with_control_points([1.0, 2.0, 0.5])

        derivative = b_spline_derivative(spline)

        assert derivative.evaluate(0.25) == pytest.approx(2.0)
        assert derivative.evaluate(1.0) == pytest.approx(-1.0)

    @pytest.mark.parametrize(
        "extrapolation, expected",
        [
            (Extrapolation.LINEAR, [Extrapolation.CONSTANT, Extrapolation.ZERO]),
            (Extrapolation.CONSTANT, [Extrapolation.ZERO, Extrapolation.ZERO]),
            (Extrapolation.ZERO, [Extrapolation.ZERO, Extrapolation.ZERO]),
        ],
    )
    def test_extrapolation_per_order(self, spline, extrapolation, expected):
        spline.with_extrapolation(extrapolation)

        modes = [
            b_spline_derivative(spline, order=order).extrapolation
            for order in (1, 2)
        ]

        assert modes == expected
