"""Tests for batched B-spline evaluation."""

import pytest
import torch
import torch.testing
from torch.autograd import gradcheck

from torchbsplines import (
    BSpline,
    ControlPointError,
    ControlPointsNotSetError,
    DegreeError,
    Extrapolation,
    ShapeError,
    b_spline_basis,
    b_spline_evaluate,
    b_spline_regular,
)


def _scalar_reference(spline, inputs, control_points):
    """Evaluate every (example, output, input) with the scalar B-spline."""
    batch_size, num_inputs = inputs.shape
    num_outputs = control_points.shape[1]
    expected = torch.zeros(
        batch_size, num_outputs, num_inputs, dtype=torch.float64
    )
    for e in range(batch_size):
        for o in range(num_outputs):
            for i in range(num_inputs):
                spline.with_control_points(control_points[i, o])
                expected[e, o, i] = spline.evaluate(inputs[e, i].item())
    return expected


class TestBSplineBasis:
    """Tests for b_spline_basis."""

    def test_shape(self):
        spline = b_spline_regular(3, 6)
        x = torch.rand(4, 5, dtype=torch.float64)

        basis = b_spline_basis(spline, x)

        assert basis.shape == (4, 5, 6)

    def test_scalar_input(self):
        spline = b_spline_regular(2, 5)

        basis = b_spline_basis(spline, torch.tensor(0.5, dtype=torch.float64))

        assert basis.shape == (5,)

    def test_partition_of_unity(self):
        spline = BSpline(3, [0.0, 0.1, 0.45, 0.5, 1.0])
        x = torch.linspace(0.0, 0.999, 101, dtype=torch.float64)

        basis = b_spline_basis(spline, x)

        torch.testing.assert_close(
            basis.sum(dim=-1),
            torch.ones(101, dtype=torch.float64),
            atol=1e-12,
            rtol=0,
        )
        assert torch.all(basis >= 0)

    @pytest.mark.parametrize("degree", [0, 1, 2, 3])
    def test_matches_scalar_recursion(self, degree):
        spline = BSpline(3, [0.0, 0.2, 0.5, 0.6, 1.0])
        x = torch.linspace(-0.2, 1.2, 57, dtype=torch.float64)

        basis = b_spline_basis(spline, x, degree=degree)

        n_basis = len(spline.expanded_knots) - degree - 1
        assert basis.shape == (57, n_basis)
        expected = torch.tensor(
            [
                [spline.basis_function(i, degree, v) for i in range(n_basis)]
                for v in x.tolist()
            ],
            dtype=torch.float64,
        )
        torch.testing.assert_close(basis, expected, atol=1e-12, rtol=0)

    def test_outside_knots_is_zero(self):
        spline = b_spline_regular(3, 6)
        x = torch.tensor([-0.5, 1.0, 1.5], dtype=torch.float64)

        basis = b_spline_basis(spline, x)

        assert torch.all(basis == 0)

    def test_degree_too_high(self):
        spline = b_spline_regular(3, 6)

        with pytest.raises(DegreeError):
            b_spline_basis(spline, torch.rand(3), degree=9)

    def test_negative_degree(self):
        with pytest.raises(DegreeError):
            b_spline_basis(b_spline_regular(3, 6), torch.rand(3), degree=-1)

    def test_integer_input(self):
        with pytest.raises(ShapeError):
            b_spline_basis(b_spline_regular(3, 6), torch.tensor([0, 1]))


class TestBSplineEvaluate:
    """Tests for b_spline_evaluate."""

    def test_matches_scalar(self):
        control_points = torch.tensor(
            [
                [[1.0, 0.0, 1.0, 1.0, 0.0, -1.0]],
                [[1.0, 0.0, 1.0, 1.0, 0.0, -1.0]],
            ],
            dtype=torch.float64,
        )
        spline = b_spline_regular(3, 6)
        inputs = torch.stack(
            [
                torch.arange(10, dtype=torch.float64) / 20.0,
                torch.arange(10, dtype=torch.float64) / 20.0 + 0.5,
            ],
            dim=1,
        )

        y = b_spline_evaluate(spline, inputs, control_points)

        expected = _scalar_reference(spline, inputs, control_points)
        torch.testing.assert_close(y, expected, atol=1e-10, rtol=1e-10)

    @pytest.mark.parametrize("extrapolation", list(Extrapolation))
    @pytest.mark.parametrize("degree", [0, 1, 3])
    def test_batch_multi_inputs_and_outputs(self, extrapolation, degree):
        # Distinct sizes so shapes cannot get mixed up.
        batch_size, num_inputs, num_outputs, num_control_points = 2, 3, 5, 7
        generator = torch.Generator().manual_seed(42)
        spline = b_spline_regular(degree, num_control_points).with_extrapolation(
            extrapolation
        )
        inputs = (
            torch.rand(batch_size, num_inputs, generator=generator, dtype=torch.float64)
            * 1.4
            - 0.2
        )
        inputs[0, 0] = 0.0
        inputs[1, 1] = 1.0
        control_points = torch.randn(
            num_inputs,
            num_outputs,
            num_control_points,
            generator=generator,
            dtype=torch.float64,
        )

        y = b_spline_evaluate(spline, inputs, control_points)

        assert y.shape == (batch_size, num_outputs, num_inputs)
        expected = _scalar_reference(spline, inputs, control_points)
        torch.testing.assert_close(y, expected, atol=1e-10, rtol=1e-10)

    def test_scalar_input_and_output(self):
        spline = b_spline_regular(3, 6).with_control_points(
            [1.0, 0.0, 1.0, 1.0, 0.0, -1.0]
        )

        y = b_spline_evaluate(spline, torch.tensor(0.0, dtype=torch.float64))

        assert y.dim() == 0
        assert y.item() == pytest.approx(1.0)

    def test_python_float_input(self):
        spline = b_spline_regular(3, 6).with_control_points(
            [1.0, 0.0, 1.0, 1.0, 0.0, -1.0]
        )

        y = b_spline_evaluate(spline, 0.3)

        assert y.dtype == torch.get_default_dtype()
        assert y.item() == pytest.approx(spline.evaluate(0.3), abs=1e-5)

    def test_scalar_input_multiple_outputs(self):
        spline = b_spline_regular(1, 3)
        control_points = torch.ones(1, 4, 3, dtype=torch.float64)

        y = b_spline_evaluate(
            spline, torch.tensor(0.5, dtype=torch.float64), control_points
        )

        assert y.shape == (1, 4, 1)

    def test_rank_one_control_points(self):
        spline = b_spline_regular(2, 4)
        control_points = torch.tensor([0.0, 1.0, 3.0, 2.0], dtype=torch.float64)
        inputs = torch.tensor([[0.25], [0.75]], dtype=torch.float64)

        y = b_spline_evaluate(spline, inputs, control_points)

        assert y.shape == (2, 1, 1)
        spline.with_control_points(control_points)
        assert y[0, 0, 0].item() == pytest.approx(spline.evaluate(0.25))
        assert y[1, 0, 0].item() == pytest.approx(spline.evaluate(0.75))

    def test_spline_control_points_by_default(self):
        spline = b_spline_regular(2, 4).with_control_points([0.0, 1.0, 3.0, 2.0])
        inputs = torch.tensor([[0.1], [0.6]], dtype=torch.float64)

        y = b_spline_evaluate(spline, inputs)

        torch.testing.assert_close(
            y.flatten(),
            torch.tensor(
                [spline.evaluate(0.1), spline.evaluate(0.6)], dtype=torch.float64
            ),
        )

    def test_requires_control_points(self):
        with pytest.raises(ControlPointsNotSetError):
            b_spline_evaluate(b_spline_regular(3, 6), torch.rand(2, 1))

    def test_dtype_mismatch(self):
        spline = b_spline_regular(3, 6)

        with pytest.raises(ShapeError, match="dtype"):
            b_spline_evaluate(
                spline,
                torch.rand(2, 1, dtype=torch.float32),
                torch.rand(1, 1, 6, dtype=torch.float64),
            )

    def test_control_points_rank(self):
        spline = b_spline_regular(3, 6)

        with pytest.raises(ShapeError, match="rank 3"):
            b_spline_evaluate(spline, torch.rand(2, 1), torch.rand(1, 6))

    def test_wrong_number_of_control_points(self):
        spline = b_spline_regular(3, 6)

        with pytest.raises(ControlPointError):
            b_spline_evaluate(spline, torch.rand(2, 1), torch.rand(1, 1, 5))

    def test_num_inputs_mismatch(self):
        spline = b_spline_regular(3, 6)

        with pytest.raises(ShapeError, match="num_inputs"):
            b_spline_evaluate(spline, torch.rand(2, 3), torch.rand(2, 1, 6))

    def test_scalar_input_with_many_inputs(self):
        spline = b_spline_regular(3, 6)

        with pytest.raises(ShapeError, match="scalar"):
            b_spline_evaluate(spline, torch.tensor(0.5), torch.rand(2, 1, 6))

    def test_inputs_rank(self):
        spline = b_spline_regular(3, 6)

        with pytest.raises(ShapeError, match="rank 2"):
            b_spline_evaluate(spline, torch.rand(4), torch.rand(1, 1, 6))

    def test_shape_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            b_spline_evaluate(
                b_spline_regular(3, 6), torch.rand(4), torch.rand(1, 1, 6)
            )

    def test_low_precision_warns(self):
        spline = b_spline_regular(2, 4)

        with pytest.warns(RuntimeWarning, match="precision"):
            b_spline_evaluate(
                spline,
                torch.rand(3, 1, dtype=torch.bfloat16),
                torch.rand(1, 1, 4, dtype=torch.bfloat16),
            )

    def test_gradcheck(self):
        spline = b_spline_regular(3, 6).with_extrapolation("linear")
        inputs = torch.tensor(
            [[0.1, 0.45], [0.25, 0.9], [-0.2, 1.3]],
            dtype=torch.float64,
            requires_grad=True,
        )
        control_points = torch.randn(
            2, 3, 6, dtype=torch.float64, requires_grad=True
        )

        assert gradcheck(
            lambda x, c: b_spline_evaluate(spline, x, c),
            (inputs, control_points),
        )

    @pytest.mark.parametrize("extrapolation", ["zero", "constant"])
    @pytest.mark.parametrize("outlier", [float("inf"), -float("inf"), 1e308, -1e308])
    def test_far_inputs_keep_gradients_finite(self, extrapolation, outlier):
        spline = b_spline_regular(3, 6).with_extrapolation(extrapolation)
        control_points = torch.randn(1, 1, 6, dtype=torch.float64)
        with_outlier = control_points.clone().requires_grad_(True)
        without_outlier = control_points.clone().requires_grad_(True)

        y = b_spline_evaluate(
            spline,
            torch.tensor([[0.5], [outlier]], dtype=torch.float64),
            with_outlier,
        )
        y.sum().backward()
        b_spline_evaluate(
            spline, torch.tensor([[0.5]], dtype=torch.float64), without_outlier
        ).sum().backward()

        spline.with_control_points(control_points.flatten())
        assert torch.isfinite(y).all()
        assert y[1, 0, 0].item() == spline.evaluate(outlier)
        # The outlier contributes only through the end control point it copies.
        expected = without_outlier.grad.clone()
        if extrapolation == "constant":
            expected[0, 0, 0 if outlier < 0 else -1] += 1.0
        torch.testing.assert_close(with_outlier.grad, expected)

    def test_far_inputs_linear_gradients_are_not_nan(self):
        spline = b_spline_regular(3, 6).with_extrapolation("linear")
        control_points = torch.randn(1, 1, 6, dtype=torch.float64, requires_grad=True)

        y = b_spline_evaluate(
            spline,
            torch.tensor([[0.5], [1e6], [-1e6]], dtype=torch.float64),
            control_points,
        )
        y.sum().backward()

        assert not torch.isnan(control_points.grad).any()

    def test_far_inputs_gradient_with_respect_to_inputs(self):
        spline = b_spline_regular(3, 6).with_control_points(
            [1.0, 0.0, 1.0, 1.0, 0.0, -1.0]
        )
        x = torch.tensor(
            [[0.5], [float("inf")]], dtype=torch.float64, requires_grad=True
        )

        b_spline_evaluate(spline, x).sum().backward()

        assert x.grad[1, 0].item() == 0.0
        assert x.grad[0, 0].item() == pytest.approx(
            spline.derivative().evaluate(0.5)
        )

    def test_gradient_matches_derivative(self):
        spline = b_spline_regular(3, 6).with_control_points(
            [1.0, 0.0, 1.0, 1.0, 0.0, -1.0]
        )
        x = torch.tensor([[0.2], [0.5], [0.7]], dtype=torch.float64, requires_grad=True)

        b_spline_evaluate(spline, x).sum().backward()

        derivative = spline.derivative()
        expected = torch.tensor(
            [[derivative.evaluate(v)] for v in (0.2, 0.5, 0.7)],
            dtype=torch.float64,
        )
        torch.testing.assert_close(x.grad, expected, atol=1e-10, rtol=1e-10)
