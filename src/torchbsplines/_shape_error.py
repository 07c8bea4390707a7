from ._spline_error import SplineError


class ShapeError(SplineError, ValueError):
    """Raised for mismatched dtypes, ranks or dimensions in batched evaluation.

    Batched evaluation expects inputs shaped ``(batch_size, num_inputs)`` and
    control points shaped ``(num_inputs, num_outputs, num_control_points)``,
    both with the same dtype.
    """

    pass
