import enum
from typing import Union


class Extrapolation(enum.Enum):
    """How a B-spline behaves outside its knots.

    Attributes
    ----------
    ZERO
        Value is 0 outside the knots.
    CONSTANT
        Value of the first (last) control point before (after) the knots.
    LINEAR
        Continue the line through the first two (last two) control points.
    """

    ZERO = "zero"
    CONSTANT = "constant"
    LINEAR = "linear"


DEFAULT_EXTRAPOLATION = Extrapolation.CONSTANT


def _as_extrapolation(mode: Union[Extrapolation, str]) -> Extrapolation:
    if isinstance(mode, Extrapolation):
        return mode
    try:
        return Extrapolation(mode)
    except ValueError:
        choices = ", ".join(repr(e.value) for e in Extrapolation)
        raise ValueError(
            f"Unknown extrapolation {mode!r}, expected one of {choices}"
        ) from None
