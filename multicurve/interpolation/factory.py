"""
Factory function for creating interpolators.
"""
from typing import Sequence, Union

from .base import ExtrapolationMethod, InterpolationMethod, Interpolator
from .linear import LinearInterpolator, PiecewiseConstantInterpolator
from .spline import CubicSplineInterpolator

_INTERPOLATORS = {
    InterpolationMethod.LINEAR: LinearInterpolator,
    InterpolationMethod.PIECEWISE_CONSTANT: PiecewiseConstantInterpolator,
    InterpolationMethod.CUBIC_SPLINE: CubicSplineInterpolator,
}


def create_interpolator(
    method: Union[str, InterpolationMethod],
    pillars: Sequence[float],
    values: Sequence[float],
    extrapolation: Union[str, ExtrapolationMethod] = ExtrapolationMethod.CONSTANT,
) -> Interpolator:
    """
    Create an interpolator based on method name.

    Args:
        method: Interpolation method (enum or name, e.g. "LINEAR")
        pillars: Time points
        values: Values to interpolate
        extrapolation: Extrapolation method (enum or name)

    Returns:
        Configured interpolator
    """
    try:
        method = InterpolationMethod(method.upper() if isinstance(method, str) else method)
    except ValueError as exc:
        raise ValueError(
            f"Unknown interpolation method: {method}. "
            f"Available: {[m.value for m in InterpolationMethod]}"
        ) from exc

    if isinstance(extrapolation, str):
        extrapolation = ExtrapolationMethod(extrapolation.upper())

    return _INTERPOLATORS[method](pillars, values, extrapolation)
