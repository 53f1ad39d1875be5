"""
Interpolation methods for term-structure curves.
"""

from .base import ExtrapolationMethod, InterpolationMethod, Interpolator
from .factory import create_interpolator
from .linear import LinearInterpolator, PiecewiseConstantInterpolator
from .spline import CubicSplineInterpolator

__all__ = [
    'Interpolator',
    'InterpolationMethod',
    'ExtrapolationMethod',
    'LinearInterpolator',
    'PiecewiseConstantInterpolator',
    'CubicSplineInterpolator',
    'create_interpolator',
]
