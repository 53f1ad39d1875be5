"""
Cubic spline interpolation backed by scipy.
"""
from typing import Sequence

from scipy.interpolate import CubicSpline

from .base import ExtrapolationMethod, Interpolator


class CubicSplineInterpolator(Interpolator):
    """Natural cubic spline through the pillar values."""

    def __init__(
        self,
        pillars: Sequence[float],
        values: Sequence[float],
        extrapolation: ExtrapolationMethod = ExtrapolationMethod.CONSTANT,
    ):
        super().__init__(pillars, values, extrapolation)
        self._spline = None
        if len(self.pillars) >= 2:
            self._spline = CubicSpline(self.pillars, self.values, bc_type="natural")

    def _interpolate_inside(self, t: float) -> float:
        return float(self._spline(t))
