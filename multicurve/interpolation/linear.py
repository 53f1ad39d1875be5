"""
Linear and step interpolation methods.
"""
import numpy as np

from .base import Interpolator


class LinearInterpolator(Interpolator):
    """Linear interpolation on the curve's interpolation entity.

    On log discount factors this is the step-forward (piecewise flat
    forward) scheme.
    """

    def _interpolate_inside(self, t: float) -> float:
        i = np.searchsorted(self.pillars, t) - 1

        t1, t2 = self.pillars[i], self.pillars[i + 1]
        v1, v2 = self.values[i], self.values[i + 1]

        weight = (t - t1) / (t2 - t1)
        return v1 + weight * (v2 - v1)


class PiecewiseConstantInterpolator(Interpolator):
    """Piecewise constant (step function) interpolation.

    Returns the value of the left pillar; can create discontinuities.
    """

    def _interpolate_inside(self, t: float) -> float:
        i = np.searchsorted(self.pillars, t, side="right") - 1
        return self.values[i]
