"""
Base classes for curve interpolation methods.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence

import numpy as np


class InterpolationMethod(Enum):
    """Supported interpolation methods."""

    LINEAR = "LINEAR"
    PIECEWISE_CONSTANT = "PIECEWISE_CONSTANT"
    CUBIC_SPLINE = "CUBIC_SPLINE"


class ExtrapolationMethod(Enum):
    """Supported extrapolation methods."""

    CONSTANT = "CONSTANT"
    LINEAR = "LINEAR"


class Interpolator(ABC):
    """Base class for curve interpolation methods."""

    def __init__(
        self,
        pillars: Sequence[float],
        values: Sequence[float],
        extrapolation: ExtrapolationMethod = ExtrapolationMethod.CONSTANT,
    ):
        """
        Initialize interpolator.

        Args:
            pillars: Time points (in years), at least one
            values: Values to interpolate at the pillars
            extrapolation: Behaviour outside the pillar range
        """
        if len(pillars) != len(values):
            raise ValueError("Pillars and values must have same length")
        if len(pillars) < 1:
            raise ValueError("Need at least 1 point for interpolation")

        order = np.argsort(np.asarray(pillars, dtype=float), kind="stable")
        self.pillars = np.asarray(pillars, dtype=float)[order]
        self.values = np.asarray(values, dtype=float)[order]
        self.extrapolation = extrapolation

        if len(np.unique(self.pillars)) != len(self.pillars):
            raise ValueError("Duplicate pillar times not allowed")

    @abstractmethod
    def _interpolate_inside(self, t: float) -> float:
        """Interpolate at a time strictly inside the pillar range."""

    def interpolate(self, t: float) -> float:
        """Interpolate value at time t."""
        if len(self.pillars) == 1:
            return float(self.values[0])
        if t <= self.pillars[0] or t >= self.pillars[-1]:
            return self._extrapolate(t)
        return float(self._interpolate_inside(t))

    def interpolate_many(self, times: Sequence[float]) -> np.ndarray:
        """Interpolate values at multiple times."""
        return np.array([self.interpolate(t) for t in times])

    def _extrapolate(self, t: float) -> float:
        if self.extrapolation == ExtrapolationMethod.LINEAR:
            if t <= self.pillars[0]:
                t1, t2 = self.pillars[0], self.pillars[1]
                v1, v2 = self.values[0], self.values[1]
            else:
                t1, t2 = self.pillars[-2], self.pillars[-1]
                v1, v2 = self.values[-2], self.values[-1]
            return float(v1 + (t - t1) * (v2 - v1) / (t2 - t1))

        if t <= self.pillars[0]:
            return float(self.values[0])
        return float(self.values[-1])
