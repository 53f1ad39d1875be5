"""
Parameter transformations between model space and solver space.
"""

from abc import ABC, abstractmethod
from typing import Sequence, Union

import numpy as np


class ParameterTransformation(ABC):
    """Bijection between the model's parameters and the unconstrained solver parameters."""

    @abstractmethod
    def get_parameter(self, solver_parameter: Sequence[float]) -> np.ndarray:
        """Map solver parameters to model parameters."""

    @abstractmethod
    def get_solver_parameter(self, parameter: Sequence[float]) -> np.ndarray:
        """Map model parameters to solver parameters."""


class PositiveParameterTransformation(ParameterTransformation):
    """Keeps model parameters positive via p = exp(x)."""

    def get_parameter(self, solver_parameter):
        return np.exp(np.asarray(solver_parameter, dtype=float))

    def get_solver_parameter(self, parameter):
        parameter = np.asarray(parameter, dtype=float)
        if np.any(parameter <= 0):
            raise ValueError("PositiveParameterTransformation requires positive parameters")
        return np.log(parameter)


class BoundedParameterTransformation(ParameterTransformation):
    """
    Keeps model parameters inside (lower, upper) with a logistic map.

    Bounds may be scalars or one value per parameter.
    """

    def __init__(
        self,
        lower_bound: Union[float, Sequence[float]],
        upper_bound: Union[float, Sequence[float]],
    ):
        self.lower_bound = np.asarray(lower_bound, dtype=float)
        self.upper_bound = np.asarray(upper_bound, dtype=float)
        if np.any(self.upper_bound <= self.lower_bound):
            raise ValueError("Upper bound must be greater than lower bound")

    def get_parameter(self, solver_parameter):
        solver_parameter = np.asarray(solver_parameter, dtype=float)
        return self.lower_bound + (self.upper_bound - self.lower_bound) / (
            1.0 + np.exp(-solver_parameter)
        )

    def get_solver_parameter(self, parameter):
        parameter = np.asarray(parameter, dtype=float)
        if np.any(parameter <= self.lower_bound) or np.any(parameter >= self.upper_bound):
            raise ValueError("Parameters must lie strictly inside the bounds")
        scaled = (parameter - self.lower_bound) / (self.upper_bound - self.lower_bound)
        return np.log(scaled / (1.0 - scaled))
