"""
Optimizer contract used by the calibration solver.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence

import numpy as np

# Maps a parameter vector to the vector of model values.
ObjectiveFunction = Callable[[np.ndarray], np.ndarray]


class OptimizerError(RuntimeError):
    """Raised when an optimizer run fails."""

    pass


class OptimizerCancelledError(OptimizerError):
    """Raised when an optimizer run is cancelled."""

    pass


class Optimizer(ABC):
    """
    Least-squares optimizer minimising the distance between objective values and targets.

    Setters return ``self`` so a configured optimizer can be built fluently.
    """

    def __init__(self, objective: ObjectiveFunction):
        self.objective = objective
        self.initial_parameters: Optional[np.ndarray] = None
        self.lower_bound: Optional[np.ndarray] = None
        self.upper_bound: Optional[np.ndarray] = None
        self.target_values: Optional[np.ndarray] = None
        self.weights: Optional[np.ndarray] = None
        self.max_iterations = 1000

    def set_initial_parameters(self, initial_parameters: Sequence[float]) -> "Optimizer":
        self.initial_parameters = np.array(initial_parameters, dtype=float)
        return self

    def set_weights(self, weights: Sequence[float]) -> "Optimizer":
        self.weights = np.array(weights, dtype=float)
        return self

    def set_max_iteration(self, max_iterations: int) -> "Optimizer":
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.max_iterations = int(max_iterations)
        return self

    def set_target_values(self, target_values: Sequence[float]) -> "Optimizer":
        self.target_values = np.array(target_values, dtype=float)
        return self

    def set_bounds(
        self, lower_bound: Sequence[float], upper_bound: Sequence[float]
    ) -> "Optimizer":
        self.lower_bound = np.array(lower_bound, dtype=float)
        self.upper_bound = np.array(upper_bound, dtype=float)
        return self

    @abstractmethod
    def run(self) -> None:
        """Run the optimization; blocks until finished."""

    @abstractmethod
    def get_best_fit_parameters(self) -> np.ndarray:
        ...

    @abstractmethod
    def get_iterations(self) -> int:
        ...

    @abstractmethod
    def get_root_mean_squared_error(self) -> float:
        ...
