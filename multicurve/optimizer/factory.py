"""
Factories creating configured optimizers for a given objective.
"""
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from .base import ObjectiveFunction, Optimizer
from .least_squares import LeastSquaresOptimizer


class OptimizerFactory(ABC):
    """Creates an optimizer for an objective, start point, bounds and targets."""

    @abstractmethod
    def get_optimizer(
        self,
        objective: ObjectiveFunction,
        initial_parameters: Sequence[float],
        lower_bound: Sequence[float],
        upper_bound: Sequence[float],
        target_values: Sequence[float],
    ) -> Optimizer:
        ...


@dataclass
class LeastSquaresOptimizerFactory(OptimizerFactory):
    """Factory for :class:`LeastSquaresOptimizer`."""

    max_iterations: int = 1000
    error_tolerance: float = 0.0
    max_threads: int = 1
    cancel_event: Optional[threading.Event] = None

    def get_optimizer(
        self,
        objective,
        initial_parameters,
        lower_bound,
        upper_bound,
        target_values,
    ) -> LeastSquaresOptimizer:
        optimizer = LeastSquaresOptimizer(
            objective,
            error_tolerance=self.error_tolerance,
            max_iterations=self.max_iterations,
            max_threads=self.max_threads,
            cancel_event=self.cancel_event,
        )
        optimizer.set_initial_parameters(initial_parameters)
        optimizer.set_bounds(lower_bound, upper_bound)
        optimizer.set_target_values(target_values)
        return optimizer
