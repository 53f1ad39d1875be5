"""
Least-squares optimizers used for joint curve calibration.
"""

from .base import ObjectiveFunction, Optimizer, OptimizerCancelledError, OptimizerError
from .factory import LeastSquaresOptimizerFactory, OptimizerFactory
from .least_squares import LeastSquaresOptimizer

__all__ = [
    "ObjectiveFunction",
    "Optimizer",
    "OptimizerError",
    "OptimizerCancelledError",
    "OptimizerFactory",
    "LeastSquaresOptimizerFactory",
    "LeastSquaresOptimizer",
]
