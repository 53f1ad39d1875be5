"""
Joint least-squares calibration of a set of curves to a set of products.
"""

import logging
import os
import threading
from typing import Iterable, Optional, Sequence

import numpy as np

from multicurve.optimizer import (
    LeastSquaresOptimizerFactory,
    Optimizer,
    OptimizerCancelledError,
    OptimizerError,
    OptimizerFactory,
)

from .aggregation import ParameterAggregation
from .exceptions import CalibrationCancelledError, CloneNotSupportedError, SolverError
from .transformation import ParameterTransformation

logger = logging.getLogger(__name__)


def default_max_threads(number_of_parameters: int) -> int:
    """Worker budget for the finite-difference Jacobian: min(2 * cpus, parameters), at least 1."""
    cpus = max(os.cpu_count() or 1, 1)
    return max(1, min(2 * cpus, number_of_parameters))


class Solver:
    """
    Calibrates the parameters of curves in a model so that products hit their targets.

    Example:
        >>> solver = Solver(model, products, calibration_accuracy=1e-12)
        >>> calibrated_model = solver.get_calibrated_model([discount_curve])
        >>> solver.accuracy, solver.iterations
    """

    def __init__(
        self,
        model,
        calibration_products: Sequence,
        calibration_target_values: Optional[Sequence[float]] = None,
        parameter_transformation: Optional[ParameterTransformation] = None,
        evaluation_time: float = 0.0,
        calibration_accuracy: float = 0.0,
        optimizer_factory: Optional[OptimizerFactory] = None,
        max_iterations: int = 1000,
        max_threads: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        if not calibration_products:
            raise ValueError("At least one calibration product is required")
        if calibration_target_values is None:
            calibration_target_values = [0.0] * len(calibration_products)
        if len(calibration_target_values) != len(calibration_products):
            raise ValueError(
                f"Got {len(calibration_target_values)} target values for "
                f"{len(calibration_products)} calibration products"
            )

        self.model = model
        self.calibration_products = list(calibration_products)
        self.calibration_target_values = np.array(calibration_target_values, dtype=float)
        self.parameter_transformation = parameter_transformation
        self.evaluation_time = evaluation_time
        self.calibration_accuracy = calibration_accuracy
        self.optimizer_factory = optimizer_factory
        self.max_iterations = max_iterations
        self.max_threads = max_threads
        self.cancel_event = cancel_event

        self.iterations = 0
        self.accuracy = np.inf
        self.last_optimizer: Optional[Optimizer] = None

    def get_calibrated_model(self, objects_to_calibrate: Iterable):
        """
        Find the parameters of ``objects_to_calibrate`` that reprice the products.

        Args:
            objects_to_calibrate: Curves of the model whose parameters are free

        Returns:
            New model with the calibrated curves; the input model is unchanged

        Raises:
            SolverError: On non-convergence or numerical failure
            CalibrationCancelledError: If the cancel event was set
        """
        aggregation = ParameterAggregation(objects_to_calibrate)
        initial_parameters = aggregation.get_parameter()
        if initial_parameters is None:
            raise ValueError("The objects to calibrate have no free parameters")

        if self.parameter_transformation is not None:
            initial_parameters = self.parameter_transformation.get_solver_parameter(initial_parameters)

        number_of_parameters = len(initial_parameters)
        lower_bound = np.full(number_of_parameters, -np.inf)
        upper_bound = np.full(number_of_parameters, np.inf)

        optimizer_factory = self.optimizer_factory
        if optimizer_factory is None:
            max_threads = self.max_threads or default_max_threads(number_of_parameters)
            optimizer_factory = LeastSquaresOptimizerFactory(
                max_iterations=self.max_iterations,
                error_tolerance=self.calibration_accuracy,
                max_threads=max(1, min(max_threads, number_of_parameters)),
                cancel_event=self.cancel_event,
            )

        def objective(solver_parameters: np.ndarray) -> np.ndarray:
            model = self._get_model_for_solver_parameter(aggregation, solver_parameters)
            return np.array(
                [product.get_value(self.evaluation_time, model) for product in self.calibration_products]
            )

        optimizer = optimizer_factory.get_optimizer(
            objective,
            initial_parameters,
            lower_bound,
            upper_bound,
            self.calibration_target_values,
        )
        self.last_optimizer = optimizer

        logger.debug(
            "Calibrating %d parameters to %d products",
            number_of_parameters,
            len(self.calibration_products),
        )
        try:
            optimizer.run()
            best_fit = optimizer.get_best_fit_parameters()
            calibrated_model = self._get_model_for_solver_parameter(aggregation, best_fit)
        except OptimizerCancelledError as exc:
            raise CalibrationCancelledError(str(exc)) from exc
        except (OptimizerError, CloneNotSupportedError, ValueError, ArithmeticError) as exc:
            raise SolverError(f"Calibration failed: {exc}") from exc

        self.iterations = optimizer.get_iterations()
        self.accuracy = self._get_pricing_error(calibrated_model)
        logger.info(
            "Calibration finished after %d iterations with accuracy %.3e",
            self.iterations,
            self.accuracy,
        )
        return calibrated_model

    def _get_pricing_error(self, model) -> float:
        """Root mean squared difference between product values and their targets."""
        values = np.array(
            [product.get_value(self.evaluation_time, model) for product in self.calibration_products]
        )
        return float(np.sqrt(np.mean((values - self.calibration_target_values) ** 2)))

    def _get_model_for_solver_parameter(self, aggregation: ParameterAggregation, solver_parameters):
        parameters = solver_parameters
        if self.parameter_transformation is not None:
            parameters = self.parameter_transformation.get_parameter(solver_parameters)
        curves_to_modify = aggregation.get_objects_to_modify_for_parameter(parameters)
        return self.model.get_clone_for_parameter(curves_to_modify)
