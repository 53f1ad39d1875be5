"""
Least-squares optimizer backed by scipy's trust-region reflective solver.

The Jacobian is computed by forward finite differences; its columns are
independent objective evaluations and are spread over a thread pool.
"""

import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np
from scipy.optimize import least_squares

from .base import ObjectiveFunction, Optimizer, OptimizerCancelledError, OptimizerError

logger = logging.getLogger(__name__)

_EPS = np.finfo(float).eps


class _StopOptimization(Exception):
    """Internal signal ending the scipy run early."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class LeastSquaresOptimizer(Optimizer):
    """
    Optimizer minimising sum_i (w_i * (f_i(x) - y_i))^2.

    The run stops when the root mean squared error reaches ``error_tolerance``,
    when scipy's convergence tests are met, or after ``max_iterations``
    Jacobian evaluations. Ending above a positive error tolerance, or
    running out of iterations above it, raises OptimizerError.
    """

    def __init__(
        self,
        objective: ObjectiveFunction,
        error_tolerance: float = 0.0,
        max_iterations: int = 1000,
        max_threads: int = 1,
        cancel_event: Optional[threading.Event] = None,
        solver_tolerance: float = 1e-12,
    ):
        super().__init__(objective)
        self.error_tolerance = error_tolerance
        self.set_max_iteration(max_iterations)
        self.max_threads = max(1, int(max_threads))
        self.cancel_event = cancel_event
        self.solver_tolerance = max(solver_tolerance, 10 * _EPS)

        self._best_fit_parameters: Optional[np.ndarray] = None
        self._best_rms = math.inf
        self._iterations = 0
        self._last_evaluation = None

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def get_best_fit_parameters(self) -> np.ndarray:
        if self._best_fit_parameters is None:
            raise OptimizerError("Optimizer has not been run")
        return self._best_fit_parameters.copy()

    def get_iterations(self) -> int:
        return self._iterations

    def get_root_mean_squared_error(self) -> float:
        return self._best_rms

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    def run(self) -> None:
        if self.initial_parameters is None or len(self.initial_parameters) == 0:
            raise ValueError("Initial parameters must be set and non-empty")

        x0 = self.initial_parameters
        number_of_parameters = len(x0)
        lower = self.lower_bound if self.lower_bound is not None else np.full(number_of_parameters, -np.inf)
        upper = self.upper_bound if self.upper_bound is not None else np.full(number_of_parameters, np.inf)

        self._best_fit_parameters = x0.copy()
        self._best_rms = math.inf
        self._iterations = 0
        self._last_evaluation = None

        executor = None
        if self.max_threads > 1 and number_of_parameters > 1:
            executor = ThreadPoolExecutor(
                max_workers=min(self.max_threads, number_of_parameters),
                thread_name_prefix="multicurve-jacobian",
            )

        try:
            result = least_squares(
                self._residuals,
                x0=x0,
                jac=lambda x: self._jacobian(x, executor),
                bounds=(lower, upper),
                method="trf",
                ftol=self.solver_tolerance,
                xtol=self.solver_tolerance,
                gtol=self.solver_tolerance,
                max_nfev=10 * self.max_iterations + number_of_parameters,
            )
        except _StopOptimization as stop:
            logger.debug("Optimization stopped after %d iterations: %s", self._iterations, stop.reason)
            if stop.reason == "max_iterations":
                self._check_accuracy(f"within {self.max_iterations} iterations")
            return
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        self._update_best(result.x, result.fun)
        logger.debug(
            "Optimization finished: status=%d, iterations=%d, rms=%.3e",
            result.status,
            self._iterations,
            self._best_rms,
        )
        if result.status == 0:
            self._check_accuracy(f"within {self.max_iterations} iterations")
        elif self.error_tolerance > 0:
            # scipy stalled on ftol/xtol/gtol before reaching the error tolerance
            self._check_accuracy(f"after scipy stopped: {result.message}")

    def _check_accuracy(self, context: str) -> None:
        if self._best_rms > self.error_tolerance:
            logger.warning(
                "No convergence %s: rms error %.3e above tolerance %.3e",
                context,
                self._best_rms,
                self.error_tolerance,
            )
            raise OptimizerError(
                f"No convergence {context} "
                f"(rms error {self._best_rms:.3e}, tolerance {self.error_tolerance:.3e})"
            )

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------
    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        values = np.asarray(self.objective(np.array(x, dtype=float)), dtype=float)
        targets = self.target_values if self.target_values is not None else np.zeros(len(values))
        if len(values) != len(targets):
            raise OptimizerError(
                f"Objective returned {len(values)} values for {len(targets)} targets"
            )
        return self._weighted_residuals(values - targets)

    def _weighted_residuals(self, residuals: np.ndarray) -> np.ndarray:
        if self.weights is None:
            return residuals
        return self.weights * residuals

    def _residuals(self, x: np.ndarray) -> np.ndarray:
        residuals = self._evaluate(x)
        if not np.all(np.isfinite(residuals)):
            raise OptimizerError(f"Objective returned non-finite values at {x}")

        self._last_evaluation = (np.array(x, copy=True), residuals)
        self._update_best(x, residuals)
        if self._best_rms <= self.error_tolerance:
            raise _StopOptimization("accuracy")
        return residuals

    def _jacobian(self, x: np.ndarray, executor: Optional[ThreadPoolExecutor]) -> np.ndarray:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise OptimizerCancelledError(f"Optimization cancelled after {self._iterations} iterations")
        if self._iterations >= self.max_iterations:
            raise _StopOptimization("max_iterations")
        self._iterations += 1

        if self._last_evaluation is not None and np.array_equal(self._last_evaluation[0], x):
            f0 = self._last_evaluation[1]
        else:
            f0 = self._evaluate(x)

        def column(index: int) -> np.ndarray:
            step = math.sqrt(_EPS) * max(1.0, abs(x[index]))
            shifted = np.array(x, dtype=float, copy=True)
            shifted[index] += step
            return (self._evaluate(shifted) - f0) / step

        indices = range(len(x))
        if executor is None:
            columns = [column(i) for i in indices]
        else:
            columns = list(executor.map(column, indices))

        jacobian = np.column_stack(columns)
        if not np.all(np.isfinite(jacobian)):
            raise OptimizerError(f"Non-finite Jacobian at {x}")
        singular = np.flatnonzero(np.all(jacobian == 0.0, axis=0))
        if len(singular) > 0:
            raise OptimizerError(
                f"Singular Jacobian: parameters {singular.tolist()} do not move any residual"
            )
        return jacobian

    def _update_best(self, x: np.ndarray, residuals: np.ndarray) -> None:
        rms = math.sqrt(float(np.mean(residuals ** 2))) if len(residuals) else 0.0
        if rms < self._best_rms:
            self._best_rms = rms
            self._best_fit_parameters = np.array(x, dtype=float, copy=True)
