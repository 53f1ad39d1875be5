"""Tests for the scipy-backed least-squares optimizer."""

import threading

import numpy as np
import pytest

from multicurve.optimizer import (
    LeastSquaresOptimizer,
    LeastSquaresOptimizerFactory,
    OptimizerCancelledError,
    OptimizerError,
)

MATRIX = np.array([[2.0, 1.0, 0.0], [0.5, 3.0, 1.0], [0.0, 1.0, 4.0]])
TARGETS = np.array([1.0, 2.0, 3.0])


def linear_objective(x):
    return MATRIX @ x


def test_solves_linear_system():
    optimizer = LeastSquaresOptimizer(linear_objective)
    optimizer.set_initial_parameters([0.0, 0.0, 0.0]).set_target_values(TARGETS)
    optimizer.run()

    expected = np.linalg.solve(MATRIX, TARGETS)
    np.testing.assert_allclose(optimizer.get_best_fit_parameters(), expected, atol=1e-10)
    assert optimizer.get_root_mean_squared_error() < 1e-10
    assert optimizer.get_iterations() >= 1


def test_threaded_jacobian_gives_same_result():
    serial = LeastSquaresOptimizer(linear_objective, max_threads=1)
    threaded = LeastSquaresOptimizer(linear_objective, max_threads=4)
    for optimizer in (serial, threaded):
        optimizer.set_initial_parameters([0.0, 0.0, 0.0]).set_target_values(TARGETS)
        optimizer.run()

    np.testing.assert_allclose(
        serial.get_best_fit_parameters(), threaded.get_best_fit_parameters(), atol=1e-12
    )


def test_solves_nonlinear_system():
    optimizer = LeastSquaresOptimizer(lambda x: np.array([x[0] ** 2, np.exp(x[1])]))
    optimizer.set_initial_parameters([1.0, 0.0]).set_target_values([4.0, 2.0])
    optimizer.run()

    np.testing.assert_allclose(optimizer.get_best_fit_parameters(), [2.0, np.log(2.0)], atol=1e-8)


def test_stops_when_error_tolerance_is_reached():
    optimizer = LeastSquaresOptimizer(
        lambda x: np.array([x[0] ** 3]), error_tolerance=1e-3
    )
    optimizer.set_initial_parameters([1.0]).set_target_values([8.0])
    optimizer.run()

    assert optimizer.get_root_mean_squared_error() <= 1e-3


def test_already_converged_start_needs_no_iterations():
    optimizer = LeastSquaresOptimizer(linear_objective, error_tolerance=1e-12)
    start = np.linalg.solve(MATRIX, TARGETS)
    optimizer.set_initial_parameters(start).set_target_values(TARGETS)
    optimizer.run()

    assert optimizer.get_iterations() == 0
    np.testing.assert_allclose(optimizer.get_best_fit_parameters(), start)


def test_weights_scale_residuals():
    optimizer = LeastSquaresOptimizer(lambda x: np.array([x[0], x[0]]))
    optimizer.set_initial_parameters([0.0]).set_target_values([1.0, 2.0]).set_weights([1.0, 3.0])
    optimizer.run()

    # weighted normal equation: (1 * 1 + 9 * 2) / (1 + 9)
    np.testing.assert_allclose(optimizer.get_best_fit_parameters(), [1.9], atol=1e-8)


def test_iteration_budget_exhausted_raises():
    optimizer = LeastSquaresOptimizer(
        lambda x: np.array([np.exp(5.0 * x[0])]), max_iterations=1
    )
    optimizer.set_initial_parameters([1.0]).set_target_values([2.0])

    with pytest.raises(OptimizerError, match="No convergence"):
        optimizer.run()


def test_singular_jacobian_raises():
    optimizer = LeastSquaresOptimizer(lambda x: np.array([x[0] - 1.0, x[0] + 1.0]))
    optimizer.set_initial_parameters([0.0, 0.0])

    with pytest.raises(OptimizerError, match="Singular"):
        optimizer.run()


def test_non_finite_objective_raises():
    optimizer = LeastSquaresOptimizer(lambda x: np.array([np.nan]))
    optimizer.set_initial_parameters([1.0])

    with pytest.raises(OptimizerError, match="non-finite"):
        optimizer.run()


def test_cancel_event_aborts_run():
    cancel_event = threading.Event()
    cancel_event.set()
    optimizer = LeastSquaresOptimizer(linear_objective, cancel_event=cancel_event)
    optimizer.set_initial_parameters([0.0, 0.0, 0.0]).set_target_values(TARGETS)

    with pytest.raises(OptimizerCancelledError):
        optimizer.run()


def test_best_fit_requires_run():
    with pytest.raises(OptimizerError):
        LeastSquaresOptimizer(linear_objective).get_best_fit_parameters()


def test_max_iteration_must_be_positive():
    with pytest.raises(ValueError):
        LeastSquaresOptimizer(linear_objective).set_max_iteration(0)


def test_factory_configures_optimizer():
    factory = LeastSquaresOptimizerFactory(max_iterations=50, error_tolerance=1e-9, max_threads=2)
    optimizer = factory.get_optimizer(
        linear_objective,
        [0.0, 0.0, 0.0],
        [-np.inf] * 3,
        [np.inf] * 3,
        TARGETS,
    )

    assert optimizer.max_iterations == 50
    assert optimizer.error_tolerance == 1e-9
    assert optimizer.max_threads == 2
    optimizer.run()
    np.testing.assert_allclose(
        optimizer.get_best_fit_parameters(), np.linalg.solve(MATRIX, TARGETS), atol=1e-8
    )
