"""Tests for the joint least-squares solver."""

import threading

import numpy as np
import pytest

from multicurve.calibration import (
    CalibrationCancelledError,
    PositiveParameterTransformation,
    Solver,
    SolverError,
)
from multicurve.curves import DiscountCurve
from multicurve.instruments import Deposit
from multicurve.model import AnalyticModel
from multicurve.optimizer import LeastSquaresOptimizerFactory, OptimizerError
from multicurve.schedule import regular_schedule


@pytest.fixture
def one_year_model():
    curve = DiscountCurve("discount", [(0.0, 1.0, False), (1.0, 1.0, True)])
    return AnalyticModel([curve])


@pytest.fixture
def one_year_deposit():
    return Deposit(regular_schedule(0.0, 1, 1.0), 0.02, "discount")


def test_single_deposit_calibration(one_year_model, one_year_deposit):
    solver = Solver(one_year_model, [one_year_deposit])
    calibrated = solver.get_calibrated_model([one_year_model.get_curve("discount")])

    assert calibrated.get_discount_curve("discount").get_discount_factor(1.0) == pytest.approx(
        1.0 / 1.02, abs=1e-12
    )
    assert solver.accuracy < 1e-12
    assert solver.iterations >= 1


def test_input_model_is_not_mutated(one_year_model, one_year_deposit):
    curve = one_year_model.get_curve("discount")
    Solver(one_year_model, [one_year_deposit]).get_calibrated_model([curve])

    assert one_year_model.get_curve("discount") is curve
    np.testing.assert_allclose(curve.get_parameter(), [1.0])


def test_single_parameter_uses_one_worker(one_year_model, one_year_deposit):
    solver = Solver(one_year_model, [one_year_deposit], max_threads=8)
    solver.get_calibrated_model([one_year_model.get_curve("discount")])

    assert solver.last_optimizer.max_threads == 1


def test_calibration_with_transformation(one_year_model, one_year_deposit):
    solver = Solver(
        one_year_model,
        [one_year_deposit],
        parameter_transformation=PositiveParameterTransformation(),
    )
    calibrated = solver.get_calibrated_model([one_year_model.get_curve("discount")])

    assert calibrated.get_discount_curve("discount").get_discount_factor(1.0) == pytest.approx(
        1.0 / 1.02, abs=1e-10
    )


def test_targets_are_matched(one_year_model, one_year_deposit):
    solver = Solver(one_year_model, [one_year_deposit], calibration_target_values=[0.01])
    calibrated = solver.get_calibrated_model([one_year_model.get_curve("discount")])

    assert one_year_deposit.get_value(0.0, calibrated) == pytest.approx(0.01, abs=1e-12)


def test_explicit_optimizer_factory_is_used(one_year_model, one_year_deposit):
    factory = LeastSquaresOptimizerFactory(max_iterations=20, error_tolerance=1e-6)
    solver = Solver(one_year_model, [one_year_deposit], optimizer_factory=factory)
    solver.get_calibrated_model([one_year_model.get_curve("discount")])

    assert solver.last_optimizer.max_iterations == 20
    assert solver.accuracy <= 1e-6


def test_non_convergence_raises_solver_error(one_year_model, one_year_deposit):
    solver = Solver(
        one_year_model,
        [one_year_deposit],
        parameter_transformation=PositiveParameterTransformation(),
        max_iterations=1,
    )
    with pytest.raises(SolverError) as excinfo:
        solver.get_calibrated_model([one_year_model.get_curve("discount")])
    assert isinstance(excinfo.value.__cause__, OptimizerError)


def test_pricing_failure_is_wrapped(one_year_model):
    deposit = Deposit(regular_schedule(0.0, 1, 1.0), 0.02, "missing")
    solver = Solver(one_year_model, [deposit])

    with pytest.raises(SolverError) as excinfo:
        solver.get_calibrated_model([one_year_model.get_curve("discount")])
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_cancellation(one_year_model, one_year_deposit):
    cancel_event = threading.Event()
    cancel_event.set()
    solver = Solver(one_year_model, [one_year_deposit], cancel_event=cancel_event)

    with pytest.raises(CalibrationCancelledError):
        solver.get_calibrated_model([one_year_model.get_curve("discount")])


def test_invalid_inputs(one_year_model, one_year_deposit):
    with pytest.raises(ValueError):
        Solver(one_year_model, [])
    with pytest.raises(ValueError):
        Solver(one_year_model, [one_year_deposit], calibration_target_values=[0.0, 0.0])

    fixed = DiscountCurve("fixed", [(0.0, 1.0, False)])
    with pytest.raises(ValueError, match="no free parameters"):
        Solver(one_year_model, [one_year_deposit]).get_calibrated_model([fixed])


@pytest.fixture
def inconsistent_deposits():
    schedule = regular_schedule(0.0, 1, 1.0)
    return [Deposit(schedule, 0.02, "discount"), Deposit(schedule, 0.05, "discount")]


def pricing_rms(products, model):
    values = np.array([product.get_value(0.0, model) for product in products])
    return np.sqrt(np.mean(values ** 2))


def test_stalled_calibration_above_accuracy_raises(one_year_model, inconsistent_deposits):
    solver = Solver(one_year_model, inconsistent_deposits, calibration_accuracy=1e-8)

    with pytest.raises(SolverError, match="No convergence") as excinfo:
        solver.get_calibrated_model([one_year_model.get_curve("discount")])
    assert isinstance(excinfo.value.__cause__, OptimizerError)


def test_best_fit_without_accuracy_target_is_returned(one_year_model, inconsistent_deposits):
    solver = Solver(one_year_model, inconsistent_deposits)
    calibrated = solver.get_calibrated_model([one_year_model.get_curve("discount")])

    # least-squares optimum of (1 + r_i) * P - 1
    expected = (1.02 + 1.05) / (1.02 ** 2 + 1.05 ** 2)
    assert calibrated.get_discount_curve("discount").get_discount_factor(1.0) == pytest.approx(
        expected, abs=1e-10
    )
    assert solver.accuracy == pytest.approx(pricing_rms(inconsistent_deposits, calibrated))


class WeightedOptimizerFactory(LeastSquaresOptimizerFactory):
    def get_optimizer(self, objective, initial_parameters, lower_bound, upper_bound, target_values):
        optimizer = super().get_optimizer(
            objective, initial_parameters, lower_bound, upper_bound, target_values
        )
        return optimizer.set_weights([10.0] * len(target_values))


def test_accuracy_is_unweighted_pricing_error(one_year_model, inconsistent_deposits):
    solver = Solver(
        one_year_model, inconsistent_deposits, optimizer_factory=WeightedOptimizerFactory()
    )
    calibrated = solver.get_calibrated_model([one_year_model.get_curve("discount")])

    expected = pricing_rms(inconsistent_deposits, calibrated)
    assert expected > 1e-3
    assert solver.accuracy == pytest.approx(expected, rel=1e-10)
    assert solver.last_optimizer.get_root_mean_squared_error() == pytest.approx(10.0 * expected, rel=1e-6)
