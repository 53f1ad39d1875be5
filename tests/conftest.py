"""Shared fixtures for the multicurve test suite."""

import pytest

from multicurve.curves import DiscountCurve, ForwardCurve
from multicurve.model import AnalyticModel
from multicurve.schedule import regular_schedule


@pytest.fixture
def flat_discount_curve():
    """Discount curve with a flat 2% continuously compounded zero rate."""
    return DiscountCurve.from_zero_rates("discount", [0.0, 1.0, 2.0, 5.0], [0.02] * 4)


@pytest.fixture
def seed_discount_curve():
    """Discount curve holding only the fixed point P(0) = 1."""
    return DiscountCurve("discount", [(0.0, 1.0, False)])


@pytest.fixture
def empty_forward_curve():
    return ForwardCurve("forward")


@pytest.fixture
def calibration_model(seed_discount_curve, empty_forward_curve):
    return AnalyticModel([seed_discount_curve, empty_forward_curve])


@pytest.fixture
def annual_schedule():
    return regular_schedule(0.0, 2, 1.0)
