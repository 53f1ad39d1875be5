"""Tests for discount and forward curves."""

import math

import numpy as np
import pytest

from multicurve.curves import (
    Curve,
    DiscountCurve,
    ForwardCurve,
    ForwardCurveFromDiscountCurve,
    InterpolationEntity,
)
from multicurve.model import AnalyticModel


def test_flat_zero_curve_discount_factors(flat_discount_curve):
    assert flat_discount_curve.get_discount_factor(0.0) == pytest.approx(1.0)
    assert flat_discount_curve.get_discount_factor(1.5) == pytest.approx(math.exp(-0.03))
    assert flat_discount_curve.get_zero_rate(1.5) == pytest.approx(0.02)
    # flat forward extrapolation beyond the last pillar
    assert flat_discount_curve.get_discount_factor(7.0) == pytest.approx(math.exp(-0.14))


def test_forward_rate_from_discount_curve(flat_discount_curve):
    expected = (math.exp(0.02) - 1.0) / 1.0
    assert flat_discount_curve.get_forward_rate(1.0, 2.0) == pytest.approx(expected)
    with pytest.raises(ValueError):
        flat_discount_curve.get_forward_rate(2.0, 1.0)


def test_parameter_vector_contains_free_points_only():
    curve = DiscountCurve(
        "discount", [(0.0, 1.0, False), (1.0, 0.98, True), (2.0, 0.95, True)]
    )
    np.testing.assert_allclose(curve.get_parameter(), [0.98, 0.95])
    np.testing.assert_allclose(curve.get_parameter_times(), [1.0, 2.0])


def test_curve_without_free_points_has_no_parameter(seed_discount_curve):
    assert seed_discount_curve.get_parameter() is None


def test_clone_for_parameter_does_not_mutate(flat_discount_curve):
    original = flat_discount_curve.get_parameter().copy()
    clone = flat_discount_curve.get_clone_for_parameter(original * 0.99)

    np.testing.assert_allclose(flat_discount_curve.get_parameter(), original)
    np.testing.assert_allclose(clone.get_parameter(), original * 0.99)
    assert clone is not flat_discount_curve
    assert clone.name == flat_discount_curve.name
    assert isinstance(clone, DiscountCurve)


def test_clone_for_own_parameter_is_equivalent(flat_discount_curve):
    clone = flat_discount_curve.get_clone_for_parameter(flat_discount_curve.get_parameter())

    assert clone.points == flat_discount_curve.points
    for t in [0.3, 1.0, 2.7, 6.0]:
        assert clone.get_value(t) == flat_discount_curve.get_value(t)


def test_clone_for_parameter_checks_length(flat_discount_curve):
    with pytest.raises(ValueError):
        flat_discount_curve.get_clone_for_parameter([1.0])


def test_clone_builder_adds_point(seed_discount_curve):
    extended = seed_discount_curve.get_clone_builder().add_point(1.0, 0.97, True).build()

    assert len(seed_discount_curve.points) == 1
    assert len(extended.points) == 2
    np.testing.assert_allclose(extended.get_parameter(), [0.97])
    assert extended.get_discount_factor(1.0) == pytest.approx(0.97)


def test_adding_conflicting_point_raises(seed_discount_curve):
    with pytest.raises(ValueError, match="another value already exists"):
        seed_discount_curve.get_clone_builder().add_point(0.0, 0.9, True)


def test_adding_identical_point_is_ignored(seed_discount_curve):
    curve = seed_discount_curve.get_clone_builder().add_point(0.0, 1.0, False).build()
    assert len(curve.points) == 1


def test_curve_requires_name():
    with pytest.raises(ValueError):
        Curve("")


def test_curve_without_points_cannot_be_evaluated(empty_forward_curve):
    with pytest.raises(ValueError, match="no points"):
        empty_forward_curve.get_value(1.0)


def test_log_of_value_per_time_interpolation():
    curve = Curve(
        "zero",
        [(0.0, 1.0, False), (1.0, math.exp(-0.02), True), (2.0, math.exp(-0.06), True)],
        interpolation_entity=InterpolationEntity.LOG_OF_VALUE_PER_TIME,
    )
    assert curve.get_value(0.0) == pytest.approx(1.0)
    assert curve.get_value(1.5) == pytest.approx(math.exp(-0.025 * 1.5))


def test_to_frame(flat_discount_curve):
    frame = flat_discount_curve.to_frame()
    assert list(frame.columns) == ["time", "value", "is_parameter"]
    assert len(frame) == 4
    assert frame["time"].tolist() == [0.0, 1.0, 2.0, 5.0]


def test_forward_curve_returns_interpolated_forward():
    curve = ForwardCurve.from_forwards("forward", [0.0, 1.0], [0.02, 0.03], payment_offset=0.25)

    assert curve.payment_offset == 0.25
    assert curve.get_forward(None, 0.5) == pytest.approx(0.025)
    assert curve.get_forward(None, 3.0) == pytest.approx(0.03)


def test_forward_curve_clone_keeps_payment_offset():
    curve = ForwardCurve.from_forwards("forward", [1.0], [0.02], payment_offset=0.5)
    clone = curve.get_clone_for_parameter([0.04])

    assert isinstance(clone, ForwardCurve)
    assert clone.payment_offset == 0.5
    assert clone.get_forward(None, 1.0) == pytest.approx(0.04)


def test_forward_curve_from_discount_curve(flat_discount_curve):
    model = AnalyticModel([flat_discount_curve])
    forward_curve = ForwardCurveFromDiscountCurve("discount", payment_offset=0.5)

    expected = (math.exp(0.02 * 0.5) - 1.0) / 0.5
    assert forward_curve.get_forward(model, 1.0) == pytest.approx(expected)
    assert forward_curve.name == "ForwardCurveFromDiscountCurve(discount,0.5)"


def test_forward_curve_from_discount_curve_uses_given_offset(flat_discount_curve):
    model = AnalyticModel([flat_discount_curve])
    forward_curve = ForwardCurveFromDiscountCurve("discount")

    expected = (math.exp(0.02) - 1.0) / 1.0
    assert forward_curve.get_forward(model, 1.0, 1.0) == pytest.approx(expected)
    with pytest.raises(ValueError):
        forward_curve.get_forward(model, 1.0)


def test_forward_curve_from_discount_curve_has_no_parameters():
    forward_curve = ForwardCurveFromDiscountCurve("discount", 0.25)

    assert forward_curve.get_parameter() is None
    assert forward_curve.get_clone_for_parameter(None) is forward_curve
    with pytest.raises(ValueError):
        forward_curve.get_clone_for_parameter([0.1])


def test_forward_curve_from_discount_curve_missing_curve():
    forward_curve = ForwardCurveFromDiscountCurve("missing", 0.25)
    with pytest.raises(ValueError, match="missing"):
        forward_curve.get_forward(AnalyticModel(), 1.0)
