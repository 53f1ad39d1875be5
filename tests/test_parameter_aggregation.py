"""Tests for flattening and splitting parameter vectors across curves."""

import numpy as np
import pytest

from multicurve.calibration import (
    CloneNotSupportedError,
    MutableParameterObject,
    ParameterAggregation,
    ParameterObject,
)
from multicurve.curves import DiscountCurve, ForwardCurve


class LegacyParameters:
    """Mutable parameter holder supporting in-place writes."""

    def __init__(self, values):
        self.values = np.array(values, dtype=float)

    def get_parameter(self):
        return self.values.copy()

    def get_clone_for_parameter(self, parameter):
        return LegacyParameters(parameter)

    def set_parameter(self, parameter):
        self.values = np.array(parameter, dtype=float)


@pytest.fixture
def curves():
    discount = DiscountCurve.from_discount_factors("discount", [1.0, 2.0], [0.98, 0.95])
    forward = ForwardCurve.from_forwards("forward", [0.0, 1.0, 2.0], [0.01, 0.02, 0.03])
    fixed = DiscountCurve("fixed", [(0.0, 1.0, False)])
    return discount, forward, fixed


def test_curves_are_parameter_objects(curves):
    discount, forward, _ = curves
    assert isinstance(discount, ParameterObject)
    assert isinstance(forward, ParameterObject)
    assert not isinstance(discount, MutableParameterObject)
    assert isinstance(LegacyParameters([1.0]), MutableParameterObject)


def test_aggregated_length_is_sum_of_members(curves):
    aggregation = ParameterAggregation(curves)
    parameter = aggregation.get_parameter()

    assert len(parameter) == 5
    np.testing.assert_allclose(parameter, [0.98, 0.95, 0.01, 0.02, 0.03])


def test_empty_aggregation_has_no_parameter():
    assert ParameterAggregation().get_parameter() is None
    fixed = DiscountCurve("fixed", [(0.0, 1.0, False)])
    assert ParameterAggregation([fixed]).get_parameter() is None


def test_round_trip_reproduces_member_vectors(curves):
    discount, forward, fixed = curves
    aggregation = ParameterAggregation(curves)

    split = aggregation.get_objects_to_modify_for_parameter(aggregation.get_parameter())

    assert list(split) == [discount, forward]
    np.testing.assert_allclose(split[discount], discount.get_parameter())
    np.testing.assert_allclose(split[forward], forward.get_parameter())
    assert fixed not in split


def test_split_assigns_slices_in_insertion_order(curves):
    discount, forward, _ = curves
    aggregation = ParameterAggregation([forward, discount])

    split = aggregation.get_objects_to_modify_for_parameter([1.0, 2.0, 3.0, 4.0, 5.0])

    np.testing.assert_allclose(split[forward], [1.0, 2.0, 3.0])
    np.testing.assert_allclose(split[discount], [4.0, 5.0])


def test_split_returns_copies(curves):
    discount, _, _ = curves
    aggregation = ParameterAggregation([discount])

    split = aggregation.get_objects_to_modify_for_parameter([0.5, 0.4])
    split[discount][0] = 123.0

    np.testing.assert_allclose(discount.get_parameter(), [0.98, 0.95])


def test_split_rejects_wrong_length(curves):
    aggregation = ParameterAggregation(curves)
    with pytest.raises(ValueError, match="length"):
        aggregation.get_objects_to_modify_for_parameter([1.0, 2.0])


def test_membership_changes_preserve_order(curves):
    discount, forward, fixed = curves
    aggregation = ParameterAggregation()
    aggregation.add(discount)
    aggregation.add(forward)
    aggregation.add(discount)

    assert len(aggregation) == 2
    assert list(aggregation) == [discount, forward]

    aggregation.remove(discount)
    assert discount not in aggregation
    assert forward in aggregation
    aggregation.remove(fixed)
    assert len(aggregation) == 1


def test_aggregation_cannot_be_cloned(curves):
    aggregation = ParameterAggregation(curves)
    with pytest.raises(CloneNotSupportedError):
        aggregation.get_clone_for_parameter(aggregation.get_parameter())


def test_legacy_set_parameter_writes_mutable_members():
    first = LegacyParameters([1.0, 2.0])
    second = LegacyParameters([3.0])
    aggregation = ParameterAggregation([first, second])

    with pytest.warns(DeprecationWarning):
        aggregation.set_parameter([10.0, 20.0, 30.0])

    np.testing.assert_allclose(first.values, [10.0, 20.0])
    np.testing.assert_allclose(second.values, [30.0])


def test_legacy_set_parameter_rejects_immutable_members(curves):
    aggregation = ParameterAggregation(curves)
    with pytest.warns(DeprecationWarning):
        with pytest.raises(CloneNotSupportedError):
            aggregation.set_parameter(aggregation.get_parameter())


def test_legacy_set_parameter_leaves_members_untouched_on_failure(curves):
    discount, _, _ = curves
    legacy = LegacyParameters([1.0, 2.0])
    aggregation = ParameterAggregation([legacy, discount])

    with pytest.warns(DeprecationWarning):
        with pytest.raises(CloneNotSupportedError):
            aggregation.set_parameter([10.0, 20.0, 0.5, 0.4])

    np.testing.assert_allclose(legacy.values, [1.0, 2.0])
    np.testing.assert_allclose(discount.get_parameter(), [0.98, 0.95])
