"""
Base curve classes: immutable, named, parameterised interpolation curves.
"""

from __future__ import annotations

import copy
import math
from datetime import date
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from multicurve.interpolation import (
    ExtrapolationMethod,
    InterpolationMethod,
    Interpolator,
    create_interpolator,
)


class InterpolationEntity(Enum):
    """Quantity on which the interpolation is performed."""

    VALUE = "VALUE"
    LOG_OF_VALUE = "LOG_OF_VALUE"
    LOG_OF_VALUE_PER_TIME = "LOG_OF_VALUE_PER_TIME"


class CurvePoint(NamedTuple):
    """Single interpolation point; ``value`` is in native units (e.g. a discount factor)."""

    time: float
    value: float
    is_parameter: bool


class Curve:
    """Immutable curve given by interpolation points.

    The values of the points flagged ``is_parameter`` form the curve's
    parameter vector (ordered by time). Every modification returns a new
    curve; instances are never changed after construction and can be shared
    across threads.
    """

    def __init__(
        self,
        name: str,
        points: Iterable[Union[CurvePoint, Tuple[float, float, bool]]] = (),
        interpolation_method: Union[str, InterpolationMethod] = InterpolationMethod.LINEAR,
        extrapolation_method: Union[str, ExtrapolationMethod] = ExtrapolationMethod.CONSTANT,
        interpolation_entity: Union[str, InterpolationEntity] = InterpolationEntity.VALUE,
        reference_date: Optional[date] = None,
    ):
        if not name:
            raise ValueError("Curve name must be a non-empty string")

        self.name = name
        self.reference_date = reference_date
        self.interpolation_method = _coerce(InterpolationMethod, interpolation_method)
        self.extrapolation_method = _coerce(ExtrapolationMethod, extrapolation_method)
        self.interpolation_entity = _coerce(InterpolationEntity, interpolation_entity)
        self._set_points(_merge_points([], points))

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------
    def get_value(self, time: float, model=None) -> float:
        """Curve value at ``time``; ``model`` is accepted for API parity."""
        if self._interpolator is None:
            raise ValueError(f"Curve {self.name} has no points")
        return self._value_from_entity(self._interpolator.interpolate(time), time)

    @property
    def points(self) -> Tuple[CurvePoint, ...]:
        return self._points

    @property
    def times(self) -> np.ndarray:
        return np.array([p.time for p in self._points])

    # ------------------------------------------------------------------
    # Parameter object
    # ------------------------------------------------------------------
    def get_parameter(self) -> Optional[np.ndarray]:
        """Values of the free points, or None if the curve has none."""
        values = [p.value for p in self._points if p.is_parameter]
        if not values:
            return None
        return np.array(values, dtype=float)

    def get_parameter_times(self) -> np.ndarray:
        return np.array([p.time for p in self._points if p.is_parameter])

    def get_clone_for_parameter(self, parameter: Optional[Sequence[float]]) -> "Curve":
        """New curve with the free point values replaced by ``parameter``."""
        if parameter is None:
            return self._clone_with_points(self._points)

        parameter = np.asarray(parameter, dtype=float)
        number_of_parameters = sum(1 for p in self._points if p.is_parameter)
        if len(parameter) != number_of_parameters:
            raise ValueError(
                f"Curve {self.name} has {number_of_parameters} parameters, "
                f"got a vector of length {len(parameter)}"
            )

        new_points = []
        parameter_index = 0
        for point in self._points:
            if point.is_parameter:
                point = point._replace(value=float(parameter[parameter_index]))
                parameter_index += 1
            new_points.append(point)
        return self._clone_with_points(new_points)

    def get_clone_builder(self) -> "CurveBuilder":
        return CurveBuilder(self)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def to_frame(self) -> pd.DataFrame:
        """Interpolation points as a DataFrame (time, value, is_parameter)."""
        return pd.DataFrame(
            [p._asdict() for p in self._points],
            columns=["time", "value", "is_parameter"],
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name!r}, "
            f"points={[(p.time, p.value) for p in self._points]})"
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _clone_with_points(self, points: Iterable[CurvePoint]) -> "Curve":
        new_curve = copy.copy(self)
        new_curve._set_points(list(points))
        return new_curve

    def _set_points(self, points: List[CurvePoint]) -> None:
        self._points = tuple(points)
        self._interpolator = self._build_interpolator()

    def _build_interpolator(self) -> Optional[Interpolator]:
        points = self._points
        if self.interpolation_entity == InterpolationEntity.LOG_OF_VALUE_PER_TIME and len(points) > 1:
            # log(value)/t is undefined at t=0, where the value is 1 by construction
            points = [p for p in points if p.time != 0.0]
        if not points:
            return None

        pillars = [p.time for p in points]
        entities = [self._entity_from_value(p.value, p.time) for p in points]
        return create_interpolator(
            self.interpolation_method, pillars, entities, self.extrapolation_method
        )

    def _entity_from_value(self, value: float, time: float) -> float:
        if self.interpolation_entity == InterpolationEntity.LOG_OF_VALUE:
            return math.log(value) if value > 0 else -math.inf
        if self.interpolation_entity == InterpolationEntity.LOG_OF_VALUE_PER_TIME:
            if time == 0.0:
                return 0.0
            return math.log(value) / time if value > 0 else -math.inf
        return value

    def _value_from_entity(self, entity: float, time: float) -> float:
        if self.interpolation_entity == InterpolationEntity.LOG_OF_VALUE:
            return math.exp(entity)
        if self.interpolation_entity == InterpolationEntity.LOG_OF_VALUE_PER_TIME:
            return math.exp(entity * time)
        return entity


class CurveBuilder:
    """Collects additional points and builds a new curve from a template curve."""

    def __init__(self, curve: Curve):
        self._curve = curve
        self._points: List[CurvePoint] = list(curve.points)

    def add_point(self, time: float, value: float, is_parameter: bool) -> "CurveBuilder":
        self._points = _merge_points(self._points, [CurvePoint(time, value, is_parameter)])
        return self

    def build(self) -> Curve:
        return self._curve._clone_with_points(self._points)


def _merge_points(
    existing: Sequence[CurvePoint],
    new_points: Iterable[Union[CurvePoint, Tuple[float, float, bool]]],
) -> List[CurvePoint]:
    """Insert points keeping time order; a clashing time must carry the same value."""
    by_time = {p.time: p for p in existing}
    for point in new_points:
        point = CurvePoint(float(point[0]), float(point[1]), bool(point[2]))
        if point.time in by_time:
            if by_time[point.time].value == point.value:
                continue
            raise ValueError(
                f"Trying to add a value for time {point.time} for which another value already exists"
            )
        by_time[point.time] = point
    return [by_time[t] for t in sorted(by_time)]


def _coerce(enum_type, value):
    if isinstance(value, str):
        return enum_type(value.upper())
    return enum_type(value)
