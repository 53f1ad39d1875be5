"""
Forward curves: interpolated forwards and forwards implied from a discount curve.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, Sequence, Union

import numpy as np

from multicurve.interpolation import ExtrapolationMethod, InterpolationMethod

from .base import Curve, CurvePoint, InterpolationEntity


class AbstractForwardCurve(ABC):
    """Interface of curves returning the forward of an index for a fixing time."""

    name: str
    payment_offset: Optional[float]

    @abstractmethod
    def get_forward(
        self, model, fixing_time: float, payment_offset: Optional[float] = None
    ) -> float:
        """
        Forward rate for ``fixing_time``.

        Args:
            model: Analytic model used to resolve referenced curves
            fixing_time: Fixing time in years
            payment_offset: Accrual length; the curve's own tenor is used when set

        Returns:
            Simply compounded forward rate
        """


class ForwardCurve(AbstractForwardCurve, Curve):
    """Forward curve given directly by interpolated forward rates."""

    def __init__(
        self,
        name: str,
        points: Sequence = (),
        payment_offset: Optional[float] = None,
        discount_curve_name: Optional[str] = None,
        interpolation_method: Union[str, InterpolationMethod] = InterpolationMethod.LINEAR,
        extrapolation_method: Union[str, ExtrapolationMethod] = ExtrapolationMethod.CONSTANT,
        interpolation_entity: Union[str, InterpolationEntity] = InterpolationEntity.VALUE,
        reference_date: Optional[date] = None,
    ):
        Curve.__init__(
            self,
            name,
            points,
            interpolation_method=interpolation_method,
            extrapolation_method=extrapolation_method,
            interpolation_entity=interpolation_entity,
            reference_date=reference_date,
        )
        self.payment_offset = payment_offset
        self.discount_curve_name = discount_curve_name

    @classmethod
    def from_forwards(
        cls,
        name: str,
        times: Sequence[float],
        forwards: Sequence[float],
        payment_offset: Optional[float] = None,
        is_parameter: Optional[Sequence[bool]] = None,
        **kwargs,
    ) -> "ForwardCurve":
        if len(times) != len(forwards):
            raise ValueError("Times and forwards must have same length")
        if is_parameter is None:
            is_parameter = [True] * len(times)
        points = [
            CurvePoint(float(t), float(f), bool(free))
            for t, f, free in zip(times, forwards, is_parameter)
        ]
        return cls(name, points, payment_offset=payment_offset, **kwargs)

    def get_forward(
        self, model, fixing_time: float, payment_offset: Optional[float] = None
    ) -> float:
        return self.get_value(fixing_time, model)


class ForwardCurveFromDiscountCurve(AbstractForwardCurve):
    """
    Forward curve implied by a discount curve held in the model.

    F(t) = (P(t) / P(t + d) - 1) / d with P the referenced discount curve
    and d the payment offset. The curve has no parameters of its own; it is
    re-evaluated against whichever model is passed in, so calibrating the
    discount curve moves the forwards too.
    """

    def __init__(
        self,
        reference_discount_curve_name: str,
        payment_offset: Optional[float] = None,
        name: Optional[str] = None,
        reference_date: Optional[date] = None,
    ):
        if not reference_discount_curve_name:
            raise ValueError("Reference discount curve name must be given")
        if payment_offset is not None and payment_offset <= 0:
            raise ValueError(f"Payment offset must be positive, got {payment_offset}")

        self.reference_discount_curve_name = reference_discount_curve_name
        self.payment_offset = payment_offset
        self.reference_date = reference_date
        self.name = name or self.default_name(reference_discount_curve_name, payment_offset)

    @staticmethod
    def default_name(reference_discount_curve_name: str, payment_offset: Optional[float]) -> str:
        tenor = "" if payment_offset is None else f"{payment_offset:g}"
        return f"ForwardCurveFromDiscountCurve({reference_discount_curve_name},{tenor})"

    def get_forward(
        self, model, fixing_time: float, payment_offset: Optional[float] = None
    ) -> float:
        offset = self.payment_offset if self.payment_offset is not None else payment_offset
        if offset is None or offset <= 0:
            raise ValueError(f"Forward curve {self.name} needs a positive payment offset")
        if model is None:
            raise ValueError(f"Forward curve {self.name} needs a model to resolve its discount curve")

        discount_curve = model.get_discount_curve(self.reference_discount_curve_name)
        if discount_curve is None:
            raise ValueError(
                f"Discount curve {self.reference_discount_curve_name} referenced by "
                f"{self.name} not found in model"
            )

        return (
            discount_curve.get_discount_factor(fixing_time, model)
            / discount_curve.get_discount_factor(fixing_time + offset, model)
            - 1.0
        ) / offset

    def get_parameter(self) -> Optional[np.ndarray]:
        return None

    def get_clone_for_parameter(self, parameter) -> "ForwardCurveFromDiscountCurve":
        if parameter is not None and len(parameter) > 0:
            raise ValueError(f"Forward curve {self.name} has no parameters")
        return self

    def __repr__(self) -> str:
        return (
            f"ForwardCurveFromDiscountCurve(name={self.name!r}, "
            f"discount={self.reference_discount_curve_name!r}, "
            f"payment_offset={self.payment_offset})"
        )
