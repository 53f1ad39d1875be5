"""
Discount curve implementation with interpolation support.
"""
import logging
import math
from datetime import date
from typing import Optional, Sequence, Union

from multicurve.interpolation import ExtrapolationMethod, InterpolationMethod

from .base import Curve, CurvePoint, InterpolationEntity

logger = logging.getLogger(__name__)


class DiscountCurve(Curve):
    """
    Discount curve P(t) with P(0) = 1 by convention.

    Interpolation defaults to linear in log discount factors, i.e. piecewise
    flat continuously compounded forwards, extrapolated flat beyond the
    last pillar.
    """

    def __init__(
        self,
        name: str,
        points: Sequence = (),
        interpolation_method: Union[str, InterpolationMethod] = InterpolationMethod.LINEAR,
        extrapolation_method: Union[str, ExtrapolationMethod] = ExtrapolationMethod.LINEAR,
        interpolation_entity: Union[str, InterpolationEntity] = InterpolationEntity.LOG_OF_VALUE,
        reference_date: Optional[date] = None,
    ):
        super().__init__(
            name,
            points,
            interpolation_method=interpolation_method,
            extrapolation_method=extrapolation_method,
            interpolation_entity=interpolation_entity,
            reference_date=reference_date,
        )

        for point in self.points:
            if point.value <= 0:
                logger.warning(
                    "Non-positive discount factor %.8f at t=%.4f on curve %s",
                    point.value,
                    point.time,
                    name,
                )

    @classmethod
    def from_discount_factors(
        cls,
        name: str,
        times: Sequence[float],
        discount_factors: Sequence[float],
        is_parameter: Optional[Sequence[bool]] = None,
        **kwargs,
    ) -> "DiscountCurve":
        """
        Create a discount curve from pillar discount factors.

        Args:
            name: Curve name
            times: Pillar times in years
            discount_factors: Discount factors at the pillars
            is_parameter: Free flags per pillar; all free if None

        Returns:
            DiscountCurve instance
        """
        if len(times) != len(discount_factors):
            raise ValueError("Times and discount factors must have same length")
        if is_parameter is None:
            is_parameter = [True] * len(times)
        points = [
            CurvePoint(float(t), float(df), bool(free))
            for t, df, free in zip(times, discount_factors, is_parameter)
        ]
        return cls(name, points, **kwargs)

    @classmethod
    def from_zero_rates(
        cls,
        name: str,
        times: Sequence[float],
        zero_rates: Sequence[float],
        is_parameter: Optional[Sequence[bool]] = None,
        **kwargs,
    ) -> "DiscountCurve":
        """Create a discount curve from continuously compounded zero rates."""
        if len(times) != len(zero_rates):
            raise ValueError("Times and zero rates must have same length")
        discount_factors = [math.exp(-r * t) for t, r in zip(times, zero_rates)]
        return cls.from_discount_factors(name, times, discount_factors, is_parameter, **kwargs)

    def get_discount_factor(self, time: float, model=None) -> float:
        """Discount factor for maturity ``time``."""
        return self.get_value(time, model)

    def get_zero_rate(self, time: float) -> float:
        """Continuously compounded zero rate at ``time``."""
        if time <= 0:
            return 0.0

        df_val = self.get_discount_factor(time)
        if df_val <= 0:
            raise ValueError(f"Non-positive discount factor: {df_val}")

        return -math.log(df_val) / time

    def get_forward_rate(self, start: float, end: float) -> float:
        """Simply compounded forward rate between ``start`` and ``end``."""
        alpha = end - start
        if alpha <= 0:
            raise ValueError("Forward period must be positive")
        return (self.get_discount_factor(start) / self.get_discount_factor(end) - 1) / alpha
