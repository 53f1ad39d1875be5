"""
Swap legs and swaps with optional notional exchange and notional reset.
"""

from dataclasses import dataclass
from typing import Optional

from multicurve.schedule import Schedule

from .base import AnalyticProduct


@dataclass(frozen=True)
class SwapLeg(AnalyticProduct):
    """
    Floating (or fixed, without forward curve) swap leg.

    Each period pays N_i * (F_i + s) * tau_i at its payment time. If a
    notional reset curve is given the notional is
    N_i = P_reset(start_i) / P(start_i). With notional exchange each period
    additionally pays N_i at its end and receives it at its start.
    """

    schedule: Schedule
    forward_curve_name: Optional[str]
    spread: float
    discount_curve_name: str
    discount_curve_for_notional_reset_name: Optional[str] = None
    is_notional_exchanged: bool = False

    def get_value(self, evaluation_time: float, model) -> float:
        discount_curve = self._get_discount_curve(model, self.discount_curve_name)

        reset_curve = None
        if self.discount_curve_for_notional_reset_name:
            reset_curve = self._get_discount_curve(model, self.discount_curve_for_notional_reset_name)
            if reset_curve is discount_curve:
                reset_curve = None

        forward_curve = self._get_forward_curve(model, self.forward_curve_name)

        value = 0.0
        for period in self.schedule:
            forward = self.spread
            if forward_curve is not None:
                forward += forward_curve.get_forward(
                    model, period.fixing, period.payment - period.fixing
                )

            notional = 1.0
            if reset_curve is not None:
                notional = (
                    reset_curve.get_discount_factor(period.period_start, model)
                    / discount_curve.get_discount_factor(period.period_start, model)
                )

            if period.payment > evaluation_time:
                value += (
                    notional
                    * forward
                    * period.period_length
                    * discount_curve.get_discount_factor(period.payment, model)
                )

            if self.is_notional_exchanged:
                if period.period_end > evaluation_time:
                    value += notional * discount_curve.get_discount_factor(period.period_end, model)
                if period.period_start > evaluation_time:
                    value -= notional * discount_curve.get_discount_factor(period.period_start, model)

        return value / discount_curve.get_discount_factor(evaluation_time, model)


@dataclass(frozen=True)
class Swap(AnalyticProduct):
    """Swap valued as receiver leg minus payer leg."""

    leg_receiver: SwapLeg
    leg_payer: SwapLeg

    @classmethod
    def from_schedules(
        cls,
        schedule_receiver: Schedule,
        forward_curve_receiver_name: Optional[str],
        spread_receiver: float,
        schedule_payer: Schedule,
        forward_curve_payer_name: Optional[str],
        spread_payer: float,
        discount_curve_name: str,
        is_notional_exchanged: bool = False,
    ) -> "Swap":
        """Swap with both legs discounted on the same curve."""
        return cls(
            SwapLeg(
                schedule_receiver,
                forward_curve_receiver_name,
                spread_receiver,
                discount_curve_name,
                is_notional_exchanged=is_notional_exchanged,
            ),
            SwapLeg(
                schedule_payer,
                forward_curve_payer_name,
                spread_payer,
                discount_curve_name,
                is_notional_exchanged=is_notional_exchanged,
            ),
        )

    def get_value(self, evaluation_time: float, model) -> float:
        return self.leg_receiver.get_value(evaluation_time, model) - self.leg_payer.get_value(
            evaluation_time, model
        )
