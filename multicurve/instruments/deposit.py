"""
Money-market deposit and forward rate agreement.
"""

from dataclasses import dataclass

from multicurve.schedule import Schedule

from .base import AnalyticProduct


@dataclass(frozen=True)
class Deposit(AnalyticProduct):
    """
    Deposit over the first period of ``schedule``.

    The lender pays 1 at period start and receives 1 + r * tau at period end;
    flows before the evaluation time are dropped.
    """

    schedule: Schedule
    rate: float
    discount_curve_name: str

    def get_value(self, evaluation_time: float, model) -> float:
        discount_curve = self._get_discount_curve(model, self.discount_curve_name)

        period = self.schedule[0]
        value = 0.0
        if period.period_start >= evaluation_time:
            value -= discount_curve.get_discount_factor(period.period_start, model)
        if period.period_end >= evaluation_time:
            payoff = 1.0 + self.rate * period.period_length
            value += payoff * discount_curve.get_discount_factor(period.period_end, model)

        return value / discount_curve.get_discount_factor(evaluation_time, model)


@dataclass(frozen=True)
class ForwardRateAgreement(AnalyticProduct):
    """FRA on the first period of ``schedule``: (F - K) * tau paid at the payment time."""

    schedule: Schedule
    rate: float
    forward_curve_name: str
    discount_curve_name: str

    def get_value(self, evaluation_time: float, model) -> float:
        discount_curve = self._get_discount_curve(model, self.discount_curve_name)
        forward_curve = self._get_forward_curve(model, self.forward_curve_name)
        if forward_curve is None:
            raise ValueError("A forward rate agreement needs a forward curve")

        period = self.schedule[0]
        if period.payment < evaluation_time:
            return 0.0

        forward = forward_curve.get_forward(model, period.fixing, period.payment - period.fixing)
        value = (
            (forward - self.rate)
            * period.period_length
            * discount_curve.get_discount_factor(period.payment, model)
        )
        return value / discount_curve.get_discount_factor(evaluation_time, model)
