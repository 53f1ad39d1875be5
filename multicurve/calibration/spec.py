"""Declarative description of one calibration instrument."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Union

from multicurve.schedule import Schedule, regular_schedule

ScheduleLike = Union[Schedule, Sequence[float]]

# Types for which a bump always applies to the receiver spread
RECEIVER_ONLY_TYPES = frozenset({"swapleg", "deposit", "fra", "future"})


def _to_schedule(schedule: Optional[ScheduleLike]) -> Optional[Schedule]:
    """Accept a Schedule or an (initial, number of periods, period length) triple."""
    if schedule is None or isinstance(schedule, Schedule):
        return schedule
    if len(schedule) != 3:
        raise ValueError(
            "A schedule definition must be a Schedule or (initial, number_of_periods, period_length)"
        )
    initial, number_of_periods, period_length = schedule
    return regular_schedule(initial, number_of_periods, period_length)


@dataclass(frozen=True)
class CalibrationSpec:
    """
    Specification of a calibration instrument.

    Each spec becomes one product priced to zero and adds one free point at
    ``calibration_time`` to the curve ``calibration_curve_name``. For
    ``future`` the receiver spread is the quoted price.
    """

    symbol: Optional[str]
    type: str
    schedule_receiver: ScheduleLike
    forward_curve_receiver_name: Optional[str]
    spread_receiver: float
    discount_curve_receiver_name: str
    schedule_payer: Optional[ScheduleLike]
    forward_curve_payer_name: Optional[str]
    spread_payer: float
    discount_curve_payer_name: Optional[str]
    calibration_curve_name: str
    calibration_time: float
    index_tenor_receiver: Optional[str] = None
    index_tenor_payer: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "schedule_receiver", _to_schedule(self.schedule_receiver))
        object.__setattr__(self, "schedule_payer", _to_schedule(self.schedule_payer))
        if self.schedule_receiver is None:
            raise ValueError(f"Calibration spec {self.symbol}: receiver schedule is required")

    @classmethod
    def single_leg(
        cls,
        symbol: Optional[str],
        type: str,
        schedule: ScheduleLike,
        forward_curve_name: Optional[str],
        spread: float,
        discount_curve_name: str,
        calibration_curve_name: str,
        calibration_time: float,
        index_tenor: Optional[str] = None,
    ) -> "CalibrationSpec":
        """Spec for single-leg instruments (deposit, FRA, future, swap leg)."""
        return cls(
            symbol=symbol,
            type=type,
            schedule_receiver=schedule,
            forward_curve_receiver_name=forward_curve_name,
            spread_receiver=spread,
            discount_curve_receiver_name=discount_curve_name,
            schedule_payer=None,
            forward_curve_payer_name=None,
            spread_payer=0.0,
            discount_curve_payer_name=None,
            calibration_curve_name=calibration_curve_name,
            calibration_time=calibration_time,
            index_tenor_receiver=index_tenor,
        )

    @property
    def product_type(self) -> str:
        return self.type.lower()

    def get_clone_shifted(self, shift: float) -> "CalibrationSpec":
        """Copy of this spec with the quoted spread moved by ``shift``."""
        if not self.discount_curve_payer_name or self.product_type in RECEIVER_ONLY_TYPES:
            return replace(self, spread_receiver=self.spread_receiver + shift)
        return replace(self, spread_payer=self.spread_payer + shift)
