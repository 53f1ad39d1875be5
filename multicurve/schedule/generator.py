"""
Schedule construction helpers.

Calendar-aware date generation is out of scope: dates, when used, are given
by the caller and only converted to curve times here.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence, Union

from multicurve.conventions.daycount import DayCountConvention, get_day_count_convention

from .core import Period, Schedule


def regular_schedule(
    initial: float,
    number_of_periods: int,
    period_length: float,
    reference_date: Optional[date] = None,
) -> Schedule:
    """Regular schedule from the triple (initial time, number of periods, period length).

    Example: ``regular_schedule(0.0, 4, 0.5)`` is a two-year semi-annual leg.
    """
    number_of_periods = int(round(number_of_periods))
    if number_of_periods < 1:
        raise ValueError("number_of_periods must be at least 1")
    if period_length <= 0:
        raise ValueError("period_length must be positive")

    times = [initial + i * period_length for i in range(number_of_periods + 1)]
    return Schedule.from_times(times, reference_date)


def schedule_from_dates(
    reference_date: date,
    dates: Sequence[date],
    day_count: Union[str, DayCountConvention] = "ACT/360",
    time_day_count: Union[str, DayCountConvention] = "ACT/365F",
) -> Schedule:
    """
    Convert a sequence of period boundary dates into a time schedule.

    Args:
        reference_date: Curve reference date (time zero)
        dates: Adjusted period boundary dates, first is the effective date
        day_count: Accrual day count for the period lengths
        time_day_count: Day count of the curve time axis

    Returns:
        Schedule with fixing at period start and payment at period end
    """
    if len(dates) < 2:
        raise ValueError("Need at least two dates to form a period")
    dates = sorted(dates)

    accrual_dcc = get_day_count_convention(day_count)
    time_dcc = get_day_count_convention(time_day_count)

    periods = []
    for start_date, end_date in zip(dates[:-1], dates[1:]):
        start = time_dcc.year_fraction(reference_date, start_date)
        end = time_dcc.year_fraction(reference_date, end_date)
        periods.append(
            Period(
                fixing=start,
                period_start=start,
                period_end=end,
                payment=end,
                period_length=accrual_dcc.year_fraction(start_date, end_date),
            )
        )
    return Schedule(tuple(periods), reference_date)
