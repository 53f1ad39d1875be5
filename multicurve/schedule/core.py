"""
Core data structures for leg schedules expressed in curve times.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterator, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Period:
    """Single accrual period of a leg, all times in years from the reference date."""

    fixing: float
    period_start: float
    period_end: float
    payment: float
    period_length: float

    def __post_init__(self):
        if self.period_end < self.period_start:
            raise ValueError(
                f"Period end {self.period_end} before period start {self.period_start}"
            )


@dataclass(frozen=True)
class Schedule:
    """Immutable sequence of accrual periods."""

    periods: Tuple[Period, ...]
    reference_date: Optional[date] = None

    def __post_init__(self):
        if not self.periods:
            raise ValueError("A schedule needs at least one period")
        object.__setattr__(self, "periods", tuple(self.periods))

    def __len__(self) -> int:
        return len(self.periods)

    def __iter__(self) -> Iterator[Period]:
        return iter(self.periods)

    def __getitem__(self, index: int) -> Period:
        return self.periods[index]

    @property
    def number_of_periods(self) -> int:
        return len(self.periods)

    def get_fixing(self, period_index: int) -> float:
        return self.periods[period_index].fixing

    def get_payment(self, period_index: int) -> float:
        return self.periods[period_index].payment

    def get_period_start(self, period_index: int) -> float:
        return self.periods[period_index].period_start

    def get_period_end(self, period_index: int) -> float:
        return self.periods[period_index].period_end

    def get_period_length(self, period_index: int) -> float:
        return self.periods[period_index].period_length

    @property
    def start(self) -> float:
        return self.periods[0].period_start

    @property
    def maturity(self) -> float:
        return self.periods[-1].period_end

    @property
    def last_payment(self) -> float:
        return self.periods[-1].payment

    @classmethod
    def from_times(
        cls, times: Sequence[float], reference_date: Optional[date] = None
    ) -> "Schedule":
        """Build a schedule whose periods span consecutive ``times``.

        Fixing is at period start, payment at period end.
        """
        if len(times) < 2:
            raise ValueError("Need at least two times to form a period")
        periods = []
        for start, end in zip(times[:-1], times[1:]):
            periods.append(
                Period(
                    fixing=float(start),
                    period_start=float(start),
                    period_end=float(end),
                    payment=float(end),
                    period_length=float(end) - float(start),
                )
            )
        return cls(tuple(periods), reference_date)
