"""
Day count conventions backed by QuantLib.

Curves and products work on float times; these conventions turn schedule
dates into accrual fractions and times from a reference date.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Union

import QuantLib as ql

DateLike = Union[date, datetime]


def _as_ql_date(value: DateLike) -> ql.Date:
    if isinstance(value, datetime):
        value = value.date()
    return ql.Date(value.day, value.month, value.year)


@dataclass(frozen=True, eq=False)
class DayCountConvention:
    """Named wrapper around a QuantLib day counter."""

    name: str
    day_counter: ql.DayCounter

    def year_fraction(self, start: DateLike, end: DateLike) -> float:
        return self.day_counter.yearFraction(_as_ql_date(start), _as_ql_date(end))

    def day_count(self, start: DateLike, end: DateLike) -> int:
        return self.day_counter.dayCount(_as_ql_date(start), _as_ql_date(end))

    def __str__(self) -> str:
        return self.name


# Money market and IBOR floating legs
ACT_360 = DayCountConvention("ACT/360", ql.Actual360())
# Time axis of curves built from dates
ACT_365F = DayCountConvention("ACT/365F", ql.Actual365Fixed())
THIRTY_360E = DayCountConvention("30E/360", ql.Thirty360(ql.Thirty360.European))
THIRTY_360U = DayCountConvention("30U/360", ql.Thirty360(ql.Thirty360.BondBasis))
ACT_ACT = DayCountConvention("ACT/ACT", ql.ActualActual(ql.ActualActual.ISDA))

_ALIASES: Dict[str, DayCountConvention] = {
    "ACT/360": ACT_360,
    "ACTUAL/360": ACT_360,
    "ACT/365F": ACT_365F,
    "ACT/365": ACT_365F,
    "ACTUAL/365F": ACT_365F,
    "30E/360": THIRTY_360E,
    "30/360E": THIRTY_360E,
    "30U/360": THIRTY_360U,
    "30/360": THIRTY_360U,
    "ACT/ACT": ACT_ACT,
    "ACTUAL/ACTUAL": ACT_ACT,
}


def get_day_count_convention(name: Union[str, DayCountConvention]) -> DayCountConvention:
    """Resolve a convention from its code (case-insensitive) or pass one through."""
    if isinstance(name, DayCountConvention):
        return name
    try:
        return _ALIASES[name.strip().upper()]
    except KeyError:
        raise ValueError(
            f"Unknown day count convention {name!r}; known codes: {sorted(_ALIASES)}"
        ) from None
