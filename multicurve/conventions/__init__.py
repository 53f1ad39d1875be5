"""Market conventions: day counts and tenor codes."""

from .daycount import (
    ACT_360,
    ACT_365F,
    ACT_ACT,
    THIRTY_360E,
    THIRTY_360U,
    DayCountConvention,
    get_day_count_convention,
)
from .tenor import infer_tenor_from_curve_name, parse_tenor, tenor_to_year_fraction

__all__ = [
    "DayCountConvention",
    "get_day_count_convention",
    "ACT_360",
    "ACT_365F",
    "ACT_ACT",
    "THIRTY_360E",
    "THIRTY_360U",
    "parse_tenor",
    "tenor_to_year_fraction",
    "infer_tenor_from_curve_name",
]
