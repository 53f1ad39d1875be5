"""
Tenor codes ("3M", "6M", "1Y") and their conversion to curve times.
"""

import logging
from typing import Optional

import QuantLib as ql

logger = logging.getLogger(__name__)

# Later entries win when several codes match, which keeps "_3M" ahead of "_1M".
_LEGACY_TENOR_CODES = ("12M", "1M", "6M", "3M")
_LEGACY_SEPARATORS = ("_", "-", " ")


def parse_tenor(code: str) -> ql.Period:
    """Parse a tenor code into a QuantLib period."""
    if not code or not code.strip():
        raise ValueError("Tenor code must be a non-empty string")
    try:
        return ql.Period(code.strip().upper())
    except RuntimeError as exc:
        raise ValueError(f"Invalid tenor code: {code!r}") from exc


def tenor_to_year_fraction(code: str) -> float:
    """Convert a tenor code to a year fraction on the ACT/365F-like time axis.

    Months and years map to exact fractions of a year (6M -> 0.5), days and
    weeks are measured in calendar days over 365.
    """
    period = parse_tenor(code)
    length = period.length()
    units = period.units()

    if units == ql.Years:
        return float(length)
    if units == ql.Months:
        return length / 12.0
    if units == ql.Weeks:
        return 7.0 * length / 365.0
    if units == ql.Days:
        return length / 365.0
    raise ValueError(f"Unsupported tenor unit in {code!r}")


def infer_tenor_from_curve_name(curve_name: Optional[str]) -> Optional[str]:
    """Guess the index tenor from a curve name such as "forwardCurve_3M".

    Legacy heuristic: looks for "_3M", "-6M", " 12M", ... inside the name.
    Prefer passing the tenor explicitly; this is only a fallback.
    """
    if not curve_name:
        return None

    tenor = None
    for code in _LEGACY_TENOR_CODES:
        if any(f"{sep}{code}" in curve_name for sep in _LEGACY_SEPARATORS):
            tenor = code

    if tenor is not None:
        logger.warning(
            "Index tenor %s inferred from curve name %r; pass the tenor explicitly",
            tenor,
            curve_name,
        )
    return tenor
