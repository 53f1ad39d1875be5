"""
Leg schedules for calibration products.
"""

from .core import Period, Schedule
from .generator import regular_schedule, schedule_from_dates

__all__ = [
    "Period",
    "Schedule",
    "regular_schedule",
    "schedule_from_dates",
]
