"""Vacation splitter.

Divide a budget of vacation days into several periods, each placed to
absorb the weekends and public holidays around it.
"""

from vacsplit.exceptions import (
    AllocationError,
    InfeasibleConstraints,
    InvalidConfiguration,
    NoPlacementFound,
)
from vacsplit.holidays import HolidayDate, get_holidays_for_year, holidays_for_window
from vacsplit.planner import Configuration, Period, allocate, find_best_period

__all__ = [
    "AllocationError",
    "Configuration",
    "HolidayDate",
    "InfeasibleConstraints",
    "InvalidConfiguration",
    "NoPlacementFound",
    "Period",
    "allocate",
    "find_best_period",
    "get_holidays_for_year",
    "holidays_for_window",
]
