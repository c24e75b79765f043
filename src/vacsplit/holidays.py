"""Public-holiday source for the vacation planner.

Holidays come from the ``holidays`` package as ``(start, end, name)``
intervals with an *exclusive* end.  The planner only needs individual
dates, so every interval is expanded into one :class:`HolidayDate` per day
and the years spanned by a search window are merged together.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from typing import NamedTuple

import holidays as holidays_lib

logger = logging.getLogger(__name__)

ONE_DAY = datetime.timedelta(days=1)

HolidayInterval = tuple[datetime.date, datetime.date, str]
"""``(start, end_exclusive, name)``."""


class HolidayDate(NamedTuple):
    """A single holiday day with its display name."""

    date: datetime.date
    name: str


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------


def supported_countries() -> dict[str, list[str]]:
    """Return ``{country_code: [region_code, ...]}`` for every known country."""
    return holidays_lib.list_supported_countries()


def get_holidays_for_year(
    country: str, region: str | None, year: int
) -> list[HolidayInterval]:
    """Return the holiday intervals of *country* (and *region*) for *year*.

    Raises ``KeyError`` if the country or region is not supported.
    """
    try:
        calendar = _country_calendar(country.upper(), region, year)
    except NotImplementedError:
        supported = supported_countries()
        code = country.upper()
        if code not in supported:
            msg = f"Unknown country {country!r}. Supported: {', '.join(sorted(supported))}"
        else:
            regions = ", ".join(sorted(supported[code])) or "none"
            msg = f"Unknown region {region!r} for {code}. Supported: {regions}"
        raise KeyError(msg) from None

    logger.debug("Loaded %d holidays for %s/%s %d", len(calendar), country, region, year)
    return sorted((d, d + ONE_DAY, name) for d, name in calendar.items())


def _country_calendar(code: str, region: str | None, year: int) -> holidays_lib.HolidayBase:
    try:
        return holidays_lib.country_holidays(code, subdiv=region, years=year)
    except NotImplementedError:
        if region is None or region.upper() == region:
            raise
    # Subdivision codes are upper case; names such as "Auckland" are not.
    return holidays_lib.country_holidays(code, subdiv=region.upper(), years=year)


# ---------------------------------------------------------------------------
# Expansion
# ---------------------------------------------------------------------------


def expand_holidays(intervals: Iterable[HolidayInterval]) -> list[HolidayDate]:
    """Expand ``[start, end)`` intervals into one entry per day."""
    days: list[HolidayDate] = []
    for start, end, name in intervals:
        d = _as_date(start)
        stop = _as_date(end)
        while d < stop:
            days.append(HolidayDate(d, name))
            d += ONE_DAY
    return days


def holidays_for_window(
    country: str | None,
    region: str | None,
    start: datetime.date,
    end: datetime.date,
    extra: Iterable[HolidayInterval] = (),
) -> list[HolidayDate]:
    """Collect holidays for every year spanned by ``start``..``end``.

    *extra* intervals (e.g. company holidays) are merged in.  Passing
    ``None`` for *country* skips public holidays entirely.
    """
    intervals: list[HolidayInterval] = []
    if country is not None:
        for year in range(start.year, end.year + 1):
            intervals.extend(get_holidays_for_year(country, region, year))
    intervals.extend(extra)
    return sorted(expand_holidays(intervals))


def holiday_set(entries: Iterable[HolidayDate]) -> frozenset[datetime.date]:
    """Flatten holiday entries into the date set the planner consumes."""
    return frozenset(h.date for h in entries)


def _as_date(value: datetime.date) -> datetime.date:
    # datetime is a date subclass; strip the time-of-day.
    if isinstance(value, datetime.datetime):
        return value.date()
    return value
