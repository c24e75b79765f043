"""Vacation period planner

Split a budget of vacation days into several periods and place each one so
that it absorbs the weekends and holidays around it.

A period is a run of *worked* days (the days charged against the budget)
plus the *extended* range: every non-work day directly adjoining the run on
either side.  Periods are placed one at a time, each searched within a
bounded horizon and ranked by total days off, then by proximity to the
search origin.
"""

from __future__ import annotations

import calendar
import datetime
import logging
from collections.abc import Collection, Iterable
from typing import NamedTuple

from vacsplit.exceptions import InfeasibleConstraints, InvalidConfiguration, NoPlacementFound
from vacsplit.holidays import HolidayDate, holiday_set, holidays_for_window

logger = logging.getLogger(__name__)

ONE_DAY = datetime.timedelta(days=1)

DEFAULT_MIN_GAP_DAYS = 3
DEFAULT_SPACING_DAYS = 120
DEFAULT_HORIZON_DAYS = 120

HolidaySet = Collection[datetime.date]

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class Configuration(NamedTuple):
    """Everything one allocation needs besides the holiday calendar.

    ``min_gap_days`` pads periods against each other; ``spacing_days`` pushes
    the next period's search origin forward and is deliberately much larger.
    """

    country: str | None
    region: str | None
    total_days: int
    period_count: int
    main_period_min_days: int
    other_periods_min_days: int
    start_date: datetime.date
    end_date: datetime.date
    min_gap_days: int = DEFAULT_MIN_GAP_DAYS
    spacing_days: int = DEFAULT_SPACING_DAYS
    horizon_days: int = DEFAULT_HORIZON_DAYS


class Period(NamedTuple):
    """A placed vacation period."""

    worked_start: datetime.date
    worked_end: datetime.date
    extended_start: datetime.date
    extended_end: datetime.date
    worked_day_count: int

    @property
    def total_days_off(self) -> int:
        return (self.extended_end - self.extended_start).days + 1

    @property
    def extra_days(self) -> int:
        """Weekend and holiday days gained around the worked range."""
        return self.total_days_off - self.worked_day_count


# ---------------------------------------------------------------------------
# Calendar classification
# ---------------------------------------------------------------------------


def _as_date(day: datetime.date) -> datetime.date:
    if isinstance(day, datetime.datetime):
        return day.date()
    return day


def is_holiday(day: datetime.date, holidays: HolidaySet) -> bool:
    """True if *day* (time-of-day ignored) is in *holidays*."""
    return _as_date(day) in holidays


def is_non_work_day(day: datetime.date, holidays: HolidaySet) -> bool:
    """True for Saturdays, Sundays and holidays."""
    return day.weekday() >= 5 or is_holiday(day, holidays)


# ---------------------------------------------------------------------------
# Range extension
# ---------------------------------------------------------------------------


def extend_backward(worked_start: datetime.date, holidays: HolidaySet) -> datetime.date:
    """Return the earliest day of the non-work run ending just before *worked_start*.

    Returns *worked_start* itself when the previous day is a work day.
    """
    extended = _as_date(worked_start)
    # Terminates: weekdays outside the finite holiday set are work days.
    while is_non_work_day(extended - ONE_DAY, holidays):
        extended -= ONE_DAY
    return extended


def extend_forward(worked_end: datetime.date, holidays: HolidaySet) -> datetime.date:
    """Return the last day of the non-work run starting just after *worked_end*."""
    extended = _as_date(worked_end)
    while is_non_work_day(extended + ONE_DAY, holidays):
        extended += ONE_DAY
    return extended


# ---------------------------------------------------------------------------
# Overlap guard
# ---------------------------------------------------------------------------


def overlaps(
    extended_start: datetime.date,
    extended_end: datetime.date,
    placed: Iterable[Period],
    min_gap_days: int,
) -> bool:
    """True if the candidate range, padded by *min_gap_days*, hits a placed period.

    Only the candidate is padded; placed periods keep their extended range.
    """
    gap = datetime.timedelta(days=min_gap_days)
    padded_start = extended_start - gap
    padded_end = extended_end + gap
    return any(
        padded_start <= p.extended_end and padded_end >= p.extended_start for p in placed
    )


# ---------------------------------------------------------------------------
# Candidate search
# ---------------------------------------------------------------------------


def build_period(
    worked_start: datetime.date, worked_day_count: int, holidays: HolidaySet
) -> Period:
    """Build the period starting on *worked_start* and spanning *worked_day_count* days.

    The worked range is a fixed run of calendar days; weekends or holidays
    inside it still count against the budget.
    """
    worked_end = worked_start + datetime.timedelta(days=worked_day_count - 1)
    return Period(
        worked_start=worked_start,
        worked_end=worked_end,
        extended_start=extend_backward(worked_start, holidays),
        extended_end=extend_forward(worked_end, holidays),
        worked_day_count=worked_day_count,
    )


def find_best_period(
    search_start: datetime.date,
    placed: list[Period],
    worked_day_target: int,
    holidays: HolidaySet,
    min_gap_days: int = DEFAULT_MIN_GAP_DAYS,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    search_end: datetime.date | None = None,
) -> Period:
    """Find the best non-overlapping period starting within the horizon.

    Every work day from *search_start* to ``search_start + horizon_days``
    (inclusive, and no later than *search_end* when given) is tried as the
    first worked day.  Candidates are ranked by total days off, then by how
    close they start to *search_start*.

    Raises :class:`NoPlacementFound` if no candidate survives.
    """
    search_start = _as_date(search_start)
    last = search_start + datetime.timedelta(days=horizon_days)
    if search_end is not None and search_end < last:
        last = search_end

    candidates: list[Period] = []
    rejected = 0
    d = search_start
    while d <= last:
        if not is_non_work_day(d, holidays):
            period = build_period(d, worked_day_target, holidays)
            if overlaps(period.extended_start, period.extended_end, placed, min_gap_days):
                rejected += 1
            else:
                candidates.append(period)
        d += ONE_DAY

    logger.debug(
        "Searched %s..%s for %d days: %d candidates, %d overlapping",
        search_start,
        last,
        worked_day_target,
        len(candidates),
        rejected,
    )

    if not candidates:
        raise NoPlacementFound(search_start)

    def rank(p: Period) -> tuple[int, int]:
        return (-p.total_days_off, abs((p.worked_start - search_start).days))

    return min(candidates, key=rank)


# ---------------------------------------------------------------------------
# Allocation
# ---------------------------------------------------------------------------


def validate_configuration(config: Configuration) -> None:
    """Raise :class:`InvalidConfiguration` for unusable inputs."""
    if config.end_date <= config.start_date:
        raise InvalidConfiguration("End date must be after start date.")
    positive = {
        "Vacation days": config.total_days,
        "Number of periods": config.period_count,
        "Main period minimum": config.main_period_min_days,
        "Other periods minimum": config.other_periods_min_days,
        "Search horizon": config.horizon_days,
    }
    for label, value in positive.items():
        if value <= 0:
            raise InvalidConfiguration(f"{label} must be greater than 0 (got {value}).")
    if config.min_gap_days < 0 or config.spacing_days < 0:
        raise InvalidConfiguration("Gap and spacing cannot be negative.")


def max_feasible_period_count(config: Configuration) -> int:
    """Largest period count whose minimum lengths fit in the budget."""
    spare = config.total_days - config.main_period_min_days
    return max(0, spare // config.other_periods_min_days + 1)


def distribute_days(config: Configuration) -> list[int]:
    """Split the budget into per-period day counts.

    Period 0 gets the main minimum, the rest the other minimum; leftover
    days are handed out one at a time, round-robin from period 0.

    Raises :class:`InfeasibleConstraints` if the minimums exceed the budget.
    """
    n = config.period_count
    minimum = config.main_period_min_days + (n - 1) * config.other_periods_min_days
    if minimum > config.total_days:
        raise InfeasibleConstraints(n, max_feasible_period_count(config))

    counts = [config.main_period_min_days] + [config.other_periods_min_days] * (n - 1)
    for i in range(config.total_days - minimum):
        counts[i % n] += 1
    return counts


def allocate(
    config: Configuration, holidays: HolidaySet | Iterable[HolidayDate] | None = None
) -> list[Period]:
    """Plan ``config.period_count`` vacation periods.

    *holidays* may be a set of dates or :class:`HolidayDate` entries; when
    omitted they are loaded for ``config.country``/``config.region`` over the
    search window.

    Returns the periods in placement order.  Raises
    :class:`InvalidConfiguration`, :class:`InfeasibleConstraints` (carrying
    the adjusted period count) or :class:`NoPlacementFound`.
    """
    validate_configuration(config)
    counts = distribute_days(config)
    days_off = _resolve_holidays(config, holidays)

    periods: list[Period] = []
    search_start = config.start_date
    for i, target in enumerate(counts):
        if periods:
            search_start = periods[-1].extended_end + datetime.timedelta(
                days=config.spacing_days
            )
        try:
            period = find_best_period(
                search_start,
                periods,
                target,
                days_off,
                min_gap_days=config.min_gap_days,
                horizon_days=config.horizon_days,
                search_end=config.end_date,
            )
        except NoPlacementFound:
            logger.info("No slot for period %d from %s", i + 1, search_start)
            raise NoPlacementFound(search_start, period_number=i + 1) from None

        logger.info(
            "Period %d: %s..%s (%d days, %d off in total)",
            i + 1,
            period.worked_start,
            period.worked_end,
            period.worked_day_count,
            period.total_days_off,
        )
        periods.append(period)

    return periods


def _resolve_holidays(
    config: Configuration, holidays: HolidaySet | Iterable[HolidayDate] | None
) -> frozenset[datetime.date]:
    if holidays is None:
        return holiday_set(
            holidays_for_window(config.country, config.region, config.start_date, config.end_date)
        )
    return frozenset(h.date if isinstance(h, HolidayDate) else _as_date(h) for h in holidays)


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------


def _fmt_range(start: datetime.date, end: datetime.date) -> str:
    if start == end:
        return start.strftime("%a, %b %d %Y")
    return f"{start.strftime('%a, %b %d %Y')} -> {end.strftime('%a, %b %d %Y')}"


def format_plan(periods: list[Period], config: Configuration) -> str:
    """Return a human-readable summary of the planned periods."""
    lines: list[str] = []
    w = 64

    used = sum(p.worked_day_count for p in periods)
    total_off = sum(p.total_days_off for p in periods)

    lines.append("")
    lines.append("=" * w)
    lines.append(
        f"  PLAN: {config.total_days} vacation days in {len(periods)} "
        f"period{'s' if len(periods) != 1 else ''}"
    )
    lines.append("=" * w)
    lines.append(f"  Vacation days used: {used} / {config.total_days}")
    lines.append(f"  Total days off: {total_off}")
    if used > 0:
        lines.append(f"  Efficiency: {total_off / used:.2f}x (days off per vacation day)")
    lines.append("")

    lines.append("  Periods:")
    lines.append("  " + "-" * (w - 4))
    for i, p in enumerate(periods, 1):
        lines.append(f"  {i:>2}. {_fmt_range(p.worked_start, p.worked_end)}")
        lines.append(
            f"      {p.worked_day_count} vacation + {p.extra_days} extra "
            f"= {p.total_days_off} days off"
        )
        if p.extra_days:
            lines.append(f"      Off: {_fmt_range(p.extended_start, p.extended_end)}")
        lines.append("")

    return "\n".join(lines)


def _months_between(start: datetime.date, end: datetime.date) -> list[tuple[int, int]]:
    months: list[tuple[int, int]] = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append((year, month))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return months


def format_calendar_view(period: Period, holidays: Iterable[HolidayDate]) -> str:
    """Return month grids covering *period*, marking vacation, extra and holiday days."""
    names = {h.date: h.name for h in holidays}

    lines: list[str] = [
        "",
        f"  Calendar View {_fmt_range(period.extended_start, period.extended_end)}",
        "  Legend: V=Vacation  E=Extra day off  H=Holiday",
        "",
    ]

    cal = calendar.Calendar(firstweekday=0)

    for year, month in _months_between(period.extended_start, period.extended_end):
        lines.append(f"  {calendar.month_name[month]} {year}")
        lines.append("  Mo  Tu  We  Th  Fr  Sa  Su")

        row = ""
        for day_num, weekday in cal.itermonthdays2(year, month):
            if day_num == 0:
                row += "    "
            else:
                d = datetime.date(year, month, day_num)
                if period.worked_start <= d <= period.worked_end:
                    cell = f" {day_num:>2}V"
                elif period.extended_start <= d <= period.extended_end:
                    cell = f" {day_num:>2}E"
                elif d in names:
                    cell = f" {day_num:>2}H"
                else:
                    cell = f"  {day_num:>2}"
                row += cell

            if weekday == 6:
                lines.append(row)
                row = ""

        if row.strip():
            lines.append(row)
        lines.append("")

    in_period = sorted(
        (d, n) for d, n in names.items() if period.extended_start <= d <= period.extended_end
    )
    if in_period:
        lines.append("  Holidays in this period:")
        for d, name in in_period:
            lines.append(f"    {d.strftime('%a, %b %d'):>12}  {name}")
        lines.append("")

    return "\n".join(lines)
