"""Errors raised while planning vacation periods."""

from __future__ import annotations

import datetime


class AllocationError(Exception):
    """Base error for a single allocation attempt."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidConfiguration(AllocationError, ValueError):
    """The configuration cannot be planned at all (bad dates or counts)."""


class InfeasibleConstraints(AllocationError):
    """The minimum period lengths do not fit in the vacation budget.

    ``adjusted_period_count`` is the largest period count the budget allows
    (0 when even the main period alone does not fit).
    """

    def __init__(self, requested_period_count: int, adjusted_period_count: int) -> None:
        self.requested_period_count = requested_period_count
        self.adjusted_period_count = adjusted_period_count
        if adjusted_period_count > 0:
            message = (
                f"Minimum lengths for {requested_period_count} periods exceed the "
                f"vacation budget; at most {adjusted_period_count} "
                f"period{'s' if adjusted_period_count != 1 else ''} fit."
            )
        else:
            message = "The main period minimum alone exceeds the vacation budget."
        super().__init__(message)


class NoPlacementFound(AllocationError):
    """No non-overlapping slot exists within the search horizon."""

    def __init__(self, search_start: datetime.date, period_number: int | None = None) -> None:
        self.search_start = search_start
        self.period_number = period_number
        what = f"period {period_number}" if period_number is not None else "a period"
        super().__init__(
            f"Cannot schedule {what} within the search window "
            f"(searched from {search_start.isoformat()}); try widening the "
            "window or reducing the number of periods."
        )
