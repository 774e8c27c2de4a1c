"""Calendar helpers: month keys, working days and laying windows."""

from __future__ import annotations

import calendar
import re
from datetime import date

from farm_engine.calculators.types import MonthKey
from farm_engine.errors import ValidationError

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})(?:-(\d{2}))?$")

SUNDAY = 6


def parse_month_year(value: str | date | None) -> MonthKey:
    """Parse ``YYYY-MM`` or ``YYYY-MM-DD`` (or a date) into a MonthKey.

    Raises:
        ValidationError: If the value is missing or the month is not 1-12.
    """
    if value is None or value == "":
        raise ValidationError("monthYear is required")
    if isinstance(value, date):
        return MonthKey(value.year, value.month)

    match = _MONTH_RE.match(str(value).strip())
    if match is None:
        raise ValidationError(
            f"Invalid monthYear '{value}', expected YYYY-MM",
            {"month_year": str(value)},
        )

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(
            f"Invalid monthYear '{value}', month must be between 1 and 12",
            {"month_year": str(value)},
        )
    return MonthKey(year, month)


def days_in_month(month: MonthKey) -> int:
    return calendar.monthrange(month.year, month.month)[1]


def month_bounds(month: MonthKey) -> tuple[date, date]:
    """First and last calendar day of the month (closed range)."""
    return (
        date(month.year, month.month, 1),
        date(month.year, month.month, days_in_month(month)),
    )


def working_days_in_month(month: MonthKey) -> int:
    """Count calendar days of the month that are not Sundays."""
    return sum(
        1
        for day in range(1, days_in_month(month) + 1)
        if date(month.year, month.month, day).weekday() != SUNDAY
    )


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month."""
    index = start.month - 1 + months
    year = start.year + index // 12
    month = index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
