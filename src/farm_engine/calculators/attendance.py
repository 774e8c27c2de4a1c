"""Attendance aggregation over a calendar month."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from farm_engine.calculators.types import AttendanceStatus, AttendanceSummary

HALF = Decimal("0.5")


def summarize_attendance(
    statuses: Iterable[str | AttendanceStatus],
    working_days: int,
) -> AttendanceSummary:
    """Collapse a laborer's assignment statuses for one month.

    Every row is counted, so two rows on the same date count twice.
    ``late`` and ``absent`` never contribute to days worked.
    """
    days_present = 0
    half_days = 0
    for status in statuses:
        value = AttendanceStatus(status)
        if value is AttendanceStatus.PRESENT:
            days_present += 1
        elif value is AttendanceStatus.HALF_DAY:
            half_days += 1

    days_worked = Decimal(days_present) + HALF * half_days
    days_absent = max(Decimal("0"), Decimal(working_days) - days_worked)

    return AttendanceSummary(
        working_days=working_days,
        days_present=days_present,
        half_days=half_days,
        days_worked=days_worked,
        days_absent=days_absent,
    )
