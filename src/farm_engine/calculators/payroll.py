"""Monthly salary calculation from aggregated attendance."""

from __future__ import annotations

from decimal import Decimal

from farm_engine.calculators.attendance import HALF
from farm_engine.calculators.types import (
    ZERO,
    AttendanceSummary,
    PayrollFigures,
    round_to_cents,
    to_decimal,
)
from farm_engine.errors import ValidationError


def calculate_payroll(
    base_salary: Decimal | int | str,
    attendance: AttendanceSummary,
    bonus_amount: Decimal | int | str = ZERO,
) -> PayrollFigures:
    """Convert a monthly base salary and attendance into final pay.

    daily = base / working_days
    deductions = days_absent * daily + half_days * 0.5 * daily
    final = base - deductions + bonus

    Deductions and final salary are rounded to cents; the daily rate is kept
    at full precision so full-month attendance always yields the base salary.
    """
    base = to_decimal(base_salary)
    bonus = to_decimal(bonus_amount)
    if base < 0:
        raise ValidationError(f"Base salary cannot be negative: {base}")
    if bonus < 0:
        raise ValidationError(f"Bonus cannot be negative: {bonus}")

    if attendance.working_days > 0:
        daily_salary = base / attendance.working_days
    else:
        daily_salary = ZERO

    salary_deductions = round_to_cents(
        attendance.days_absent * daily_salary
        + attendance.half_days * HALF * daily_salary
    )

    return PayrollFigures(
        base_salary=base,
        daily_salary=daily_salary,
        days_worked=attendance.days_worked,
        days_absent=attendance.days_absent,
        salary_deductions=salary_deductions,
        bonus_amount=bonus,
        final_salary=finalize_salary(base, salary_deductions, bonus),
    )


def finalize_salary(
    base_salary: Decimal, salary_deductions: Decimal, bonus_amount: Decimal
) -> Decimal:
    """final = base - deductions + bonus, in cents."""
    return round_to_cents(
        to_decimal(base_salary) - to_decimal(salary_deductions) + to_decimal(bonus_amount)
    )
