"""Payroll service - monthly salary runs over laborer attendance."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_engine.calculators.payroll import calculate_payroll, finalize_salary
from farm_engine.calculators.periods import parse_month_year
from farm_engine.calculators.types import ZERO, MonthKey, PaymentStatus, to_decimal
from farm_engine.errors import ConflictError, NotFoundError, ValidationError
from farm_engine.models import Laborer, Payroll
from farm_engine.services.labor_service import LaborService

logger = logging.getLogger(__name__)

_YEAR_RE = re.compile(r"^\d{4}$")

PAYROLL_UPDATE_FIELDS = (
    "salary_deductions",
    "bonus_amount",
    "payment_status",
    "payment_date",
    "notes",
)


class PayrollService:
    """Generates and maintains monthly payroll records.

    Operations:
    - generate_payroll: one record per active laborer for a month
    - list_payroll: records of a month
    - update_payroll: manual adjustments, recomputing final salary
    - payroll_summary: yearly totals
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.labor_service = LaborService(session)

    async def generate_payroll(
        self,
        month_year: str | date,
        bonuses: Mapping[int, Decimal] | None = None,
    ) -> list[Payroll]:
        """Create payroll rows for every active laborer.

        The month is validated before anything is written, and a month that
        already has payroll is rejected. All rows are flushed in the caller's
        transaction, so a failure part way leaves nothing behind.

        Raises:
            ValidationError: If the month is missing or malformed.
            ConflictError: If payroll already exists for the month.
        """
        month = parse_month_year(month_year)
        month_key = str(month)
        bonuses = bonuses or {}

        existing = await self.session.scalar(
            select(func.count()).select_from(Payroll).where(Payroll.month_year == month_key)
        )
        if existing:
            raise ConflictError(
                f"Payroll for {month_key} has already been generated",
                {"month_year": month_key, "existing": existing},
            )

        laborers = await self.labor_service.list_laborers(active_only=True)
        created: list[Payroll] = []
        for laborer in laborers:
            attendance = await self.labor_service.aggregate_attendance(laborer.id, month)
            figures = calculate_payroll(
                laborer.monthly_salary,
                attendance,
                bonuses.get(laborer.id, ZERO),
            )
            payroll = Payroll(
                month_year=month_key,
                laborer_id=laborer.id,
                base_salary=figures.base_salary,
                days_worked=figures.days_worked,
                days_absent=figures.days_absent,
                salary_deductions=figures.salary_deductions,
                bonus_amount=figures.bonus_amount,
                final_salary=figures.final_salary,
                payment_status=PaymentStatus.PENDING.value,
            )
            self.session.add(payroll)
            created.append(payroll)

        await self.session.flush()
        logger.info(
            "Generated payroll for %s: %d laborers, total %s",
            month_key,
            len(created),
            sum((p.final_salary for p in created), ZERO),
        )
        return created

    async def list_payroll(self, month_year: str | date) -> list[Payroll]:
        month_key = str(parse_month_year(month_year))
        result = await self.session.execute(
            select(Payroll).where(Payroll.month_year == month_key).order_by(Payroll.laborer_id)
        )
        return list(result.scalars().all())

    async def get_payroll(self, payroll_id: int) -> Payroll:
        payroll = await self.session.get(Payroll, payroll_id)
        if payroll is None:
            raise NotFoundError("Payroll", payroll_id)
        return payroll

    async def update_payroll(self, payroll_id: int, updates: dict[str, Any]) -> Payroll:
        """Adjust deductions, bonus or payment details of a payroll row.

        ``final_salary`` is always recomputed from base, deductions and bonus.
        """
        payroll = await self.get_payroll(payroll_id)

        for key in ("salary_deductions", "bonus_amount"):
            if key in updates and to_decimal(updates[key]) < 0:
                raise ValidationError(f"{key} cannot be negative")
        if updates.get("payment_status") is not None:
            try:
                updates = {
                    **updates,
                    "payment_status": PaymentStatus(updates["payment_status"]).value,
                }
            except ValueError:
                raise ValidationError(
                    f"Invalid payment_status '{updates['payment_status']}'",
                    {"allowed": [s.value for s in PaymentStatus]},
                )

        for key, value in updates.items():
            if key not in PAYROLL_UPDATE_FIELDS:
                continue
            if value is None and key not in ("payment_date", "notes"):
                continue
            setattr(payroll, key, value)

        payroll.final_salary = finalize_salary(
            payroll.base_salary, payroll.salary_deductions, payroll.bonus_amount
        )
        await self.session.flush()
        logger.info("Updated payroll id=%s %s", payroll.id, payroll.snapshot())
        return payroll

    async def payroll_summary(self, year: int | str) -> dict[str, Any]:
        """Total final salary per month and for the year."""
        year_str = str(year).strip() if year is not None else ""
        if not _YEAR_RE.match(year_str):
            raise ValidationError("year is required as YYYY", {"year": year})

        result = await self.session.execute(
            select(Payroll.month_year, Payroll.payment_status, Payroll.final_salary).where(
                Payroll.month_year.like(f"{year_str}-%")
            )
        )

        months: dict[str, Decimal] = {}
        total_paid = ZERO
        total_pending = ZERO
        for month_year, payment_status, final_salary in result.all():
            months[month_year] = months.get(month_year, ZERO) + final_salary
            if payment_status == PaymentStatus.PAID.value:
                total_paid += final_salary
            else:
                total_pending += final_salary

        return {
            "year": int(year_str),
            "total_payroll": total_paid + total_pending,
            "total_paid": total_paid,
            "total_pending": total_pending,
            "months": dict(sorted(months.items())),
        }

    async def monthly_salary_total(self, month: MonthKey) -> Decimal:
        """Sum of final salaries recorded for a month (0 when none)."""
        total = await self.session.scalar(
            select(func.coalesce(func.sum(Payroll.final_salary), 0)).where(
                Payroll.month_year == str(month)
            )
        )
        return to_decimal(total)

    async def laborer_history(self, laborer_id: int) -> list[Payroll]:
        if await self.session.get(Laborer, laborer_id) is None:
            raise NotFoundError("Laborer", laborer_id)
        result = await self.session.execute(
            select(Payroll).where(Payroll.laborer_id == laborer_id).order_by(Payroll.month_year)
        )
        return list(result.scalars().all())
