"""Payroll generation and adjustment tests."""

from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from farm_engine.calculators.types import MonthKey
from farm_engine.errors import ConflictError, NotFoundError, ValidationError
from farm_engine.models import Payroll
from farm_engine.services import LaborService, PayrollService

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def crew(session, make_laborer):
    """Two active laborers and one inactive one, with August 2025 attendance.

    Asha works 24 full days, Bala has no assignments at all.
    """
    asha = await make_laborer("Asha", monthly_salary=Decimal("26000"))
    bala = await make_laborer("Bala", monthly_salary=Decimal("13000"))
    await make_laborer("Chitra", monthly_salary=Decimal("20000"), is_active=False)

    labor = LaborService(session)
    for day in range(1, 25):
        await labor.create_assignment(
            {"laborer_id": asha.id, "work_date": date(2025, 8, day), "task": "feeding"}
        )
    return asha, bala


async def payroll_count(session) -> int:
    return await session.scalar(select(func.count()).select_from(Payroll))


class TestGeneratePayroll:
    """Test monthly payroll runs."""

    async def test_one_row_per_active_laborer(self, session, crew):
        asha, bala = crew
        rows = await PayrollService(session).generate_payroll("2025-08")

        by_laborer = {row.laborer_id: row for row in rows}
        assert set(by_laborer) == {asha.id, bala.id}

        asha_row = by_laborer[asha.id]
        assert asha_row.month_year == "2025-08"
        assert asha_row.days_worked == Decimal("24")
        assert asha_row.days_absent == Decimal("2")
        assert asha_row.salary_deductions == Decimal("2000.00")
        assert asha_row.final_salary == Decimal("24000.00")
        assert asha_row.payment_status == "pending"

        bala_row = by_laborer[bala.id]
        assert bala_row.days_absent == Decimal("26")
        assert bala_row.final_salary == Decimal("0.00")

    async def test_bonuses_applied(self, session, crew):
        asha, _ = crew
        rows = await PayrollService(session).generate_payroll(
            "2025-08", bonuses={asha.id: Decimal("500")}
        )
        asha_row = next(r for r in rows if r.laborer_id == asha.id)
        assert asha_row.final_salary == Decimal("24500.00")

    async def test_rerun_for_same_month_rejected(self, session, crew):
        service = PayrollService(session)
        await service.generate_payroll("2025-08")

        with pytest.raises(ConflictError):
            await service.generate_payroll("2025-08")
        assert await payroll_count(session) == 2

    async def test_malformed_month_writes_nothing(self, session, crew):
        with pytest.raises(ValidationError):
            await PayrollService(session).generate_payroll("2025-13")
        assert await payroll_count(session) == 0

    async def test_other_month_unaffected(self, session, crew):
        service = PayrollService(session)
        await service.generate_payroll("2025-08")
        rows = await service.generate_payroll("2025-09")
        assert len(rows) == 2
        assert all(r.days_worked == Decimal("0") for r in rows)


class TestUpdatePayroll:
    """Test manual adjustments."""

    async def test_final_salary_recomputed(self, session, crew):
        asha, _ = crew
        service = PayrollService(session)
        rows = await service.generate_payroll("2025-08")
        row = next(r for r in rows if r.laborer_id == asha.id)

        updated = await service.update_payroll(
            row.id,
            {
                "salary_deductions": Decimal("1000"),
                "bonus_amount": Decimal("250"),
                "payment_status": "paid",
                "payment_date": date(2025, 9, 5),
            },
        )

        assert updated.final_salary == Decimal("25250.00")
        assert updated.payment_status == "paid"
        assert updated.payment_date == date(2025, 9, 5)

    async def test_invalid_status_rejected(self, session, crew):
        rows = await PayrollService(session).generate_payroll("2025-08")
        with pytest.raises(ValidationError):
            await PayrollService(session).update_payroll(rows[0].id, {"payment_status": "void"})

    async def test_negative_deduction_rejected(self, session, crew):
        rows = await PayrollService(session).generate_payroll("2025-08")
        with pytest.raises(ValidationError):
            await PayrollService(session).update_payroll(
                rows[0].id, {"salary_deductions": Decimal("-1")}
            )

    async def test_missing_row(self, session):
        with pytest.raises(NotFoundError):
            await PayrollService(session).update_payroll(404, {"notes": "x"})


class TestPayrollReports:
    async def test_summary_splits_paid_and_pending(self, session, crew):
        asha, _ = crew
        service = PayrollService(session)
        rows = await service.generate_payroll("2025-08")
        asha_row = next(r for r in rows if r.laborer_id == asha.id)
        await service.update_payroll(asha_row.id, {"payment_status": "paid"})

        summary = await service.payroll_summary(2025)

        assert summary["year"] == 2025
        assert summary["total_paid"] == Decimal("24000.00")
        assert summary["total_pending"] == Decimal("0.00")
        assert summary["total_payroll"] == Decimal("24000.00")
        assert summary["months"] == {"2025-08": Decimal("24000.00")}

    async def test_summary_requires_year(self, session):
        with pytest.raises(ValidationError):
            await PayrollService(session).payroll_summary("25")

    async def test_monthly_total_and_history(self, session, crew):
        asha, _ = crew
        service = PayrollService(session)
        await service.generate_payroll("2025-08")

        total = await service.monthly_salary_total(MonthKey(2025, 8))
        assert total == Decimal("24000.00")

        history = await service.laborer_history(asha.id)
        assert [p.month_year for p in history] == ["2025-08"]
