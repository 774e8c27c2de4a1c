"""Laborer, work assignment and attendance service tests."""

from datetime import date
from decimal import Decimal

import pytest

from farm_engine.errors import BusinessRuleError, NotFoundError, ValidationError
from farm_engine.services import LaborService

pytestmark = pytest.mark.asyncio


class TestLaborers:
    """Test laborer CRUD rules."""

    async def test_create_and_list_active(self, session, make_laborer):
        active = await make_laborer("Asha")
        await make_laborer("Bala", is_active=False)

        service = LaborService(session)
        everyone = await service.list_laborers()
        active_only = await service.list_laborers(active_only=True)

        assert len(everyone) == 2
        assert [l.id for l in active_only] == [active.id]

    async def test_create_requires_name(self, session):
        with pytest.raises(ValidationError):
            await LaborService(session).create_laborer({"full_name": "", "monthly_salary": 100})

    async def test_negative_salary_rejected(self, session):
        with pytest.raises(ValidationError):
            await LaborService(session).create_laborer(
                {"full_name": "Asha", "monthly_salary": Decimal("-1")}
            )

    async def test_update_skips_missing_fields(self, session, make_laborer):
        laborer = await make_laborer("Asha", phone="555-0100")
        updated = await LaborService(session).update_laborer(
            laborer.id, {"monthly_salary": Decimal("30000"), "phone": None}
        )
        assert updated.monthly_salary == Decimal("30000")
        assert updated.phone == "555-0100"

    async def test_get_missing_laborer(self, session):
        with pytest.raises(NotFoundError):
            await LaborService(session).get_laborer(999)

    async def test_delete_without_history(self, session, make_laborer):
        laborer = await make_laborer()
        service = LaborService(session)
        await service.delete_laborer(laborer.id)
        with pytest.raises(NotFoundError):
            await service.get_laborer(laborer.id)

    async def test_delete_with_history_refused(self, session, make_laborer):
        laborer = await make_laborer()
        service = LaborService(session)
        await service.create_assignment(
            {"laborer_id": laborer.id, "work_date": date(2025, 8, 1), "task": "feeding"}
        )
        with pytest.raises(BusinessRuleError, match="deactivate"):
            await service.delete_laborer(laborer.id)


class TestWorkAssignments:
    """Test daily assignment recording."""

    async def test_single_task_normalized(self, session, make_laborer):
        laborer = await make_laborer()
        assignment = await LaborService(session).create_assignment(
            {"laborer_id": laborer.id, "work_date": date(2025, 8, 4), "task": "egg collection"}
        )
        assert assignment.tasks_assigned == ["egg collection"]
        assert assignment.attendance_status == "present"

    async def test_same_day_updates_existing(self, session, make_laborer):
        laborer = await make_laborer()
        service = LaborService(session)
        first = await service.create_assignment(
            {"laborer_id": laborer.id, "work_date": date(2025, 8, 4), "attendance_status": "present"}
        )
        second = await service.create_assignment(
            {"laborer_id": laborer.id, "work_date": date(2025, 8, 4), "attendance_status": "half_day"}
        )

        assert second.id == first.id
        assert second.attendance_status == "half_day"
        assert len(await service.list_assignments(laborer_id=laborer.id)) == 1

    async def test_invalid_status_rejected(self, session, make_laborer):
        laborer = await make_laborer()
        with pytest.raises(ValidationError):
            await LaborService(session).create_assignment(
                {"laborer_id": laborer.id, "work_date": date(2025, 8, 4), "attendance_status": "sick"}
            )

    async def test_unknown_laborer(self, session):
        with pytest.raises(NotFoundError):
            await LaborService(session).create_assignment(
                {"laborer_id": 42, "work_date": date(2025, 8, 4)}
            )

    async def test_update_assignment(self, session, make_laborer):
        laborer = await make_laborer()
        service = LaborService(session)
        assignment = await service.create_assignment(
            {"laborer_id": laborer.id, "work_date": date(2025, 8, 4)}
        )
        updated = await service.update_assignment(
            assignment.id, {"attendance_status": "late", "hours": Decimal("6.5")}
        )
        assert updated.attendance_status == "late"
        assert updated.hours == Decimal("6.5")


class TestAttendance:
    """Test monthly attendance aggregation from stored assignments."""

    async def test_aggregates_only_the_month(self, session, make_laborer):
        laborer = await make_laborer()
        service = LaborService(session)
        for day, status in [(1, "present"), (2, "present"), (4, "half_day"), (5, "absent")]:
            await service.create_assignment(
                {"laborer_id": laborer.id, "work_date": date(2025, 8, day), "attendance_status": status}
            )
        # Outside the month on both sides
        await service.create_assignment(
            {"laborer_id": laborer.id, "work_date": date(2025, 7, 31), "attendance_status": "present"}
        )
        await service.create_assignment(
            {"laborer_id": laborer.id, "work_date": date(2025, 9, 1), "attendance_status": "present"}
        )

        summary = await service.aggregate_attendance(laborer.id, "2025-08")

        assert summary.working_days == 26
        assert summary.days_present == 2
        assert summary.half_days == 1
        assert summary.days_worked == Decimal("2.5")
        assert summary.days_absent == Decimal("23.5")

    async def test_last_day_of_month_included(self, session, make_laborer):
        laborer = await make_laborer()
        service = LaborService(session)
        await service.create_assignment(
            {"laborer_id": laborer.id, "work_date": date(2025, 8, 31), "attendance_status": "present"}
        )
        summary = await service.aggregate_attendance(laborer.id, "2025-08")
        assert summary.days_present == 1
