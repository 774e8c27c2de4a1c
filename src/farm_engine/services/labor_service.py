"""Laborer, work assignment and attendance service."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_engine.calculators.attendance import summarize_attendance
from farm_engine.calculators.periods import month_bounds, parse_month_year, working_days_in_month
from farm_engine.calculators.types import (
    AttendanceStatus,
    AttendanceSummary,
    MonthKey,
    to_decimal,
)
from farm_engine.errors import BusinessRuleError, NotFoundError, ValidationError
from farm_engine.models import DailyLog, Laborer, Payroll, WorkAssignment

logger = logging.getLogger(__name__)

LABORER_FIELDS = (
    "employee_code",
    "full_name",
    "phone",
    "address",
    "monthly_salary",
    "hire_date",
    "is_active",
    "emergency_contact",
    "emergency_phone",
)

ASSIGNMENT_FIELDS = (
    "tasks_assigned",
    "attendance_status",
    "performance_notes",
    "hours",
)


def _check_status(value: Any) -> str:
    try:
        return AttendanceStatus(value).value
    except ValueError:
        raise ValidationError(
            f"Invalid attendance_status '{value}'",
            {"allowed": [s.value for s in AttendanceStatus]},
        )


class LaborService:
    """Laborer records, daily work assignments and monthly attendance."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ------------------------------------------------------------------
    # Laborers
    # ------------------------------------------------------------------

    async def list_laborers(self, active_only: bool = False) -> list[Laborer]:
        query = select(Laborer)
        if active_only:
            query = query.where(Laborer.is_active.is_(True))
        result = await self.session.execute(query.order_by(Laborer.full_name, Laborer.id))
        return list(result.scalars().all())

    async def get_laborer(self, laborer_id: int) -> Laborer:
        laborer = await self.session.get(Laborer, laborer_id)
        if laborer is None:
            raise NotFoundError("Laborer", laborer_id)
        return laborer

    async def create_laborer(self, data: dict[str, Any]) -> Laborer:
        if not data.get("full_name"):
            raise ValidationError("full_name is required")
        if to_decimal(data.get("monthly_salary")) < 0:
            raise ValidationError("monthly_salary cannot be negative")

        payload = {k: v for k, v in data.items() if k in LABORER_FIELDS and v is not None}
        laborer = Laborer(**payload)
        self.session.add(laborer)
        await self.session.flush()
        logger.info("Created laborer id=%s name=%s", laborer.id, laborer.full_name)
        return laborer

    async def update_laborer(self, laborer_id: int, updates: dict[str, Any]) -> Laborer:
        laborer = await self.get_laborer(laborer_id)
        if updates.get("full_name") == "":
            raise ValidationError("full_name cannot be empty")
        if to_decimal(updates.get("monthly_salary")) < 0:
            raise ValidationError("monthly_salary cannot be negative")

        for key, value in updates.items():
            if key in LABORER_FIELDS and value is not None:
                setattr(laborer, key, value)
        await self.session.flush()
        return laborer

    async def delete_laborer(self, laborer_id: int) -> None:
        """Hard delete a laborer with no history.

        Laborers referenced by assignments, payroll or daily logs must be
        deactivated instead so their history stays intact.
        """
        laborer = await self.get_laborer(laborer_id)

        referenced = await self.session.scalar(
            select(
                or_(
                    exists().where(WorkAssignment.laborer_id == laborer_id),
                    exists().where(Payroll.laborer_id == laborer_id),
                    exists().where(DailyLog.supervisor_id == laborer_id),
                )
            )
        )
        if referenced:
            raise BusinessRuleError(
                f"Laborer {laborer_id} has work or payroll history; deactivate instead",
                {"laborer_id": laborer_id},
            )

        await self.session.delete(laborer)
        await self.session.flush()
        logger.info("Deleted laborer id=%s", laborer_id)

    # ------------------------------------------------------------------
    # Work assignments
    # ------------------------------------------------------------------

    async def list_assignments(
        self,
        work_date: date | None = None,
        laborer_id: int | None = None,
    ) -> list[WorkAssignment]:
        query = select(WorkAssignment)
        if work_date is not None:
            query = query.where(WorkAssignment.work_date == work_date)
        if laborer_id is not None:
            query = query.where(WorkAssignment.laborer_id == laborer_id)
        result = await self.session.execute(
            query.order_by(WorkAssignment.work_date, WorkAssignment.laborer_id)
        )
        return list(result.scalars().all())

    async def get_assignment(self, assignment_id: int) -> WorkAssignment:
        assignment = await self.session.get(WorkAssignment, assignment_id)
        if assignment is None:
            raise NotFoundError("WorkAssignment", assignment_id)
        return assignment

    async def create_assignment(self, data: dict[str, Any]) -> WorkAssignment:
        """Record a laborer's day.

        A single ``task`` is normalized into ``tasks_assigned``. Submitting a
        second assignment for the same laborer and date updates the first.
        """
        laborer_id = data.get("laborer_id")
        work_date = data.get("work_date")
        if not laborer_id or not work_date:
            raise ValidationError("laborer_id and work_date are required")
        await self.get_laborer(laborer_id)

        payload = {k: v for k, v in data.items() if k in ASSIGNMENT_FIELDS and v is not None}
        if data.get("task") and not payload.get("tasks_assigned"):
            payload["tasks_assigned"] = [data["task"]]
        if "attendance_status" in payload:
            payload["attendance_status"] = _check_status(payload["attendance_status"])

        existing = await self.session.scalar(
            select(WorkAssignment).where(
                WorkAssignment.laborer_id == laborer_id,
                WorkAssignment.work_date == work_date,
            )
        )
        if existing is not None:
            for key, value in payload.items():
                setattr(existing, key, value)
            await self.session.flush()
            logger.info(
                "Updated work assignment id=%s laborer=%s date=%s",
                existing.id, laborer_id, work_date,
            )
            return existing

        assignment = WorkAssignment(laborer_id=laborer_id, work_date=work_date, **payload)
        self.session.add(assignment)
        await self.session.flush()
        return assignment

    async def update_assignment(self, assignment_id: int, updates: dict[str, Any]) -> WorkAssignment:
        assignment = await self.get_assignment(assignment_id)
        if updates.get("task") and not updates.get("tasks_assigned"):
            updates = {**updates, "tasks_assigned": [updates["task"]]}
        for key, value in updates.items():
            if key not in ASSIGNMENT_FIELDS or value is None:
                continue
            if key == "attendance_status":
                value = _check_status(value)
            setattr(assignment, key, value)
        await self.session.flush()
        return assignment

    # ------------------------------------------------------------------
    # Attendance
    # ------------------------------------------------------------------

    async def attendance_statuses(self, laborer_id: int, month: MonthKey) -> list[str]:
        """Every assignment status of the laborer inside the month (closed range)."""
        first, last = month_bounds(month)
        result = await self.session.execute(
            select(WorkAssignment.attendance_status).where(
                WorkAssignment.laborer_id == laborer_id,
                WorkAssignment.work_date.between(first, last),
            )
        )
        return list(result.scalars().all())

    async def aggregate_attendance(
        self,
        laborer_id: int,
        month_year: str | date | MonthKey,
    ) -> AttendanceSummary:
        """Summarize a laborer's attendance for a month."""
        month = month_year if isinstance(month_year, MonthKey) else parse_month_year(month_year)
        statuses = await self.attendance_statuses(laborer_id, month)
        return summarize_attendance(statuses, working_days_in_month(month))
