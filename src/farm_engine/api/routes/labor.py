"""Laborer and work assignment endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from farm_engine.api.dependencies import DbSession, require_permission
from farm_engine.api.schemas import (
    AttendanceResponse,
    ErrorResponse,
    LaborerCreate,
    LaborerResponse,
    LaborerUpdate,
    WorkAssignmentCreate,
    WorkAssignmentResponse,
    WorkAssignmentUpdate,
)
from farm_engine.calculators.periods import parse_month_year
from farm_engine.services.labor_service import LaborService

router = APIRouter(tags=["labor"])


# ============================================================================
# Laborers
# ============================================================================


@router.get(
    "/laborers",
    response_model=list[LaborerResponse],
    dependencies=[Depends(require_permission("laborers", "read"))],
)
async def list_laborers(
    db: DbSession,
    active_only: bool = False,
) -> list[LaborerResponse]:
    """List laborers, optionally only active ones."""
    laborers = await LaborService(db).list_laborers(active_only=active_only)
    return [LaborerResponse.model_validate(l) for l in laborers]


@router.post(
    "/laborers",
    response_model=LaborerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("laborers", "create"))],
)
async def create_laborer(db: DbSession, payload: LaborerCreate) -> LaborerResponse:
    laborer = await LaborService(db).create_laborer(payload.model_dump())
    await db.commit()
    return LaborerResponse.model_validate(laborer)


@router.get(
    "/laborers/{laborer_id}",
    response_model=LaborerResponse,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("laborers", "read"))],
)
async def get_laborer(
    db: DbSession,
    laborer_id: Annotated[int, Path()],
) -> LaborerResponse:
    laborer = await LaborService(db).get_laborer(laborer_id)
    return LaborerResponse.model_validate(laborer)


@router.put(
    "/laborers/{laborer_id}",
    response_model=LaborerResponse,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("laborers", "update"))],
)
async def update_laborer(
    db: DbSession,
    laborer_id: Annotated[int, Path()],
    payload: LaborerUpdate,
) -> LaborerResponse:
    laborer = await LaborService(db).update_laborer(
        laborer_id, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return LaborerResponse.model_validate(laborer)


@router.delete(
    "/laborers/{laborer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("laborers", "delete"))],
)
async def delete_laborer(
    db: DbSession,
    laborer_id: Annotated[int, Path()],
) -> Response:
    """Delete a laborer without history; others must be deactivated."""
    await LaborService(db).delete_laborer(laborer_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/laborers/{laborer_id}/attendance",
    response_model=AttendanceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("work_assignments", "read"))],
)
async def get_attendance(
    db: DbSession,
    laborer_id: Annotated[int, Path()],
    month_year: Annotated[str, Query(examples=["2025-08"])],
) -> AttendanceResponse:
    """Attendance summary of a laborer for one month."""
    service = LaborService(db)
    await service.get_laborer(laborer_id)
    month = parse_month_year(month_year)
    summary = await service.aggregate_attendance(laborer_id, month)
    return AttendanceResponse(
        laborer_id=laborer_id,
        month_year=str(month),
        working_days=summary.working_days,
        days_present=summary.days_present,
        half_days=summary.half_days,
        days_worked=summary.days_worked,
        days_absent=summary.days_absent,
    )


# ============================================================================
# Work assignments
# ============================================================================


@router.get(
    "/work-assignments",
    response_model=list[WorkAssignmentResponse],
    dependencies=[Depends(require_permission("work_assignments", "read"))],
)
async def list_work_assignments(
    db: DbSession,
    work_date: date | None = None,
    laborer_id: int | None = None,
) -> list[WorkAssignmentResponse]:
    assignments = await LaborService(db).list_assignments(
        work_date=work_date, laborer_id=laborer_id
    )
    return [WorkAssignmentResponse.model_validate(a) for a in assignments]


@router.post(
    "/work-assignments",
    response_model=WorkAssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("work_assignments", "create"))],
)
async def create_work_assignment(
    db: DbSession,
    payload: WorkAssignmentCreate,
) -> WorkAssignmentResponse:
    """Record a laborer's day; a second entry for the same day updates it."""
    assignment = await LaborService(db).create_assignment(payload.model_dump())
    await db.commit()
    return WorkAssignmentResponse.model_validate(assignment)


@router.put(
    "/work-assignments/{assignment_id}",
    response_model=WorkAssignmentResponse,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("work_assignments", "update"))],
)
async def update_work_assignment(
    db: DbSession,
    assignment_id: Annotated[int, Path()],
    payload: WorkAssignmentUpdate,
) -> WorkAssignmentResponse:
    assignment = await LaborService(db).update_assignment(
        assignment_id, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return WorkAssignmentResponse.model_validate(assignment)
