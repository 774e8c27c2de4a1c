"""Payroll API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from farm_engine.api.dependencies import DbSession, require_permission
from farm_engine.api.schemas import (
    ErrorResponse,
    PayrollGenerateRequest,
    PayrollResponse,
    PayrollSummaryResponse,
    PayrollUpdate,
)
from farm_engine.services.payroll_service import PayrollService

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.post(
    "/generate",
    response_model=list[PayrollResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("payroll", "create"))],
)
async def generate_payroll(
    db: DbSession,
    payload: PayrollGenerateRequest,
) -> list[PayrollResponse]:
    """Generate payroll for every active laborer for a month.

    The run is a single transaction; a month already processed is rejected.
    """
    rows = await PayrollService(db).generate_payroll(payload.month_year, payload.bonuses)
    await db.commit()
    return [PayrollResponse.model_validate(r) for r in rows]


@router.get(
    "/summary",
    response_model=PayrollSummaryResponse,
    responses={400: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("payroll", "read"))],
)
async def payroll_summary(
    db: DbSession,
    year: Annotated[str, Query(examples=["2025"])],
) -> PayrollSummaryResponse:
    summary = await PayrollService(db).payroll_summary(year)
    return PayrollSummaryResponse(**summary)


@router.get(
    "/laborers/{laborer_id}",
    response_model=list[PayrollResponse],
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("payroll", "read"))],
)
async def laborer_payroll_history(
    db: DbSession,
    laborer_id: Annotated[int, Path()],
) -> list[PayrollResponse]:
    rows = await PayrollService(db).laborer_history(laborer_id)
    return [PayrollResponse.model_validate(r) for r in rows]


@router.get(
    "/{month_year}",
    response_model=list[PayrollResponse],
    responses={400: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("payroll", "read"))],
)
async def list_payroll(
    db: DbSession,
    month_year: Annotated[str, Path()],
) -> list[PayrollResponse]:
    """List payroll records of a month (YYYY-MM)."""
    rows = await PayrollService(db).list_payroll(month_year)
    return [PayrollResponse.model_validate(r) for r in rows]


@router.put(
    "/{payroll_id}",
    response_model=PayrollResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("payroll", "update"))],
)
async def update_payroll(
    db: DbSession,
    payroll_id: Annotated[int, Path()],
    payload: PayrollUpdate,
) -> PayrollResponse:
    """Adjust deductions, bonus or payment details; final salary is recomputed."""
    payroll = await PayrollService(db).update_payroll(
        payroll_id, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return PayrollResponse.model_validate(payroll)
