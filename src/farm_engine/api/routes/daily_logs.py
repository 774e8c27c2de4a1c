"""Daily log endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from farm_engine.api.dependencies import DbSession, require_permission
from farm_engine.api.schemas import (
    DailyLogCreate,
    DailyLogResponse,
    DailyLogUpdate,
    ErrorResponse,
)
from farm_engine.services.daily_log_service import DailyLogService

router = APIRouter(prefix="/daily-logs", tags=["daily-logs"])


@router.get(
    "",
    response_model=list[DailyLogResponse],
    dependencies=[Depends(require_permission("daily_logs", "read"))],
)
async def list_daily_logs(
    db: DbSession,
    log_date: date | None = None,
    house_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[DailyLogResponse]:
    logs = await DailyLogService(db).list_logs(
        log_date=log_date, house_id=house_id, start_date=start_date, end_date=end_date
    )
    return [DailyLogResponse.model_validate(log) for log in logs]


@router.post(
    "",
    response_model=DailyLogResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    dependencies=[Depends(require_permission("daily_logs", "create"))],
)
async def upsert_daily_log(db: DbSession, payload: DailyLogCreate) -> DailyLogResponse:
    """Record a house's day; resubmitting the same house and date updates it.

    Feed bags are checked against the batch's remaining stock.
    """
    log = await DailyLogService(db).upsert_log(payload.model_dump(exclude_unset=True))
    await db.commit()
    return DailyLogResponse.model_validate(log)


@router.get(
    "/{log_id}",
    response_model=DailyLogResponse,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("daily_logs", "read"))],
)
async def get_daily_log(db: DbSession, log_id: Annotated[int, Path()]) -> DailyLogResponse:
    log = await DailyLogService(db).get_log(log_id)
    return DailyLogResponse.model_validate(log)


@router.put(
    "/{log_id}",
    response_model=DailyLogResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    dependencies=[Depends(require_permission("daily_logs", "update"))],
)
async def update_daily_log(
    db: DbSession,
    log_id: Annotated[int, Path()],
    payload: DailyLogUpdate,
) -> DailyLogResponse:
    log = await DailyLogService(db).update_log(log_id, payload.model_dump(exclude_unset=True))
    await db.commit()
    return DailyLogResponse.model_validate(log)


@router.delete(
    "/{log_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("daily_logs", "delete"))],
)
async def delete_daily_log(db: DbSession, log_id: Annotated[int, Path()]) -> Response:
    await DailyLogService(db).delete_log(log_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
