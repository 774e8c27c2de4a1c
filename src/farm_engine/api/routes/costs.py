"""Cost and egg pricing endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from farm_engine.api.dependencies import AppSettings, DbSession, require_permission
from farm_engine.api.schemas import (
    CostSummaryResponse,
    DailyCostResponse,
    ErrorResponse,
    FlockCostCreate,
    FlockCostResponse,
    OperatingCostCreate,
    OperatingCostResponse,
    OperatingCostUpdate,
)
from farm_engine.errors import NotFoundError
from farm_engine.services.cost_service import CostService

router = APIRouter(prefix="/costs", tags=["costs"])


@router.get(
    "/daily",
    response_model=DailyCostResponse,
    responses={400: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("costs", "read"))],
)
async def daily_egg_cost(
    db: DbSession,
    settings: AppSettings,
    cost_date: Annotated[date, Query(alias="date")],
) -> DailyCostResponse:
    """Per-egg cost breakdown and suggested price for a day."""
    breakdown = await CostService(db, markup=settings.egg_price_markup).compute_daily_egg_cost(
        cost_date
    )
    return DailyCostResponse.model_validate(breakdown)


@router.get(
    "/summary",
    response_model=CostSummaryResponse,
    responses={400: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("costs", "read"))],
)
async def cost_summary(
    db: DbSession,
    start: date,
    end: date,
) -> CostSummaryResponse:
    summary = await CostService(db).cost_summary(start, end)
    return CostSummaryResponse(**summary)


# ============================================================================
# Operating costs
# ============================================================================


@router.get(
    "/operating",
    response_model=list[OperatingCostResponse],
    dependencies=[Depends(require_permission("costs", "read"))],
)
async def list_operating_costs(
    db: DbSession,
    year: int | None = None,
) -> list[OperatingCostResponse]:
    costs = await CostService(db).list_operating_costs(year=year)
    return [OperatingCostResponse.model_validate(c) for c in costs]


@router.post(
    "/operating",
    response_model=OperatingCostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("costs", "write"))],
)
async def create_operating_cost(
    db: DbSession,
    payload: OperatingCostCreate,
) -> OperatingCostResponse:
    """Record a month's fixed costs; one record per month."""
    cost = await CostService(db).create_operating_cost(payload.model_dump())
    await db.commit()
    return OperatingCostResponse.model_validate(cost)


@router.get(
    "/operating/{month_year}",
    response_model=OperatingCostResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("costs", "read"))],
)
async def get_operating_cost(
    db: DbSession,
    month_year: Annotated[str, Path()],
) -> OperatingCostResponse:
    cost = await CostService(db).get_operating_cost(month_year)
    if cost is None:
        raise NotFoundError("OperatingCost", month_year)
    return OperatingCostResponse.model_validate(cost)


@router.put(
    "/operating/{month_year}",
    response_model=OperatingCostResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("costs", "write"))],
)
async def update_operating_cost(
    db: DbSession,
    month_year: Annotated[str, Path()],
    payload: OperatingCostUpdate,
) -> OperatingCostResponse:
    cost = await CostService(db).update_operating_cost(
        month_year, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return OperatingCostResponse.model_validate(cost)


# ============================================================================
# Flock costs
# ============================================================================


@router.get(
    "/flocks",
    response_model=list[FlockCostResponse],
    dependencies=[Depends(require_permission("costs", "read"))],
)
async def list_flock_costs(db: DbSession) -> list[FlockCostResponse]:
    flocks = await CostService(db).list_flock_costs()
    return [FlockCostResponse.model_validate(f) for f in flocks]


@router.post(
    "/flocks",
    response_model=FlockCostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("costs", "write"))],
)
async def create_flock_cost(db: DbSession, payload: FlockCostCreate) -> FlockCostResponse:
    """Record a flock purchase; it feeds the health component of egg cost."""
    flock = await CostService(db).create_flock_cost(payload.model_dump())
    await db.commit()
    return FlockCostResponse.model_validate(flock)
