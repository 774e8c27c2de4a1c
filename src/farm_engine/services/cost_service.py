"""Cost service - operating costs, flock costs and daily egg pricing."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_engine.calculators.egg_cost import (
    DEFAULT_MARKUP,
    compute_egg_cost,
    daily_flock_cost,
    feed_cost_for_usage,
)
from farm_engine.calculators.feed_batch import DEFAULT_BAG_SIZE_KG
from farm_engine.calculators.periods import days_in_month, month_bounds, parse_month_year
from farm_engine.calculators.types import (
    ZERO,
    DailyCostBreakdown,
    DailyCostInputs,
    FeedUsage,
    FlockInput,
    MonthKey,
    round_to_cents,
    to_decimal,
)
from farm_engine.errors import ConflictError, NotFoundError, ValidationError
from farm_engine.models import DailyLog, FeedBatch, FlockCost, OperatingCost
from farm_engine.services.feed_batch_service import FeedBatchService
from farm_engine.services.payroll_service import PayrollService

logger = logging.getLogger(__name__)

OPERATING_COMPONENTS = (
    "supervisor_salary",
    "total_laborer_salaries",
    "electricity_cost",
    "water_cost",
    "maintenance_cost",
    "other_costs",
)

FLOCK_FIELDS = (
    "batch_date",
    "birds_purchased",
    "cost_per_bird",
    "vaccination_cost_per_bird",
    "expected_laying_months",
    "notes",
)


def _total_monthly_cost(cost: OperatingCost) -> Decimal:
    return sum((to_decimal(getattr(cost, name)) for name in OPERATING_COMPONENTS), ZERO)


class CostService:
    """Prices a day's eggs from feed, labor, overhead and flock costs.

    Monthly costs are spread over the month's average daily production;
    feed and flock costs are charged against the day's own eggs.
    """

    def __init__(self, session: AsyncSession, markup: Decimal = DEFAULT_MARKUP):
        self.session = session
        self.markup = markup
        self.feed_batches = FeedBatchService(session)
        self.payroll = PayrollService(session)

    # ------------------------------------------------------------------
    # Operating costs
    # ------------------------------------------------------------------

    async def get_operating_cost(self, month_year: str | date | MonthKey) -> OperatingCost | None:
        month = month_year if isinstance(month_year, MonthKey) else parse_month_year(month_year)
        return await self.session.scalar(
            select(OperatingCost).where(OperatingCost.month_year == str(month))
        )

    async def list_operating_costs(self, year: int | None = None) -> list[OperatingCost]:
        query = select(OperatingCost)
        if year is not None:
            query = query.where(OperatingCost.month_year.like(f"{year:04d}-%"))
        result = await self.session.execute(query.order_by(OperatingCost.month_year))
        return list(result.scalars().all())

    def _apply_components(self, cost: OperatingCost, data: dict[str, Any]) -> None:
        for name in OPERATING_COMPONENTS:
            if data.get(name) is None:
                continue
            value = to_decimal(data[name])
            if value < 0:
                raise ValidationError(f"{name} cannot be negative", {name: str(value)})
            setattr(cost, name, value)

    async def create_operating_cost(self, data: dict[str, Any]) -> OperatingCost:
        """Record a month's fixed costs.

        When laborer salaries are not given they are taken from that month's
        payroll.

        Raises:
            ValidationError: If the month is missing or a component is negative.
            ConflictError: If the month already has operating costs.
        """
        month = parse_month_year(data.get("month_year"))
        if await self.get_operating_cost(month) is not None:
            raise ConflictError(
                f"Operating costs for {month} already exist", {"month_year": str(month)}
            )

        cost = OperatingCost(month_year=str(month), notes=data.get("notes"))
        for name in OPERATING_COMPONENTS:
            setattr(cost, name, ZERO)
        self._apply_components(cost, data)
        if data.get("total_laborer_salaries") is None:
            cost.total_laborer_salaries = await self.payroll.monthly_salary_total(month)
        cost.total_monthly_cost = round_to_cents(_total_monthly_cost(cost))

        self.session.add(cost)
        await self.session.flush()
        logger.info(
            "Recorded operating costs for %s: total %s", cost.month_year, cost.total_monthly_cost
        )
        return cost

    async def update_operating_cost(self, month_year: str, updates: dict[str, Any]) -> OperatingCost:
        cost = await self.get_operating_cost(month_year)
        if cost is None:
            raise NotFoundError("OperatingCost", month_year)
        self._apply_components(cost, updates)
        if updates.get("notes") is not None:
            cost.notes = updates["notes"]
        cost.total_monthly_cost = round_to_cents(_total_monthly_cost(cost))
        await self.session.flush()
        return cost

    # ------------------------------------------------------------------
    # Flock costs
    # ------------------------------------------------------------------

    async def list_flock_costs(self) -> list[FlockCost]:
        result = await self.session.execute(select(FlockCost).order_by(FlockCost.batch_date))
        return list(result.scalars().all())

    async def create_flock_cost(self, data: dict[str, Any]) -> FlockCost:
        if not data.get("batch_date"):
            raise ValidationError("batch_date is required")
        if int(data.get("birds_purchased") or 0) <= 0:
            raise ValidationError("birds_purchased must be positive")
        if to_decimal(data.get("cost_per_bird")) < 0:
            raise ValidationError("cost_per_bird cannot be negative")
        if to_decimal(data.get("vaccination_cost_per_bird")) < 0:
            raise ValidationError("vaccination_cost_per_bird cannot be negative")
        if data.get("expected_laying_months") is not None and data["expected_laying_months"] <= 0:
            raise ValidationError("expected_laying_months must be positive")

        flock = FlockCost(**{k: v for k, v in data.items() if k in FLOCK_FIELDS and v is not None})
        self.session.add(flock)
        await self.session.flush()
        return flock

    # ------------------------------------------------------------------
    # Egg pricing
    # ------------------------------------------------------------------

    async def _batch_for_log(self, log: DailyLog) -> FeedBatch | None:
        if log.feed_batch_id is not None:
            batch = await self.session.get(FeedBatch, log.feed_batch_id)
            if batch is not None:
                return batch
        return await self.feed_batches.latest_batch(on_or_before=log.log_date) or (
            await self.feed_batches.latest_batch()
        )

    async def feed_usage_for_logs(self, logs: list[DailyLog]) -> list[FeedUsage]:
        """Price each log's bags at the cost of the batch they came from."""
        usages: list[FeedUsage] = []
        for log in logs:
            bags = to_decimal(log.feed_bags_used)
            if bags <= 0:
                continue
            batch = await self._batch_for_log(log)
            usages.append(
                FeedUsage(
                    bags_used=bags,
                    cost_per_bag=batch.cost_per_bag if batch else ZERO,
                    bag_size_kg=batch.bag_size_kg if batch else DEFAULT_BAG_SIZE_KG,
                )
            )
        return usages

    async def month_production(self, month: MonthKey) -> int:
        first, last = month_bounds(month)
        total = await self.session.scalar(
            select(func.coalesce(func.sum(DailyLog.eggs_collected), 0)).where(
                DailyLog.log_date.between(first, last)
            )
        )
        return int(total or 0)

    async def compute_daily_egg_cost(self, cost_date: date | str) -> DailyCostBreakdown:
        """Cost per egg and suggested price for one day across all houses."""
        if isinstance(cost_date, str):
            try:
                cost_date = date.fromisoformat(cost_date)
            except ValueError:
                raise ValidationError(f"Invalid date '{cost_date}', expected YYYY-MM-DD")
        month = MonthKey(cost_date.year, cost_date.month)

        result = await self.session.execute(select(DailyLog).where(DailyLog.log_date == cost_date))
        logs = list(result.scalars().all())
        total_eggs = sum(log.eggs_collected or 0 for log in logs)
        feed_cost, feed_kg = feed_cost_for_usage(await self.feed_usage_for_logs(logs))

        operating = await self.get_operating_cost(month)
        labor_cost = await self.payroll.monthly_salary_total(month)
        if not labor_cost and operating is not None:
            labor_cost = operating.total_laborer_salaries

        flocks = [
            FlockInput(
                batch_date=f.batch_date,
                birds_purchased=f.birds_purchased,
                cost_per_bird=f.cost_per_bird,
                vaccination_cost_per_bird=f.vaccination_cost_per_bird,
                expected_laying_months=f.expected_laying_months,
            )
            for f in await self.list_flock_costs()
        ]

        breakdown = compute_egg_cost(
            DailyCostInputs(
                cost_date=cost_date,
                total_eggs=total_eggs,
                feed_cost=feed_cost,
                feed_kg=feed_kg,
                days_in_month=days_in_month(month),
                month_production=await self.month_production(month),
                monthly_labor_cost=labor_cost,
                monthly_operating_cost=operating.overhead if operating else ZERO,
                daily_flock_cost=daily_flock_cost(flocks, cost_date),
            ),
            markup=self.markup,
        )
        logger.info(
            "Egg cost for %s: %s eggs, %s per egg, suggested price %s",
            cost_date, total_eggs, breakdown.total_cost_per_egg, breakdown.suggested_price,
        )
        return breakdown

    async def cost_summary(self, start: date, end: date) -> dict[str, Any]:
        """Eggs, feed bags, feed kg and feed cost over a closed date range."""
        if start is None or end is None:
            raise ValidationError("start and end are required")
        if start > end:
            raise ValidationError("start must not be after end")

        result = await self.session.execute(
            select(DailyLog).where(DailyLog.log_date.between(start, end))
        )
        logs = list(result.scalars().all())
        usages = await self.feed_usage_for_logs(logs)
        feed_cost, feed_kg = feed_cost_for_usage(usages)

        return {
            "start": start,
            "end": end,
            "total_eggs": sum(log.eggs_collected or 0 for log in logs),
            "total_feed_bags": sum((u.bags_used for u in usages), ZERO),
            "total_feed_kg": feed_kg,
            "total_feed_cost": round_to_cents(feed_cost),
        }
