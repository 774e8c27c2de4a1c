"""Feed batch service - batches, ingredients and bag inventory."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_engine.calculators.feed_batch import (
    DEFAULT_BAG_SIZE_KG,
    check_feed_availability,
    coerce_ingredient,
    compute_batch_totals,
    compute_batch_usage,
)
from farm_engine.calculators.types import ZERO, BatchTotals, BatchUsage, to_decimal
from farm_engine.errors import BusinessRuleError, NotFoundError, ValidationError
from farm_engine.models import BatchIngredient, DailyLog, FeedBatch

logger = logging.getLogger(__name__)

BATCH_FIELDS = ("batch_date", "batch_name", "bag_size_kg", "miscellaneous_cost", "notes")


class FeedBatchService:
    """Keeps each batch's derived totals equal to its live ingredient rows.

    Every ingredient mutation goes through ``batch.ingredients`` and is
    followed by a full recomputation, all inside the caller's transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        default_bag_size_kg: Decimal = DEFAULT_BAG_SIZE_KG,
    ):
        self.session = session
        self.default_bag_size_kg = default_bag_size_kg

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def apply_totals(self, batch: FeedBatch) -> BatchTotals:
        """Recompute and store batch totals from its current ingredients."""
        totals = compute_batch_totals(
            batch.ingredients,
            bag_size_kg=batch.bag_size_kg,
            miscellaneous_cost=batch.miscellaneous_cost,
        )
        batch.bag_size_kg = totals.bag_size_kg
        batch.miscellaneous_cost = totals.miscellaneous_cost
        batch.total_quantity_tons = totals.total_quantity_tons
        batch.total_bags = totals.total_bags
        batch.total_cost = totals.total_cost
        batch.cost_per_bag = totals.cost_per_bag
        batch.cost_per_kg = totals.cost_per_kg
        for ingredient, line in zip(batch.ingredients, totals.ingredients):
            ingredient.cost_per_kg = line.cost_per_kg
        return totals

    async def recalculate(self, batch_id: int) -> FeedBatch:
        batch = await self.get_batch(batch_id)
        totals = self.apply_totals(batch)
        await self.session.flush()
        logger.info(
            "Recalculated feed batch id=%s: %s bags, total cost %s, cost per bag %s",
            batch.id, totals.total_bags, totals.total_cost, totals.cost_per_bag,
        )
        return batch

    def preview(
        self,
        ingredients: Iterable[Mapping[str, Any]],
        bag_size_kg: Decimal | None = None,
        miscellaneous_cost: Decimal | int = ZERO,
    ) -> BatchTotals:
        """Price a prospective batch without persisting anything."""
        lines = list(ingredients or [])
        if not lines:
            raise ValidationError("ingredients array is required")
        return compute_batch_totals(
            lines,
            bag_size_kg=bag_size_kg or self.default_bag_size_kg,
            miscellaneous_cost=miscellaneous_cost,
        )

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    async def list_batches(
        self,
        batch_date: date | None = None,
        batch_name: str | None = None,
    ) -> list[FeedBatch]:
        query = select(FeedBatch)
        if batch_date is not None:
            query = query.where(FeedBatch.batch_date == batch_date)
        if batch_name:
            query = query.where(FeedBatch.batch_name.ilike(f"%{batch_name}%"))
        result = await self.session.execute(
            query.order_by(FeedBatch.batch_date.desc(), FeedBatch.id.desc())
        )
        return list(result.scalars().all())

    async def get_batch(self, batch_id: int) -> FeedBatch:
        batch = await self.session.get(FeedBatch, batch_id)
        if batch is None:
            raise NotFoundError("FeedBatch", batch_id)
        return batch

    async def latest_batch(self, on_or_before: date | None = None) -> FeedBatch | None:
        query = select(FeedBatch)
        if on_or_before is not None:
            query = query.where(FeedBatch.batch_date <= on_or_before)
        return await self.session.scalar(
            query.order_by(FeedBatch.batch_date.desc(), FeedBatch.id.desc()).limit(1)
        )

    async def create_batch(self, data: dict[str, Any]) -> FeedBatch:
        """Create a batch with its ingredients and derived totals."""
        ingredients = data.get("ingredients")
        if not data.get("batch_date") or not data.get("batch_name") or ingredients is None:
            raise ValidationError("batch_date, batch_name and ingredients are required")

        batch = FeedBatch(
            batch_date=data["batch_date"],
            batch_name=data["batch_name"],
            bag_size_kg=to_decimal(data.get("bag_size_kg") or self.default_bag_size_kg),
            miscellaneous_cost=to_decimal(data.get("miscellaneous_cost")),
            notes=data.get("notes"),
            ingredients=[self._build_ingredient(raw) for raw in ingredients],
        )
        totals = self.apply_totals(batch)
        self.session.add(batch)
        await self.session.flush()
        logger.info(
            "Created feed batch id=%s name=%s: %s bags at %s per bag",
            batch.id, batch.batch_name, totals.total_bags, totals.cost_per_bag,
        )
        return batch

    async def update_batch(self, batch_id: int, updates: dict[str, Any]) -> FeedBatch:
        """Update batch fields, optionally replacing the whole ingredient set."""
        batch = await self.get_batch(batch_id)

        for key in BATCH_FIELDS:
            if key not in updates or updates[key] is None:
                continue
            value = updates[key]
            if key in ("bag_size_kg", "miscellaneous_cost"):
                value = to_decimal(value)
            setattr(batch, key, value)

        if updates.get("ingredients") is not None:
            batch.ingredients.clear()
            for raw in updates["ingredients"]:
                batch.ingredients.append(self._build_ingredient(raw))

        self.apply_totals(batch)
        await self.session.flush()
        logger.info("Updated feed batch id=%s", batch.id)
        return batch

    async def delete_batch(self, batch_id: int) -> None:
        """Delete a batch and its ingredients.

        Batches already drawn down by daily logs are kept so feed costs of
        those days stay priced.
        """
        batch = await self.get_batch(batch_id)
        log_count = await self.session.scalar(
            select(func.count()).select_from(DailyLog).where(DailyLog.feed_batch_id == batch_id)
        )
        if log_count:
            raise BusinessRuleError(
                f"Feed batch \"{batch.batch_name}\" is referenced by {log_count} daily logs",
                {"batch_id": batch_id, "daily_logs": log_count},
            )
        await self.session.delete(batch)
        await self.session.flush()
        logger.info("Deleted feed batch id=%s", batch_id)

    # ------------------------------------------------------------------
    # Ingredients
    # ------------------------------------------------------------------

    def _build_ingredient(self, raw: Mapping[str, Any] | Any) -> BatchIngredient:
        line = coerce_ingredient(raw)
        return BatchIngredient(
            ingredient_name=line.ingredient_name,
            quantity_kg=line.quantity_kg,
            total_cost=line.total_cost,
            supplier=line.supplier,
        )

    async def get_ingredient(self, ingredient_id: int) -> BatchIngredient:
        ingredient = await self.session.get(BatchIngredient, ingredient_id)
        if ingredient is None:
            raise NotFoundError("BatchIngredient", ingredient_id)
        return ingredient

    async def list_ingredients(self, batch_id: int) -> list[BatchIngredient]:
        batch = await self.get_batch(batch_id)
        return list(batch.ingredients)

    async def add_ingredient(self, batch_id: int, data: Mapping[str, Any]) -> BatchIngredient:
        batch = await self.get_batch(batch_id)
        ingredient = self._build_ingredient(data)
        batch.ingredients.append(ingredient)
        self.apply_totals(batch)
        await self.session.flush()
        logger.info("Added ingredient %s to feed batch id=%s", ingredient.ingredient_name, batch.id)
        return ingredient

    async def update_ingredient(
        self, ingredient_id: int, updates: Mapping[str, Any]
    ) -> BatchIngredient:
        ingredient = await self.get_ingredient(ingredient_id)
        merged = coerce_ingredient(
            {
                "ingredient_name": updates.get("ingredient_name") or ingredient.ingredient_name,
                "quantity_kg": updates.get("quantity_kg", ingredient.quantity_kg),
                "total_cost": updates.get("total_cost", ingredient.total_cost),
                "supplier": updates.get("supplier", ingredient.supplier),
            }
        )
        ingredient.ingredient_name = merged.ingredient_name
        ingredient.quantity_kg = merged.quantity_kg
        ingredient.total_cost = merged.total_cost
        ingredient.supplier = merged.supplier

        batch = await self.get_batch(ingredient.batch_id)
        self.apply_totals(batch)
        await self.session.flush()
        return ingredient

    async def remove_ingredient(self, ingredient_id: int) -> FeedBatch:
        ingredient = await self.get_ingredient(ingredient_id)
        batch = await self.get_batch(ingredient.batch_id)
        batch.ingredients.remove(ingredient)
        self.apply_totals(batch)
        await self.session.flush()
        logger.info("Removed ingredient id=%s from feed batch id=%s", ingredient_id, batch.id)
        return batch

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    async def bags_used(self, batch_id: int, exclude_log_id: int | None = None) -> Decimal:
        """Bags drawn from a batch by daily logs, optionally skipping one log."""
        query = select(func.coalesce(func.sum(DailyLog.feed_bags_used), 0)).where(
            DailyLog.feed_batch_id == batch_id
        )
        if exclude_log_id is not None:
            query = query.where(DailyLog.id != exclude_log_id)
        return to_decimal(await self.session.scalar(query))

    async def usage_stats(self, batch_id: int) -> tuple[FeedBatch, BatchUsage]:
        batch = await self.get_batch(batch_id)
        used = await self.bags_used(batch_id)
        return batch, compute_batch_usage(batch.total_bags, used)

    async def all_usage_stats(self) -> list[tuple[FeedBatch, BatchUsage]]:
        batches = await self.list_batches()
        result = await self.session.execute(
            select(DailyLog.feed_batch_id, func.sum(DailyLog.feed_bags_used))
            .where(DailyLog.feed_batch_id.is_not(None))
            .group_by(DailyLog.feed_batch_id)
        )
        used_by_batch = {batch_id: to_decimal(total) for batch_id, total in result.all()}
        return [
            (batch, compute_batch_usage(batch.total_bags, used_by_batch.get(batch.id, ZERO)))
            for batch in batches
        ]

    async def check_availability(
        self,
        batch_id: int,
        requested_bags: Decimal | int | str,
        exclude_log_id: int | None = None,
    ) -> Decimal:
        """Validate a consumption and return the bags left after it."""
        batch = await self.get_batch(batch_id)
        used = await self.bags_used(batch_id, exclude_log_id=exclude_log_id)
        return check_feed_availability(batch.batch_name, batch.total_bags, used, requested_bags)
