"""Feed recipe service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_engine.calculators.recipe import calculate_recipe_cost, validate_recipe_percentages
from farm_engine.calculators.types import RecipeCost, to_decimal
from farm_engine.errors import NotFoundError, ValidationError
from farm_engine.models import FeedRecipe

logger = logging.getLogger(__name__)


def _store_percentages(percentages: Mapping[str, Any]) -> dict[str, str]:
    # JSON column; decimals are kept as strings to avoid float drift.
    return {name: str(to_decimal(value)) for name, value in percentages.items()}


class FeedRecipeService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_recipes(self, is_active: bool | None = None) -> list[FeedRecipe]:
        query = select(FeedRecipe)
        if is_active is not None:
            query = query.where(FeedRecipe.is_active.is_(is_active))
        result = await self.session.execute(query.order_by(FeedRecipe.recipe_name))
        return list(result.scalars().all())

    async def get_recipe(self, recipe_id: int) -> FeedRecipe:
        recipe = await self.session.get(FeedRecipe, recipe_id)
        if recipe is None:
            raise NotFoundError("FeedRecipe", recipe_id)
        return recipe

    async def create_recipe(self, data: dict[str, Any]) -> FeedRecipe:
        if not data.get("recipe_name"):
            raise ValidationError("recipe_name is required")
        percentages = data.get("percentages") or {}
        validate_recipe_percentages(percentages)

        recipe = FeedRecipe(
            recipe_name=data["recipe_name"],
            percentages=_store_percentages(percentages),
            is_active=data.get("is_active", True),
            notes=data.get("notes"),
        )
        self.session.add(recipe)
        await self.session.flush()
        logger.info("Created feed recipe id=%s name=%s", recipe.id, recipe.recipe_name)
        return recipe

    async def update_recipe(self, recipe_id: int, updates: dict[str, Any]) -> FeedRecipe:
        recipe = await self.get_recipe(recipe_id)
        if updates.get("percentages") is not None:
            validate_recipe_percentages(updates["percentages"])
            recipe.percentages = _store_percentages(updates["percentages"])
        for key in ("recipe_name", "is_active", "notes"):
            if updates.get(key) is not None:
                setattr(recipe, key, updates[key])
        if not recipe.recipe_name:
            raise ValidationError("recipe_name cannot be empty")
        await self.session.flush()
        return recipe

    async def delete_recipe(self, recipe_id: int) -> None:
        recipe = await self.get_recipe(recipe_id)
        await self.session.delete(recipe)
        await self.session.flush()

    async def calculate_cost(
        self,
        recipe_id: int,
        batch_size_kg: Decimal | int | str,
        prices_per_kg: Mapping[str, Any] | None = None,
    ) -> RecipeCost:
        recipe = await self.get_recipe(recipe_id)
        return calculate_recipe_cost(recipe.percentages, batch_size_kg, prices_per_kg)
