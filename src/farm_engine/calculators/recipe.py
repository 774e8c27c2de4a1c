"""Feed recipe costing from ingredient percentages."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from farm_engine.calculators.types import (
    ZERO,
    RecipeCost,
    RecipeIngredientCost,
    round_unit,
    to_decimal,
)
from farm_engine.errors import BusinessRuleError, ValidationError

HUNDRED = Decimal("100")


def total_percent(percentages: Mapping[str, Decimal | int | str]) -> Decimal:
    return sum((to_decimal(p) for p in percentages.values()), ZERO)


def validate_recipe_percentages(percentages: Mapping[str, Decimal | int | str]) -> Decimal:
    """Check that a recipe's percentages are usable and return their sum.

    Raises:
        ValidationError: If any percentage is negative or the sum is not positive.
        BusinessRuleError: If the percentages sum to more than 100.
    """
    for name, value in percentages.items():
        if to_decimal(value) < 0:
            raise ValidationError(
                f"Percentage for '{name}' cannot be negative",
                {"ingredient": name, "percent": str(value)},
            )

    total = total_percent(percentages)
    if total <= 0:
        raise ValidationError("Recipe percentages must sum to more than 0")
    if total > HUNDRED:
        raise BusinessRuleError(
            f"Total ingredient percentages cannot exceed 100% (got {total}%)",
            {"total_percent": str(total)},
        )
    return total


def calculate_recipe_cost(
    percentages: Mapping[str, Decimal | int | str],
    batch_size_kg: Decimal | int | str,
    prices_per_kg: Mapping[str, Decimal | int | str] | None = None,
) -> RecipeCost:
    """Price a batch of a recipe.

    Each ingredient weighs ``batch_size_kg * percent / 100`` and costs its
    weight times its price per kg; ingredients without a price cost 0.
    """
    size = to_decimal(batch_size_kg)
    if size <= 0:
        raise ValidationError(f"batch_size_kg must be positive, got {size}")
    total = validate_recipe_percentages(percentages)
    prices = prices_per_kg or {}

    lines: list[RecipeIngredientCost] = []
    total_cost = ZERO
    for name, raw_percent in percentages.items():
        percent = to_decimal(raw_percent)
        if percent <= 0:
            continue
        amount_kg = size * percent / HUNDRED
        price = to_decimal(prices.get(name))
        cost = amount_kg * price
        total_cost += cost
        lines.append(
            RecipeIngredientCost(
                name=name,
                percent=percent,
                amount_kg=amount_kg,
                cost_per_kg=price,
                total_cost=cost,
            )
        )

    return RecipeCost(
        batch_size_kg=size,
        total_percent=total,
        total_cost=total_cost,
        cost_per_kg=round_unit(total_cost / size),
        ingredients=lines,
    )
