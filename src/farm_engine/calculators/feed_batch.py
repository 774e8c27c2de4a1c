"""Feed batch cost allocation and bag-based inventory."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from farm_engine.calculators.types import (
    ZERO,
    BatchTotals,
    BatchUsage,
    IngredientCost,
    IngredientInput,
    round_to_cents,
    round_unit,
    to_decimal,
)
from farm_engine.errors import InsufficientFeedError, ValidationError

DEFAULT_BAG_SIZE_KG = Decimal("50")
KG_PER_TON = Decimal("1000")
NEARLY_EMPTY_RATIO = Decimal("0.1")


def coerce_ingredient(raw: IngredientInput | Mapping[str, Any] | Any) -> IngredientInput:
    """Accept dataclasses, dicts or ORM rows with ingredient attributes.

    Quantities and costs are rounded to cents, the precision they are
    stored at, so totals computed now match totals recomputed from the
    saved rows.
    """
    if isinstance(raw, IngredientInput):
        ingredient = raw
    elif isinstance(raw, Mapping):
        ingredient = IngredientInput(
            ingredient_name=raw.get("ingredient_name") or raw.get("name") or "",
            quantity_kg=to_decimal(raw.get("quantity_kg")),
            total_cost=to_decimal(raw.get("total_cost")),
            supplier=raw.get("supplier"),
        )
    else:
        ingredient = IngredientInput(
            ingredient_name=raw.ingredient_name,
            quantity_kg=to_decimal(raw.quantity_kg),
            total_cost=to_decimal(raw.total_cost),
            supplier=getattr(raw, "supplier", None),
        )

    ingredient = IngredientInput(
        ingredient_name=ingredient.ingredient_name,
        quantity_kg=round_to_cents(ingredient.quantity_kg),
        total_cost=round_to_cents(ingredient.total_cost),
        supplier=ingredient.supplier,
    )

    if not ingredient.ingredient_name:
        raise ValidationError("ingredient_name is required")
    if ingredient.quantity_kg <= 0:
        raise ValidationError(
            f"Ingredient '{ingredient.ingredient_name}' quantity_kg must be positive",
            {"quantity_kg": str(ingredient.quantity_kg)},
        )
    if ingredient.total_cost < 0:
        raise ValidationError(
            f"Ingredient '{ingredient.ingredient_name}' total_cost cannot be negative",
            {"total_cost": str(ingredient.total_cost)},
        )
    return ingredient


def ingredient_cost_per_kg(quantity_kg: Decimal, total_cost: Decimal) -> Decimal:
    if quantity_kg <= 0:
        return ZERO
    return round_unit(total_cost / quantity_kg)


def compute_batch_totals(
    ingredients: Iterable[IngredientInput | Mapping[str, Any] | Any],
    bag_size_kg: Decimal | int | str = DEFAULT_BAG_SIZE_KG,
    miscellaneous_cost: Decimal | int | str = ZERO,
) -> BatchTotals:
    """Derive batch totals from the full current ingredient list.

    Always recomputes from scratch; calling it twice with the same list
    yields identical totals. ``total_cost`` is the exact sum of ingredient
    costs plus the miscellaneous cost.
    """
    bag_size = round_to_cents(to_decimal(bag_size_kg))
    misc = round_to_cents(to_decimal(miscellaneous_cost))
    if bag_size <= 0:
        raise ValidationError(f"bag_size_kg must be positive, got {bag_size}")
    if misc < 0:
        raise ValidationError(f"miscellaneous_cost cannot be negative, got {misc}")

    lines = [coerce_ingredient(raw) for raw in ingredients]

    ingredients_cost = sum((line.total_cost for line in lines), ZERO)
    total_quantity_kg = sum((line.quantity_kg for line in lines), ZERO)
    total_cost = ingredients_cost + misc

    total_bags = math.ceil(total_quantity_kg / bag_size) if total_quantity_kg > 0 else 0
    cost_per_bag = round_unit(total_cost / total_bags) if total_bags > 0 else ZERO
    cost_per_kg = (
        round_unit(total_cost / total_quantity_kg) if total_quantity_kg > 0 else ZERO
    )

    return BatchTotals(
        bag_size_kg=bag_size,
        total_quantity_kg=total_quantity_kg,
        total_quantity_tons=(total_quantity_kg / KG_PER_TON).quantize(Decimal("0.001")),
        total_bags=total_bags,
        ingredients_cost=ingredients_cost,
        miscellaneous_cost=misc,
        total_cost=total_cost,
        cost_per_bag=cost_per_bag,
        cost_per_kg=cost_per_kg,
        ingredients=[
            IngredientCost(
                ingredient_name=line.ingredient_name,
                quantity_kg=line.quantity_kg,
                total_cost=line.total_cost,
                cost_per_kg=ingredient_cost_per_kg(line.quantity_kg, line.total_cost),
                supplier=line.supplier,
            )
            for line in lines
        ],
    )


def compute_batch_usage(total_bags: int, bags_used: Decimal | int | str) -> BatchUsage:
    """Remaining stock and usage percentage of a batch."""
    used = to_decimal(bags_used)
    total = Decimal(total_bags)
    remaining = max(ZERO, total - used)
    usage_percentage = round_to_cents(used / total * 100) if total > 0 else ZERO

    return BatchUsage(
        total_bags=total_bags,
        bags_used=used,
        remaining_bags=remaining,
        usage_percentage=usage_percentage,
        is_nearly_empty=remaining <= total * NEARLY_EMPTY_RATIO,
        is_empty=remaining <= 0,
    )


def check_feed_availability(
    batch_name: str,
    total_bags: int,
    bags_used_elsewhere: Decimal | int | str,
    requested_bags: Decimal | int | str,
) -> Decimal:
    """Validate a consumption against a batch and return the bags left after it.

    ``bags_used_elsewhere`` must exclude the log being edited. Consuming
    exactly the remaining stock is allowed and leaves 0.

    Raises:
        ValidationError: If the requested amount is negative.
        InsufficientFeedError: If the request exceeds the remaining bags.
    """
    requested = to_decimal(requested_bags)
    if requested < 0:
        raise ValidationError(f"feed_bags_used cannot be negative, got {requested}")

    available = max(ZERO, Decimal(total_bags) - to_decimal(bags_used_elsewhere))
    if requested > available:
        raise InsufficientFeedError(batch_name, requested, available)
    return available - requested
