"""Daily egg production costing and suggested pricing."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from farm_engine.calculators.periods import add_months
from farm_engine.calculators.types import (
    ZERO,
    DailyCostBreakdown,
    DailyCostInputs,
    FeedUsage,
    FlockInput,
    round_to_cents,
    round_unit,
    to_decimal,
)
from farm_engine.errors import ValidationError

DEFAULT_MARKUP = Decimal("1.2")
LAYING_DAYS_PER_MONTH = 30


def feed_cost_for_usage(usages: Iterable[FeedUsage]) -> tuple[Decimal, Decimal]:
    """Total feed cost and kilograms for the bags consumed on a day."""
    cost = ZERO
    kg = ZERO
    for usage in usages:
        bags = to_decimal(usage.bags_used)
        cost += bags * to_decimal(usage.cost_per_bag)
        kg += bags * to_decimal(usage.bag_size_kg)
    return cost, kg


def daily_flock_cost(flocks: Iterable[FlockInput], on_date: date) -> Decimal:
    """Amortized acquisition cost of all flocks laying on ``on_date``.

    A flock lays from its batch date (inclusive) for ``expected_laying_months``
    months (exclusive); its cost is spread evenly over 30 days per month.
    """
    total = ZERO
    for flock in flocks:
        months = flock.expected_laying_months or 0
        if months <= 0:
            continue
        if on_date < flock.batch_date or on_date >= add_months(flock.batch_date, months):
            continue
        flock_cost = Decimal(flock.birds_purchased) * (
            to_decimal(flock.cost_per_bird) + to_decimal(flock.vaccination_cost_per_bird)
        )
        total += flock_cost / (months * LAYING_DAYS_PER_MONTH)
    return total


def compute_egg_cost(
    inputs: DailyCostInputs,
    markup: Decimal | int | str = DEFAULT_MARKUP,
) -> DailyCostBreakdown:
    """Break a day's production cost down per egg.

    Fixed monthly costs (labor, operating) are spread over the month's
    average daily production rather than the day's own count. A day with no
    eggs prices every component at 0.
    """
    factor = to_decimal(markup)
    if factor <= 0:
        raise ValidationError(f"markup must be positive, got {factor}")
    if inputs.days_in_month <= 0:
        raise ValidationError("days_in_month must be positive")

    avg_daily = Decimal(inputs.month_production) / inputs.days_in_month

    if inputs.total_eggs <= 0:
        return DailyCostBreakdown(
            cost_date=inputs.cost_date,
            total_eggs=0,
            total_feed_kg=inputs.feed_kg,
            feed_cost=round_to_cents(inputs.feed_cost),
            avg_monthly_production=inputs.month_production,
            avg_daily_production=round_unit(avg_daily),
            feed_cost_per_egg=ZERO,
            labor_cost_per_egg=ZERO,
            fixed_cost_per_egg=ZERO,
            health_cost_per_egg=ZERO,
            total_cost_per_egg=ZERO,
            suggested_price=ZERO,
        )

    eggs = Decimal(inputs.total_eggs)
    feed_per_egg = inputs.feed_cost / eggs
    if avg_daily > 0:
        labor_per_egg = inputs.monthly_labor_cost / inputs.days_in_month / avg_daily
        fixed_per_egg = inputs.monthly_operating_cost / inputs.days_in_month / avg_daily
    else:
        labor_per_egg = ZERO
        fixed_per_egg = ZERO
    health_per_egg = inputs.daily_flock_cost / eggs

    total_per_egg = feed_per_egg + labor_per_egg + fixed_per_egg + health_per_egg

    return DailyCostBreakdown(
        cost_date=inputs.cost_date,
        total_eggs=inputs.total_eggs,
        total_feed_kg=inputs.feed_kg,
        feed_cost=round_to_cents(inputs.feed_cost),
        avg_monthly_production=inputs.month_production,
        avg_daily_production=round_unit(avg_daily),
        feed_cost_per_egg=round_unit(feed_per_egg),
        labor_cost_per_egg=round_unit(labor_per_egg),
        fixed_cost_per_egg=round_unit(fixed_per_egg),
        health_cost_per_egg=round_unit(health_per_egg),
        total_cost_per_egg=round_unit(total_per_egg),
        suggested_price=round_unit(total_per_egg * factor),
    )
