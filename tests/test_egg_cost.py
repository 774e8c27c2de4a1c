"""Unit tests for daily egg costing."""

from datetime import date
from decimal import Decimal

import pytest

from farm_engine.calculators.egg_cost import compute_egg_cost, daily_flock_cost, feed_cost_for_usage
from farm_engine.calculators.types import DailyCostInputs, FeedUsage, FlockInput
from farm_engine.errors import ValidationError


def inputs(**overrides) -> DailyCostInputs:
    values = dict(
        cost_date=date(2025, 9, 10),
        total_eggs=1000,
        feed_cost=Decimal("5000"),
        feed_kg=Decimal("250"),
        days_in_month=30,
        month_production=30000,
        monthly_labor_cost=Decimal("60000"),
        monthly_operating_cost=Decimal("30000"),
        daily_flock_cost=Decimal("200"),
    )
    values.update(overrides)
    return DailyCostInputs(**values)


class TestComputeEggCost:
    """Test per-egg cost components and suggested price."""

    def test_breakdown(self):
        result = compute_egg_cost(inputs())

        assert result.avg_daily_production == Decimal("1000.0000")
        assert result.feed_cost_per_egg == Decimal("5.0000")
        assert result.labor_cost_per_egg == Decimal("2.0000")
        assert result.fixed_cost_per_egg == Decimal("1.0000")
        assert result.health_cost_per_egg == Decimal("0.2000")
        assert result.total_cost_per_egg == Decimal("8.2000")
        assert result.suggested_price == Decimal("9.8400")

    def test_custom_markup(self):
        result = compute_egg_cost(inputs(), markup="1.5")
        assert result.suggested_price == Decimal("12.3000")

    def test_fixed_costs_use_average_not_daily_count(self):
        """A low-production day does not inflate labor and overhead per egg."""
        result = compute_egg_cost(inputs(total_eggs=500))
        assert result.labor_cost_per_egg == Decimal("2.0000")
        assert result.feed_cost_per_egg == Decimal("10.0000")

    def test_zero_eggs_prices_everything_at_zero(self):
        result = compute_egg_cost(inputs(total_eggs=0))

        assert result.total_eggs == 0
        assert result.feed_cost == Decimal("5000.00")
        assert result.feed_cost_per_egg == Decimal("0")
        assert result.labor_cost_per_egg == Decimal("0")
        assert result.fixed_cost_per_egg == Decimal("0")
        assert result.health_cost_per_egg == Decimal("0")
        assert result.total_cost_per_egg == Decimal("0")
        assert result.suggested_price == Decimal("0")

    def test_no_month_production_skips_fixed_costs(self):
        result = compute_egg_cost(inputs(month_production=0, daily_flock_cost=Decimal("0")))
        assert result.labor_cost_per_egg == Decimal("0")
        assert result.fixed_cost_per_egg == Decimal("0")
        assert result.total_cost_per_egg == Decimal("5.0000")

    def test_non_positive_markup_rejected(self):
        with pytest.raises(ValidationError):
            compute_egg_cost(inputs(), markup=0)


class TestFeedCostForUsage:
    def test_prices_each_usage_at_its_batch(self):
        cost, kg = feed_cost_for_usage(
            [
                FeedUsage(Decimal("2"), Decimal("1775"), Decimal("50")),
                FeedUsage(Decimal("1.5"), Decimal("1000"), Decimal("40")),
            ]
        )
        assert cost == Decimal("5050.0")
        assert kg == Decimal("160.0")

    def test_no_usage(self):
        assert feed_cost_for_usage([]) == (Decimal("0"), Decimal("0"))


class TestDailyFlockCost:
    """Flock cost is spread over 30 days per laying month."""

    flock = FlockInput(
        batch_date=date(2025, 1, 15),
        birds_purchased=1000,
        cost_per_bird=Decimal("340"),
        vaccination_cost_per_bird=Decimal("20"),
        expected_laying_months=12,
    )

    def test_inside_laying_window(self):
        assert daily_flock_cost([self.flock], date(2025, 1, 15)) == Decimal("1000")
        assert daily_flock_cost([self.flock], date(2026, 1, 14)) == Decimal("1000")

    def test_outside_laying_window(self):
        assert daily_flock_cost([self.flock], date(2025, 1, 14)) == Decimal("0")
        assert daily_flock_cost([self.flock], date(2026, 1, 15)) == Decimal("0")

    def test_flocks_add_up(self):
        second = FlockInput(date(2025, 6, 1), 500, Decimal("360"), expected_laying_months=6)
        assert daily_flock_cost([self.flock, second], date(2025, 7, 1)) == Decimal("2000")

    def test_zero_month_flock_ignored(self):
        idle = FlockInput(date(2025, 1, 1), 100, Decimal("100"), expected_laying_months=0)
        assert daily_flock_cost([idle], date(2025, 1, 2)) == Decimal("0")
