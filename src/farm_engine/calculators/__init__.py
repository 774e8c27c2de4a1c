"""Farm cost and payroll calculation core."""

from farm_engine.calculators.attendance import summarize_attendance
from farm_engine.calculators.egg_cost import compute_egg_cost, daily_flock_cost, feed_cost_for_usage
from farm_engine.calculators.feed_batch import (
    check_feed_availability,
    compute_batch_totals,
    compute_batch_usage,
)
from farm_engine.calculators.payroll import calculate_payroll
from farm_engine.calculators.periods import parse_month_year, working_days_in_month
from farm_engine.calculators.recipe import calculate_recipe_cost

__all__ = [
    "summarize_attendance",
    "calculate_payroll",
    "compute_batch_totals",
    "compute_batch_usage",
    "check_feed_availability",
    "calculate_recipe_cost",
    "compute_egg_cost",
    "daily_flock_cost",
    "feed_cost_for_usage",
    "parse_month_year",
    "working_days_in_month",
]
