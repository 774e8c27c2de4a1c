"""Type definitions for the calculation core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

ZERO = Decimal("0")
PRECISION = Decimal("0.0001")  # 4 decimal places for per-unit costs
OUTPUT_PRECISION = Decimal("0.01")  # 2 decimal places for currency totals


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(OUTPUT_PRECISION, rounding=ROUND_HALF_UP)


def round_unit(amount: Decimal) -> Decimal:
    """Round a per-unit figure (per bag, per kg, per egg) to 4 decimal places."""
    return amount.quantize(PRECISION, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal:
    """Coerce ints, floats, strings and None into Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class AttendanceStatus(str, Enum):
    """Work assignment attendance values."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    LATE = "late"


class PaymentStatus(str, Enum):
    """Payroll payment status values."""

    PENDING = "pending"
    PAID = "paid"


@dataclass(frozen=True)
class MonthKey:
    """A calendar month, rendered as ``YYYY-MM``."""

    year: int
    month: int

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class AttendanceSummary:
    """Attendance collapsed over one calendar month."""

    working_days: int
    days_present: int
    half_days: int
    days_worked: Decimal
    days_absent: Decimal


@dataclass(frozen=True)
class PayrollFigures:
    """Salary figures derived from attendance for one laborer and month."""

    base_salary: Decimal
    daily_salary: Decimal
    days_worked: Decimal
    days_absent: Decimal
    salary_deductions: Decimal
    bonus_amount: Decimal
    final_salary: Decimal


@dataclass(frozen=True)
class IngredientInput:
    """One ingredient line going into a feed batch."""

    ingredient_name: str
    quantity_kg: Decimal
    total_cost: Decimal
    supplier: str | None = None


@dataclass(frozen=True)
class IngredientCost:
    """Ingredient with its derived cost per kilogram."""

    ingredient_name: str
    quantity_kg: Decimal
    total_cost: Decimal
    cost_per_kg: Decimal
    supplier: str | None = None


@dataclass(frozen=True)
class BatchTotals:
    """Derived totals for a feed batch."""

    bag_size_kg: Decimal
    total_quantity_kg: Decimal
    total_quantity_tons: Decimal
    total_bags: int
    ingredients_cost: Decimal
    miscellaneous_cost: Decimal
    total_cost: Decimal
    cost_per_bag: Decimal
    cost_per_kg: Decimal
    ingredients: list[IngredientCost] = field(default_factory=list)


@dataclass(frozen=True)
class BatchUsage:
    """Bag-based inventory position of a feed batch."""

    total_bags: int
    bags_used: Decimal
    remaining_bags: Decimal
    usage_percentage: Decimal
    is_nearly_empty: bool
    is_empty: bool


@dataclass(frozen=True)
class RecipeIngredientCost:
    """Amount and cost of one recipe ingredient for a batch size."""

    name: str
    percent: Decimal
    amount_kg: Decimal
    cost_per_kg: Decimal
    total_cost: Decimal


@dataclass(frozen=True)
class RecipeCost:
    """Cost of mixing a recipe at a given batch size."""

    batch_size_kg: Decimal
    total_percent: Decimal
    total_cost: Decimal
    cost_per_kg: Decimal
    ingredients: list[RecipeIngredientCost] = field(default_factory=list)


@dataclass(frozen=True)
class FeedUsage:
    """Bags consumed by one daily log, priced at its batch's cost per bag."""

    bags_used: Decimal
    cost_per_bag: Decimal
    bag_size_kg: Decimal = Decimal("50")


@dataclass(frozen=True)
class FlockInput:
    """Acquisition cost of a flock, amortized over its laying period."""

    batch_date: date
    birds_purchased: int
    cost_per_bird: Decimal
    vaccination_cost_per_bird: Decimal = ZERO
    expected_laying_months: int = 12


@dataclass(frozen=True)
class DailyCostInputs:
    """Everything needed to price one day's eggs."""

    cost_date: date
    total_eggs: int
    feed_cost: Decimal
    feed_kg: Decimal
    days_in_month: int
    month_production: int
    monthly_labor_cost: Decimal
    monthly_operating_cost: Decimal
    daily_flock_cost: Decimal = ZERO


@dataclass(frozen=True)
class DailyCostBreakdown:
    """Per-egg cost components and the suggested selling price."""

    cost_date: date
    total_eggs: int
    total_feed_kg: Decimal
    feed_cost: Decimal
    avg_monthly_production: int
    avg_daily_production: Decimal
    feed_cost_per_egg: Decimal
    labor_cost_per_egg: Decimal
    fixed_cost_per_egg: Decimal
    health_cost_per_egg: Decimal
    total_cost_per_egg: Decimal
    suggested_price: Decimal
