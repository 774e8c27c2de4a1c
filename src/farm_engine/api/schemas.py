"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from farm_engine.calculators.types import AttendanceStatus, PaymentStatus


# ============================================================================
# Laborer schemas
# ============================================================================


class LaborerCreate(BaseModel):
    """Schema for creating a laborer."""

    full_name: str = Field(min_length=1, max_length=100)
    employee_code: str | None = Field(default=None, max_length=20)
    phone: str | None = None
    address: str | None = None
    monthly_salary: Decimal = Field(default=Decimal("0"), ge=0)
    hire_date: date | None = None
    is_active: bool = True
    emergency_contact: str | None = None
    emergency_phone: str | None = None


class LaborerUpdate(BaseModel):
    """Schema for updating a laborer; omitted fields are left unchanged."""

    full_name: str | None = Field(default=None, min_length=1, max_length=100)
    employee_code: str | None = Field(default=None, max_length=20)
    phone: str | None = None
    address: str | None = None
    monthly_salary: Decimal | None = Field(default=None, ge=0)
    hire_date: date | None = None
    is_active: bool | None = None
    emergency_contact: str | None = None
    emergency_phone: str | None = None


class LaborerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_code: str | None = None
    full_name: str
    phone: str | None = None
    address: str | None = None
    monthly_salary: Decimal
    hire_date: date | None = None
    is_active: bool
    emergency_contact: str | None = None
    emergency_phone: str | None = None
    created_at: datetime


# ============================================================================
# Work assignment schemas
# ============================================================================


class WorkAssignmentCreate(BaseModel):
    """Schema for recording a laborer's day.

    ``task`` is a shorthand for a single-entry ``tasks_assigned``.
    """

    laborer_id: int
    work_date: date
    task: str | None = None
    tasks_assigned: list[str] | None = None
    attendance_status: AttendanceStatus = AttendanceStatus.PRESENT
    performance_notes: str | None = None
    hours: Decimal = Field(default=Decimal("0"), ge=0)


class WorkAssignmentUpdate(BaseModel):
    task: str | None = None
    tasks_assigned: list[str] | None = None
    attendance_status: AttendanceStatus | None = None
    performance_notes: str | None = None
    hours: Decimal | None = Field(default=None, ge=0)


class WorkAssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    laborer_id: int
    work_date: date
    tasks_assigned: list[str] | None = None
    attendance_status: str
    performance_notes: str | None = None
    hours: Decimal
    created_at: datetime


class AttendanceResponse(BaseModel):
    """Attendance of one laborer over one month."""

    model_config = ConfigDict(from_attributes=True)

    laborer_id: int
    month_year: str
    working_days: int
    days_present: int
    half_days: int
    days_worked: Decimal
    days_absent: Decimal


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollGenerateRequest(BaseModel):
    """Schema for a monthly payroll run."""

    month_year: str = Field(examples=["2025-08"])
    bonuses: dict[int, Decimal] | None = None


class PayrollUpdate(BaseModel):
    salary_deductions: Decimal | None = Field(default=None, ge=0)
    bonus_amount: Decimal | None = Field(default=None, ge=0)
    payment_status: PaymentStatus | None = None
    payment_date: date | None = None
    notes: str | None = None


class PayrollResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    month_year: str
    laborer_id: int
    base_salary: Decimal
    days_worked: Decimal
    days_absent: Decimal
    salary_deductions: Decimal
    bonus_amount: Decimal
    final_salary: Decimal
    payment_date: date | None = None
    payment_status: str
    notes: str | None = None
    created_at: datetime


class PayrollSummaryResponse(BaseModel):
    year: int
    total_payroll: Decimal
    total_paid: Decimal
    total_pending: Decimal
    months: dict[str, Decimal]


# ============================================================================
# Feed batch schemas
# ============================================================================


class IngredientCreate(BaseModel):
    """Schema for one ingredient line of a feed batch."""

    ingredient_name: str = Field(min_length=1, max_length=100)
    quantity_kg: Decimal = Field(gt=0)
    total_cost: Decimal = Field(ge=0)
    supplier: str | None = None


class IngredientUpdate(BaseModel):
    ingredient_name: str | None = Field(default=None, min_length=1, max_length=100)
    quantity_kg: Decimal | None = Field(default=None, gt=0)
    total_cost: Decimal | None = Field(default=None, ge=0)
    supplier: str | None = None


class IngredientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    batch_id: int
    ingredient_name: str
    quantity_kg: Decimal
    total_cost: Decimal
    cost_per_kg: Decimal
    supplier: str | None = None


class FeedBatchCreate(BaseModel):
    """Schema for creating a feed batch with its ingredients."""

    batch_date: date
    batch_name: str = Field(min_length=1, max_length=100)
    bag_size_kg: Decimal | None = Field(default=None, gt=0)
    miscellaneous_cost: Decimal = Field(default=Decimal("0"), ge=0)
    notes: str | None = None
    ingredients: list[IngredientCreate]


class FeedBatchUpdate(BaseModel):
    """Schema for updating a feed batch.

    A non-null ``ingredients`` list replaces the whole ingredient set.
    """

    batch_date: date | None = None
    batch_name: str | None = Field(default=None, min_length=1, max_length=100)
    bag_size_kg: Decimal | None = Field(default=None, gt=0)
    miscellaneous_cost: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None
    ingredients: list[IngredientCreate] | None = None


class FeedBatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    batch_date: date
    batch_name: str
    bag_size_kg: Decimal
    total_quantity_tons: Decimal
    total_bags: int
    miscellaneous_cost: Decimal
    total_cost: Decimal
    cost_per_bag: Decimal
    cost_per_kg: Decimal
    notes: str | None = None
    ingredients: list[IngredientResponse] = []
    created_at: datetime


class BatchCalculateRequest(BaseModel):
    """Schema for pricing a prospective batch without saving it."""

    ingredients: list[IngredientCreate] = Field(min_length=1)
    bag_size_kg: Decimal | None = Field(default=None, gt=0)
    miscellaneous_cost: Decimal = Field(default=Decimal("0"), ge=0)


class IngredientCostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ingredient_name: str
    quantity_kg: Decimal
    total_cost: Decimal
    cost_per_kg: Decimal
    supplier: str | None = None


class BatchTotalsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    bag_size_kg: Decimal
    total_quantity_kg: Decimal
    total_quantity_tons: Decimal
    total_bags: int
    ingredients_cost: Decimal
    miscellaneous_cost: Decimal
    total_cost: Decimal
    cost_per_bag: Decimal
    cost_per_kg: Decimal
    ingredients: list[IngredientCostResponse]


class BatchUsageResponse(BaseModel):
    """Bag inventory position of a batch."""

    batch_id: int
    batch_name: str
    total_bags: int
    bags_used: Decimal
    remaining_bags: Decimal
    usage_percentage: Decimal
    is_nearly_empty: bool
    is_empty: bool
    cost_per_bag: Decimal
    bag_size_kg: Decimal


# ============================================================================
# Feed recipe schemas
# ============================================================================


class FeedRecipeCreate(BaseModel):
    recipe_name: str = Field(min_length=1, max_length=100)
    percentages: dict[str, Decimal] = Field(examples=[{"corn": 50, "soybean": 50}])
    is_active: bool = True
    notes: str | None = None


class FeedRecipeUpdate(BaseModel):
    recipe_name: str | None = Field(default=None, min_length=1, max_length=100)
    percentages: dict[str, Decimal] | None = None
    is_active: bool | None = None
    notes: str | None = None


class FeedRecipeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    recipe_name: str
    percentages: dict[str, Decimal]
    is_active: bool
    notes: str | None = None
    created_at: datetime


class RecipeCostRequest(BaseModel):
    batch_size_kg: Decimal = Field(gt=0)
    prices_per_kg: dict[str, Decimal] = {}


class RecipeIngredientCostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    percent: Decimal
    amount_kg: Decimal
    cost_per_kg: Decimal
    total_cost: Decimal


class RecipeCostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    batch_size_kg: Decimal
    total_percent: Decimal
    total_cost: Decimal
    cost_per_kg: Decimal
    ingredients: list[RecipeIngredientCostResponse]


# ============================================================================
# House and daily log schemas
# ============================================================================


class HouseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    capacity: int = Field(default=0, ge=0)
    current_bird_count: int = Field(default=0, ge=0)
    location: str | None = None
    description: str | None = None
    status: str = "active"


class HouseUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    capacity: int | None = Field(default=None, ge=0)
    current_bird_count: int | None = Field(default=None, ge=0)
    location: str | None = None
    description: str | None = None
    status: str | None = None


class HouseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    capacity: int
    current_bird_count: int
    location: str | None = None
    description: str | None = None
    status: str
    created_at: datetime


class DailyLogCreate(BaseModel):
    """Schema for a day's production entry; resubmission updates it."""

    log_date: date
    house_id: int
    eggs_collected: int = Field(default=0, ge=0)
    cracked_eggs: int = Field(default=0, ge=0)
    feed_batch_id: int | None = None
    feed_bags_used: Decimal | None = Field(default=None, ge=0)
    mortality_count: int = Field(default=0, ge=0)
    notes: str | None = None
    supervisor_id: int | None = None


class DailyLogUpdate(BaseModel):
    log_date: date | None = None
    house_id: int | None = None
    eggs_collected: int | None = Field(default=None, ge=0)
    cracked_eggs: int | None = Field(default=None, ge=0)
    feed_batch_id: int | None = None
    feed_bags_used: Decimal | None = Field(default=None, ge=0)
    mortality_count: int | None = Field(default=None, ge=0)
    notes: str | None = None
    supervisor_id: int | None = None


class DailyLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    log_date: date
    house_id: int
    eggs_collected: int
    cracked_eggs: int
    feed_batch_id: int | None = None
    feed_bags_used: Decimal
    mortality_count: int
    notes: str | None = None
    supervisor_id: int | None = None
    created_at: datetime


# ============================================================================
# Cost schemas
# ============================================================================


class OperatingCostCreate(BaseModel):
    """Schema for a month's fixed costs.

    Laborer salaries default to the month's payroll total when omitted.
    """

    month_year: str = Field(examples=["2025-08"])
    supervisor_salary: Decimal = Field(default=Decimal("0"), ge=0)
    total_laborer_salaries: Decimal | None = Field(default=None, ge=0)
    electricity_cost: Decimal = Field(default=Decimal("0"), ge=0)
    water_cost: Decimal = Field(default=Decimal("0"), ge=0)
    maintenance_cost: Decimal = Field(default=Decimal("0"), ge=0)
    other_costs: Decimal = Field(default=Decimal("0"), ge=0)
    notes: str | None = None


class OperatingCostUpdate(BaseModel):
    supervisor_salary: Decimal | None = Field(default=None, ge=0)
    total_laborer_salaries: Decimal | None = Field(default=None, ge=0)
    electricity_cost: Decimal | None = Field(default=None, ge=0)
    water_cost: Decimal | None = Field(default=None, ge=0)
    maintenance_cost: Decimal | None = Field(default=None, ge=0)
    other_costs: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class OperatingCostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    month_year: str
    supervisor_salary: Decimal
    total_laborer_salaries: Decimal
    electricity_cost: Decimal
    water_cost: Decimal
    maintenance_cost: Decimal
    other_costs: Decimal
    total_monthly_cost: Decimal
    overhead: Decimal
    notes: str | None = None


class FlockCostCreate(BaseModel):
    batch_date: date
    birds_purchased: int = Field(gt=0)
    cost_per_bird: Decimal = Field(ge=0)
    vaccination_cost_per_bird: Decimal = Field(default=Decimal("0"), ge=0)
    expected_laying_months: int = Field(default=12, gt=0)
    notes: str | None = None


class FlockCostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    batch_date: date
    birds_purchased: int
    cost_per_bird: Decimal
    vaccination_cost_per_bird: Decimal
    expected_laying_months: int
    total_cost: Decimal
    notes: str | None = None


class DailyCostResponse(BaseModel):
    """Per-egg cost breakdown for one day."""

    model_config = ConfigDict(from_attributes=True)

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


class CostSummaryResponse(BaseModel):
    start: date
    end: date
    total_eggs: int
    total_feed_bags: Decimal
    total_feed_kg: Decimal
    total_feed_cost: Decimal


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
