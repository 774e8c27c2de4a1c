"""Monthly operating cost and flock acquisition cost models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from farm_engine.models.base import Base, TimestampMixin


class OperatingCost(Base, TimestampMixin):
    """Fixed costs for one month; at most one row per month."""

    __tablename__ = "operating_cost"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    month_year: Mapped[str] = mapped_column(String(7), nullable=False, unique=True)
    supervisor_salary: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    total_laborer_salaries: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    electricity_cost: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    water_cost: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    maintenance_cost: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    other_costs: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    total_monthly_cost: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "supervisor_salary >= 0 AND total_laborer_salaries >= 0 "
            "AND electricity_cost >= 0 AND water_cost >= 0 "
            "AND maintenance_cost >= 0 AND other_costs >= 0",
            name="operating_cost_non_negative_check",
        ),
    )

    @property
    def overhead(self) -> Decimal:
        """Operating cost excluding laborer salaries."""
        return (
            self.supervisor_salary
            + self.electricity_cost
            + self.water_cost
            + self.maintenance_cost
            + self.other_costs
        )


class FlockCost(Base, TimestampMixin):
    """Purchase and vaccination cost of a flock of laying birds."""

    __tablename__ = "flock_cost"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    batch_date: Mapped[date] = mapped_column(Date, nullable=False)
    birds_purchased: Mapped[int] = mapped_column(Integer, nullable=False)
    cost_per_bird: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    vaccination_cost_per_bird: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    expected_laying_months: Mapped[int] = mapped_column(Integer, nullable=False, default=12)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("birds_purchased > 0", name="flock_cost_birds_check"),
        CheckConstraint("cost_per_bird >= 0", name="flock_cost_price_check"),
        CheckConstraint("expected_laying_months > 0", name="flock_cost_months_check"),
    )

    @property
    def total_cost(self) -> Decimal:
        return self.birds_purchased * (self.cost_per_bird + self.vaccination_cost_per_bird)
