"""Laborer, work assignment and payroll models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farm_engine.models.base import Base, TimestampMixin


class Laborer(Base, TimestampMixin):
    """Farm laborer paid a fixed monthly salary."""

    __tablename__ = "laborer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_code: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    monthly_salary: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    emergency_contact: Mapped[str | None] = mapped_column(String(100), nullable=True)
    emergency_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    __table_args__ = (
        CheckConstraint("monthly_salary >= 0", name="laborer_salary_check"),
    )

    # Relationships
    assignments: Mapped[list[WorkAssignment]] = relationship(back_populates="laborer")
    payrolls: Mapped[list[Payroll]] = relationship(back_populates="laborer")


class WorkAssignment(Base, TimestampMixin):
    """One laborer's attendance and tasks for one day."""

    __tablename__ = "work_assignment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    laborer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("laborer.id", ondelete="RESTRICT"),
        nullable=False,
    )
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    tasks_assigned: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    attendance_status: Mapped[str] = mapped_column(
        String(10), nullable=False, default="present"
    )
    performance_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))

    __table_args__ = (
        UniqueConstraint("laborer_id", "work_date", name="work_assignment_laborer_date_unique"),
        CheckConstraint(
            "attendance_status IN ('present', 'absent', 'half_day', 'late')",
            name="work_assignment_status_check",
        ),
        CheckConstraint("hours >= 0", name="work_assignment_hours_check"),
    )

    # Relationships
    laborer: Mapped[Laborer] = relationship(back_populates="assignments")


class Payroll(Base, TimestampMixin):
    """Monthly salary record for a laborer."""

    __tablename__ = "payroll"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    month_year: Mapped[str] = mapped_column(String(7), nullable=False)  # e.g. 2025-08
    laborer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("laborer.id", ondelete="RESTRICT"),
        nullable=False,
    )
    base_salary: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    days_worked: Mapped[Decimal] = mapped_column(Numeric(5, 1), nullable=False, default=Decimal("0"))
    days_absent: Mapped[Decimal] = mapped_column(Numeric(5, 1), nullable=False, default=Decimal("0"))
    salary_deductions: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    bonus_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    final_salary: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    payment_status: Mapped[str] = mapped_column(String(10), nullable=False, default="pending")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("laborer_id", "month_year", name="payroll_laborer_month_unique"),
        CheckConstraint(
            "payment_status IN ('pending', 'paid')",
            name="payroll_payment_status_check",
        ),
    )

    # Relationships
    laborer: Mapped[Laborer] = relationship(back_populates="payrolls")

    def snapshot(self) -> dict[str, Any]:
        """Monetary fields as strings, for logging."""
        return {
            "laborer_id": self.laborer_id,
            "month_year": self.month_year,
            "base_salary": str(self.base_salary),
            "salary_deductions": str(self.salary_deductions),
            "bonus_amount": str(self.bonus_amount),
            "final_salary": str(self.final_salary),
        }
