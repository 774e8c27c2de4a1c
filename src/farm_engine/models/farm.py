"""House and daily production log models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import (
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
from farm_engine.models.feed import FeedBatch


class House(Base, TimestampMixin):
    """A poultry house whose production is logged daily."""

    __tablename__ = "house"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_bird_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive', 'maintenance')",
            name="house_status_check",
        ),
        CheckConstraint("capacity >= 0", name="house_capacity_check"),
        CheckConstraint("current_bird_count >= 0", name="house_bird_count_check"),
    )

    # Relationships
    daily_logs: Mapped[list[DailyLog]] = relationship(back_populates="house")


class DailyLog(Base, TimestampMixin):
    """Eggs collected and feed consumed in one house on one day."""

    __tablename__ = "daily_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    log_date: Mapped[date] = mapped_column(Date, nullable=False)
    house_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("house.id", ondelete="RESTRICT"),
        nullable=False,
    )
    eggs_collected: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cracked_eggs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    feed_batch_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("feed_batch.id", ondelete="SET NULL"),
        nullable=True,
    )
    feed_bags_used: Mapped[Decimal] = mapped_column(
        Numeric(8, 2), nullable=False, default=Decimal("0")
    )
    mortality_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    supervisor_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("laborer.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint("house_id", "log_date", name="daily_log_house_date_unique"),
        CheckConstraint("eggs_collected >= 0", name="daily_log_eggs_check"),
        CheckConstraint("cracked_eggs >= 0", name="daily_log_cracked_check"),
        CheckConstraint("feed_bags_used >= 0", name="daily_log_bags_check"),
        CheckConstraint("mortality_count >= 0", name="daily_log_mortality_check"),
    )

    # Relationships
    house: Mapped[House] = relationship(back_populates="daily_logs")
    feed_batch: Mapped[FeedBatch | None] = relationship()
