"""Feed batch, batch ingredient and feed recipe models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

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
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farm_engine.models.base import Base, TimestampMixin


class FeedBatch(Base, TimestampMixin):
    """A mixed batch of feed, bagged and drawn down by daily logs.

    Totals are derived from the ingredient rows and must be recomputed
    whenever the ingredient set changes.
    """

    __tablename__ = "feed_batch"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    batch_date: Mapped[date] = mapped_column(Date, nullable=False)
    batch_name: Mapped[str] = mapped_column(String(100), nullable=False)
    bag_size_kg: Mapped[Decimal] = mapped_column(
        Numeric(8, 2), nullable=False, default=Decimal("50")
    )
    total_quantity_tons: Mapped[Decimal] = mapped_column(
        Numeric(10, 3), nullable=False, default=Decimal("0")
    )
    total_bags: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    miscellaneous_cost: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    total_cost: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    cost_per_bag: Mapped[Decimal] = mapped_column(
        Numeric(12, 4), nullable=False, default=Decimal("0")
    )
    cost_per_kg: Mapped[Decimal] = mapped_column(
        Numeric(12, 4), nullable=False, default=Decimal("0")
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("bag_size_kg > 0", name="feed_batch_bag_size_check"),
        CheckConstraint("total_bags >= 0", name="feed_batch_total_bags_check"),
        CheckConstraint("miscellaneous_cost >= 0", name="feed_batch_misc_cost_check"),
    )

    # Relationships
    ingredients: Mapped[list[BatchIngredient]] = relationship(
        back_populates="batch",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BatchIngredient.id",
    )

    @property
    def total_quantity_kg(self) -> Decimal:
        return sum((i.quantity_kg for i in self.ingredients), Decimal("0"))


class BatchIngredient(Base, TimestampMixin):
    """One purchased ingredient line in a feed batch."""

    __tablename__ = "batch_ingredient"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    batch_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("feed_batch.id", ondelete="CASCADE"),
        nullable=False,
    )
    ingredient_name: Mapped[str] = mapped_column(String(100), nullable=False)
    quantity_kg: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    cost_per_kg: Mapped[Decimal] = mapped_column(
        Numeric(12, 4), nullable=False, default=Decimal("0")
    )
    supplier: Mapped[str | None] = mapped_column(String(100), nullable=True)

    __table_args__ = (
        CheckConstraint("quantity_kg > 0", name="batch_ingredient_quantity_check"),
        CheckConstraint("total_cost >= 0", name="batch_ingredient_cost_check"),
    )

    # Relationships
    batch: Mapped[FeedBatch] = relationship(back_populates="ingredients")


class FeedRecipe(Base, TimestampMixin):
    """Named ingredient percentage map used to plan batches."""

    __tablename__ = "feed_recipe"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_name: Mapped[str] = mapped_column(String(100), nullable=False)
    percentages: Mapped[dict[str, str]] = mapped_column(JSON, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
