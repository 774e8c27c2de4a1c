"""SQLAlchemy ORM models."""

from farm_engine.models.base import Base, TimestampMixin
from farm_engine.models.costs import FlockCost, OperatingCost
from farm_engine.models.farm import DailyLog, House
from farm_engine.models.feed import BatchIngredient, FeedBatch, FeedRecipe
from farm_engine.models.labor import Laborer, Payroll, WorkAssignment

__all__ = [
    "Base",
    "TimestampMixin",
    "Laborer",
    "WorkAssignment",
    "Payroll",
    "FeedBatch",
    "BatchIngredient",
    "FeedRecipe",
    "House",
    "DailyLog",
    "OperatingCost",
    "FlockCost",
]
