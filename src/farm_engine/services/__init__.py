"""Farm engine services."""

from farm_engine.services.cost_service import CostService
from farm_engine.services.daily_log_service import DailyLogService
from farm_engine.services.feed_batch_service import FeedBatchService
from farm_engine.services.feed_recipe_service import FeedRecipeService
from farm_engine.services.house_service import HouseService
from farm_engine.services.labor_service import LaborService
from farm_engine.services.payroll_service import PayrollService

__all__ = [
    "CostService",
    "DailyLogService",
    "FeedBatchService",
    "FeedRecipeService",
    "HouseService",
    "LaborService",
    "PayrollService",
]
