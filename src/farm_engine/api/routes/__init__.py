"""API routes."""

from farm_engine.api.routes.costs import router as costs_router
from farm_engine.api.routes.daily_logs import router as daily_logs_router
from farm_engine.api.routes.feed import router as feed_router
from farm_engine.api.routes.health import router as health_router
from farm_engine.api.routes.houses import router as houses_router
from farm_engine.api.routes.labor import router as labor_router
from farm_engine.api.routes.payroll import router as payroll_router

__all__ = [
    "costs_router",
    "daily_logs_router",
    "feed_router",
    "health_router",
    "houses_router",
    "labor_router",
    "payroll_router",
]
