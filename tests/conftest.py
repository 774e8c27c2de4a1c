"""Pytest fixtures for farm engine tests."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.pool import StaticPool

from farm_engine.api.app import create_app
from farm_engine.api.dependencies import get_db_session
from farm_engine.config import Settings
from farm_engine.database import create_schema, get_engine, get_session_factory
from farm_engine.models import FeedBatch, House, Laborer
from farm_engine.services import FeedBatchService, HouseService, LaborService

# In-memory SQLite shared across sessions through a single connection
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the in-memory database."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="WARNING",
        egg_price_markup=Decimal("1.2"),
        default_bag_size_kg=Decimal("50"),
        auto_create_schema=False,
    )


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh database per test."""
    engine = get_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Database session for service level tests."""
    factory = get_session_factory(engine)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(engine: AsyncEngine, settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, with sessions bound to the test engine."""
    app = create_app(settings)
    factory = get_session_factory(engine)

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ============================================================================
# Seed helpers
# ============================================================================


@pytest.fixture
def make_laborer(session: AsyncSession) -> Callable[..., Awaitable[Laborer]]:
    """Create a laborer with sensible defaults."""

    async def _make(full_name: str = "Ravi Kumar", **overrides: Any) -> Laborer:
        data: dict[str, Any] = {
            "full_name": full_name,
            "monthly_salary": Decimal("26000"),
            "hire_date": date(2024, 1, 1),
        }
        data.update(overrides)
        return await LaborService(session).create_laborer(data)

    return _make


@pytest.fixture
def make_house(session: AsyncSession) -> Callable[..., Awaitable[House]]:
    """Create a laying house."""

    async def _make(name: str = "House A", **overrides: Any) -> House:
        data: dict[str, Any] = {"name": name, "capacity": 5000, "current_bird_count": 4000}
        data.update(overrides)
        return await HouseService(session).create_house(data)

    return _make


@pytest.fixture
def make_batch(session: AsyncSession) -> Callable[..., Awaitable[FeedBatch]]:
    """Create a 1000 kg feed batch: 20 bags at 1775 per bag by default."""

    async def _make(
        batch_name: str = "Layer Mash 01",
        batch_date: date = date(2025, 8, 1),
        **overrides: Any,
    ) -> FeedBatch:
        data: dict[str, Any] = {
            "batch_date": batch_date,
            "batch_name": batch_name,
            "bag_size_kg": Decimal("50"),
            "miscellaneous_cost": Decimal("500"),
            "ingredients": [
                {"ingredient_name": "corn", "quantity_kg": "600", "total_cost": "15000"},
                {"ingredient_name": "soybean", "quantity_kg": "400", "total_cost": "20000"},
            ],
        }
        data.update(overrides)
        return await FeedBatchService(session).create_batch(data)

    return _make
