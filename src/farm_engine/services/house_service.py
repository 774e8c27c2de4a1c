"""House service."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_engine.errors import BusinessRuleError, NotFoundError, ValidationError
from farm_engine.models import DailyLog, House

HOUSE_FIELDS = ("name", "capacity", "current_bird_count", "location", "description", "status")
HOUSE_STATUSES = ("active", "inactive", "maintenance")


class HouseService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_houses(self, status: str | None = None) -> list[House]:
        query = select(House)
        if status:
            query = query.where(House.status == status)
        result = await self.session.execute(query.order_by(House.name))
        return list(result.scalars().all())

    async def get_house(self, house_id: int) -> House:
        house = await self.session.get(House, house_id)
        if house is None:
            raise NotFoundError("House", house_id)
        return house

    def _validate(self, house: House) -> None:
        if not house.name:
            raise ValidationError("name is required")
        if house.status not in HOUSE_STATUSES:
            raise ValidationError(
                f"Invalid status '{house.status}'", {"allowed": list(HOUSE_STATUSES)}
            )
        if (house.capacity or 0) < 0 or (house.current_bird_count or 0) < 0:
            raise ValidationError("capacity and current_bird_count cannot be negative")
        if house.capacity and house.current_bird_count and house.current_bird_count > house.capacity:
            raise BusinessRuleError(
                f"Bird count {house.current_bird_count} exceeds capacity {house.capacity}",
                {"capacity": house.capacity, "current_bird_count": house.current_bird_count},
            )

    async def create_house(self, data: dict[str, Any]) -> House:
        house = House(
            **{k: v for k, v in data.items() if k in HOUSE_FIELDS and v is not None}
        )
        if house.status is None:
            house.status = "active"
        self._validate(house)
        self.session.add(house)
        await self.session.flush()
        return house

    async def update_house(self, house_id: int, updates: dict[str, Any]) -> House:
        house = await self.get_house(house_id)
        for key, value in updates.items():
            if key in HOUSE_FIELDS and value is not None:
                setattr(house, key, value)
        self._validate(house)
        await self.session.flush()
        return house

    async def delete_house(self, house_id: int) -> None:
        house = await self.get_house(house_id)
        log_count = await self.session.scalar(
            select(func.count()).select_from(DailyLog).where(DailyLog.house_id == house_id)
        )
        if log_count:
            raise BusinessRuleError(
                f"House {house_id} has {log_count} daily logs; set it inactive instead",
                {"house_id": house_id, "daily_logs": log_count},
            )
        await self.session.delete(house)
        await self.session.flush()
