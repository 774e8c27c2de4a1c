"""Daily log service - production entries and feed consumption."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_engine.calculators.types import ZERO, to_decimal
from farm_engine.errors import ConflictError, NotFoundError, ValidationError
from farm_engine.models import DailyLog
from farm_engine.services.feed_batch_service import FeedBatchService
from farm_engine.services.house_service import HouseService

logger = logging.getLogger(__name__)

DAILY_LOG_FIELDS = (
    "log_date",
    "house_id",
    "eggs_collected",
    "cracked_eggs",
    "feed_batch_id",
    "feed_bags_used",
    "mortality_count",
    "notes",
    "supervisor_id",
)

_COUNT_FIELDS = ("eggs_collected", "cracked_eggs", "mortality_count")


def _pick(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k in DAILY_LOG_FIELDS and v is not None}


class DailyLogService:
    """One log per house and day, drawing feed bags from a batch."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.feed_batches = FeedBatchService(session)
        self.houses = HouseService(session)

    async def get_log(self, log_id: int) -> DailyLog:
        log = await self.session.get(DailyLog, log_id)
        if log is None:
            raise NotFoundError("DailyLog", log_id)
        return log

    async def find_log(self, house_id: int, log_date: date) -> DailyLog | None:
        return await self.session.scalar(
            select(DailyLog).where(DailyLog.house_id == house_id, DailyLog.log_date == log_date)
        )

    async def list_logs(
        self,
        log_date: date | None = None,
        house_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[DailyLog]:
        query = select(DailyLog)
        if log_date is not None:
            query = query.where(DailyLog.log_date == log_date)
        if house_id is not None:
            query = query.where(DailyLog.house_id == house_id)
        if start_date is not None:
            query = query.where(DailyLog.log_date >= start_date)
        if end_date is not None:
            query = query.where(DailyLog.log_date <= end_date)
        result = await self.session.execute(
            query.order_by(DailyLog.log_date.desc(), DailyLog.house_id)
        )
        return list(result.scalars().all())

    async def validate_feed_usage(
        self,
        payload: dict[str, Any],
        existing: DailyLog | None = None,
    ) -> None:
        """Reject consumption beyond what the batch has left.

        The edited log's own usage is excluded from the batch balance, so
        re-submitting the same figure never fails.

        Raises:
            ValidationError: If bags are given without a batch.
            NotFoundError: If the batch does not exist.
            InsufficientFeedError: If the batch cannot cover the bags.
        """
        incoming_bags = payload.get("feed_bags_used")
        batch_id = payload.get("feed_batch_id") or (existing.feed_batch_id if existing else None)
        bags = incoming_bags if incoming_bags is not None else (
            existing.feed_bags_used if existing else None
        )

        if incoming_bags is not None and to_decimal(incoming_bags) > 0 and not batch_id:
            raise ValidationError("feed_batch_id is required when feed_bags_used is provided")
        if not batch_id or bags is None:
            return

        await self.feed_batches.check_availability(
            batch_id,
            bags,
            exclude_log_id=existing.id if existing else None,
        )

    def _validate_counts(self, payload: dict[str, Any]) -> None:
        for key in _COUNT_FIELDS:
            if key in payload and payload[key] < 0:
                raise ValidationError(f"{key} cannot be negative")
        if "feed_bags_used" in payload:
            payload["feed_bags_used"] = to_decimal(payload["feed_bags_used"])
            if payload["feed_bags_used"] < 0:
                raise ValidationError("feed_bags_used cannot be negative")

    async def upsert_log(self, data: dict[str, Any]) -> DailyLog:
        """Create the day's log for a house, or update it if it exists."""
        payload = _pick(data)
        if not payload.get("log_date") or not payload.get("house_id"):
            raise ValidationError("log_date and house_id are required")
        self._validate_counts(payload)
        await self.houses.get_house(payload["house_id"])

        existing = await self.find_log(payload["house_id"], payload["log_date"])
        await self.validate_feed_usage(payload, existing)

        if existing is not None:
            for key, value in payload.items():
                setattr(existing, key, value)
            await self.session.flush()
            logger.info(
                "Updated existing daily log id=%s for house=%s date=%s",
                existing.id, existing.house_id, existing.log_date,
            )
            return existing

        log = DailyLog(**payload)
        if log.feed_bags_used is None:
            log.feed_bags_used = ZERO
        self.session.add(log)
        await self.session.flush()
        logger.info(
            "Created daily log id=%s for house=%s date=%s", log.id, log.house_id, log.log_date
        )
        return log

    async def update_log(self, log_id: int, updates: dict[str, Any]) -> DailyLog:
        log = await self.get_log(log_id)
        payload = _pick(updates)
        self._validate_counts(payload)

        house_id = payload.get("house_id", log.house_id)
        log_date = payload.get("log_date", log.log_date)
        if (house_id, log_date) != (log.house_id, log.log_date):
            await self.houses.get_house(house_id)
            clash = await self.find_log(house_id, log_date)
            if clash is not None and clash.id != log.id:
                raise ConflictError(
                    f"A daily log already exists for house {house_id} on {log_date}",
                    {"daily_log_id": clash.id},
                )

        await self.validate_feed_usage(payload, log)
        for key, value in payload.items():
            setattr(log, key, value)
        await self.session.flush()
        return log

    async def delete_log(self, log_id: int) -> None:
        log = await self.get_log(log_id)
        await self.session.delete(log)
        await self.session.flush()
        logger.info("Deleted daily log id=%s", log_id)
