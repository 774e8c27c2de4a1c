"""Error taxonomy shared by calculators, services and the API."""

from __future__ import annotations

from decimal import Decimal
from typing import Any


class FarmEngineError(Exception):
    """Base class for all domain errors.

    ``status_code`` and ``code`` are consumed by the API exception handlers.
    """

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)


class ValidationError(FarmEngineError):
    """Malformed or missing input, rejected before any write."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(FarmEngineError):
    """Referenced row does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} {entity_id} not found",
            {"entity": entity, "id": entity_id},
        )


class ConflictError(FarmEngineError):
    """Operation would duplicate an existing row."""

    status_code = 409
    code = "CONFLICT"


class BusinessRuleError(FarmEngineError):
    """Input is well formed but violates a business rule."""

    status_code = 422
    code = "BUSINESS_RULE_VIOLATION"


class InsufficientFeedError(BusinessRuleError):
    """Raised when a daily log would consume more bags than a batch has left."""

    code = "INSUFFICIENT_FEED"

    def __init__(self, batch_name: str, requested: Decimal, available: Decimal):
        self.batch_name = batch_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot use {requested} bags. Only {available} bags available "
            f"in batch \"{batch_name}\".",
            {
                "batch_name": batch_name,
                "requested": str(requested),
                "available": str(available),
            },
        )
