"""Feed batch, ingredient and recipe endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from farm_engine.api.dependencies import AppSettings, DbSession, require_permission
from farm_engine.api.schemas import (
    BatchCalculateRequest,
    BatchTotalsResponse,
    BatchUsageResponse,
    ErrorResponse,
    FeedBatchCreate,
    FeedBatchResponse,
    FeedBatchUpdate,
    FeedRecipeCreate,
    FeedRecipeResponse,
    FeedRecipeUpdate,
    IngredientCreate,
    IngredientResponse,
    IngredientUpdate,
    RecipeCostRequest,
    RecipeCostResponse,
)
from farm_engine.calculators.types import BatchUsage
from farm_engine.models import FeedBatch
from farm_engine.services.feed_batch_service import FeedBatchService
from farm_engine.services.feed_recipe_service import FeedRecipeService

router = APIRouter(prefix="/feed", tags=["feed"])


def _usage_response(batch: FeedBatch, usage: BatchUsage) -> BatchUsageResponse:
    return BatchUsageResponse(
        batch_id=batch.id,
        batch_name=batch.batch_name,
        total_bags=usage.total_bags,
        bags_used=usage.bags_used,
        remaining_bags=usage.remaining_bags,
        usage_percentage=usage.usage_percentage,
        is_nearly_empty=usage.is_nearly_empty,
        is_empty=usage.is_empty,
        cost_per_bag=batch.cost_per_bag,
        bag_size_kg=batch.bag_size_kg,
    )


# ============================================================================
# Feed batches
# ============================================================================


@router.get(
    "/batches",
    response_model=list[FeedBatchResponse],
    dependencies=[Depends(require_permission("feed", "read"))],
)
async def list_batches(
    db: DbSession,
    batch_date: date | None = None,
    batch_name: str | None = None,
) -> list[FeedBatchResponse]:
    """List feed batches, newest first."""
    batches = await FeedBatchService(db).list_batches(batch_date=batch_date, batch_name=batch_name)
    return [FeedBatchResponse.model_validate(b) for b in batches]


@router.post(
    "/batches",
    response_model=FeedBatchResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "create"))],
)
async def create_batch(
    db: DbSession,
    settings: AppSettings,
    payload: FeedBatchCreate,
) -> FeedBatchResponse:
    """Create a batch; bag count and unit costs are derived from its ingredients."""
    service = FeedBatchService(db, settings.default_bag_size_kg)
    batch = await service.create_batch(payload.model_dump())
    await db.commit()
    return FeedBatchResponse.model_validate(batch)


@router.post(
    "/batches/calculate",
    response_model=BatchTotalsResponse,
    responses={400: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "read"))],
)
async def calculate_batch(
    db: DbSession,
    settings: AppSettings,
    payload: BatchCalculateRequest,
) -> BatchTotalsResponse:
    """Preview batch totals without saving anything."""
    totals = FeedBatchService(db, settings.default_bag_size_kg).preview(
        [i.model_dump() for i in payload.ingredients],
        bag_size_kg=payload.bag_size_kg,
        miscellaneous_cost=payload.miscellaneous_cost,
    )
    return BatchTotalsResponse.model_validate(totals)


@router.get(
    "/batches/usage",
    response_model=list[BatchUsageResponse],
    dependencies=[Depends(require_permission("feed", "read"))],
)
async def all_batch_usage(db: DbSession) -> list[BatchUsageResponse]:
    """Bag inventory of every batch."""
    stats = await FeedBatchService(db).all_usage_stats()
    return [_usage_response(batch, usage) for batch, usage in stats]


@router.get(
    "/batches/{batch_id}",
    response_model=FeedBatchResponse,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "read"))],
)
async def get_batch(
    db: DbSession,
    batch_id: Annotated[int, Path()],
) -> FeedBatchResponse:
    batch = await FeedBatchService(db).get_batch(batch_id)
    return FeedBatchResponse.model_validate(batch)


@router.put(
    "/batches/{batch_id}",
    response_model=FeedBatchResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "update"))],
)
async def update_batch(
    db: DbSession,
    batch_id: Annotated[int, Path()],
    payload: FeedBatchUpdate,
) -> FeedBatchResponse:
    """Update a batch; a given ingredient list replaces the current one."""
    batch = await FeedBatchService(db).update_batch(
        batch_id, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return FeedBatchResponse.model_validate(batch)


@router.delete(
    "/batches/{batch_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "delete"))],
)
async def delete_batch(
    db: DbSession,
    batch_id: Annotated[int, Path()],
) -> Response:
    await FeedBatchService(db).delete_batch(batch_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/batches/{batch_id}/recalculate",
    response_model=FeedBatchResponse,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "update"))],
)
async def recalculate_batch(
    db: DbSession,
    batch_id: Annotated[int, Path()],
) -> FeedBatchResponse:
    batch = await FeedBatchService(db).recalculate(batch_id)
    await db.commit()
    return FeedBatchResponse.model_validate(batch)


@router.get(
    "/batches/{batch_id}/usage",
    response_model=BatchUsageResponse,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "read"))],
)
async def batch_usage(
    db: DbSession,
    batch_id: Annotated[int, Path()],
) -> BatchUsageResponse:
    batch, usage = await FeedBatchService(db).usage_stats(batch_id)
    return _usage_response(batch, usage)


# ============================================================================
# Batch ingredients
# ============================================================================


@router.get(
    "/batches/{batch_id}/ingredients",
    response_model=list[IngredientResponse],
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "read"))],
)
async def list_ingredients(
    db: DbSession,
    batch_id: Annotated[int, Path()],
) -> list[IngredientResponse]:
    ingredients = await FeedBatchService(db).list_ingredients(batch_id)
    return [IngredientResponse.model_validate(i) for i in ingredients]


@router.post(
    "/batches/{batch_id}/ingredients",
    response_model=IngredientResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "update"))],
)
async def add_ingredient(
    db: DbSession,
    batch_id: Annotated[int, Path()],
    payload: IngredientCreate,
) -> IngredientResponse:
    """Add an ingredient and recompute the batch totals."""
    ingredient = await FeedBatchService(db).add_ingredient(batch_id, payload.model_dump())
    await db.commit()
    return IngredientResponse.model_validate(ingredient)


@router.put(
    "/ingredients/{ingredient_id}",
    response_model=IngredientResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "update"))],
)
async def update_ingredient(
    db: DbSession,
    ingredient_id: Annotated[int, Path()],
    payload: IngredientUpdate,
) -> IngredientResponse:
    ingredient = await FeedBatchService(db).update_ingredient(
        ingredient_id, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return IngredientResponse.model_validate(ingredient)


@router.delete(
    "/ingredients/{ingredient_id}",
    response_model=FeedBatchResponse,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "update"))],
)
async def remove_ingredient(
    db: DbSession,
    ingredient_id: Annotated[int, Path()],
) -> FeedBatchResponse:
    """Remove an ingredient and return the recomputed batch."""
    batch = await FeedBatchService(db).remove_ingredient(ingredient_id)
    await db.commit()
    return FeedBatchResponse.model_validate(batch)


# ============================================================================
# Feed recipes
# ============================================================================


@router.get(
    "/recipes",
    response_model=list[FeedRecipeResponse],
    dependencies=[Depends(require_permission("feed", "read"))],
)
async def list_recipes(
    db: DbSession,
    is_active: bool | None = None,
) -> list[FeedRecipeResponse]:
    recipes = await FeedRecipeService(db).list_recipes(is_active=is_active)
    return [FeedRecipeResponse.model_validate(r) for r in recipes]


@router.post(
    "/recipes",
    response_model=FeedRecipeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "create"))],
)
async def create_recipe(db: DbSession, payload: FeedRecipeCreate) -> FeedRecipeResponse:
    """Create a recipe; percentages must sum to more than 0 and at most 100."""
    recipe = await FeedRecipeService(db).create_recipe(payload.model_dump())
    await db.commit()
    return FeedRecipeResponse.model_validate(recipe)


@router.get(
    "/recipes/{recipe_id}",
    response_model=FeedRecipeResponse,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "read"))],
)
async def get_recipe(
    db: DbSession,
    recipe_id: Annotated[int, Path()],
) -> FeedRecipeResponse:
    recipe = await FeedRecipeService(db).get_recipe(recipe_id)
    return FeedRecipeResponse.model_validate(recipe)


@router.put(
    "/recipes/{recipe_id}",
    response_model=FeedRecipeResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "update"))],
)
async def update_recipe(
    db: DbSession,
    recipe_id: Annotated[int, Path()],
    payload: FeedRecipeUpdate,
) -> FeedRecipeResponse:
    recipe = await FeedRecipeService(db).update_recipe(
        recipe_id, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return FeedRecipeResponse.model_validate(recipe)


@router.delete(
    "/recipes/{recipe_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "delete"))],
)
async def delete_recipe(
    db: DbSession,
    recipe_id: Annotated[int, Path()],
) -> Response:
    await FeedRecipeService(db).delete_recipe(recipe_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/recipes/{recipe_id}/cost",
    response_model=RecipeCostResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("feed", "read"))],
)
async def recipe_cost(
    db: DbSession,
    recipe_id: Annotated[int, Path()],
    payload: RecipeCostRequest,
) -> RecipeCostResponse:
    """Price a batch of the recipe at the given ingredient prices."""
    cost = await FeedRecipeService(db).calculate_cost(
        recipe_id, payload.batch_size_kg, payload.prices_per_kg
    )
    return RecipeCostResponse.model_validate(cost)
