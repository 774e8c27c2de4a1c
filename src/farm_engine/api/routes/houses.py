"""House endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from farm_engine.api.dependencies import DbSession, require_permission
from farm_engine.api.schemas import ErrorResponse, HouseCreate, HouseResponse, HouseUpdate
from farm_engine.services.house_service import HouseService

router = APIRouter(prefix="/houses", tags=["houses"])


@router.get(
    "",
    response_model=list[HouseResponse],
    dependencies=[Depends(require_permission("houses", "read"))],
)
async def list_houses(
    db: DbSession,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> list[HouseResponse]:
    houses = await HouseService(db).list_houses(status=status_filter)
    return [HouseResponse.model_validate(h) for h in houses]


@router.post(
    "",
    response_model=HouseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("houses", "create"))],
)
async def create_house(db: DbSession, payload: HouseCreate) -> HouseResponse:
    house = await HouseService(db).create_house(payload.model_dump())
    await db.commit()
    return HouseResponse.model_validate(house)


@router.get(
    "/{house_id}",
    response_model=HouseResponse,
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("houses", "read"))],
)
async def get_house(db: DbSession, house_id: Annotated[int, Path()]) -> HouseResponse:
    house = await HouseService(db).get_house(house_id)
    return HouseResponse.model_validate(house)


@router.put(
    "/{house_id}",
    response_model=HouseResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("houses", "update"))],
)
async def update_house(
    db: DbSession,
    house_id: Annotated[int, Path()],
    payload: HouseUpdate,
) -> HouseResponse:
    house = await HouseService(db).update_house(house_id, payload.model_dump(exclude_unset=True))
    await db.commit()
    return HouseResponse.model_validate(house)


@router.delete(
    "/{house_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission("houses", "delete"))],
)
async def delete_house(db: DbSession, house_id: Annotated[int, Path()]) -> Response:
    await HouseService(db).delete_house(house_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
