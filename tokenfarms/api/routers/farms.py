# This file defines the farm and staker query endpoints.
# They are POST endpoints with JSON bodies even though every one of them is a pure read.
# Body models reject bad identifiers and pagination values before the service is called.
# Responses carry the raw store rows under one key per endpoint, without pagination metadata.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from tokenfarms.api.dependencies import get_farm_service
from tokenfarms.api.schemas.farm_schemas import (
    FarmListResponse,
    FarmResponse,
    GetFarmRequest,
    GetFarmsRequest,
    GetStakersRequest,
    StakedOnlyRequest,
    StakerListResponse,
    ValidationErrorResponse,
)
from tokenfarms.api.services.farm_service import FarmService

router = APIRouter(
    tags=["farms"],
    responses={
        400: {"model": ValidationErrorResponse, "description": "Invalid request body."},
        500: {"description": "Server error", "content": {"text/plain": {}}},
    },
)
FarmServiceDep = Annotated[FarmService, Depends(get_farm_service)]


@router.post("/get-farm", response_model=FarmResponse)
def get_farm(payload: GetFarmRequest, service: FarmServiceDep) -> dict[str, object]:
    return {"farm": service.get_farm(farm_name=payload.farm_name)}


@router.post("/get-farms", response_model=FarmListResponse)
def get_farms(
    service: FarmServiceDep,
    payload: GetFarmsRequest | None = None,
) -> dict[str, object]:
    payload = payload or GetFarmsRequest()
    farms = service.get_farms(
        creator=payload.creator,
        original_creator=payload.original_creator,
        page=payload.page,
        limit=payload.limit,
        sort=payload.sort,
    )
    return {"farms": farms}


@router.post("/get-stakers", response_model=StakerListResponse)
def get_stakers(payload: GetStakersRequest, service: FarmServiceDep) -> dict[str, object]:
    stakers = service.get_stakers(
        farm_name=payload.farm_name,
        page=payload.page,
        limit=payload.limit,
    )
    return {"stakers": stakers}


@router.post("/staked-only", response_model=FarmListResponse)
def staked_only(payload: StakedOnlyRequest, service: FarmServiceDep) -> dict[str, object]:
    farms = service.get_staked_farms(
        staker=payload.staker,
        page=payload.page,
        limit=payload.limit,
        sort=payload.sort,
    )
    return {"farms": farms}
