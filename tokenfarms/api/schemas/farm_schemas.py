# This file defines request bodies and response shapes for the farm query endpoints.
# It exists so every field constraint is declared once and enforced before any query runs.
# Identifier fields share one pattern and length rule; pagination fields share one set of bounds.
# Response models keep rows as plain column dictionaries because the store columns pass through verbatim.

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from tokenfarms.api.pagination import DEFAULT_SORT_METHOD, MAX_ROW_OFFSET, SortMethod

IDENTIFIER_PATTERN = r"^[a-z1-5.]+$"
MAX_LIMIT = 100
# Keeps limit * (page - 1) inside MAX_ROW_OFFSET for every accepted limit.
MAX_PAGE = MAX_ROW_OFFSET // MAX_LIMIT + 1

Identifier = Annotated[str, Field(min_length=1, max_length=12, pattern=IDENTIFIER_PATTERN)]
Page = Annotated[int, Field(ge=1, le=MAX_PAGE)]
Limit = Annotated[int, Field(ge=1, le=MAX_LIMIT)]


class _RequestBody(BaseModel):
    model_config = ConfigDict(extra="ignore")


class GetFarmRequest(_RequestBody):
    farm_name: Identifier


class GetFarmsRequest(_RequestBody):
    page: Page | None = None
    limit: Limit | None = None
    sort: SortMethod = DEFAULT_SORT_METHOD
    creator: Identifier | None = None
    original_creator: Identifier | None = None


class GetStakersRequest(_RequestBody):
    farm_name: Identifier
    page: Page | None = None
    limit: Limit | None = None


class StakedOnlyRequest(_RequestBody):
    staker: Identifier
    page: Page | None = None
    limit: Limit | None = None
    sort: SortMethod = DEFAULT_SORT_METHOD


class FarmResponse(BaseModel):
    farm: list[dict[str, Any]]


class FarmListResponse(BaseModel):
    farms: list[dict[str, Any]]


class StakerListResponse(BaseModel):
    stakers: list[dict[str, Any]]


class ValidationErrorItem(BaseModel):
    type: str
    msg: str
    path: str | None = None
    location: str | None = None
    value: Any | None = None


class ValidationErrorResponse(BaseModel):
    errors: list[ValidationErrorItem]
