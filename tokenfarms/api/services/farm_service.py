# This file implements read services for the farm and staker endpoints.
# It exists so routers can stay transport-focused while SQL execution lives in one layer.
# Each operation runs exactly one prepared statement on one pooled connection.
# Store failures are logged here with full detail and surfaced to callers as an opaque server error.

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from tokenfarms.api.api_config import ApiConfig
from tokenfarms.api.db_access import DatabaseClient
from tokenfarms.api.error_handlers import (
    PAGINATION_MESSAGES,
    SERVER_ERROR_MESSAGE,
    APIError,
    field_error,
)
from tokenfarms.api.pagination import (
    PaginationError,
    PaginationSpec,
    SortMethod,
    normalize_pagination,
    resolve_sort,
)
from tokenfarms.api.queries import FarmQueries, QueryPlan

LOGGER = logging.getLogger("api")


class FarmService:
    """Data retrieval for farm and staker API routes."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db
        self.queries = FarmQueries(
            farms_table=self.config.validate_table_name(self.config.farms_table_name),
            stakers_table=self.config.validate_table_name(self.config.stakers_table_name),
        )

    def get_farm(self, *, farm_name: str) -> list[dict[str, Any]]:
        return self._run(self.queries.farm(farm_name=farm_name), operation="get_farm")

    def get_farms(
        self,
        *,
        creator: str | None,
        original_creator: str | None,
        page: int | None,
        limit: int | None,
        sort: str | SortMethod | None,
    ) -> list[dict[str, Any]]:
        plan = self.queries.farms(
            creator=creator,
            original_creator=original_creator,
            pagination=self._pagination(page=page, limit=limit),
            sort=resolve_sort(sort),
        )
        return self._run(plan, operation="get_farms")

    def get_stakers(
        self, *, farm_name: str, page: int | None, limit: int | None
    ) -> list[dict[str, Any]]:
        plan = self.queries.stakers(
            farm_name=farm_name,
            pagination=self._pagination(page=page, limit=limit),
        )
        return self._run(plan, operation="get_stakers")

    def get_staked_farms(
        self,
        *,
        staker: str,
        page: int | None,
        limit: int | None,
        sort: str | SortMethod | None,
    ) -> list[dict[str, Any]]:
        plan = self.queries.staked_farms(
            staker=staker,
            pagination=self._pagination(page=page, limit=limit),
            sort=resolve_sort(sort),
        )
        return self._run(plan, operation="get_staked_farms")

    def _pagination(self, *, page: int | None, limit: int | None) -> PaginationSpec:
        try:
            return normalize_pagination(
                page=page,
                limit=limit,
                default_limit=self.config.default_limit,
                max_limit=self.config.max_limit,
            )
        except PaginationError as exc:
            if exc.field == "limit":
                msg = f"Limit must be a positive integer and max {self.config.max_limit}"
            else:
                msg = PAGINATION_MESSAGES[exc.field]
            raise APIError(
                status_code=400,
                error_code="INVALID_PAGINATION",
                message=str(exc),
                details=[field_error(exc.field, msg, exc.value)],
            ) from exc

    def _run(self, plan: QueryPlan, *, operation: str) -> list[dict[str, Any]]:
        try:
            return self.db.fetch_all(plan.sql, plan.params)
        except SQLAlchemyError as exc:
            LOGGER.exception("Query failed for operation=%s params=%s", operation, plan.params)
            raise APIError(
                status_code=500,
                error_code="SERVER_ERROR",
                message=SERVER_ERROR_MESSAGE,
            ) from exc
