# This file holds every SQL statement the API can run, prepared once per table configuration.
# It exists so the set of possible queries is closed and can be audited in one place.
# Filter selection is a pure function; each filter variant maps to a fully written statement.
# User values are always bound as parameters, never formatted into the SQL text.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tokenfarms.api.pagination import PaginationSpec, SortMethod, order_by_time_created


class FarmFilter(str, Enum):
    NONE = "none"
    CREATOR = "creator"
    ORIGINAL_CREATOR = "original_creator"


@dataclass(frozen=True)
class QueryPlan:
    sql: str
    params: dict[str, Any] = field(default_factory=dict)


def select_farm_filter(
    *, creator: str | None, original_creator: str | None
) -> tuple[FarmFilter, str | None]:
    """Pick the single filter a farm listing applies. Creator wins over original creator."""

    if creator:
        return FarmFilter.CREATOR, creator
    if original_creator:
        return FarmFilter.ORIGINAL_CREATOR, original_creator
    return FarmFilter.NONE, None


def _page_params(pagination: PaginationSpec) -> dict[str, int]:
    return {"limit": pagination.limit, "offset": pagination.offset}


class FarmQueries:
    """Prepared statements for farm and staker lookups."""

    def __init__(self, *, farms_table: str, stakers_table: str) -> None:
        self.farms_table = farms_table
        self.stakers_table = stakers_table

        self._farm_by_name = f"""
        SELECT *
        FROM {farms_table}
        WHERE farm_name = :farm_name
        LIMIT 1
        """

        where_by_filter = {
            FarmFilter.NONE: "",
            FarmFilter.CREATOR: "WHERE creator = :creator",
            FarmFilter.ORIGINAL_CREATOR: "WHERE original_creator = :original_creator",
        }
        self._farms: dict[tuple[FarmFilter, SortMethod], str] = {
            (farm_filter, sort): f"""
            SELECT *
            FROM {farms_table}
            {where_sql}
            {order_by_time_created(sort)}
            LIMIT :limit OFFSET :offset
            """
            for farm_filter, where_sql in where_by_filter.items()
            for sort in SortMethod
        }

        self._stakers = f"""
        SELECT *
        FROM {stakers_table}
        WHERE farm_name = :farm_name
        ORDER BY balance_numeric DESC
        LIMIT :limit OFFSET :offset
        """

        self._staked_farms: dict[SortMethod, str] = {
            sort: f"""
            SELECT
                farms.*,
                stakers.balance AS staker_balance,
                stakers.last_update_time AS staker_last_update_time
            FROM {stakers_table} stakers
            JOIN {farms_table} farms ON stakers.farm_name = farms.farm_name
            WHERE stakers.username = :staker
            {order_by_time_created(sort, column="farms.time_created")}
            LIMIT :limit OFFSET :offset
            """
            for sort in SortMethod
        }

    def farm(self, *, farm_name: str) -> QueryPlan:
        return QueryPlan(sql=self._farm_by_name, params={"farm_name": farm_name})

    def farms(
        self,
        *,
        creator: str | None,
        original_creator: str | None,
        pagination: PaginationSpec,
        sort: SortMethod,
    ) -> QueryPlan:
        farm_filter, filter_value = select_farm_filter(
            creator=creator, original_creator=original_creator
        )
        params: dict[str, Any] = {}
        if farm_filter is not FarmFilter.NONE:
            params[farm_filter.value] = filter_value
        params.update(_page_params(pagination))
        return QueryPlan(sql=self._farms[(farm_filter, sort)], params=params)

    def stakers(self, *, farm_name: str, pagination: PaginationSpec) -> QueryPlan:
        return QueryPlan(
            sql=self._stakers,
            params={"farm_name": farm_name, **_page_params(pagination)},
        )

    def staked_farms(
        self, *, staker: str, pagination: PaginationSpec, sort: SortMethod
    ) -> QueryPlan:
        return QueryPlan(
            sql=self._staked_farms[sort],
            params={"staker": staker, **_page_params(pagination)},
        )
