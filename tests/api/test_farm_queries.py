# This file tests the prepared statement set for farm and staker lookups.
# It exists to pin filter precedence, parameter binding order, and sort clauses.
# The statements are inspected directly, without a database.

from __future__ import annotations

import pytest

from tokenfarms.api.pagination import PaginationSpec, SortMethod
from tokenfarms.api.queries import FarmFilter, FarmQueries, select_farm_filter


@pytest.fixture
def queries() -> FarmQueries:
    return FarmQueries(farms_table="tokenfarms_farms", stakers_table="tokenfarms_stakers")


def _normalized(sql: str) -> str:
    return " ".join(sql.split())


def test_select_farm_filter_precedence() -> None:
    assert select_farm_filter(creator="bob", original_creator="dave") == (FarmFilter.CREATOR, "bob")
    assert select_farm_filter(creator=None, original_creator="dave") == (
        FarmFilter.ORIGINAL_CREATOR,
        "dave",
    )
    assert select_farm_filter(creator="", original_creator="dave") == (
        FarmFilter.ORIGINAL_CREATOR,
        "dave",
    )
    assert select_farm_filter(creator=None, original_creator=None) == (FarmFilter.NONE, None)


def test_farm_lookup_is_single_row(queries: FarmQueries) -> None:
    plan = queries.farm(farm_name="alice")

    assert _normalized(plan.sql) == (
        "SELECT * FROM tokenfarms_farms WHERE farm_name = :farm_name LIMIT 1"
    )
    assert plan.params == {"farm_name": "alice"}


def test_farms_with_both_filters_binds_creator_only(queries: FarmQueries) -> None:
    plan = queries.farms(
        creator="bob",
        original_creator="dave",
        pagination=PaginationSpec(page=3, limit=20),
        sort=SortMethod.NEWEST,
    )

    sql = _normalized(plan.sql)
    assert "WHERE creator = :creator" in sql
    assert "original_creator" not in sql
    assert list(plan.params) == ["creator", "limit", "offset"]
    assert plan.params == {"creator": "bob", "limit": 20, "offset": 40}


def test_farms_with_original_creator_filter(queries: FarmQueries) -> None:
    plan = queries.farms(
        creator=None,
        original_creator="dave",
        pagination=PaginationSpec(page=1, limit=100),
        sort=SortMethod.OLDEST,
    )

    sql = _normalized(plan.sql)
    assert "WHERE original_creator = :original_creator" in sql
    assert "ORDER BY time_created ASC" in sql
    assert list(plan.params) == ["original_creator", "limit", "offset"]


def test_farms_without_filter_is_unfiltered(queries: FarmQueries) -> None:
    plan = queries.farms(
        creator=None,
        original_creator=None,
        pagination=PaginationSpec(page=2, limit=10),
        sort=SortMethod.NEWEST,
    )

    assert _normalized(plan.sql) == (
        "SELECT * FROM tokenfarms_farms ORDER BY time_created DESC LIMIT :limit OFFSET :offset"
    )
    assert plan.params == {"limit": 10, "offset": 10}


def test_user_values_never_reach_sql_text(queries: FarmQueries) -> None:
    plan = queries.farms(
        creator="bob.evil",
        original_creator=None,
        pagination=PaginationSpec(page=1, limit=5),
        sort=SortMethod.NEWEST,
    )
    staked = queries.staked_farms(
        staker="zed.evil", pagination=PaginationSpec(page=1, limit=5), sort=SortMethod.NEWEST
    )

    assert "bob.evil" not in plan.sql
    assert "zed.evil" not in staked.sql


def test_stakers_always_sorted_by_balance(queries: FarmQueries) -> None:
    plan = queries.stakers(farm_name="alice", pagination=PaginationSpec(page=2, limit=50))

    sql = _normalized(plan.sql)
    assert "ORDER BY balance_numeric DESC" in sql
    assert "time_created" not in sql
    assert list(plan.params) == ["farm_name", "limit", "offset"]
    assert plan.params == {"farm_name": "alice", "limit": 50, "offset": 50}


def test_staked_farms_joins_staker_position(queries: FarmQueries) -> None:
    plan = queries.staked_farms(
        staker="zed", pagination=PaginationSpec(page=1, limit=100), sort=SortMethod.OLDEST
    )

    sql = _normalized(plan.sql)
    assert "stakers.balance AS staker_balance" in sql
    assert "stakers.last_update_time AS staker_last_update_time" in sql
    assert "JOIN tokenfarms_farms farms ON stakers.farm_name = farms.farm_name" in sql
    assert "WHERE stakers.username = :staker" in sql
    assert "ORDER BY farms.time_created ASC" in sql
    assert list(plan.params) == ["staker", "limit", "offset"]
