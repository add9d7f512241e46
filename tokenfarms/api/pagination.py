# This file handles pagination and sort parsing for list endpoints.
# It exists so every router uses the same deterministic rules for page size and ordering.
# The helpers validate bounds before any offset arithmetic runs.
# Sort methods come from a fixed allow-list, so only known clauses ever reach SQL text.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SortMethod(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"


DEFAULT_SORT_METHOD = SortMethod.NEWEST

# Largest value a BIGINT OFFSET can bind.
MAX_ROW_OFFSET = 2**63 - 1

SORT_DIRECTIONS: dict[SortMethod, str] = {
    SortMethod.NEWEST: "DESC",
    SortMethod.OLDEST: "ASC",
}


class PaginationError(ValueError):
    """A page or limit value outside the accepted bounds."""

    def __init__(self, message: str, *, field: str, value: int) -> None:
        self.field = field
        self.value = value
        super().__init__(message)


@dataclass(frozen=True)
class PaginationSpec:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return self.limit * self.page - self.limit


def normalize_pagination(
    *,
    page: int | None,
    limit: int | None,
    default_limit: int,
    max_limit: int,
) -> PaginationSpec:
    """Validate and normalize page/limit values."""

    resolved_page = 1 if page is None else page
    resolved_limit = default_limit if limit is None else limit
    if resolved_page < 1:
        raise PaginationError("page must be >= 1", field="page", value=resolved_page)
    if resolved_limit < 1:
        raise PaginationError("limit must be >= 1", field="limit", value=resolved_limit)
    if resolved_limit > max_limit:
        raise PaginationError(
            f"limit must be <= {max_limit}", field="limit", value=resolved_limit
        )
    if resolved_limit * resolved_page - resolved_limit > MAX_ROW_OFFSET:
        raise PaginationError(
            "page is too large for the requested limit", field="page", value=resolved_page
        )
    return PaginationSpec(page=resolved_page, limit=resolved_limit)


def resolve_sort(requested_sort: str | SortMethod | None) -> SortMethod:
    """Map a requested sort name onto the allow-list, falling back to newest."""

    if isinstance(requested_sort, SortMethod):
        return requested_sort
    try:
        return SortMethod((requested_sort or "").strip().lower())
    except ValueError:
        return DEFAULT_SORT_METHOD


def order_by_time_created(sort: SortMethod, *, column: str = "time_created") -> str:
    return f"ORDER BY {column} {SORT_DIRECTIONS[sort]}"
