# This file wraps database access so API services can run parameterized SQL safely.
# It exists to keep SQL execution details out of router code and make testing easier.
# The client owns one explicitly sized connection pool and hands out scoped connections from it.
# Keeping this layer small makes query behavior easier to audit and troubleshoot.

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from tokenfarms.api.api_config import ApiConfig

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def _connect_args(
    database_url: str, *, connect_timeout_seconds: int, statement_timeout_ms: int
) -> dict[str, Any]:
    backend = make_url(database_url).get_backend_name()
    if backend == "postgresql":
        return {
            "connect_timeout": connect_timeout_seconds,
            "options": f"-c statement_timeout={statement_timeout_ms}",
        }
    if backend == "sqlite":
        return {"check_same_thread": False, "timeout": connect_timeout_seconds}
    return {}


class DatabaseClient:
    """Minimal SQLAlchemy wrapper for API read access over a bounded pool."""

    def __init__(
        self,
        *,
        database_url: str,
        pool_max: int = 10,
        pool_timeout_seconds: int = 10,
        connect_timeout_seconds: int = 5,
        statement_timeout_ms: int = 5000,
    ) -> None:
        # max_overflow=0 makes pool_max a hard ceiling; extra callers queue on pool_timeout.
        self._engine: Engine = create_engine(
            database_url,
            pool_size=pool_max,
            max_overflow=0,
            pool_timeout=pool_timeout_seconds,
            pool_pre_ping=True,
            connect_args=_connect_args(
                database_url,
                connect_timeout_seconds=connect_timeout_seconds,
                statement_timeout_ms=statement_timeout_ms,
            ),
        )
        self.pool_max = pool_max

    @classmethod
    def from_config(cls, config: ApiConfig) -> DatabaseClient:
        return cls(
            database_url=config.database_url,
            pool_max=config.pool_max,
            pool_timeout_seconds=config.pool_timeout_seconds,
            connect_timeout_seconds=config.connect_timeout_seconds,
            statement_timeout_ms=config.statement_timeout_ms,
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """Check a connection out of the pool and return it on every exit path."""

        with self._engine.connect() as connection:
            yield connection

    def checked_out(self) -> int:
        """Number of pooled connections currently in use."""

        return self._engine.pool.checkedout()

    def can_connect(self) -> bool:
        try:
            with self.connection() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def table_exists(self, table_name: str) -> bool:
        self._validate_identifier(table_name)
        with self.connection() as connection:
            return inspect(connection).has_table(table_name)

    def fetch_all(self, query: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        with self.connection() as connection:
            rows = connection.execute(text(query), dict(params or {})).mappings().all()
        return [dict(row) for row in rows]

    def fetch_one(self, query: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        with self.connection() as connection:
            row = connection.execute(text(query), dict(params or {})).mappings().first()
        return dict(row) if row is not None else None

    def dispose(self) -> None:
        self._engine.dispose()

    def _validate_identifier(self, identifier: str) -> str:
        if not _IDENTIFIER_RE.match(identifier):
            raise ValueError(f"Unsafe SQL identifier: {identifier!r}")
        return identifier
