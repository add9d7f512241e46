# This file defines runtime settings for the API layer in one place.
# It exists so the listening port, store credentials, and pool sizing can be changed without code edits.
# The config loader reads environment variables and applies safe defaults for local development.
# It also validates table names so only safe SQL identifiers reach statement text.

from __future__ import annotations

import os
import re
from functools import lru_cache
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

DEFAULT_FARMS_TABLE_NAME = "tokenfarms_farms"
DEFAULT_STAKERS_TABLE_NAME = "tokenfarms_stakers"


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Token Farms API"
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "local"
    log_level: str = "INFO"
    database_url: str
    pool_max: int = 10
    pool_timeout_seconds: int = 10
    connect_timeout_seconds: int = 5
    statement_timeout_ms: int = 5000
    default_limit: int = 100
    max_limit: int = 100
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    farms_table_name: str = DEFAULT_FARMS_TABLE_NAME
    stakers_table_name: str = DEFAULT_STAKERS_TABLE_NAME
    app_version: str = "0.1.0"
    allowed_table_names: set[str] = Field(default_factory=set)

    @field_validator("farms_table_name", "stakers_table_name")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"Unsafe SQL identifier: {value!r}")
        return value

    @field_validator(
        "port",
        "pool_max",
        "pool_timeout_seconds",
        "connect_timeout_seconds",
        "statement_timeout_ms",
        "default_limit",
        "max_limit",
    )
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    def validate_table_name(self, table_name: str) -> str:
        if not _IDENTIFIER_RE.match(table_name):
            raise ValueError(f"Unsafe SQL identifier: {table_name!r}")
        if table_name not in self.allowed_table_names:
            raise ValueError(f"Table name is not in allowlist: {table_name!r}")
        return table_name


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def _database_url_from_parts() -> str:
    """Build a PostgreSQL URL from the discrete POSTGRES_* variables, or return ''."""

    host = os.getenv("POSTGRES_HOST", "")
    database = os.getenv("POSTGRES_DB", "")
    user = os.getenv("POSTGRES_USER", "")
    if not (host and database and user):
        return ""
    password = quote_plus(os.getenv("POSTGRES_PASSWORD", ""))
    port = _env_int("POSTGRES_PORT", 5432)
    return f"postgresql+psycopg2://{quote_plus(user)}:{password}@{host}:{port}/{database}"


def _build_allowed_table_names() -> set[str]:
    """Default tables plus API_ALLOWED_TABLE_NAMES; configured names must appear here."""

    allowed_names = {DEFAULT_FARMS_TABLE_NAME, DEFAULT_STAKERS_TABLE_NAME}
    allowed_names.update(_env_list("API_ALLOWED_TABLE_NAMES", []))
    for table_name in allowed_names:
        if not _IDENTIFIER_RE.match(table_name):
            raise ValueError(f"Unsafe SQL identifier in allowlist: {table_name!r}")
    return allowed_names


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Token Farms API"),
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", 3000),
        "environment": os.getenv("ENV", "local"),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "database_url": os.getenv("DATABASE_URL", "") or _database_url_from_parts(),
        "pool_max": _env_int("POSTGRES_POOL_MAX", 10),
        "pool_timeout_seconds": _env_int("POSTGRES_POOL_TIMEOUT_SECONDS", 10),
        "connect_timeout_seconds": _env_int("POSTGRES_CONNECT_TIMEOUT_SECONDS", 5),
        "statement_timeout_ms": _env_int("API_STATEMENT_TIMEOUT_MS", 5000),
        "default_limit": _env_int("API_DEFAULT_LIMIT", 100),
        "max_limit": _env_int("API_MAX_LIMIT", 100),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", ["*"]),
        "farms_table_name": os.getenv("FARMS_TABLE_NAME", DEFAULT_FARMS_TABLE_NAME),
        "stakers_table_name": os.getenv("STAKERS_TABLE_NAME", DEFAULT_STAKERS_TABLE_NAME),
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
    }
    if not config_values["database_url"]:
        raise RuntimeError(
            "DATABASE_URL (or POSTGRES_HOST, POSTGRES_DB and POSTGRES_USER) is required for API startup."
        )

    config_values["allowed_table_names"] = _build_allowed_table_names()

    config = ApiConfig.model_validate(config_values)
    config.validate_table_name(config.farms_table_name)
    config.validate_table_name(config.stakers_table_name)
    return config


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
