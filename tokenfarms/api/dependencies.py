# This file provides dependency factories for FastAPI routes and middleware.
# It exists so the connection pool and services are created once and shared through dependency injection.
# The setup keeps routers thin and makes endpoint tests easy to override.
# Centralized construction also ensures one consistent API configuration is used.

from __future__ import annotations

from functools import lru_cache

from tokenfarms.api.api_config import ApiConfig, get_api_config
from tokenfarms.api.db_access import DatabaseClient
from tokenfarms.api.services.farm_service import FarmService


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    return DatabaseClient.from_config(get_api_config())


@lru_cache(maxsize=1)
def get_farm_service() -> FarmService:
    config = get_api_config()
    db_client = get_database_client()
    return FarmService(config=config, db=db_client)


def get_config() -> ApiConfig:
    return get_api_config()
