# This file defines liveness and readiness endpoints for API operations.
# It exists so orchestration and monitoring systems can verify service health quickly.
# The readiness check confirms database connectivity and source table availability.
# Pool usage is reported alongside so saturation is visible without a separate tool.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from tokenfarms.api.api_config import ApiConfig
from tokenfarms.api.db_access import DatabaseClient
from tokenfarms.api.dependencies import get_config, get_database_client
from tokenfarms.api.schemas.health_schemas import HealthResponse, ReadinessResponse

router = APIRouter(tags=["health"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]
DBDep = Annotated[DatabaseClient, Depends(get_database_client)]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@router.get("/health", response_model=HealthResponse)
def health(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        "request_id": request.state.request_id,
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
        "version": config.app_version,
        "timestamp": _utc_now(),
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(
    request: Request,
    config: ConfigDep,
    db: DBDep,
) -> dict[str, object]:
    db_connected = db.can_connect()
    farms_source_ready = db_connected and db.table_exists(config.farms_table_name)
    stakers_source_ready = db_connected and db.table_exists(config.stakers_table_name)
    is_ready = db_connected and farms_source_ready and stakers_source_ready

    return {
        "request_id": request.state.request_id,
        "db_connected": db_connected,
        "farms_source_ready": farms_source_ready,
        "stakers_source_ready": stakers_source_ready,
        "ready": is_ready,
        "database": "reachable" if db_connected else "unreachable",
        "pool_max": db.pool_max,
        "pool_in_use": db.checked_out(),
        "timestamp": _utc_now(),
    }
