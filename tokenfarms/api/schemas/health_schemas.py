# This file defines response schemas for health and readiness endpoints.
# It exists to keep operational status contracts explicit for platform consumers.
# Readiness reports store reachability and whether both source tables exist.
# Stable health schemas make monitoring checks straightforward to automate.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    request_id: str
    status: str
    environment: str
    service_name: str
    version: str
    timestamp: datetime


class ReadinessResponse(BaseModel):
    request_id: str
    db_connected: bool
    farms_source_ready: bool
    stakers_source_ready: bool
    ready: bool
    database: str
    pool_max: int
    pool_in_use: int
    timestamp: datetime
