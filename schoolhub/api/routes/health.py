# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoint."""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from schoolhub import __version__
from schoolhub.infrastructure.database.connection import check_database_connection

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(description="Overall health status")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    store: str = Field(description="Entity store backend and its status")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    checked_at: datetime = Field(description="When health was checked")


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(request: Request) -> HealthResponse:
    """Report liveness and, for the SQL backend, database reachability."""
    settings = request.app.state.settings
    backend = settings.database.backend

    healthy = True
    if backend == "sql":
        healthy = await check_database_connection()
        if not healthy:
            logger.error("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if healthy else "degraded",
        version=__version__,
        environment=settings.environment,
        store=f"{backend}:{'up' if healthy else 'down'}",
        uptime_seconds=int(time.time() - _server_start_time),
        checked_at=datetime.now(timezone.utc),
    )
