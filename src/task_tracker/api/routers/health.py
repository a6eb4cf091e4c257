"""Liveness endpoint that also round-trips the database."""

from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import text

from ...deps import DatabaseSessionDependency
from ...schemas.system import HealthCheckResponse

router = APIRouter(tags=["system"])


@router.get("/healthz", response_model=HealthCheckResponse, summary="Health check")
async def read_health(session: DatabaseSessionDependency) -> HealthCheckResponse:
    # A broken connection surfaces as the generic 500 envelope.
    await session.execute(text("SELECT 1"))
    return HealthCheckResponse(status="ok", database="ok")
