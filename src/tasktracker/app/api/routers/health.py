"""Health and readiness endpoints."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request, status

from ...schemas.system import HealthCheckResponse

router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def read_health(request: Request) -> HealthCheckResponse:
    """Report liveness and seconds elapsed since the application was created."""
    started_at: float = request.app.state.started_at
    return HealthCheckResponse(ok=True, uptime=round(time.monotonic() - started_at, 3))
