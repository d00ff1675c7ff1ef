"""System health endpoint — reports the state of the stats cache."""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from app.api.deps import StatsCache

router = APIRouter(prefix="/system", tags=["system"])


class StatsCacheHealth(BaseModel):
    ready: bool
    version: int
    updated_at: datetime | None = None
    recompute_count: int
    last_error: str | None = None
    pending: bool


class HealthResponse(BaseModel):
    status: str  # "ok" or "degraded"
    stats: StatsCacheHealth


@router.get("/health", response_model=HealthResponse)
async def system_health(stats_service: StatsCache) -> HealthResponse:
    slot = stats_service.slot
    cache = StatsCacheHealth(
        ready=slot.ready,
        version=slot.version,
        updated_at=slot.updated_at,
        recompute_count=stats_service.recompute_count,
        last_error=stats_service.last_error,
        pending=stats_service.pending,
    )
    overall = "ok" if cache.ready and cache.last_error is None else "degraded"
    return HealthResponse(status=overall, stats=cache)
