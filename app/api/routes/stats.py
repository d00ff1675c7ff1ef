"""Catalog stats endpoint, served from the in-memory cache."""

from fastapi import APIRouter, HTTPException, status

from app.api.deps import StatsCache
from app.models.stats import Stats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=Stats)
async def get_stats(stats_service: StatsCache) -> Stats:
    """Return cached stats; they refresh on their own when items.json changes."""
    stats = stats_service.get_stats()
    if stats is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Stats not initialized",
        )
    return stats
