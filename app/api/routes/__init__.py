"""API router aggregation."""

from fastapi import APIRouter

from app.api.routes.items import router as items_router
from app.api.routes.stats import router as stats_router
from app.api.routes.system import router as system_router

api_router = APIRouter(prefix="/api")
api_router.include_router(items_router)
api_router.include_router(stats_router)
api_router.include_router(system_router)
