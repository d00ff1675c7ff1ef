"""FastAPI application entrypoint."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import api_router
from app.core.config import Settings, get_settings
from app.services.change_feed import ChangeFeed, FileWatcher
from app.services.item_store import JsonItemStore
from app.services.stats_service import StatsService


def build_stats_service(settings: Settings) -> StatsService:
    """Wire the item store, change feed and watcher into a stats service."""
    feed = ChangeFeed()
    watcher = None
    if settings.stats_poll_interval_seconds > 0:
        watcher = FileWatcher(settings.data_path, feed, settings.stats_poll_interval_seconds)
    store = JsonItemStore(settings.data_path, feed, watcher)
    return StatsService(
        store,
        feed,
        debounce_seconds=settings.stats_debounce_seconds,
        watcher=watcher,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: stats must be computed before any request is served.
    stats_service = build_stats_service(app.state.settings)
    await stats_service.start()
    app.state.item_store = stats_service.store
    app.state.stats_service = stats_service
    yield
    await stats_service.stop()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Catalog Stats",
        version="0.1.0",
        description="JSON-file backed item catalog with cached stats",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ── CORS ─────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── API routes ───────────────────────────────────────────
    app.include_router(api_router)
    register_error_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
