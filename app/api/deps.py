"""FastAPI dependencies resolving the services owned by the running app."""

from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings
from app.services.item_store import JsonItemStore
from app.services.stats_service import StatsService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_item_store(request: Request) -> JsonItemStore:
    return request.app.state.item_store


def get_stats_service(request: Request) -> StatsService:
    return request.app.state.stats_service


# Typed shorthand for use in route signatures
AppSettings = Annotated[Settings, Depends(get_app_settings)]
ItemStore = Annotated[JsonItemStore, Depends(get_item_store)]
StatsCache = Annotated[StatsService, Depends(get_stats_service)]
