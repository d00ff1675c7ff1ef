"""Shared test fixtures — temporary items.json + app with lifespan + test client."""

import json
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.main import create_app

SAMPLE_ITEMS = [
    {"id": 1, "name": "Laptop Pro", "category": "Electronics", "price": 2499},
    {"id": 2, "name": "Noise Cancelling Headphones", "category": "Electronics", "price": 399},
    {"id": 3, "name": "Ergonomic Chair", "category": "Furniture", "price": 799},
]


def write_items(path: Path, items) -> None:
    path.write_text(json.dumps(items, indent=2), encoding="utf-8")


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "items.json"
    write_items(path, SAMPLE_ITEMS)
    return path


@pytest.fixture
def settings(data_file: Path) -> Settings:
    return Settings(
        _env_file=None,
        data_path=str(data_file),
        stats_debounce_seconds=0.05,
        stats_poll_interval_seconds=0,
    )


@pytest.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """App with its lifespan running, so the stats cache is initialized."""
    application = create_app(settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
