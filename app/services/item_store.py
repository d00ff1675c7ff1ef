"""JSON file item store.

The whole catalog lives in one JSON array on disk. Reads and writes go
through a worker thread so the event loop keeps serving requests; writes
replace the file atomically and announce themselves on the change feed.
"""

import asyncio
import contextlib
import json
import logging
import os
import tempfile
from typing import Any

from app.core.errors import StoreError
from app.models.base import epoch_millis
from app.services.change_feed import ChangeFeed, FileWatcher

logger = logging.getLogger(__name__)


class JsonItemStore:
    def __init__(
        self,
        path: str,
        feed: ChangeFeed | None = None,
        watcher: FileWatcher | None = None,
    ) -> None:
        self.path = path
        self._feed = feed
        self._watcher = watcher
        self._write_lock = asyncio.Lock()

    # ── Reads ────────────────────────────────────────────────

    def _read(self) -> list[dict[str, Any]]:
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except OSError as exc:
            raise StoreError(f"Cannot read item store {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise StoreError(f"Malformed JSON in {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise StoreError(f"Item store {self.path} must hold a JSON array")
        return data

    async def read_all(self) -> list[dict[str, Any]]:
        """Return every record currently in the store."""
        return await asyncio.to_thread(self._read)

    async def get(self, item_id: int) -> dict[str, Any] | None:
        for item in await self.read_all():
            if isinstance(item, dict) and item.get("id") == item_id:
                return item
        return None

    # ── Writes ───────────────────────────────────────────────

    def _write(self, items: list[dict[str, Any]]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        except OSError as exc:
            raise StoreError(f"Cannot write item store {self.path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise StoreError(f"Cannot write item store {self.path}: {exc}") from exc

    async def write_all(self, items: list[dict[str, Any]]) -> None:
        await asyncio.to_thread(self._write, items)
        # The write is announced below; the poller must not report it again.
        if self._watcher is not None:
            self._watcher.acknowledge()
        if self._feed is not None:
            self._feed.publish("store")

    async def add_item(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Append a new item with a timestamp id and persist the catalog."""
        async with self._write_lock:
            items = await self.read_all()
            item = {**payload, "id": epoch_millis()}
            items.append(item)
            await self.write_all(items)
        logger.info("Added item %s to %s", item["id"], self.path)
        return item
