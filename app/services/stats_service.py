"""Stats service — cached catalog stats with debounced invalidation.

Lifecycle: construct, ``await start()`` (one immediate computation that must
succeed), serve reads through ``get_stats()``, ``await stop()`` on shutdown.

Every change event from the item store (re)arms a single timer. When the
timer expires without a newer event, one recompute runs in the background
and swaps its result into the cache slot. A failed recompute is logged and
leaves the previous value in place.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from app.core.cache import StatsSlot
from app.core.errors import StatsInitializationError
from app.models.stats import Stats
from app.services.aggregator import compute_stats
from app.services.change_feed import ChangeFeed, FileWatcher, Subscription
from app.services.item_store import JsonItemStore

logger = logging.getLogger(__name__)

Aggregate = Callable[[Iterable[Mapping[str, Any]]], Stats]


class StatsService:
    def __init__(
        self,
        store: JsonItemStore,
        feed: ChangeFeed,
        *,
        debounce_seconds: float = 0.3,
        watcher: FileWatcher | None = None,
        aggregate: Aggregate = compute_stats,
    ) -> None:
        self.store = store
        self.feed = feed
        self.debounce_seconds = debounce_seconds
        self.watcher = watcher
        self._aggregate = aggregate

        self.slot = StatsSlot()
        self.recompute_count = 0
        self.last_error: str | None = None

        self._timer: asyncio.TimerHandle | None = None
        self._recompute_task: asyncio.Task | None = None
        self._listen_task: asyncio.Task | None = None
        self._subscription: Subscription | None = None

    # ── Reads ────────────────────────────────────────────────

    def get_stats(self) -> Stats | None:
        """Return the last computed stats, or None before initialization."""
        return self.slot.get()

    @property
    def pending(self) -> bool:
        """True while a debounced recompute is scheduled but not started."""
        return self._timer is not None

    # ── Lifecycle ────────────────────────────────────────────

    async def start(self) -> None:
        """Populate the cache, then begin listening for store changes.

        Raises StatsInitializationError if the first computation fails.
        """
        try:
            stats = await self._compute()
        except Exception as exc:
            logger.exception("Error initializing stats cache")
            raise StatsInitializationError(
                f"Initial stats computation failed: {exc}"
            ) from exc

        self.slot.set(stats)
        logger.info("Stats cache initialized: %s", stats.model_dump(by_alias=True))

        self._subscription = self.feed.subscribe()
        self._listen_task = asyncio.create_task(self._listen(self._subscription))
        if self.watcher is not None:
            self.watcher.start()

    async def stop(self) -> None:
        """Cancel any pending recompute and stop listening.

        A recompute that has already started is allowed to finish.
        """
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

        if self._listen_task is not None:
            self._listen_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._listen_task
            self._listen_task = None

        if self.watcher is not None:
            await self.watcher.stop()

        # Nothing can call notify() any more.
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if self._recompute_task is not None and not self._recompute_task.done():
            await self._recompute_task
        self._recompute_task = None

    # ── Invalidation ─────────────────────────────────────────

    async def _listen(self, subscription: Subscription) -> None:
        async for event in subscription:
            logger.debug("Store change from %s at %s", event.source, event.at)
            self.notify()

    def notify(self) -> None:
        """Schedule a recompute after the quiet period, restarting any pending one."""
        if self._timer is not None:
            self._timer.cancel()
            logger.debug("Stats recompute rescheduled")
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_seconds, self._fire)

    def _fire(self) -> None:
        self._timer = None
        previous = self._recompute_task
        self._recompute_task = asyncio.create_task(self._recompute(previous))

    async def _recompute(self, previous: asyncio.Task | None) -> None:
        # Runs commit in start order.
        if previous is not None and not previous.done():
            await asyncio.wait([previous])

        try:
            stats = await self._compute()
        except Exception as exc:
            self.last_error = f"{type(exc).__name__}: {exc}"
            logger.exception("Error updating stats cache, keeping previous value")
            return

        self.slot.set(stats)
        self.recompute_count += 1
        self.last_error = None
        logger.info("Stats cache updated: %s", stats.model_dump(by_alias=True))

    async def _compute(self) -> Stats:
        records = await self.store.read_all()
        return self._aggregate(records)
