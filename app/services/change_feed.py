"""Change notifications for the item store.

``ChangeFeed`` fans out "something changed" events to every open
subscription. ``FileWatcher`` polls the data file's fingerprint and publishes
when it differs from the last one seen, so edits made outside this process
are picked up too.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime

from app.models.base import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    source: str
    at: datetime = field(default_factory=utcnow)


class Subscription:
    """Async iterator over the events published after it was opened."""

    def __init__(self, feed: ChangeFeed) -> None:
        self._feed = feed
        # One queued event already means "changed"; later ones are dropped.
        self._queue: asyncio.Queue[ChangeEvent] = asyncio.Queue(maxsize=1)
        self.closed = False

    def _push(self, event: ChangeEvent) -> None:
        if self._queue.full():
            return
        self._queue.put_nowait(event)

    def close(self) -> None:
        self.closed = True
        self._feed._subscriptions.discard(self)

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> ChangeEvent:
        if self.closed:
            raise StopAsyncIteration
        return await self._queue.get()


class ChangeFeed:
    """In-process broadcast channel for store change events."""

    def __init__(self) -> None:
        self._subscriptions: set[Subscription] = set()

    def subscribe(self) -> Subscription:
        sub = Subscription(self)
        self._subscriptions.add(sub)
        return sub

    def publish(self, source: str) -> None:
        """Deliver a change event to all open subscriptions. Never blocks."""
        event = ChangeEvent(source=source)
        for sub in list(self._subscriptions):
            sub._push(event)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)


Fingerprint = tuple[int, int]


class FileWatcher:
    """Poll a file's (mtime_ns, size) and publish on change.

    A missing file has fingerprint ``None``; its disappearance and
    reappearance both count as changes.
    """

    def __init__(self, path: str, feed: ChangeFeed, interval: float) -> None:
        self.path = path
        self._feed = feed
        self._interval = interval
        self._task: asyncio.Task | None = None
        self._last: Fingerprint | None = None

    def _fingerprint(self) -> Fingerprint | None:
        try:
            st = os.stat(self.path)
        except OSError:
            logger.debug("Watched file %s is not accessible", self.path)
            return None
        return (st.st_mtime_ns, st.st_size)

    def check(self) -> bool:
        """Compare against the last fingerprint; publish if it moved."""
        current = self._fingerprint()
        if current == self._last:
            return False
        self._last = current
        logger.debug("Detected change in %s", self.path)
        self._feed.publish("watcher")
        return True

    def acknowledge(self) -> None:
        """Take the current fingerprint as seen, so an own write is not re-announced."""
        self._last = self._fingerprint()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.check()

    def start(self) -> None:
        if self._task is not None:
            return
        self._last = self._fingerprint()
        self._task = asyncio.create_task(self._run())
        logger.info("File watcher initialized for: %s", self.path)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
