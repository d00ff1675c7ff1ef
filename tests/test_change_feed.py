"""Tests for the change feed and the polling file watcher."""

import asyncio
import json
from pathlib import Path

import pytest

from app.models.stats import Stats
from app.services.aggregator import compute_stats
from app.services.change_feed import ChangeFeed, FileWatcher
from app.services.item_store import JsonItemStore
from app.services.stats_service import StatsService


async def _next_event(sub, timeout: float = 1.0):
    return await asyncio.wait_for(sub.__anext__(), timeout=timeout)


@pytest.mark.asyncio
async def test_publish_reaches_every_subscriber():
    feed = ChangeFeed()
    first = feed.subscribe()
    second = feed.subscribe()

    feed.publish("store")

    assert (await _next_event(first)).source == "store"
    assert (await _next_event(second)).source == "store"


@pytest.mark.asyncio
async def test_closed_subscription_stops_iterating():
    feed = ChangeFeed()
    sub = feed.subscribe()
    sub.close()

    feed.publish("store")
    assert feed.subscriber_count == 0
    with pytest.raises(StopAsyncIteration):
        await sub.__anext__()


@pytest.mark.asyncio
async def test_events_before_subscribe_are_not_delivered():
    feed = ChangeFeed()
    feed.publish("early")
    sub = feed.subscribe()
    feed.publish("late")
    assert (await _next_event(sub)).source == "late"


@pytest.mark.asyncio
async def test_unread_events_collapse_into_one():
    feed = ChangeFeed()
    sub = feed.subscribe()
    for source in ("store", "watcher", "store"):
        feed.publish(source)

    assert (await _next_event(sub)).source == "store"
    with pytest.raises(asyncio.TimeoutError):
        await _next_event(sub, timeout=0.05)


@pytest.mark.asyncio
async def test_watcher_check_detects_content_change(data_file: Path):
    feed = ChangeFeed()
    sub = feed.subscribe()
    watcher = FileWatcher(str(data_file), feed, interval=60)
    watcher.start()

    try:
        assert watcher.check() is False
        data_file.write_text(json.dumps([{"price": 1}, {"price": 2}]), encoding="utf-8")
        assert watcher.check() is True
        assert (await _next_event(sub)).source == "watcher"
        assert watcher.check() is False
    finally:
        await watcher.stop()


@pytest.mark.asyncio
async def test_watcher_treats_removal_and_return_as_changes(data_file: Path):
    feed = ChangeFeed()
    watcher = FileWatcher(str(data_file), feed, interval=60)
    watcher.start()

    try:
        content = data_file.read_text(encoding="utf-8")
        data_file.unlink()
        assert watcher.check() is True
        assert watcher.check() is False
        data_file.write_text(content, encoding="utf-8")
        assert watcher.check() is True
    finally:
        await watcher.stop()


@pytest.mark.asyncio
async def test_acknowledged_change_is_not_reported(data_file: Path):
    feed = ChangeFeed()
    sub = feed.subscribe()
    watcher = FileWatcher(str(data_file), feed, interval=60)
    watcher.start()

    try:
        data_file.write_text(json.dumps([{"price": 5}]), encoding="utf-8")
        watcher.acknowledge()
        assert watcher.check() is False
        with pytest.raises(asyncio.TimeoutError):
            await _next_event(sub, timeout=0.05)
    finally:
        await watcher.stop()


@pytest.mark.asyncio
async def test_external_edit_is_picked_up_by_polling(data_file: Path):
    feed = ChangeFeed()
    service = StatsService(
        JsonItemStore(str(data_file), feed),
        feed,
        debounce_seconds=0.05,
        watcher=FileWatcher(str(data_file), feed, interval=0.05),
    )
    await service.start()

    try:
        data_file.write_text(
            json.dumps([{"price": 10}, {"price": 20}, {"price": 30}, {"price": 40}]),
            encoding="utf-8",
        )
        await asyncio.sleep(0.5)
        assert service.get_stats() == Stats(total=4, average_price=25)
    finally:
        await service.stop()


@pytest.mark.asyncio
async def test_own_write_recomputes_once_with_polling_on(data_file: Path):
    calls = []

    def aggregate(records):
        calls.append(len(records))
        return compute_stats(records)

    feed = ChangeFeed()
    # Poll slower than the debounce so a second report would be a separate burst.
    watcher = FileWatcher(str(data_file), feed, interval=0.2)
    service = StatsService(
        JsonItemStore(str(data_file), feed, watcher),
        feed,
        debounce_seconds=0.05,
        watcher=watcher,
        aggregate=aggregate,
    )
    await service.start()
    calls.clear()

    try:
        await service.store.add_item({"name": "Pen", "price": 3})
        await asyncio.sleep(0.8)
        assert calls == [4]
        assert service.get_stats().total == 4
    finally:
        await service.stop()
