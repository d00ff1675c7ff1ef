"""Shared helpers for all models."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def epoch_millis() -> int:
    """Current wall-clock time in milliseconds, used for new item ids."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)
