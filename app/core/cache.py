"""Single-slot holder for the last computed catalog stats.

Readers never trigger a recompute: ``get`` returns whatever was last stored,
or ``None`` if nothing has been stored yet. ``set`` swaps the whole value in
one assignment, so a reader sees either the previous or the new ``Stats``.
"""

from datetime import datetime

from app.models.base import utcnow
from app.models.stats import Stats


class StatsSlot:
    """Last-writer-wins cache slot for a ``Stats`` value."""

    __slots__ = ("_value", "version", "updated_at")

    def __init__(self) -> None:
        self._value: Stats | None = None
        self.version = 0
        self.updated_at: datetime | None = None

    def get(self) -> Stats | None:
        """Return the cached stats, or None if never populated."""
        return self._value

    def set(self, stats: Stats) -> None:
        """Replace the cached stats."""
        self._value = stats
        self.version += 1
        self.updated_at = utcnow()

    @property
    def ready(self) -> bool:
        return self._value is not None
