"""
Loading of calendar events for the visible window of days.

The loader sits between a calendar event source (an adapter) and the
EventOverlapIndex used to render busy markers. Fetch failures for a day
are logged and leave that day uncached, which the index treats as free.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, List, Protocol

from ..domain.event_index import EventOverlapIndex
from ..domain.exceptions import CalendarSourceError
from ..domain.models import CalendarEvent

logger = logging.getLogger(__name__)


class CalendarEventSourceProtocol(Protocol):
    """Protocol describing the calendar collaborator needed by the loader."""

    async def fetch_events(self, day: date) -> List[CalendarEvent]:
        """Return the events overlapping ``day``."""


class EventWindowLoader:
    """Keeps the event index populated for a sliding window of visible days."""

    def __init__(
        self,
        source: CalendarEventSourceProtocol,
        index: EventOverlapIndex,
        *,
        visible_days: int = 3,
    ) -> None:
        if visible_days < 1:
            raise ValueError(f"visible_days must be at least 1, got {visible_days}")
        self._source = source
        self._index = index
        self._visible_days = visible_days
        self._window_start: date | None = None

    @property
    def window_start(self) -> date | None:
        return self._window_start

    def visible_days_from(self, start_day: date) -> List[date]:
        return [start_day + timedelta(days=offset) for offset in range(self._visible_days)]

    async def load(self, start_day: date) -> List[date]:
        """
        Fetch events for the window starting at ``start_day``.

        Days that left the window are invalidated so they are refetched
        when they come back into view.

        Returns:
            The visible days
        """
        days = self.visible_days_from(start_day)
        stale = [day for day in self._index.known_days if day not in days]
        self._index.invalidate(stale)

        await self.load_days(days)

        self._window_start = start_day
        return days

    async def load_days(self, days: Iterable[date]) -> None:
        """
        Fetch events for ``days`` without touching other cached days.

        A day whose fetch fails is logged and left uncached.
        """
        for day in days:
            try:
                events = await self._source.fetch_events(day)
            except CalendarSourceError as exc:
                logger.warning("Could not fetch events for %s: %s", day.isoformat(), exc)
                self._index.invalidate([day])
                continue
            self._index.set_events(day, events)

    async def shift(self, days: int) -> List[date]:
        """Move the window by ``days`` (negative moves back) and reload."""
        if self._window_start is None:
            raise RuntimeError("Call load() before shifting the window.")
        return await self.load(self._window_start + timedelta(days=days))
