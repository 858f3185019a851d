"""
Per-day cache of busy calendar intervals, queried per grid slot.
"""

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from .models import CalendarEvent, Slot


class EventOverlapIndex:
    """
    Answers "is this slot busy" and "which events cover it".

    Events are stored per day exactly as supplied; lookups scan the day's
    list linearly and test ``start <= slot instant < end``. A day with no
    entry is treated as free.
    """

    def __init__(self, timezone: str = "UTC"):
        self.timezone = timezone
        self._events: Dict[date, List[CalendarEvent]] = {}

    @staticmethod
    def _day_key(day: date) -> date:
        if isinstance(day, datetime):
            day = day.date()
        return date(day.year, day.month, day.day)

    @property
    def known_days(self) -> List[date]:
        return sorted(self._events)

    def set_events(self, day: date, events: Iterable[CalendarEvent]) -> None:
        """Replace the cached events for ``day``."""
        self._events[self._day_key(day)] = list(events)

    def invalidate(self, days: Optional[Iterable[date]] = None) -> None:
        """Drop cached events for ``days``, or for every day when omitted."""
        if days is None:
            self._events.clear()
            return
        for day in days:
            self._events.pop(self._day_key(day), None)

    def has_day(self, day: date) -> bool:
        return self._day_key(day) in self._events

    def events_for(self, day: date) -> List[CalendarEvent]:
        return list(self._events.get(self._day_key(day), []))

    def is_busy(self, slot: Slot) -> bool:
        instant = slot.instant(self.timezone)
        return any(event.contains(instant) for event in self._events.get(self._day_key(slot.day), []))

    def overlapping_titles(self, slot: Slot) -> List[str]:
        """Titles of every event covering ``slot``, in cache order."""
        instant = slot.instant(self.timezone)
        return [
            event.title
            for event in self._events.get(self._day_key(slot.day), [])
            if event.contains(instant)
        ]
