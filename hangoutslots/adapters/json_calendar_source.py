"""
File-backed calendar event source.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import pendulum

from ..domain.exceptions import CalendarSourceError
from ..domain.models import UNTITLED_EVENT, CalendarEvent

logger = logging.getLogger(__name__)


class JsonCalendarSource:
    """
    Calendar source that reads events from a JSON file.

    The file holds a list of objects such as::

        [{"start": "2024-06-01T10:00:00", "end": "2024-06-01T11:00:00", "title": "Gym"}]

    Naive timestamps are interpreted in the configured timezone. The file
    is read once, on first use.
    """

    def __init__(self, path: Path, timezone: str = "UTC"):
        self.path = path
        self.timezone = timezone
        self._events: List[CalendarEvent] | None = None

    def _load_events(self) -> List[CalendarEvent]:
        """Load and validate events from the JSON file."""
        if not self.path.exists():
            logger.warning("Events file %s not found, assuming an empty calendar", self.path)
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw_events = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise CalendarSourceError(f"Could not read events file {self.path}: {exc}") from exc

        if not isinstance(raw_events, list):
            raise CalendarSourceError(f"Events file {self.path} must contain a JSON list")

        events: List[CalendarEvent] = []
        for position, raw_event in enumerate(raw_events):
            try:
                events.append(self._parse_event(raw_event))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping event #%d in %s: %s", position, self.path, exc)

        return events

    def _parse_event(self, raw_event: Dict[str, Any]) -> CalendarEvent:
        start = pendulum.parse(raw_event["start"], tz=self.timezone)
        end = pendulum.parse(raw_event["end"], tz=self.timezone)

        if not isinstance(start, pendulum.DateTime) or not isinstance(end, pendulum.DateTime):
            raise ValueError("start and end must be date-times")
        if end <= start:
            raise ValueError(f"end {end} is not after start {start}")

        title = raw_event.get("title") or UNTITLED_EVENT
        return CalendarEvent(start=start, end=end, title=str(title))

    @property
    def events(self) -> List[CalendarEvent]:
        if self._events is None:
            self._events = self._load_events()
        return self._events

    async def fetch_events(self, day: date) -> List[CalendarEvent]:
        """
        Return the events overlapping ``day`` in the configured timezone.

        Raises:
            CalendarSourceError: If the file cannot be read
        """
        day_start = pendulum.datetime(day.year, day.month, day.day, tz=self.timezone)
        day_end = day_start.add(days=1)

        return [
            event for event in self.events
            if event.start < day_end and event.end > day_start
        ]
