"""
Tests for the event overlap index.
"""

from datetime import date

import pendulum

from hangoutslots.domain.event_index import EventOverlapIndex
from hangoutslots.domain.models import CalendarEvent, Slot

DAY = date(2024, 6, 1)


def _event(start: str, end: str, title: str = "Untitled Event", tz: str = "UTC") -> CalendarEvent:
    return CalendarEvent(start=pendulum.parse(start, tz=tz), end=pendulum.parse(end, tz=tz), title=title)


class TestEventOverlapIndex:
    """Tests for EventOverlapIndex."""

    def test_unknown_day_is_free(self):
        """A day without cached events is never busy."""
        index = EventOverlapIndex()

        slot = Slot(day=DAY, hour=10, minute=0)

        assert not index.is_busy(slot)
        assert index.overlapping_titles(slot) == []
        assert not index.has_day(DAY)

    def test_containment_is_half_open(self):
        """A slot starting when an event ends is free."""
        index = EventOverlapIndex()
        index.set_events(DAY, [_event("2024-06-01 10:00", "2024-06-01 11:00", "Gym")])

        assert index.is_busy(Slot(day=DAY, hour=10, minute=0))
        assert index.is_busy(Slot(day=DAY, hour=10, minute=30))
        assert not index.is_busy(Slot(day=DAY, hour=11, minute=0))
        assert not index.is_busy(Slot(day=DAY, hour=9, minute=30))

    def test_all_overlapping_titles_are_returned(self):
        """Unsorted, overlapping events are all reported in cache order."""
        index = EventOverlapIndex()
        index.set_events(DAY, [
            _event("2024-06-01 14:00", "2024-06-01 15:00", "Dentist"),
            _event("2024-06-01 09:00", "2024-06-01 12:00", "Work block"),
            _event("2024-06-01 10:00", "2024-06-01 10:45", "Coffee"),
        ])

        titles = index.overlapping_titles(Slot(day=DAY, hour=10, minute=30))

        assert titles == ["Work block", "Coffee"]

    def test_lookup_uses_index_timezone(self):
        """Slots are compared at their wall-clock instant in the index timezone."""
        index = EventOverlapIndex(timezone="Europe/Berlin")
        # 08:00-09:00 UTC is 10:00-11:00 in Berlin during summer time
        index.set_events(DAY, [_event("2024-06-01 08:00", "2024-06-01 09:00", "Call")])

        assert index.is_busy(Slot(day=DAY, hour=10, minute=0))
        assert not index.is_busy(Slot(day=DAY, hour=8, minute=0))

    def test_set_events_accepts_datetime_keys(self):
        index = EventOverlapIndex()
        index.set_events(
            pendulum.datetime(2024, 6, 1, 15, 0, tz="UTC"),
            [_event("2024-06-01 10:00", "2024-06-01 11:00")],
        )

        assert index.has_day(DAY)
        assert index.known_days == [DAY]
        assert len(index.events_for(DAY)) == 1
        assert index.is_busy(Slot(day=DAY, hour=10, minute=0))
        assert index.overlapping_titles(Slot(day=DAY, hour=10, minute=30)) == ["Untitled Event"]

    def test_invalidate(self):
        """Invalidated days fall back to free."""
        index = EventOverlapIndex()
        other_day = date(2024, 6, 2)
        index.set_events(DAY, [_event("2024-06-01 10:00", "2024-06-01 11:00")])
        index.set_events(other_day, [_event("2024-06-02 10:00", "2024-06-02 11:00")])

        index.invalidate([DAY])

        assert not index.is_busy(Slot(day=DAY, hour=10, minute=0))
        assert index.is_busy(Slot(day=other_day, hour=10, minute=0))

        index.invalidate()

        assert index.known_days == []
