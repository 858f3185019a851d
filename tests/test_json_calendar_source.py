"""
Tests for the JSON calendar source adapter.
"""

import asyncio
import json
import logging
from datetime import date

import pendulum
import pytest

from hangoutslots.adapters.json_calendar_source import JsonCalendarSource
from hangoutslots.domain.exceptions import CalendarSourceError


def _write_events(tmp_path, events):
    path = tmp_path / "events.json"
    path.write_text(json.dumps(events), encoding="utf-8")
    return path


class TestJsonCalendarSource:
    """Tests for JsonCalendarSource."""

    def test_fetch_events_for_day(self, tmp_path):
        """Only events overlapping the requested day are returned."""
        path = _write_events(tmp_path, [
            {"start": "2024-06-01T10:00:00", "end": "2024-06-01T11:00:00", "title": "Gym"},
            {"start": "2024-06-01T23:00:00", "end": "2024-06-02T01:00:00", "title": "Late show"},
            {"start": "2024-06-03T10:00:00", "end": "2024-06-03T11:00:00", "title": "Other day"},
        ])
        source = JsonCalendarSource(path, timezone="UTC")

        june_1 = asyncio.run(source.fetch_events(date(2024, 6, 1)))
        june_2 = asyncio.run(source.fetch_events(date(2024, 6, 2)))

        assert [e.title for e in june_1] == ["Gym", "Late show"]
        assert [e.title for e in june_2] == ["Late show"]
        assert june_1[0].start == pendulum.datetime(2024, 6, 1, 10, 0, tz="UTC")

    def test_naive_times_use_configured_timezone(self, tmp_path):
        path = _write_events(tmp_path, [
            {"start": "2024-06-01T10:00:00", "end": "2024-06-01T11:00:00", "title": "Gym"},
        ])
        source = JsonCalendarSource(path, timezone="Europe/Berlin")

        events = asyncio.run(source.fetch_events(date(2024, 6, 1)))

        assert events[0].start == pendulum.datetime(2024, 6, 1, 10, 0, tz="Europe/Berlin")

    def test_missing_title_defaults(self, tmp_path):
        path = _write_events(tmp_path, [
            {"start": "2024-06-01T10:00:00", "end": "2024-06-01T11:00:00"},
            {"start": "2024-06-01T12:00:00", "end": "2024-06-01T13:00:00", "title": None},
        ])

        events = asyncio.run(JsonCalendarSource(path).fetch_events(date(2024, 6, 1)))

        assert [e.title for e in events] == ["Untitled Event", "Untitled Event"]

    def test_invalid_entries_are_skipped(self, tmp_path, caplog):
        """Broken entries are logged and skipped."""
        path = _write_events(tmp_path, [
            {"start": "2024-06-01T10:00:00"},
            {"start": "not a date", "end": "2024-06-01T11:00:00"},
            {"start": "2024-06-01T12:00:00", "end": "2024-06-01T11:00:00"},
            {"start": "2024-06-01T14:00:00", "end": "2024-06-01T15:00:00", "title": "Valid"},
        ])

        with caplog.at_level(logging.WARNING):
            events = asyncio.run(JsonCalendarSource(path).fetch_events(date(2024, 6, 1)))

        assert [e.title for e in events] == ["Valid"]
        assert caplog.text.count("Skipping event") == 3

    def test_missing_file_is_empty_calendar(self, tmp_path):
        source = JsonCalendarSource(tmp_path / "missing.json")

        assert asyncio.run(source.fetch_events(date(2024, 6, 1))) == []

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CalendarSourceError, match="Could not read events file"):
            asyncio.run(JsonCalendarSource(path).fetch_events(date(2024, 6, 1)))

    def test_non_list_json_raises(self, tmp_path):
        path = _write_events(tmp_path, {"start": "2024-06-01T10:00:00"})

        with pytest.raises(CalendarSourceError, match="must contain a JSON list"):
            asyncio.run(JsonCalendarSource(path).fetch_events(date(2024, 6, 1)))
