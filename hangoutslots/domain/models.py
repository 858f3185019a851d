"""
Domain models for grid slots, availability ranges and calendar events.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict

import pendulum
from pendulum import DateTime

from .exceptions import InvalidSlotError


UNTITLED_EVENT = "Untitled Event"


class Mode(str, Enum):
    """Projection applied to the merged selection."""
    AVAILABILITY = "availability"
    TIME_SLOTS = "time-slots"


class SegmentationPolicy(str, Enum):
    """How a range is cut into candidate meeting windows."""
    TILING = "tiling"    # step by the window length, no overlap
    SLIDING = "sliding"  # step by one granularity unit, windows overlap


@dataclass(frozen=True)
class Slot:
    """
    One selectable cell of the grid: a calendar day plus an (hour, minute).

    Equality and hashing use only the wall-clock components, so two slots
    created from different datetimes on the same day compare equal.
    """
    day: date
    hour: int
    minute: int

    def __post_init__(self):
        day = self.day
        if isinstance(day, datetime):
            day = day.date()
        object.__setattr__(self, "day", date(day.year, day.month, day.day))

        if not 0 <= self.hour <= 23:
            raise InvalidSlotError(f"Hour must be between 0 and 23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise InvalidSlotError(f"Minute must be between 0 and 59, got {self.minute}")

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Slot":
        """Build the slot whose wall-clock time is ``dt``."""
        return cls(day=dt.date(), hour=dt.hour, minute=dt.minute)

    def instant(self, tz: str = "UTC") -> DateTime:
        """Return the wall-clock instant of this slot in ``tz``."""
        return pendulum.datetime(
            self.day.year,
            self.day.month,
            self.day.day,
            self.hour,
            self.minute,
            tz=tz,
        )

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute

    @property
    def time_string(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def __str__(self) -> str:
        return f"{self.day.isoformat()} {self.time_string}"


@dataclass(frozen=True)
class Range:
    """
    Half-open interval ``[start, end)`` of availability.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    @property
    def start_slot(self) -> Slot:
        return Slot.from_datetime(self.start)

    @property
    def end_slot(self) -> Slot:
        """Exclusive end; a range closing at midnight ends at 00:00 of the next day."""
        return Slot.from_datetime(self.end)

    @property
    def day(self) -> date:
        return self.start_slot.day

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "Range") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def overlap_minutes(self, other: "Range") -> int:
        """Minutes shared with ``other`` (0 when disjoint)."""
        if not self.overlaps(other):
            return 0
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        return int((end - start).total_seconds() / 60)

    def format_date(self) -> str:
        return self.start.format("dddd, MMMM D")

    def format_time_range(self) -> str:
        return f"{self.start.format('HH:mm')} - {self.end.format('HH:mm')}"

    def format_display(self) -> str:
        """
        Format the range for display.
        Format: Weekday, Month D | HH:mm - HH:mm (N min)
        """
        return f"{self.format_date()} | {self.format_time_range()} ({self.duration_minutes()} min)"

    def to_payload(self) -> Dict[str, str]:
        """Serialize for the poll-creation collaborator."""
        return {
            "start_time": self.start.to_iso8601_string(),
            "end_time": self.end.to_iso8601_string(),
            "label": self.format_display(),
        }

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class CalendarEvent:
    """A busy interval supplied by the calendar provider."""
    start: DateTime
    end: DateTime
    title: str = UNTITLED_EVENT

    def contains(self, instant: DateTime) -> bool:
        """True when ``instant`` falls in ``[start, end)``."""
        return self.start <= instant < self.end
