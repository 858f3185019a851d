"""
Domain layer - Pure business logic without external dependencies.
"""

from .event_index import EventOverlapIndex
from .exceptions import (
    CalendarSourceError,
    EmptySelectionError,
    HangoutSlotsError,
    InvalidDurationError,
    InvalidSlotError,
)
from .models import CalendarEvent, Mode, Range, SegmentationPolicy, Slot
from .range_merger import RangeMerger
from .slot_segmenter import SlotSegmenter

__all__ = [
    "CalendarEvent",
    "CalendarSourceError",
    "EmptySelectionError",
    "EventOverlapIndex",
    "HangoutSlotsError",
    "InvalidDurationError",
    "InvalidSlotError",
    "Mode",
    "Range",
    "RangeMerger",
    "SegmentationPolicy",
    "SlotSegmenter",
    "Slot",
]
