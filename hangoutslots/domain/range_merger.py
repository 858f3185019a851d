"""
Consolidation of selected grid slots into contiguous availability ranges.

Pure domain logic: no I/O, no UI state.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Set

from .exceptions import InvalidSlotError
from .models import Range, Slot

logger = logging.getLogger(__name__)


class RangeMerger:
    """
    Merges an unordered set of slots into maximal ranges per calendar day.

    Algorithm:
    1. Group slots by calendar day
    2. Sort each day's slots by time of day
    3. Walk the sorted slots, extending the open range while each slot
       starts exactly where the range currently ends
    4. Close the open range at the last slot + one granularity unit
    5. Sort all ranges by start instant

    Ranges never cross midnight: slots on different days are never merged,
    even when 23:30 and 00:00 of the next day are both selected.
    """

    def __init__(self, granularity_minutes: int = 30, timezone: str = "UTC"):
        if granularity_minutes <= 0:
            raise ValueError(f"Granularity must be positive, got {granularity_minutes}")
        self.granularity_minutes = granularity_minutes
        self.timezone = timezone

    def merge(self, slots: Iterable[Slot]) -> List[Range]:
        """
        Merge selected slots into ranges.

        Args:
            slots: Selected slots, in any order. Duplicates collapse.

        Returns:
            Non-overlapping ranges sorted by start instant. Every input slot
            is covered by exactly one range.

        Raises:
            InvalidSlotError: If a slot is not aligned to the granularity
        """
        slots_by_day = self._group_by_day(slots)

        ranges: List[Range] = []
        for day_slots in slots_by_day.values():
            ranges.extend(self._merge_day(day_slots))

        ranges.sort(key=lambda r: r.start)

        logger.debug("Merged %d day(s) of slots into %d range(s)", len(slots_by_day), len(ranges))
        return ranges

    def expand(self, ranges: Iterable[Range]) -> Set[Slot]:
        """
        Return the grid slots covered by ``ranges``.

        Only whole granularity units are counted; a trailing partial unit
        contributes no slot.
        """
        slots: Set[Slot] = set()

        for time_range in ranges:
            current = time_range.start
            while current.add(minutes=self.granularity_minutes) <= time_range.end:
                slots.add(Slot.from_datetime(current))
                current = current.add(minutes=self.granularity_minutes)

        return slots

    def validate_slot(self, slot: Slot) -> None:
        """
        Raise InvalidSlotError unless ``slot`` is a grid cell that exists in the timezone.

        Wall-clock times skipped by a DST transition (02:00-02:59 in Berlin
        when clocks go forward) are rejected.
        """
        if slot.minute % self.granularity_minutes != 0:
            raise InvalidSlotError(
                f"Slot {slot} is not aligned to {self.granularity_minutes}-minute granularity"
            )
        if Slot.from_datetime(slot.instant(self.timezone)) != slot:
            raise InvalidSlotError(f"Slot {slot} does not exist in timezone {self.timezone}")

    def _group_by_day(self, slots: Iterable[Slot]) -> Dict[date, Set[Slot]]:
        grouped: Dict[date, Set[Slot]] = defaultdict(set)

        for slot in slots:
            self.validate_slot(slot)
            grouped[slot.day].add(slot)

        return grouped

    def _merge_day(self, day_slots: Set[Slot]) -> List[Range]:
        """
        Merge the slots of a single day.

        Example:
        Slots: [10:00, 10:30, 14:00]
        Result: [10:00-11:00, 14:00-14:30]
        """
        sorted_slots = sorted(day_slots, key=lambda s: s.minute_of_day)
        ranges: List[Range] = []

        range_start = sorted_slots[0].instant(self.timezone)
        range_end = range_start.add(minutes=self.granularity_minutes)

        for slot in sorted_slots[1:]:
            slot_start = slot.instant(self.timezone)

            if slot_start == range_end:
                range_end = slot_start.add(minutes=self.granularity_minutes)
                continue

            ranges.append(Range(start=range_start, end=range_end))
            range_start = slot_start
            range_end = slot_start.add(minutes=self.granularity_minutes)

        ranges.append(Range(start=range_start, end=range_end))
        return ranges
