"""
Selection session orchestrating slot toggles, mode changes and recomputation.

The session owns the raw slot selection for one scheduling flow and keeps
``current_ranges`` equal to ``segment(merge(selection), mode, duration)``
after every mutation. Collaborators (event index, poll creator) are
injected so the session can be driven and tested without any UI.
"""

from __future__ import annotations

import logging
from typing import Any, FrozenSet, List, Optional, Protocol, Sequence, Set, Tuple

from ..config import AppConfig
from ..domain.event_index import EventOverlapIndex
from ..domain.exceptions import EmptySelectionError, InvalidDurationError
from ..domain.models import Mode, Range, Slot
from ..domain.range_merger import RangeMerger
from ..domain.slot_segmenter import SlotSegmenter

logger = logging.getLogger(__name__)


class PollCreatorProtocol(Protocol):
    """Protocol describing the poll-creation collaborator fed on submit."""

    async def create_poll(self, ranges: Sequence[Range]) -> Any:
        """Persist and share the ranges, returning e.g. a share URL."""


class SelectionSession:
    """
    State for one "find a time" flow.

    Single-owner object: callers must not mutate it from several threads.
    """

    def __init__(
        self,
        merger: RangeMerger,
        segmenter: SlotSegmenter,
        *,
        selectable_durations: Sequence[int] = (30, 60),
        duration_minutes: int = 30,
        mode: Mode = Mode.AVAILABILITY,
        event_index: Optional[EventOverlapIndex] = None,
    ) -> None:
        self._merger = merger
        self._segmenter = segmenter
        self._selectable_durations = tuple(selectable_durations)
        self._event_index = event_index

        self._validate_duration(duration_minutes)
        self._mode = Mode(mode)
        self._duration_minutes = duration_minutes

        self._selection: Set[Slot] = set()
        self._current_ranges: Tuple[Range, ...] = ()
        self._last_dragged: Optional[Slot] = None

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        event_index: Optional[EventOverlapIndex] = None,
    ) -> "SelectionSession":
        """Build a session with merger and segmenter wired from configuration."""
        return cls(
            merger=RangeMerger(
                granularity_minutes=config.granularity_minutes,
                timezone=config.timezone,
            ),
            segmenter=SlotSegmenter(granularity_minutes=config.granularity_minutes),
            selectable_durations=config.selectable_durations,
            duration_minutes=config.default_duration_minutes,
            event_index=event_index,
        )

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def duration_minutes(self) -> int:
        return self._duration_minutes

    @property
    def raw_selection(self) -> FrozenSet[Slot]:
        return frozenset(self._selection)

    @property
    def current_ranges(self) -> Tuple[Range, ...]:
        return self._current_ranges

    @property
    def can_submit(self) -> bool:
        return bool(self._current_ranges)

    def toggle_slot(self, slot: Slot) -> None:
        """
        Select ``slot`` if it is unselected, otherwise deselect it.

        Raises:
            InvalidSlotError: If the slot is off the grid or skipped by a DST
                change; state is unchanged
        """
        self._merger.validate_slot(slot)

        if slot in self._selection:
            self._selection.remove(slot)
        else:
            self._selection.add(slot)
        self._recompute()

    def drag_over(self, slot: Slot) -> bool:
        """
        Handle the pointer entering ``slot`` during a drag.

        Each slot is toggled once on entry; repeated events for the slot
        already under the pointer and busy slots are ignored.

        Returns:
            True if the selection changed
        """
        if slot == self._last_dragged:
            return False
        self._last_dragged = slot

        if self.is_busy(slot):
            logger.debug("Skipping busy slot %s during drag", slot)
            return False

        self.toggle_slot(slot)
        return True

    def end_drag(self) -> None:
        self._last_dragged = None

    def set_mode(self, mode: Mode) -> None:
        self._mode = Mode(mode)
        self._recompute()

    def set_duration(self, duration_minutes: int) -> None:
        """
        Change the window length used in time-slots mode.

        Raises:
            InvalidDurationError: If the duration is not selectable; state is unchanged
        """
        self._validate_duration(duration_minutes)
        self._duration_minutes = duration_minutes
        self._recompute()

    def clear(self) -> None:
        self._selection.clear()
        self._last_dragged = None
        self._recompute()

    def is_busy(self, slot: Slot) -> bool:
        if self._event_index is None:
            return False
        return self._event_index.is_busy(slot)

    def overlapping_titles(self, slot: Slot) -> List[str]:
        if self._event_index is None:
            return []
        return self._event_index.overlapping_titles(slot)

    async def submit(self, poll_creator: PollCreatorProtocol) -> Any:
        """
        Hand the current ranges to the poll-creation collaborator.

        Raises:
            EmptySelectionError: If there is nothing to submit
        """
        if not self._current_ranges:
            raise EmptySelectionError("Select at least one time before creating a poll.")

        logger.info("Submitting %d range(s) in %s mode", len(self._current_ranges), self._mode.value)
        return await poll_creator.create_poll(list(self._current_ranges))

    def _validate_duration(self, duration_minutes: int) -> None:
        self._segmenter.validate_duration(duration_minutes)
        if duration_minutes not in self._selectable_durations:
            raise InvalidDurationError(
                f"Duration {duration_minutes} is not one of {list(self._selectable_durations)}"
            )

    def _recompute(self) -> None:
        merged = self._merger.merge(self._selection)
        self._current_ranges = tuple(
            self._segmenter.segment(merged, self._mode, self._duration_minutes)
        )
        logger.debug(
            "Recomputed %d range(s) from %d slot(s) (mode=%s, duration=%d)",
            len(self._current_ranges),
            len(self._selection),
            self._mode.value,
            self._duration_minutes,
        )
