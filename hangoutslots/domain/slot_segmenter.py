"""
Re-slicing of availability ranges into fixed-length candidate meeting slots.
"""

import logging
from typing import List, Optional, Sequence

from .exceptions import InvalidDurationError
from .models import Mode, Range, SegmentationPolicy

logger = logging.getLogger(__name__)


class SlotSegmenter:
    """
    Turns merged ranges into the projection shown for the current mode.

    In availability mode the ranges pass through untouched. In time-slots
    mode each range is cut into windows of exactly ``duration`` minutes:

    - Tiling (duration == granularity): windows step by the duration and
      never overlap.
    - Sliding (duration > granularity): windows step by one granularity
      unit, so consecutive windows overlap by ``duration - granularity``.
      A 10:00-11:30 range at 60 minutes yields 10:00-11:00 and 10:30-11:30.

    A tail shorter than the duration is dropped in both policies.
    """

    def __init__(self, granularity_minutes: int = 30):
        if granularity_minutes <= 0:
            raise ValueError(f"Granularity must be positive, got {granularity_minutes}")
        self.granularity_minutes = granularity_minutes

    def validate_duration(self, duration_minutes: int) -> None:
        """Raise InvalidDurationError unless duration is a positive multiple of granularity."""
        if (
            isinstance(duration_minutes, bool)
            or not isinstance(duration_minutes, int)
            or duration_minutes <= 0
            or duration_minutes % self.granularity_minutes != 0
        ):
            raise InvalidDurationError(
                f"Duration must be a positive multiple of {self.granularity_minutes} minutes, "
                f"got {duration_minutes!r}"
            )

    def policy_for(self, duration_minutes: int) -> SegmentationPolicy:
        """Default policy: tile at one unit, slide for anything longer."""
        self.validate_duration(duration_minutes)
        if duration_minutes == self.granularity_minutes:
            return SegmentationPolicy.TILING
        return SegmentationPolicy.SLIDING

    def segment(
        self,
        ranges: Sequence[Range],
        mode: Mode,
        duration_minutes: int,
        policy: Optional[SegmentationPolicy] = None,
    ) -> List[Range]:
        """
        Project ranges for the given mode.

        Args:
            ranges: Ranges to project, usually the output of RangeMerger.merge
            mode: Availability (identity) or time-slots (re-slice)
            duration_minutes: Window length; only checked in time-slots mode
            policy: Overrides the default policy for the duration

        Returns:
            New list of ranges; per-range windows are concatenated in input order.

        Raises:
            InvalidDurationError: In time-slots mode, if the duration is invalid
        """
        if mode == Mode.AVAILABILITY:
            return list(ranges)

        self.validate_duration(duration_minutes)
        policy = policy or self.policy_for(duration_minutes)
        step_minutes = (
            duration_minutes if policy == SegmentationPolicy.TILING else self.granularity_minutes
        )

        windows: List[Range] = []
        for time_range in ranges:
            windows.extend(self._windows(time_range, duration_minutes, step_minutes))

        logger.debug(
            "Segmented %d range(s) into %d %d-minute window(s) using %s",
            len(ranges),
            len(windows),
            duration_minutes,
            policy.value,
        )
        return windows

    @staticmethod
    def _windows(time_range: Range, duration_minutes: int, step_minutes: int) -> List[Range]:
        windows: List[Range] = []
        window_start = time_range.start

        while window_start.add(minutes=duration_minutes) <= time_range.end:
            windows.append(
                Range(start=window_start, end=window_start.add(minutes=duration_minutes))
            )
            window_start = window_start.add(minutes=step_minutes)

        return windows
