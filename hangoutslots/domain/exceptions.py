"""
Domain-specific exception hierarchy for hangout slot planning.
"""


class HangoutSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidSlotError(HangoutSlotsError, ValueError):
    """Raised when a slot does not describe a valid grid position."""


class InvalidDurationError(HangoutSlotsError, ValueError):
    """Raised when a segmentation duration is not a positive multiple of the granularity."""


class EmptySelectionError(HangoutSlotsError):
    """Raised when submitting a selection that produced no ranges."""


class CalendarSourceError(HangoutSlotsError):
    """Raised when calendar event data cannot be read or parsed."""
