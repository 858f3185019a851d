"""
Adapters layer - External calendar integrations.
"""

from .json_calendar_source import JsonCalendarSource

__all__ = ["JsonCalendarSource"]
