"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .event_loader import CalendarEventSourceProtocol, EventWindowLoader
from .selection_session import PollCreatorProtocol, SelectionSession

__all__ = [
    "CalendarEventSourceProtocol",
    "EventWindowLoader",
    "PollCreatorProtocol",
    "SelectionSession",
]
