"""Band events and fan registrations (in-memory)."""

from bandconnect.events.models import Event, EventStatus
from bandconnect.events.registry import EventRegistry

__all__ = [
    "EventRegistry",
    "Event",
    "EventStatus",
]
