"""Data models for the events module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from bandconnect.messaging.models import new_id


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Event:
    """A show or meet-up hosted by a band, with a registration cap."""

    title: str
    band_id: str
    date: int  # epoch ms
    max_capacity: int
    id: str = field(default_factory=new_id)
    description: str = ""
    location: str = ""
    image_url: str | None = None
    status: EventStatus = EventStatus.UPCOMING
    registered_users: frozenset[str] = frozenset()

    @property
    def current_registrations(self) -> int:
        return len(self.registered_users)

    @property
    def is_full(self) -> bool:
        return self.current_registrations >= self.max_capacity

    @property
    def spots_left(self) -> int:
        return max(self.max_capacity - self.current_registrations, 0)
