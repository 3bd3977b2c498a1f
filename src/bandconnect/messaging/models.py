"""Data models for the messaging module."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum

from bandconnect.exceptions import InvalidInputError


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def new_id() -> str:
    return str(uuid.uuid4())


class MessageStatus(str, Enum):
    """Message delivery status. Transitions only move forward."""
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = [MessageStatus.SENT, MessageStatus.DELIVERED, MessageStatus.READ]


class MessagePriority(str, Enum):
    """How urgently the recipient should see a message."""
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


@dataclass(frozen=True)
class Location:
    """A shared place attached to a message."""

    latitude: float
    longitude: float
    location_name: str
    timestamp: int = field(default_factory=now_ms)

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidInputError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidInputError(f"Longitude out of range: {self.longitude}")


@dataclass(frozen=True)
class Message:
    """A direct message between two users."""

    sender_id: str
    receiver_id: str
    content: str
    id: str = field(default_factory=new_id)
    timestamp: int = field(default_factory=now_ms)  # epoch ms
    status: MessageStatus = MessageStatus.SENT
    location: Location | None = None
    image_url: str | None = None
    priority: MessagePriority = MessagePriority.NORMAL
    is_quick_response: bool = False

    @property
    def pair(self) -> tuple[str, str]:
        """Canonical (sorted) participant pair."""
        return canonical_pair(self.sender_id, self.receiver_id)

    def with_status(self, status: MessageStatus) -> Message:
        """Copy with ``status`` applied; regressions return ``self`` unchanged."""
        if status.rank <= self.status.rank:
            return self
        return replace(self, status=status)


@dataclass(frozen=True)
class Conversation:
    """One per unordered participant pair, created on the first message."""

    participants: tuple[str, str]
    id: str = field(default_factory=new_id)
    last_message: Message | None = None
    last_updated: int = field(default_factory=now_ms)
    unread_count: int = 0
    is_pinned: bool = False

    def includes(self, user_id: str) -> bool:
        return user_id in self.participants

    def other_participant(self, user_id: str) -> str:
        first, second = self.participants
        return second if first == user_id else first


@dataclass(frozen=True)
class QuickResponse:
    """Canned reply text owned by a band member."""

    band_member_id: str
    content: str
    category: str
    id: str = field(default_factory=new_id)


def canonical_pair(user_a: str, user_b: str) -> tuple[str, str]:
    first, second = sorted([user_a, user_b])
    return first, second


def conversation_sort_key(conversation: Conversation) -> tuple[bool, int]:
    """Pinned first, then most recent activity first (use with reverse=True)."""
    return conversation.is_pinned, conversation.last_updated
