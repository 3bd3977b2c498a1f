"""Data models for the users module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from bandconnect.messaging.models import new_id, now_ms


class UserRole(str, Enum):
    FAN = "fan"
    BAND_MEMBER = "band_member"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    """A BandConnect account, fan or band member."""

    username: str
    email: str
    name: str
    id: str = field(default_factory=new_id)
    role: UserRole = UserRole.FAN
    bio: str = ""
    band_name: str | None = None
    last_active: int = field(default_factory=now_ms)  # epoch ms
    quick_response_enabled: bool = True

    @property
    def is_band_member(self) -> bool:
        return self.role == UserRole.BAND_MEMBER
