"""In-memory user directory with the signed-in user as a live stream."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Iterable

from bandconnect.exceptions import UserNotFoundError
from bandconnect.messaging.models import now_ms
from bandconnect.streams import DerivedStream, StateStream
from bandconnect.users.models import User, UserRole

logger = logging.getLogger(__name__)

# A user counts as online if active within this many seconds
ONLINE_WINDOW_SECONDS = int(os.environ.get("BANDCONNECT_ONLINE_WINDOW_SECONDS", "300"))


def sample_band_members() -> list[User]:
    """Demo accounts matching the ids used by ``sample_quick_responses``."""
    return [
        User("johnlennon", "john@beatles.com", "John Lennon", id="user1",
             role=UserRole.BAND_MEMBER, band_name="The Beatles"),
        User("paulmccartney", "paul@beatles.com", "Paul McCartney", id="user2",
             role=UserRole.BAND_MEMBER, band_name="The Beatles"),
        User("davegrohl", "dave@foofighters.com", "Dave Grohl", id="user3",
             role=UserRole.BAND_MEMBER, band_name="Foo Fighters"),
        User("taylorswift", "taylor@swift.com", "Taylor Swift", id="user4",
             role=UserRole.BAND_MEMBER, band_name="Taylor Swift"),
    ]


class UserDirectory:
    """Known users plus the current (signed-in) user.

    Authentication itself is external; ``set_current_user`` is what a login
    flow calls once it knows who the user is.
    """

    def __init__(self, users: Iterable[User] = (), online_window_seconds: int | None = None):
        self._users: StateStream[tuple[User, ...]] = StateStream(tuple(users))
        self._current_user: StateStream[User | None] = StateStream(None)
        self.online_window_seconds = (
            ONLINE_WINDOW_SECONDS if online_window_seconds is None else online_window_seconds
        )

    @property
    def users(self) -> StateStream[tuple[User, ...]]:
        return self._users

    @property
    def current_user(self) -> StateStream[User | None]:
        return self._current_user

    def add_user(self, user: User) -> User:
        """Add or replace (by id) a user."""
        self._users.update(
            lambda users: tuple(u for u in users if u.id != user.id) + (user,)
        )
        if self._current_user.value and self._current_user.value.id == user.id:
            self._current_user.set(user)
        return user

    def get_user(self, user_id: str) -> User | None:
        return next((u for u in self._users.value if u.id == user_id), None)

    def get_band_members(self) -> DerivedStream[list[User]]:
        return self._users.map(lambda users: [u for u in users if u.is_band_member])

    def get_band_member_by_id(self, user_id: str) -> DerivedStream[User | None]:
        return self._users.map(
            lambda users: next((u for u in users if u.id == user_id), None)
        )

    def set_current_user(self, user_id: str | None) -> User | None:
        """Sign a user in by id, or sign out with ``None``."""
        if user_id is None:
            self._current_user.set(None)
            return None
        user = self.get_user(user_id)
        if user is None:
            raise UserNotFoundError(f"No user with id {user_id}")
        self._current_user.set(user)
        logger.info(f"Signed in as {user.username} ({user.id})")
        return user

    def touch(self, user_id: str, now: int | None = None) -> None:
        """Record activity for presence."""
        user = self.get_user(user_id)
        if user is None:
            raise UserNotFoundError(f"No user with id {user_id}")
        self.add_user(replace(user, last_active=now if now is not None else now_ms()))

    def is_online(self, user: User, now: int | None = None) -> bool:
        now = now if now is not None else now_ms()
        return (now - user.last_active) < self.online_window_seconds * 1000
