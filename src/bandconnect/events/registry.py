"""In-memory event list with capacity-bounded registration."""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import replace
from typing import Iterable

from bandconnect.events.models import Event, EventStatus
from bandconnect.exceptions import EventFullError, InvalidInputError
from bandconnect.streams import DerivedStream, StateStream

logger = logging.getLogger(__name__)


class EventRegistry:
    """Create events, register fans and move events through their lifecycle.

    Registration checks capacity and adds the user in one copy-on-write
    update under the registry lock, so concurrent registrations can never
    push an event past ``max_capacity``.
    """

    def __init__(self, events: Iterable[Event] = ()):
        self._write_lock = threading.RLock()
        self._events: StateStream[tuple[Event, ...]] = StateStream(tuple(events))

    @property
    def events(self) -> StateStream[tuple[Event, ...]]:
        return self._events

    def get_event(self, event_id: str) -> Event | None:
        return next((e for e in self._events.value if e.id == event_id), None)

    def get_events_for_band(self, band_id: str) -> DerivedStream[list[Event]]:
        """A band's events, soonest first."""
        return self._events.map(
            lambda events: sorted(
                (e for e in events if e.band_id == band_id),
                key=lambda e: e.date,
            )
        )

    def get_events_for_user(self, user_id: str) -> DerivedStream[list[Event]]:
        """Events the user is registered for, soonest first."""
        return self._events.map(
            lambda events: sorted(
                (e for e in events if user_id in e.registered_users),
                key=lambda e: e.date,
            )
        )

    # ---- Mutations ----

    def create_event(
        self,
        title: str,
        band_id: str,
        date: int,
        max_capacity: int,
        description: str = "",
        location: str = "",
        image_url: str | None = None,
    ) -> Event:
        if not title or not title.strip():
            raise InvalidInputError("Event title must not be blank")
        if not band_id:
            raise InvalidInputError("band_id is required")
        if max_capacity < 0:
            raise InvalidInputError(f"max_capacity must be >= 0, got {max_capacity}")

        event = Event(
            title=title,
            band_id=band_id,
            date=date,
            max_capacity=max_capacity,
            description=description,
            location=location,
            image_url=image_url,
        )
        with self._write_lock:
            self._events.update(lambda events: events + (event,))
        logger.info(f"Created event {event.id} ({title}) for band {band_id}")
        return event

    def register_for_event(self, event_id: str, user_id: str) -> Event | None:
        """Register ``user_id``. Returns the updated event, or None if unknown.

        Registering twice is a no-op. A full event raises EventFullError and
        nothing is changed.
        """
        if not user_id:
            raise InvalidInputError("user_id is required")
        with self._write_lock:
            event = self.get_event(event_id)
            if event is None:
                logger.debug(f"register_for_event: no event {event_id}")
                return None
            if user_id in event.registered_users:
                return event
            if event.is_full:
                raise EventFullError(
                    f"Event {event_id} is full ({event.current_registrations}/{event.max_capacity})"
                )
            updated = replace(event, registered_users=event.registered_users | {user_id})
            self._replace(updated)
        return updated

    def update_event_status(self, event_id: str, status: EventStatus | str) -> Event | None:
        """Set the status. Unknown events are ignored; unknown statuses raise."""
        try:
            if not isinstance(status, EventStatus):
                status = EventStatus(str(status).lower())
        except ValueError as e:
            raise InvalidInputError(f"Unknown event status: {status!r}") from e
        with self._write_lock:
            event = self.get_event(event_id)
            if event is None:
                logger.debug(f"update_event_status: no event {event_id}")
                return None
            updated = replace(event, status=status)
            self._replace(updated)
        return updated

    # ---- Async wrappers (asyncio.to_thread) ----

    async def acreate_event(self, title: str, band_id: str, date: int, max_capacity: int, **kwargs) -> Event:
        """Async version of create_event."""
        return await asyncio.to_thread(self.create_event, title, band_id, date, max_capacity, **kwargs)

    async def aregister_for_event(self, event_id: str, user_id: str) -> Event | None:
        """Async version of register_for_event."""
        return await asyncio.to_thread(self.register_for_event, event_id, user_id)

    async def aupdate_event_status(self, event_id: str, status: EventStatus | str) -> Event | None:
        """Async version of update_event_status."""
        return await asyncio.to_thread(self.update_event_status, event_id, status)

    def _replace(self, updated: Event) -> None:
        self._events.update(lambda events: tuple(
            updated if e.id == updated.id else e for e in events
        ))
