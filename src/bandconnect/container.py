"""Composition root: owns one instance of each store and wires presenters to them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from bandconnect.events.registry import EventRegistry
from bandconnect.messaging.models import now_ms
from bandconnect.messaging.quick_responses import QuickResponseRegistry, sample_quick_responses
from bandconnect.messaging.store import MessageStore
from bandconnect.presenters.chat import ChatPresenter
from bandconnect.presenters.conversations import ConversationsPresenter
from bandconnect.users.directory import UserDirectory, sample_band_members


@dataclass
class AppContainer:
    """Explicitly owned stores, injected into every presenter it builds."""

    users: UserDirectory = field(default_factory=UserDirectory)
    messages: MessageStore = field(default_factory=MessageStore)
    quick_responses: QuickResponseRegistry = field(default_factory=QuickResponseRegistry)
    events: EventRegistry = field(default_factory=EventRegistry)

    @classmethod
    def with_sample_data(cls, clock: Callable[[], int] = now_ms) -> AppContainer:
        """Container seeded with the demo band members and their quick responses."""
        return cls(
            users=UserDirectory(sample_band_members()),
            messages=MessageStore(clock=clock),
            quick_responses=QuickResponseRegistry(sample_quick_responses()),
        )

    def conversations_presenter(self) -> ConversationsPresenter:
        return ConversationsPresenter(self.users, self.messages)

    def chat_presenter(self) -> ChatPresenter:
        return ChatPresenter(self.users, self.messages, self.quick_responses)
