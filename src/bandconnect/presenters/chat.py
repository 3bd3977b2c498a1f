"""Presenter for a one-to-one chat screen."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from bandconnect.messaging.models import Location, Message, MessagePriority, MessageStatus
from bandconnect.messaging.quick_responses import QuickResponseRegistry
from bandconnect.messaging.store import MessageStore
from bandconnect.streams import StateStream
from bandconnect.users.directory import UserDirectory
from bandconnect.users.models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatUiState:
    is_loading: bool = True
    recipient: User | None = None
    messages: list[Message] = field(default_factory=list)
    current_user_id: str = ""
    is_recipient_online: bool = False
    quick_responses: list[str] = field(default_factory=list)
    error_message: str | None = None


class ChatPresenter:
    """Drives the chat screen between the signed-in user and one recipient.

    Incoming messages are marked read as soon as they are shown. Band members
    send with HIGH priority and get their quick responses offered.
    """

    def __init__(self, users: UserDirectory, store: MessageStore, quick_responses: QuickResponseRegistry):
        self._users = users
        self._store = store
        self._quick_responses = quick_responses
        self._ui_state: StateStream[ChatUiState] = StateStream(ChatUiState())
        self._subscriptions: list = []

    @property
    def ui_state(self) -> StateStream[ChatUiState]:
        return self._ui_state

    def open(self, recipient_id: str) -> None:
        """Load the recipient, the message thread and (for band members) quick responses."""
        self.close()
        current_user = self._users.current_user.value
        if current_user is None:
            self._fail("You need to be logged in to send messages.")
            return

        recipient = self._users.get_user(recipient_id)
        if recipient is None:
            self._fail("Recipient not found.")
            return

        self._ui_state.update(lambda s: replace(
            s,
            recipient=recipient,
            is_recipient_online=self._users.is_online(recipient),
            current_user_id=current_user.id,
        ))

        self._subscriptions.append(
            self._store.get_messages_with_user(current_user.id, recipient_id).subscribe(
                lambda messages: self._on_messages(current_user.id, messages)
            )
        )
        if current_user.is_band_member:
            self._subscriptions.append(
                self._quick_responses.get_quick_responses_for_band_member(current_user.id).subscribe(
                    lambda responses: self._ui_state.update(lambda s: replace(
                        s, quick_responses=[r.content for r in responses]
                    ))
                )
            )
        self._ui_state.update(lambda s: replace(s, is_loading=False))

    def _on_messages(self, current_user_id: str, messages: list[Message]) -> None:
        self._ui_state.update(lambda s: replace(s, messages=messages))
        for message in messages:
            if message.receiver_id == current_user_id and message.status != MessageStatus.READ:
                self._store.mark_message_as_read(message.id)

    def _fail(self, error: str) -> None:
        logger.debug(f"Chat unavailable: {error}")
        self._ui_state.update(lambda s: replace(s, is_loading=False, error_message=error))

    def send_message(
        self,
        content: str,
        location: Location | None = None,
        is_quick_response: bool = False,
    ) -> Message | None:
        """Send to the open recipient. Returns None when no chat is open."""
        current_user = self._users.current_user.value
        recipient = self._ui_state.value.recipient
        if current_user is None or recipient is None:
            return None
        priority = MessagePriority.HIGH if current_user.is_band_member else MessagePriority.NORMAL
        return self._store.send_message(
            sender_id=current_user.id,
            receiver_id=recipient.id,
            content=content,
            location=location,
            priority=priority,
            is_quick_response=is_quick_response,
        )

    def send_quick_response(self, index: int) -> Message | None:
        responses = self._ui_state.value.quick_responses
        if not 0 <= index < len(responses):
            return None
        return self.send_message(responses[index], is_quick_response=True)

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.close()
        self._subscriptions = []
