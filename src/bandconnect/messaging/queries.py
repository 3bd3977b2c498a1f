"""Read-only projections over the message store's streams."""

from __future__ import annotations

from bandconnect.messaging.models import Conversation, Message, conversation_sort_key
from bandconnect.streams import DerivedStream, StateStream


class ConversationQueries:
    """Per-user and per-pair views. Never allocates messages or conversations."""

    def __init__(
        self,
        messages: StateStream[tuple[Message, ...]],
        conversations: StateStream[tuple[Conversation, ...]],
    ):
        self._messages = messages
        self._conversations = conversations

    def get_conversations_for_user(self, user_id: str) -> DerivedStream[list[Conversation]]:
        """Conversations the user takes part in, pinned first then most recent."""
        return self._conversations.map(
            lambda convos: sorted(
                (c for c in convos if c.includes(user_id)),
                key=conversation_sort_key,
                reverse=True,
            )
        )

    def get_messages_for_conversation(self, conversation_id: str) -> DerivedStream[list[Message]]:
        """Chronological messages of one conversation.

        The participant pair is resolved from the latest conversations
        snapshot each time a value is produced, so an unknown id yields an
        empty list until the conversation exists.
        """
        def project(msgs: tuple[Message, ...]) -> list[Message]:
            convo = self._find(conversation_id)
            if convo is None:
                return []
            return sorted(
                (m for m in msgs if m.pair == convo.participants),
                key=lambda m: m.timestamp,
            )

        return self._messages.map(project)

    def get_messages_with_user(self, user_id: str, other_user_id: str) -> DerivedStream[list[Message]]:
        """Chronological messages exchanged between two users, either direction."""
        def project(msgs: tuple[Message, ...]) -> list[Message]:
            return sorted(
                (
                    m for m in msgs
                    if (m.sender_id == user_id and m.receiver_id == other_user_id)
                    or (m.sender_id == other_user_id and m.receiver_id == user_id)
                ),
                key=lambda m: m.timestamp,
            )

        return self._messages.map(project)

    def get_unread_total(self, user_id: str) -> DerivedStream[int]:
        """Sum of unread counters across the user's conversations."""
        return self._conversations.map(
            lambda convos: sum(c.unread_count for c in convos if c.includes(user_id))
        )

    def _find(self, conversation_id: str) -> Conversation | None:
        return next(
            (c for c in self._conversations.value if c.id == conversation_id),
            None,
        )
