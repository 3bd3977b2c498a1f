"""In-memory message store: the single point of mutation for messages and conversations."""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import replace
from typing import Callable, Iterable

from bandconnect.exceptions import InvalidInputError
from bandconnect.messaging.models import (
    Conversation,
    Location,
    Message,
    MessagePriority,
    MessageStatus,
    now_ms,
)
from bandconnect.messaging.queries import ConversationQueries
from bandconnect.messaging.records import message_from_record
from bandconnect.streams import DerivedStream, StateStream

logger = logging.getLogger(__name__)


class MessageStore:
    """Append-only message log plus the conversation index derived from it.

    Every mutation runs under one lock and replaces whole tuples, so a
    subscriber only ever sees complete pre- or post-mutation snapshots, and
    two concurrent sends to the same pair cannot lose an update.

    Args:
        clock: Callable returning epoch milliseconds. Defaults to wall time.
    """

    def __init__(self, clock: Callable[[], int] = now_ms):
        self._clock = clock
        self._write_lock = threading.RLock()
        self._messages: StateStream[tuple[Message, ...]] = StateStream(())
        self._conversations: StateStream[tuple[Conversation, ...]] = StateStream(())
        self.queries = ConversationQueries(self._messages, self._conversations)

    # ---- Streams ----

    @property
    def messages(self) -> StateStream[tuple[Message, ...]]:
        return self._messages

    @property
    def conversations(self) -> StateStream[tuple[Conversation, ...]]:
        return self._conversations

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        return next(
            (c for c in self._conversations.value if c.id == conversation_id),
            None,
        )

    def get_message(self, message_id: str) -> Message | None:
        return next((m for m in self._messages.value if m.id == message_id), None)

    # ---- Queries ----

    def get_conversations_for_user(self, user_id: str) -> DerivedStream[list[Conversation]]:
        return self.queries.get_conversations_for_user(user_id)

    def get_messages_for_conversation(self, conversation_id: str) -> DerivedStream[list[Message]]:
        return self.queries.get_messages_for_conversation(conversation_id)

    def get_messages_with_user(self, user_id: str, other_user_id: str) -> DerivedStream[list[Message]]:
        return self.queries.get_messages_with_user(user_id, other_user_id)

    # ---- Mutations ----

    def send_message(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        location: Location | None = None,
        image_url: str | None = None,
        priority: MessagePriority = MessagePriority.NORMAL,
        is_quick_response: bool = False,
    ) -> Message:
        """Append a new message and update (or create) its conversation."""
        if not sender_id or not receiver_id:
            raise InvalidInputError("Both sender_id and receiver_id are required")

        with self._write_lock:
            message = Message(
                sender_id=sender_id,
                receiver_id=receiver_id,
                content=content,
                timestamp=self._clock(),
                location=location,
                image_url=image_url,
                priority=priority,
                is_quick_response=is_quick_response,
            )
            self._append(message)
        return message

    def mark_message_as_read(self, message_id: str) -> None:
        self._set_status(message_id, MessageStatus.READ)

    def mark_message_as_delivered(self, message_id: str) -> None:
        self._set_status(message_id, MessageStatus.DELIVERED)

    def mark_all_messages_as_read(self, conversation_id: str, user_id: str) -> None:
        """Mark every message addressed to ``user_id`` read, then zero the counter.

        The two phases are separate commits; subscribers see the message
        update before the counter reset.
        """
        with self._write_lock:
            self._messages.update(lambda msgs: tuple(
                m.with_status(MessageStatus.READ) if m.receiver_id == user_id else m
                for m in msgs
            ))

            if self.get_conversation(conversation_id) is None:
                logger.debug(f"mark_all_messages_as_read: no conversation {conversation_id}")
                return
            self._conversations.update(lambda convos: tuple(
                replace(c, unread_count=0) if c.id == conversation_id else c
                for c in convos
            ))

    def pin_conversation(self, conversation_id: str, is_pinned: bool) -> None:
        with self._write_lock:
            if self.get_conversation(conversation_id) is None:
                logger.debug(f"pin_conversation: no conversation {conversation_id}")
                return
            self._conversations.update(lambda convos: tuple(
                replace(c, is_pinned=is_pinned) if c.id == conversation_id else c
                for c in convos
            ))

    def import_messages(self, records: Iterable[dict]) -> list[Message]:
        """Replay plain records (see ``records.message_from_record``) in time order.

        Ids, timestamps and statuses are kept. Messages already marked read
        do not count towards unread counters. Records whose id is already in
        the store (or earlier in the same batch) are skipped. Returns the
        messages actually imported.
        """
        messages = sorted(
            (message_from_record(r) for r in records),
            key=lambda m: m.timestamp,
        )
        imported = []
        with self._write_lock:
            seen = {m.id for m in self._messages.value}
            for message in messages:
                if message.id in seen:
                    logger.debug(f"import_messages: skipping duplicate message {message.id}")
                    continue
                seen.add(message.id)
                self._append(message, count_unread=message.status != MessageStatus.READ)
                imported.append(message)
        logger.info(f"Imported {len(imported)} of {len(messages)} messages")
        return imported

    # ---- Async wrappers (asyncio.to_thread) ----

    async def asend_message(self, sender_id: str, receiver_id: str, content: str, **kwargs) -> Message:
        """Async version of send_message."""
        return await asyncio.to_thread(self.send_message, sender_id, receiver_id, content, **kwargs)

    async def amark_message_as_read(self, message_id: str) -> None:
        """Async version of mark_message_as_read."""
        return await asyncio.to_thread(self.mark_message_as_read, message_id)

    async def amark_all_messages_as_read(self, conversation_id: str, user_id: str) -> None:
        """Async version of mark_all_messages_as_read."""
        return await asyncio.to_thread(self.mark_all_messages_as_read, conversation_id, user_id)

    async def apin_conversation(self, conversation_id: str, is_pinned: bool) -> None:
        """Async version of pin_conversation."""
        return await asyncio.to_thread(self.pin_conversation, conversation_id, is_pinned)

    # ---- Internals ----

    def _append(self, message: Message, count_unread: bool = True) -> None:
        self._messages.update(lambda msgs: msgs + (message,))
        self._conversations.update(
            lambda convos: self._derive_conversation(convos, message, count_unread)
        )

    def _derive_conversation(
        self,
        convos: tuple[Conversation, ...],
        message: Message,
        count_unread: bool,
    ) -> tuple[Conversation, ...]:
        participants = message.pair
        # Unread is tracked for the first canonical participant only.
        bump = 1 if count_unread and participants[0] == message.receiver_id else 0

        for index, convo in enumerate(convos):
            if sorted(convo.participants) == list(participants):
                updated = replace(convo, unread_count=convo.unread_count + bump)
                # Imported history can arrive older than the current last message.
                if message.timestamp >= convo.last_updated:
                    updated = replace(
                        updated,
                        last_message=message,
                        last_updated=message.timestamp,
                    )
                return convos[:index] + (updated,) + convos[index + 1:]

        convo = Conversation(
            participants=participants,
            last_message=message,
            last_updated=message.timestamp,
            unread_count=bump,
        )
        logger.info(f"Created conversation {convo.id} for {participants[0]} and {participants[1]}")
        return convos + (convo,)

    def _set_status(self, message_id: str, status: MessageStatus) -> None:
        with self._write_lock:
            current = self.get_message(message_id)
            if current is None:
                logger.debug(f"No message {message_id}; status {status.value} not applied")
                return
            if current.with_status(status) is current:
                if current.status != status:
                    logger.warning(
                        f"Ignoring status change {current.status.value} -> {status.value} "
                        f"for message {message_id}"
                    )
                return
            self._messages.update(lambda msgs: tuple(
                m.with_status(status) if m.id == message_id else m for m in msgs
            ))
