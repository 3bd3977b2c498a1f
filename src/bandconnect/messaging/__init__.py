"""Direct messages, conversations and quick responses (in-memory)."""

from bandconnect.messaging.models import (
    Conversation,
    Location,
    Message,
    MessagePriority,
    MessageStatus,
    QuickResponse,
)
from bandconnect.messaging.queries import ConversationQueries
from bandconnect.messaging.quick_responses import QuickResponseRegistry, sample_quick_responses
from bandconnect.messaging.records import message_from_record, message_to_record
from bandconnect.messaging.store import MessageStore

__all__ = [
    "MessageStore",
    "ConversationQueries",
    "QuickResponseRegistry",
    "sample_quick_responses",
    "message_to_record",
    "message_from_record",
    "Message",
    "Conversation",
    "QuickResponse",
    "Location",
    "MessageStatus",
    "MessagePriority",
]
