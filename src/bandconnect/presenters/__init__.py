"""Screen-level presenters that observe the stores and issue mutations."""

from bandconnect.presenters.chat import ChatPresenter, ChatUiState
from bandconnect.presenters.conversations import ConversationsPresenter, ConversationsUiState
from bandconnect.presenters.formatting import format_conversation_timestamp, format_message_time

__all__ = [
    "ChatPresenter",
    "ChatUiState",
    "ConversationsPresenter",
    "ConversationsUiState",
    "format_conversation_timestamp",
    "format_message_time",
]
