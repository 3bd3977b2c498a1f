"""Presenter for the conversation list screen."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from bandconnect.messaging.models import Conversation
from bandconnect.messaging.store import MessageStore
from bandconnect.streams import StateStream, combine
from bandconnect.users.directory import UserDirectory
from bandconnect.users.models import User


@dataclass(frozen=True)
class ConversationsUiState:
    is_loading: bool = True
    conversations: list[Conversation] = field(default_factory=list)
    user_names: dict[str, str] = field(default_factory=dict)  # user id -> display name
    current_user_id: str = ""
    error_message: str | None = None


class ConversationsPresenter:
    """Keeps ``ui_state`` in sync with the signed-in user's conversations."""

    def __init__(self, users: UserDirectory, store: MessageStore):
        self._users = users
        self._store = store
        self._ui_state: StateStream[ConversationsUiState] = StateStream(ConversationsUiState())
        self._subscription = None
        self._load()

    @property
    def ui_state(self) -> StateStream[ConversationsUiState]:
        return self._ui_state

    def _load(self) -> None:
        current_user = self._users.current_user.value
        if current_user is None:
            self._ui_state.update(lambda s: replace(
                s,
                is_loading=False,
                error_message="You need to be logged in to view conversations.",
            ))
            return

        combined = combine(
            self._users.users,
            self._store.get_conversations_for_user(current_user.id),
            fn=lambda users, conversations: (users, conversations),
        )
        self._subscription = combined.subscribe(
            lambda pair: self._on_update(current_user.id, *pair)
        )

    def _on_update(self, current_user_id: str, users: tuple[User, ...], conversations: list[Conversation]) -> None:
        self._ui_state.update(lambda s: replace(
            s,
            is_loading=False,
            conversations=conversations,
            user_names={u.id: u.name for u in users},
            current_user_id=current_user_id,
        ))

    def pin_conversation(self, conversation_id: str, is_pinned: bool) -> None:
        self._store.pin_conversation(conversation_id, is_pinned)

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
