"""Tests for the composition root."""

from bandconnect.container import AppContainer


def test_default_container_is_empty():
    app = AppContainer()
    assert app.users.users.value == ()
    assert app.messages.messages.value == ()
    assert app.quick_responses.responses.value == ()


def test_containers_do_not_share_state():
    first = AppContainer.with_sample_data()
    second = AppContainer.with_sample_data()
    first.messages.send_message("user1", "user2", "hi")
    assert second.messages.messages.value == ()


def test_presenters_share_container_stores():
    app = AppContainer.with_sample_data()
    app.users.set_current_user("user1")
    chat = app.chat_presenter()
    conversations = app.conversations_presenter()

    chat.open("user2")
    chat.send_message("Studio at 6?")

    assert len(conversations.ui_state.value.conversations) == 1
    assert conversations.ui_state.value.conversations[0].last_message.content == "Studio at 6?"


def test_container_owns_event_registry():
    app = AppContainer.with_sample_data()
    event = app.events.create_event("Cavern Club", "user1", date=0, max_capacity=10)
    assert app.events.get_event(event.id) == event
    assert AppContainer().events.events.value == ()
