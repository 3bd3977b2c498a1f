"""Tests for exception hierarchy."""

from bandconnect.exceptions import (
    BandConnectError,
    MessagingError,
    InvalidInputError,
    RecordError,
    UserError,
    UserNotFoundError,
    EventError,
    EventFullError,
)


def test_all_inherit_from_base():
    for exc_class in [
        MessagingError, InvalidInputError, RecordError,
        UserError, UserNotFoundError,
        EventError, EventFullError,
    ]:
        assert issubclass(exc_class, BandConnectError)


def test_messaging_hierarchy():
    assert issubclass(InvalidInputError, MessagingError)
    assert issubclass(RecordError, MessagingError)


def test_user_hierarchy():
    assert issubclass(UserNotFoundError, UserError)
    assert not issubclass(UserNotFoundError, MessagingError)


def test_exception_message():
    e = InvalidInputError("test error")
    assert str(e) == "test error"


def test_event_hierarchy():
    assert issubclass(EventFullError, EventError)
    assert not issubclass(EventFullError, MessagingError)
