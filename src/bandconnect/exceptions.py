"""Unified exception hierarchy for bandconnect."""


class BandConnectError(Exception):
    """Base exception for all bandconnect errors."""


# Messaging
class MessagingError(BandConnectError):
    """Base exception for message store operations."""


class InvalidInputError(MessagingError):
    """Rejected input, e.g. blank content or a missing participant id."""


class RecordError(MessagingError):
    """Failed to convert a plain record into a message."""


# Users
class UserError(BandConnectError):
    """Base exception for user directory operations."""


class UserNotFoundError(UserError):
    """No user with the requested id exists in the directory."""


# Events
class EventError(BandConnectError):
    """Base exception for event operations."""


class EventFullError(EventError):
    """Registration refused because the event is at capacity."""
