"""Conversion between messages and plain dict records (ISO 8601 timestamps)."""

from __future__ import annotations

from datetime import datetime, timezone

import dateutil.parser as parser

from bandconnect.exceptions import InvalidInputError, RecordError
from bandconnect.messaging.models import Location, Message, MessagePriority, MessageStatus


def ms_to_iso(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).isoformat()


def parse_timestamp(value: int | float | str) -> int:
    """Epoch milliseconds from an int/float or any date string dateutil understands.

    Naive date strings are taken as UTC.
    """
    if isinstance(value, bool):
        raise RecordError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    try:
        dt = parser.parse(value)
    except (ValueError, OverflowError, TypeError) as e:
        raise RecordError(f"Invalid timestamp: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def message_to_record(message: Message) -> dict:
    record = {
        "id": message.id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "content": message.content,
        "timestamp": ms_to_iso(message.timestamp),
        "status": message.status.value,
        "priority": message.priority.value,
        "image_url": message.image_url,
        "is_quick_response": message.is_quick_response,
        "location": None,
    }
    if message.location:
        record["location"] = {
            "latitude": message.location.latitude,
            "longitude": message.location.longitude,
            "location_name": message.location.location_name,
            "timestamp": ms_to_iso(message.location.timestamp),
        }
    return record


def message_from_record(record: dict) -> Message:
    """Build a Message from a record produced by ``message_to_record`` or by hand.

    Only sender_id, receiver_id, content and timestamp are required.
    """
    try:
        sender_id = record["sender_id"]
        receiver_id = record["receiver_id"]
        content = record["content"]
        raw_timestamp = record["timestamp"]
    except KeyError as e:
        raise RecordError(f"Record missing required field {e}") from e
    if not sender_id or not receiver_id:
        raise RecordError("Record needs a non-empty sender_id and receiver_id")

    try:
        status = MessageStatus(record.get("status") or MessageStatus.SENT.value)
        priority = MessagePriority(record.get("priority") or MessagePriority.NORMAL.value)
    except ValueError as e:
        raise RecordError(f"Invalid enum value in record: {e}") from e

    location = None
    loc = record.get("location")
    if loc:
        try:
            location = Location(
                latitude=float(loc["latitude"]),
                longitude=float(loc["longitude"]),
                location_name=loc.get("location_name", ""),
                timestamp=parse_timestamp(loc.get("timestamp", raw_timestamp)),
            )
        except (KeyError, ValueError, InvalidInputError) as e:
            raise RecordError(f"Invalid location in record: {e}") from e

    kwargs = {}
    if record.get("id"):
        kwargs["id"] = record["id"]

    return Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        timestamp=parse_timestamp(raw_timestamp),
        status=status,
        location=location,
        image_url=record.get("image_url"),
        priority=priority,
        is_quick_response=bool(record.get("is_quick_response", False)),
        **kwargs,
    )
