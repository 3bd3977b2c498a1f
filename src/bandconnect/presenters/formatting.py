"""Display strings for timestamps shown in the conversation list and chat."""

from __future__ import annotations

from datetime import datetime, tzinfo

from bandconnect.messaging.models import now_ms

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS


def format_conversation_timestamp(
    timestamp: int,
    now: int | None = None,
    tz: tzinfo | None = None,
) -> str:
    """Relative label: "Just now", "5m", "3h", weekday within a week, else "MM/dd"."""
    now = now if now is not None else now_ms()
    diff = now - timestamp
    if diff < MINUTE_MS:
        return "Just now"
    if diff < HOUR_MS:
        return f"{diff // MINUTE_MS}m"
    if diff < DAY_MS:
        return f"{diff // HOUR_MS}h"
    dt = datetime.fromtimestamp(timestamp / 1000, tz=tz)
    if diff < 7 * DAY_MS:
        return dt.strftime("%a")
    return dt.strftime("%m/%d")


def format_message_time(timestamp: int, tz: tzinfo | None = None) -> str:
    """Clock time such as "9:05 PM"."""
    dt = datetime.fromtimestamp(timestamp / 1000, tz=tz)
    hour = dt.hour % 12 or 12
    return f"{hour}:{dt.minute:02d} {'AM' if dt.hour < 12 else 'PM'}"
