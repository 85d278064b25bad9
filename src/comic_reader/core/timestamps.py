"""Timestamp parsing for API payloads."""

from datetime import datetime
from typing import Optional


def to_local_naive(moment: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as sent by the API.

    A trailing ``Z`` means UTC. Results are naive local time, the same form
    ``datetime.now()`` gives for locally tracked sessions, so the two can be
    compared. Returns ``None`` for empty or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return to_local_naive(datetime.fromisoformat(text))
    except ValueError:
        return None
