"""Shared utility helpers for tk."""

from __future__ import annotations

from datetime import datetime, timezone

from ticket.errors import TimestampParseError

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_timestamp(moment: datetime) -> str:
    """Format an instant in the on-disk ISO-8601 UTC form."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def now_timestamp() -> str:
    """Return the current time in the on-disk ISO-8601 UTC form."""
    return format_timestamp(datetime.now(timezone.utc))


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp into an aware UTC datetime.

    Accepts the canonical ``YYYY-MM-DDTHH:MM:SSZ`` form as well as any other
    ISO-8601 string ``datetime.fromisoformat`` understands.  Naive values are
    taken to be UTC.

    Raises:
        TimestampParseError: If the value is empty or not a timestamp.
    """
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        msg = "Empty timestamp"
        raise TimestampParseError(msg)
    try:
        parsed = datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            msg = f"Invalid timestamp '{value}'"
            raise TimestampParseError(msg) from None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        msg = f"Timestamp '{value}' is out of range in UTC"
        raise TimestampParseError(msg) from None


def try_parse_timestamp(value: str | None) -> datetime | None:
    """Parse a timestamp, returning None for absent or malformed values."""
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except TimestampParseError:
        return None
