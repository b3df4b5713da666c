"""
Timestamp helpers. All stored timestamps are timezone-naive UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone

from backend_journal.core.exceptions import ValidationError

# Same text layout SQLite holds for DATETIME columns; range filters compare
# against it lexicographically.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def timestamp_to_naive_datetime(ts: int | float) -> datetime:
    """
    Convert epoch seconds to a naive UTC datetime.

    Raises ValidationError when ts falls outside what datetime can represent.
    """
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError) as e:
        raise ValidationError(f"timestamp out of range: {ts}") from e


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def date_key(value: datetime) -> str:
    """Calendar date of a timestamp as YYYY-MM-DD."""
    return value.date().isoformat()
