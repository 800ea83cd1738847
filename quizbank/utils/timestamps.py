"""
Server-side timestamps for quiz results.

Timestamps are exchanged as UTC ISO-8601 strings with millisecond precision and
a trailing ``Z`` (``2024-05-01T08:30:00.123Z``). Both storage backends expose the
same string, so it can be used as an exact delete key.
"""
from datetime import datetime, timezone
from typing import Optional

def utc_now() -> datetime:
    """Current naive UTC time truncated to milliseconds."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)

def format_timestamp(dt: datetime) -> str:
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"

def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse a timestamp string into naive UTC, or None if it is not one."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt

def new_timestamp() -> str:
    return format_timestamp(utc_now())
