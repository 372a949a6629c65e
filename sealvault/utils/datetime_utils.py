"""
Centralized datetime helpers for SealVault.

Timestamps are persisted as RFC 3339 strings and carried in backup metadata
and file names as unix seconds. These helpers convert between the two.
"""

from datetime import datetime, timezone

from ..exceptions import FatalError


def utc_now() -> datetime:
    """
    Get current UTC time with timezone awareness.

    Returns:
        Current datetime with UTC timezone attached
    """
    return datetime.now(timezone.utc)


def unix_timestamp() -> int:
    """Current time as whole unix seconds."""
    return int(utc_now().timestamp())


def rfc3339_timestamp(dt: datetime | None = None) -> str:
    """
    Format a datetime as an RFC 3339 string with second precision.

    Args:
        dt: Datetime to format; defaults to now. Naive values are treated as UTC.

    Returns:
        String like "2024-01-15T10:30:00Z"
    """
    if dt is None:
        dt = utc_now()
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def rfc3339_from_unix(timestamp: int) -> str:
    """Format unix seconds as an RFC 3339 string."""
    return rfc3339_timestamp(datetime.fromtimestamp(timestamp, tz=timezone.utc))


def parse_rfc3339_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp.

    Handles the 'Z' suffix and explicit offsets. Values without an offset
    are rejected since their instant is ambiguous.

    Raises:
        FatalError: If the value is not a valid RFC 3339 timestamp
    """
    normalized = value.strip()
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(normalized)
    except ValueError as e:
        raise FatalError("Invalid RFC 3339 timestamp", value=value) from e

    if dt.tzinfo is None:
        raise FatalError("RFC 3339 timestamp is missing an offset", value=value)
    return dt
