"""
Time helpers for token expiry and API timestamps.
"""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def expiry_from_now(seconds: int) -> datetime:
    """Absolute UTC expiry for a lifetime given in seconds."""
    return utc_now() + timedelta(seconds=seconds)


def format_iso_timestamp(dt: datetime) -> str:
    """Format datetime as the RFC 3339 string the API accepts (UTC, Z suffix)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")

