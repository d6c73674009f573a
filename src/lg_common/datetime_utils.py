"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """ISO-8601 string of utc_now(), millisecond precision with a Z suffix."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")
