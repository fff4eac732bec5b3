"""Date and time formatting utilities."""

from datetime import datetime, timezone


def format_timestamp(timestamp_ms: int) -> str:
    """
    Format a commit timestamp as YYYY-MM-DD HH:MM (UTC).

    Args:
        timestamp_ms: Milliseconds since epoch, 0 for placeholder commits

    Returns:
        Formatted timestamp, or "unknown" when there is none
    """
    if not timestamp_ms or timestamp_ms <= 0:
        return "unknown"
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%d %H:%M")
