"""Timestamp formatting utilities."""

from datetime import date, datetime
from typing import Optional


def now() -> str:
    """Current local time as a compact string for directory names (YYYYMMDD_HHMMSS)."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact(moment: Optional[datetime] = None) -> str:
    """ISO 8601 timestamp (seconds precision) for record fields and event logs."""
    moment = moment or datetime.now()
    return moment.isoformat(timespec="seconds")


def today(moment: Optional[datetime] = None) -> str:
    """ISO calendar date (YYYY-MM-DD)."""
    return (moment or datetime.now()).date().isoformat()


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp or date string.

    Returns:
        datetime, or None when the value is missing or unparseable
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def format_timestamp(iso_timestamp: str, relative: bool = False) -> str:
    """
    Format ISO 8601 timestamp to readable format.

    Args:
        iso_timestamp: ISO 8601 formatted timestamp string
        relative: If True, show relative time (e.g., "2h ago")
                 If False, show absolute time (e.g., "2026-10-13 18:45:40")

    Returns:
        Human-readable timestamp

    Examples:
        format_timestamp("2026-10-13T18:45:40")
        # "2026-10-13 18:45:40"

        format_timestamp("2026-10-13T18:45:40", relative=True)
        # "2h ago"
    """
    try:
        dt = datetime.fromisoformat(iso_timestamp)

        if relative:
            return _format_relative_time(dt)
        else:
            return dt.strftime("%Y-%m-%d %H:%M:%S")

    except (ValueError, TypeError):
        # Return original if parsing fails
        return iso_timestamp


def _format_relative_time(dt: datetime, reference: Optional[datetime] = None) -> str:
    """
    Format datetime as relative time in compact format.

    - Seconds: "30s ago"
    - Minutes: "15m ago"
    - Hours: "2h ago"
    - Days: "5d ago"
    """
    reference = reference or datetime.now()
    diff = reference - dt

    # Future times
    if diff.total_seconds() < 0:
        diff = -diff
        suffix = "from now"
    else:
        suffix = "ago"

    seconds = int(diff.total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = diff.days

    if seconds < 60:
        return f"{seconds}s {suffix}"
    elif minutes < 60:
        return f"{minutes}m {suffix}"
    elif hours < 24:
        return f"{hours}h {suffix}"
    else:
        return f"{days}d {suffix}"
