"""
Date parsing and formatting utilities.
"""

from datetime import date, datetime, time, timezone
from typing import Optional, Union


def local_timezone():
    """Get the system local timezone."""
    return datetime.now().astimezone().tzinfo


def ensure_aware(value: datetime) -> datetime:
    """Attach the local timezone to naive datetimes; aware ones pass through."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def start_of_day(d: date) -> datetime:
    """Local midnight at the start of ``d``."""
    return datetime.combine(d, time.min).astimezone()


def shift_years(value: datetime, years: int) -> datetime:
    """
    Move a datetime by whole calendar years.

    February 29th lands on February 28th in non-leap target years.
    """
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """
    Parse a date string into a date object.

    Handles various formats:
    - ISO format (YYYY-MM-DD)
    - ISO datetime (YYYY-MM-DDTHH:MM:SS)

    Args:
        date_str: Date string to parse

    Returns:
        Parsed date object or None if invalid
    """
    if not date_str:
        return None
    if isinstance(date_str, date):
        return date_str

    # Take only date part if it's a datetime string
    if 'T' in date_str:
        date_str = date_str.split('T')[0]

    try:
        return datetime.strptime(date_str.strip(), '%Y-%m-%d').date()
    except ValueError:
        return None


def parse_datetime(value: Optional[Union[str, datetime]]) -> Optional[datetime]:
    """
    Parse an ISO datetime string.

    A bare date means local midnight. A trailing ``Z`` is read as UTC.
    Naive results get the local timezone.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)

    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        only_date = parse_date(text)
        return start_of_day(only_date) if only_date else None

    return ensure_aware(parsed)


def format_date(d: Optional[date]) -> Optional[str]:
    """
    Format a date object as ISO string (YYYY-MM-DD).

    Args:
        d: Date object to format

    Returns:
        ISO formatted date string or None
    """
    if not d:
        return None

    return d.strftime('%Y-%m-%d')


def to_timestamp(value: datetime) -> float:
    """Seconds since the epoch, suitable for ``NSDate.dateWithTimeIntervalSince1970_``."""
    return ensure_aware(value).timestamp()


def from_timestamp(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone(local_timezone())
