"""Date encodings used by the calendar export and the news feed"""

from datetime import date, datetime, time, timezone
from email.utils import format_datetime

ICS_DATETIME_FORMAT = "%Y%m%dT%H%M%SZ"


def format_ics_datetime(value: datetime, pattern: str = ICS_DATETIME_FORMAT) -> str:
    """Render a zoned timestamp in UTC basic format, e.g. 20160707T170000Z"""
    if value.tzinfo is None:
        raise ValueError("Calendar timestamps must be timezone aware")
    return value.astimezone(timezone.utc).strftime(pattern)


def format_rfc822(value: datetime) -> str:
    """Render a timestamp as an RFC 822 date with English names and a GMT suffix.

    Naive values are taken as UTC. The output does not depend on the
    process locale.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def format_rfc822_date(value: date) -> str:
    """Feed dates for posts are days, published at midnight"""
    return format_rfc822(datetime.combine(value, time.min, tzinfo=timezone.utc))
