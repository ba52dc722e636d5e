"""Time calculation utilities for the billing core.

This module provides low-level utilities for time handling including:
- Normalizing instants into a civil timezone
- Calculating durations in decimal hours
- Formatting and parsing wall-clock date/time strings

Every function that depends on wall-clock fields takes the timezone as an
explicit argument; nothing here reads a module-level timezone.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal

SECONDS_PER_HOUR = Decimal("3600")


def to_civil_time(instant: dt.datetime, tz: dt.tzinfo) -> dt.datetime:
    """Express an instant as wall-clock time in the given timezone.

    Naive datetimes are taken to already be wall-clock time in ``tz``;
    aware datetimes are converted.

    Args:
        instant: The instant to normalize
        tz: Civil timezone (e.g., ``ZoneInfo("Europe/Berlin")``)

    Returns:
        Timezone-aware datetime in ``tz``

    Example:
        >>> from zoneinfo import ZoneInfo
        >>> berlin = ZoneInfo("Europe/Berlin")
        >>> utc = dt.datetime(2025, 11, 12, 13, 30, tzinfo=dt.timezone.utc)
        >>> to_civil_time(utc, berlin).hour
        14
    """
    if instant.tzinfo is None or instant.utcoffset() is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def elapsed_time(start: dt.datetime, end: dt.datetime) -> dt.timedelta:
    """Return the absolute time elapsed between two instants.

    Aware datetimes are compared in UTC. Python subtracts two datetimes
    sharing a tzinfo on their wall-clock fields, which is off by the DST
    shift when the pair straddles a transition.

    Example:
        >>> from zoneinfo import ZoneInfo
        >>> berlin = ZoneInfo("Europe/Berlin")
        >>> elapsed_time(
        ...     dt.datetime(2025, 3, 30, 1, 0, tzinfo=berlin),
        ...     dt.datetime(2025, 3, 30, 4, 0, tzinfo=berlin),
        ... )
        datetime.timedelta(seconds=7200)
    """
    if start.utcoffset() is not None and end.utcoffset() is not None:
        start = start.astimezone(dt.timezone.utc)
        end = end.astimezone(dt.timezone.utc)
    return end - start


def minutes_to_timedelta(minutes: int) -> dt.timedelta:
    """Convert minutes to a timedelta object.

    Example:
        >>> minutes_to_timedelta(15)
        datetime.timedelta(seconds=900)
    """
    return dt.timedelta(minutes=minutes)


def timedelta_to_decimal_hours(td: dt.timedelta) -> Decimal:
    """Convert a timedelta to decimal hours with 2 decimal precision.

    Args:
        td: Timedelta to convert

    Returns:
        Decimal hours (rounded to 2 decimal places)

    Example:
        >>> timedelta_to_decimal_hours(dt.timedelta(hours=7, minutes=30))
        Decimal('7.50')
        >>> timedelta_to_decimal_hours(dt.timedelta(minutes=15))
        Decimal('0.25')

    Note:
        Rounds half away from zero, so 10 minutes (0.1666...) is 0.17
        and a 30-second sliver (0.00833...) is 0.01.
    """
    hours = Decimal(str(td.total_seconds())) / SECONDS_PER_HOUR
    return hours.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def calculate_duration_hours(start: dt.datetime, end: dt.datetime) -> Decimal:
    """Calculate the elapsed hours between two instants.

    Both datetimes must be either naive or aware. The result is negative
    when ``end`` precedes ``start``.

    Args:
        start: Start instant
        end: End instant

    Returns:
        Elapsed hours rounded to 2 decimal places

    Example:
        >>> calculate_duration_hours(
        ...     dt.datetime(2025, 11, 12, 9, 0), dt.datetime(2025, 11, 12, 17, 30)
        ... )
        Decimal('8.50')
    """
    return timedelta_to_decimal_hours(elapsed_time(start, end))


def format_time_string(instant: dt.datetime, tz: dt.tzinfo) -> str:
    """Format an instant as ``HH:MM:SS`` wall-clock time in ``tz``.

    Example:
        >>> from zoneinfo import ZoneInfo
        >>> format_time_string(
        ...     dt.datetime(2025, 7, 1, 12, 0, tzinfo=dt.timezone.utc),
        ...     ZoneInfo("Europe/Berlin"),
        ... )
        '14:00:00'
    """
    return to_civil_time(instant, tz).strftime("%H:%M:%S")


def format_date_string(instant: dt.datetime, tz: dt.tzinfo) -> str:
    """Format an instant as a ``YYYY-MM-DD`` civil date in ``tz``.

    Example:
        >>> from zoneinfo import ZoneInfo
        >>> format_date_string(
        ...     dt.datetime(2025, 11, 12, 23, 30, tzinfo=dt.timezone.utc),
        ...     ZoneInfo("Europe/Berlin"),
        ... )
        '2025-11-13'
    """
    return to_civil_time(instant, tz).strftime("%Y-%m-%d")
