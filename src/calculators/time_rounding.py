"""Timer rounding engine for billable time entries.

This module turns a raw start/stop timer pair into quarter-hour aligned
billing boundaries:
- Start times round down to the current quarter, unless they are within
  the last four minutes before the next one (remainder 11-14)
- End times round up to the next quarter whenever they are past a boundary
- Every entry bills at least 15 minutes

Rounding truth table (minutes past the current quarter -> minutes added
to that quarter):

    remainder   0  1 .. 10  11 .. 14
    start       0     0       15
    end         0    15       15

Wall-clock fields are read in an explicitly passed timezone. Arithmetic
runs on absolute (UTC) instants, so an hour or day rollover and a DST
transition never produce a non-existent wall-clock time.
"""

import datetime as dt
import logging
from typing import Callable, Dict

from src.calculators.time_utils import (
    calculate_duration_hours,
    elapsed_time,
    minutes_to_timedelta,
    to_civil_time,
)
from src.exceptions import PreconditionError
from src.models.time_entry import MINIMUM_DURATION_HOURS, RoundedEntry

logger = logging.getLogger(__name__)

QUARTER_MINUTES = 15
START_ROUND_UP_REMAINDER = 11


def start_rounding_offset(remainder: int) -> int:
    """Minutes to add to the current quarter boundary for a start time.

    Args:
        remainder: Minutes past the current quarter (0-14)

    Returns:
        15 for remainders 11-14, otherwise 0
    """
    return QUARTER_MINUTES if remainder >= START_ROUND_UP_REMAINDER else 0


def end_rounding_offset(remainder: int) -> int:
    """Minutes to add to the current quarter boundary for an end time.

    Args:
        remainder: Minutes past the current quarter (0-14)

    Returns:
        15 for any positive remainder, 0 on a boundary
    """
    return QUARTER_MINUTES if remainder > 0 else 0


START_ROUNDING_TABLE: Dict[int, int] = {
    r: start_rounding_offset(r) for r in range(QUARTER_MINUTES)
}
END_ROUNDING_TABLE: Dict[int, int] = {
    r: end_rounding_offset(r) for r in range(QUARTER_MINUTES)
}


def _round_to_quarter(
    instant: dt.datetime, tz: dt.tzinfo, offset_for: Callable[[int], int]
) -> dt.datetime:
    local = to_civil_time(instant, tz)
    remainder = local.minute % QUARTER_MINUTES

    as_utc = local.astimezone(dt.timezone.utc)
    boundary = as_utc - dt.timedelta(
        minutes=remainder, seconds=local.second, microseconds=local.microsecond
    )
    rounded = boundary + minutes_to_timedelta(offset_for(remainder))
    return rounded.astimezone(tz)


def round_start_time(instant: dt.datetime, tz: dt.tzinfo) -> dt.datetime:
    """Round a timer start time to a quarter-hour boundary.

    Rounds down to the current quarter, except within the last four
    minutes before the next quarter, where it rounds up. Seconds and
    microseconds are always dropped.

    Args:
        instant: Raw start time (naive values are wall-clock time in ``tz``)
        tz: Civil timezone whose wall clock defines the quarters

    Returns:
        Rounded start time as an aware datetime in ``tz``

    Example:
        >>> from zoneinfo import ZoneInfo
        >>> berlin = ZoneInfo("Europe/Berlin")
        >>> round_start_time(dt.datetime(2025, 11, 12, 19, 7), berlin).strftime("%H:%M")
        '19:00'
        >>> round_start_time(dt.datetime(2025, 11, 12, 19, 11), berlin).strftime("%H:%M")
        '19:15'
        >>> round_start_time(dt.datetime(2025, 11, 12, 19, 55), berlin).strftime("%H:%M")
        '19:45'
    """
    return _round_to_quarter(instant, tz, start_rounding_offset)


def round_end_time(instant: dt.datetime, tz: dt.tzinfo) -> dt.datetime:
    """Round a timer end time up to a quarter-hour boundary.

    Any time past a boundary moves to the next quarter; a time exactly on
    a boundary keeps its minute. Seconds and microseconds are always
    dropped.

    Args:
        instant: Raw end time (naive values are wall-clock time in ``tz``)
        tz: Civil timezone whose wall clock defines the quarters

    Returns:
        Rounded end time as an aware datetime in ``tz``

    Example:
        >>> from zoneinfo import ZoneInfo
        >>> berlin = ZoneInfo("Europe/Berlin")
        >>> round_end_time(dt.datetime(2025, 11, 12, 19, 47), berlin).strftime("%H:%M")
        '20:00'
        >>> round_end_time(dt.datetime(2025, 11, 12, 19, 14), berlin).strftime("%H:%M")
        '19:15'
        >>> round_end_time(dt.datetime(2025, 11, 12, 19, 45), berlin).strftime("%H:%M")
        '19:45'
    """
    return _round_to_quarter(instant, tz, end_rounding_offset)


def round_timer_to_quarters(
    raw_start: dt.datetime, raw_end: dt.datetime, tz: dt.tzinfo
) -> RoundedEntry:
    """Round a timer start/stop pair into a billable entry.

    The start and end are rounded independently; if the rounded entry is
    shorter than 15 minutes, the end is moved to exactly 15 minutes after
    the rounded start.

    Args:
        raw_start: Time the timer was started
        raw_end: Time the timer was stopped
        tz: Civil timezone whose wall clock defines the quarters

    Returns:
        RoundedEntry with rounded boundaries and duration in hours

    Raises:
        PreconditionError: If raw_end is before raw_start

    Example:
        >>> from zoneinfo import ZoneInfo
        >>> berlin = ZoneInfo("Europe/Berlin")
        >>> entry = round_timer_to_quarters(
        ...     dt.datetime(2025, 11, 12, 19, 7),
        ...     dt.datetime(2025, 11, 12, 19, 9),
        ...     berlin,
        ... )
        >>> entry.start_time.strftime("%H:%M"), entry.end_time.strftime("%H:%M")
        ('19:00', '19:15')
        >>> entry.duration_hours
        Decimal('0.25')
    """
    start_local = to_civil_time(raw_start, tz)
    end_local = to_civil_time(raw_end, tz)
    if elapsed_time(start_local, end_local) < dt.timedelta(0):
        raise PreconditionError(
            f"Timer end ({end_local.isoformat()}) is before timer start "
            f"({start_local.isoformat()})",
            field="raw_end",
            value=raw_end,
        )

    rounded_start = round_start_time(start_local, tz)
    rounded_end = round_end_time(end_local, tz)
    duration_hours = calculate_duration_hours(rounded_start, rounded_end)

    if duration_hours < MINIMUM_DURATION_HOURS:
        logger.debug(
            f"Rounded duration {duration_hours}h below minimum, "
            f"extending end to {QUARTER_MINUTES} minutes after start"
        )
        rounded_end = (
            rounded_start.astimezone(dt.timezone.utc)
            + minutes_to_timedelta(QUARTER_MINUTES)
        ).astimezone(tz)
        duration_hours = MINIMUM_DURATION_HOURS

    logger.debug(
        f"Rounded timer {start_local.isoformat()} - {end_local.isoformat()} "
        f"to {rounded_start.isoformat()} - {rounded_end.isoformat()} "
        f"({duration_hours}h)"
    )

    return RoundedEntry(
        start_time=rounded_start,
        end_time=rounded_end,
        duration_hours=duration_hours,
    )
