"""Calculator modules for the billing core."""

from src.calculators.time_rounding import (
    END_ROUNDING_TABLE,
    START_ROUNDING_TABLE,
    end_rounding_offset,
    round_end_time,
    round_start_time,
    round_timer_to_quarters,
    start_rounding_offset,
)
from src.calculators.time_utils import (
    calculate_duration_hours,
    elapsed_time,
    format_date_string,
    format_time_string,
    minutes_to_timedelta,
    timedelta_to_decimal_hours,
    to_civil_time,
)

__all__ = [
    # time_rounding
    "END_ROUNDING_TABLE",
    "START_ROUNDING_TABLE",
    "end_rounding_offset",
    "round_end_time",
    "round_start_time",
    "round_timer_to_quarters",
    "start_rounding_offset",
    # time_utils
    "calculate_duration_hours",
    "elapsed_time",
    "format_date_string",
    "format_time_string",
    "minutes_to_timedelta",
    "timedelta_to_decimal_hours",
    "to_civil_time",
]
