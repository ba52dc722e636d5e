"""Time entry data models for the billing core.

This module defines TimeInterval, a raw start/stop pair, and RoundedEntry,
the billable result produced by the timer rounding engine.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict

from pydantic import ConfigDict, Field, field_validator, model_validator

from src.models.base import BaseDataModel

MINIMUM_DURATION_HOURS = Decimal("0.25")


def _as_utc(instant: dt.datetime) -> dt.datetime:
    # Same-tzinfo datetimes compare on wall-clock fields; UTC does not.
    return instant.astimezone(dt.timezone.utc)


class TimeInterval(BaseDataModel):
    """A finalized start/end pair of timezone-aware instants.

    Attributes:
        start: Start instant (timezone-aware)
        end: End instant (timezone-aware, strictly after start)
    """

    model_config = ConfigDict(frozen=True)

    start: dt.datetime = Field(..., description="Start instant")
    end: dt.datetime = Field(..., description="End instant")

    @field_validator("start", "end")
    @classmethod
    def validate_aware(cls, v: dt.datetime, info) -> dt.datetime:
        """Reject naive datetimes; an interval must be unambiguous."""
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError(f"{info.field_name} must be timezone-aware")
        return v

    @model_validator(mode="after")
    def validate_order(self) -> "TimeInterval":
        """Validate that end is strictly after start."""
        if _as_utc(self.end) <= _as_utc(self.start):
            raise ValueError(
                f"end ({self.end.isoformat()}) must be after start "
                f"({self.start.isoformat()})"
            )
        return self

    @property
    def duration(self) -> dt.timedelta:
        """Elapsed time between start and end."""
        return _as_utc(self.end) - _as_utc(self.start)


class RoundedEntry(BaseDataModel):
    """Billable time entry with quarter-hour aligned boundaries.

    Computed once when a timer stops and never mutated afterwards.

    Attributes:
        start_time: Rounded start instant in the civil timezone
        end_time: Rounded end instant in the civil timezone
        duration_hours: Billable hours (>= 0.25, 2 decimal places)

    Example:
        >>> entry = RoundedEntry(
        ...     start_time=dt.datetime(2025, 11, 12, 19, 0, tzinfo=dt.timezone.utc),
        ...     end_time=dt.datetime(2025, 11, 12, 19, 15, tzinfo=dt.timezone.utc),
        ...     duration_hours=Decimal("0.25"),
        ... )
        >>> entry.duration_minutes
        15
    """

    model_config = ConfigDict(frozen=True)

    start_time: dt.datetime = Field(..., description="Rounded start instant")
    end_time: dt.datetime = Field(..., description="Rounded end instant")
    duration_hours: Decimal = Field(
        ..., ge=MINIMUM_DURATION_HOURS, description="Billable hours"
    )

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_aware(cls, v: dt.datetime, info) -> dt.datetime:
        """Reject naive datetimes; rounded boundaries carry their timezone."""
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError(f"{info.field_name} must be timezone-aware")
        return v

    @model_validator(mode="after")
    def validate_boundaries(self) -> "RoundedEntry":
        """Validate that the duration matches the boundaries.

        Raises:
            ValueError: If end is not after start or the stored duration
                disagrees with the boundaries
        """
        if _as_utc(self.end_time) <= _as_utc(self.start_time):
            raise ValueError(
                f"end_time ({self.end_time.isoformat()}) must be after "
                f"start_time ({self.start_time.isoformat()})"
            )
        elapsed = Decimal(str(self._elapsed().total_seconds()))
        expected = (elapsed / Decimal("3600")).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        if expected != self.duration_hours:
            raise ValueError(
                f"duration_hours ({self.duration_hours}) does not match "
                f"boundaries ({expected} hours)"
            )
        return self

    def _elapsed(self) -> dt.timedelta:
        return _as_utc(self.end_time) - _as_utc(self.start_time)

    @property
    def duration_minutes(self) -> int:
        """Billable duration in whole minutes."""
        return int(self._elapsed().total_seconds() // 60)

    def to_time_entry_fields(self) -> Dict[str, Any]:
        """Build the field map a time entry store persists on timer stop.

        Wall-clock fields are taken from the timezone the entry was
        rounded in.

        Returns:
            Dictionary with entry_date, entry_time, entry_end_time,
            duration_hours, and date_start
        """
        return {
            "entry_date": self.start_time.date(),
            "entry_time": self.start_time.strftime("%H:%M:%S"),
            "entry_end_time": self.end_time.strftime("%H:%M:%S"),
            "duration_hours": self.duration_hours,
            "date_start": self.start_time,
        }
