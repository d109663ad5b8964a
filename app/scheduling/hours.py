"""
Venue operating hours.

Venues store their hours as a JSON list of day ranges.  Each entry names
either a weekday (``"monday"`` .. ``"sunday"``) or a specific ISO date
(``"2026-12-25"``).  Dated entries override the weekday entries for that
date, which is how holidays and special openings are expressed::

    [{"day": "saturday", "open_time": "09:00", "close_time": "18:00"},
     {"day": "2026-12-26", "is_open": false}]

The blob is decoded once, at the validation boundary, into a list of
:class:`OperatingRange`.
"""

from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, TypeAdapter, ValidationError, field_validator, model_validator

from app.core.exceptions import InvalidVenue

WEEKDAYS: tuple[str, ...] = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday", )


class OperatingRange(BaseModel):
    """One declared open/close window for a weekday or a specific date."""

    day: str
    is_open: bool = True
    open_time: Optional[datetime.time] = None
    close_time: Optional[datetime.time] = None

    @field_validator("day")
    @classmethod
    def normalise_day(cls, value: str) -> str:
        value = value.strip().lower()
        if value in WEEKDAYS:
            return value
        try:
            datetime.date.fromisoformat(value)
        except ValueError:
            raise ValueError(f"day must be a weekday name or YYYY-MM-DD, got '{value}'")
        return value

    @model_validator(mode="after")
    def require_times_when_open(self) -> "OperatingRange":
        if self.is_open and (self.open_time is None or self.close_time is None):
            raise ValueError(f"open_time and close_time are required when '{self.day}' is open")
        return self

    @property
    def specific_date(self) -> Optional[datetime.date]:
        """The ISO date this entry applies to, ``None`` for weekday entries."""
        if self.day in WEEKDAYS:
            return None
        return datetime.date.fromisoformat(self.day)

    def matches(self, day: datetime.date) -> bool:
        specific = self.specific_date
        if specific is not None:
            return specific == day
        return WEEKDAYS.index(self.day) == day.weekday()


_RANGES_ADAPTER = TypeAdapter(list[OperatingRange])


def decode_operating_ranges(raw: Optional[list]) -> list[OperatingRange]:
    """Decode the stored JSON blob.

    Raises :class:`InvalidVenue` when the venue data is malformed.
    """
    try:
        return _RANGES_ADAPTER.validate_python(raw or [])
    except ValidationError as e:
        raise InvalidVenue(f"Venue operating hours are malformed: {e.error_count()} invalid entries")


def ranges_for_day(ranges: list[OperatingRange], day: datetime.date) -> list[OperatingRange]:
    """Return the open ranges that cover *day*.

    Entries for the specific date take precedence over weekday entries.
    """
    dated = [r for r in ranges if r.specific_date == day]
    candidates = dated if dated else [r for r in ranges if r.specific_date is None and r.matches(day)]
    return [r for r in candidates if r.is_open]
