"""
Time-window validation for play sessions.

Pure functions: nothing here touches the database.  The current instant
is always passed in, which keeps every rule deterministic under test.

Rules, in order, each a hard rejection:

1. the date is today or later                       -> ``TooSoon``
2. the date is at most ``max_advance_months`` ahead -> ``TooFarAhead``
3. start is before end                              -> ``InvertedRange``
4. the duration is at least the minimum             -> ``TooShort``
   (and at most the optional maximum)               -> ``TooLong``
5. the window fits the venue's open/close times     -> ``OutsideVenueHours``

All comparisons combine the date with the time of day into naive local
datetimes, so the whole check runs in one reference time zone.
"""

from __future__ import annotations

import calendar
import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.core.exceptions import (InvertedRange, OutsideVenueHours, TooFarAhead, TooLong, TooShort, TooSoon, )
from app.scheduling.hours import OperatingRange, ranges_for_day

# ======================================================================
# Configuration
# ======================================================================


class SchedulingConfig(BaseModel):
    """Limits applied by the window validator.

    Built from application settings by the service layer; tests inject
    their own instance.
    """

    min_duration_minutes: int = Field(30, ge=1)
    max_duration_minutes: Optional[int] = Field(None, ge=1)
    max_advance_months: int = Field(3, ge=0)


DEFAULT_CONFIG = SchedulingConfig()

# ======================================================================
# Date/time helpers
# ======================================================================


def add_months(day: datetime.date, months: int) -> datetime.date:
    """Calendar month arithmetic, clamping to the last day of the month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return datetime.date(year, month, min(day.day, last_day))


def combine(day: datetime.date, time_of_day: datetime.time) -> datetime.datetime:
    return datetime.datetime.combine(day, time_of_day)


def _closing_instant(day: datetime.date, close_time: datetime.time) -> datetime.datetime:
    # 00:00 as a closing time means midnight at the end of the day
    if close_time == datetime.time.min:
        return combine(day + datetime.timedelta(days=1), close_time)
    return combine(day, close_time)


# ======================================================================
# Validation
# ======================================================================


def validate_window(session_date: datetime.date, start: datetime.time, end: datetime.time,
                    venue_open: Optional[datetime.time], venue_close: Optional[datetime.time],
                    now: datetime.datetime, config: SchedulingConfig = DEFAULT_CONFIG, ) -> None:
    """Validate a proposed session window.

    When *venue_open* / *venue_close* are ``None`` only rules 1-4 run.
    """
    today = now.date()
    if session_date < today:
        raise TooSoon(f"Session date {session_date.isoformat()} is in the past")

    latest = add_months(today, config.max_advance_months)
    if session_date > latest:
        raise TooFarAhead(f"Cannot create sessions more than {config.max_advance_months} months in advance "
                          f"(latest allowed date is {latest.isoformat()})")

    start_at = combine(session_date, start)
    end_at = combine(session_date, end)
    if start_at >= end_at:
        raise InvertedRange()

    duration = end_at - start_at
    if duration < datetime.timedelta(minutes=config.min_duration_minutes):
        raise TooShort(f"Session must be at least {config.min_duration_minutes} minutes long")
    if config.max_duration_minutes is not None and duration > datetime.timedelta(
            minutes=config.max_duration_minutes):
        raise TooLong(f"Session must be at most {config.max_duration_minutes} minutes long")

    if venue_open is None or venue_close is None:
        return

    if start_at < combine(session_date, venue_open) or end_at > _closing_instant(session_date, venue_close):
        raise OutsideVenueHours(f"Session time must be within venue operating hours "
                                f"({venue_open:%H:%M} - {venue_close:%H:%M})")


def validate_against_operating_ranges(session_date: datetime.date, start: datetime.time, end: datetime.time,
                                      ranges: list[OperatingRange], now: datetime.datetime,
                                      config: SchedulingConfig = DEFAULT_CONFIG, ) -> OperatingRange:
    """Validate a window against every range declared for that day.

    The window is accepted if it fits at least one range covering the
    date; the accepting range is returned.  Rules 1-4 do not depend on
    the range and fail immediately.
    """
    covering = ranges_for_day(ranges, session_date)
    if not covering:
        validate_window(session_date, start, end, None, None, now, config)
        raise OutsideVenueHours(f"Venue is closed on {session_date:%A} {session_date.isoformat()}")

    last_error: Optional[OutsideVenueHours] = None
    for operating_range in covering:
        try:
            validate_window(session_date, start, end, operating_range.open_time, operating_range.close_time, now,
                            config)
            return operating_range
        except OutsideVenueHours as e:
            last_error = e
    raise last_error
