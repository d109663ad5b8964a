"""Tests for session window validation.

Pure unit tests: the current instant is passed in explicitly, nothing
touches the database.
"""

import datetime

import pytest

from app.core.exceptions import InvertedRange, OutsideVenueHours, TooFarAhead, TooLong, TooShort, TooSoon
from app.scheduling.hours import OperatingRange
from app.scheduling.validator import (DEFAULT_CONFIG, SchedulingConfig, add_months, validate_against_operating_ranges,
                                      validate_window, )

NOW = datetime.datetime(2026, 3, 2, 10, 0)
TODAY = NOW.date()
NEXT_WEEK = TODAY + datetime.timedelta(days=7)
OPEN = datetime.time(8, 0)
CLOSE = datetime.time(22, 0)


def _t(value: str) -> datetime.time:
    return datetime.time.fromisoformat(value)


def _range(day: str, open_time: str | None = "08:00", close_time: str | None = "22:00",
           is_open: bool = True) -> OperatingRange:
    return OperatingRange(day=day, is_open=is_open, open_time=open_time, close_time=close_time)


# ======================================================================
# Config / helpers
# ======================================================================


class TestSchedulingConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.min_duration_minutes == 30
        assert DEFAULT_CONFIG.max_duration_minutes is None
        assert DEFAULT_CONFIG.max_advance_months == 3


class TestAddMonths:
    @pytest.mark.parametrize(
        "day, months, expected",
        [
            (datetime.date(2026, 3, 2), 3, datetime.date(2026, 6, 2)),
            (datetime.date(2026, 11, 15), 3, datetime.date(2027, 2, 15)),
            (datetime.date(2026, 11, 30), 3, datetime.date(2027, 2, 28)),
            (datetime.date(2027, 11, 30), 3, datetime.date(2028, 2, 29)),
            (datetime.date(2026, 1, 31), 0, datetime.date(2026, 1, 31)),
        ],
    )
    def test_calendar_arithmetic(self, day, months, expected):
        assert add_months(day, months) == expected


# ======================================================================
# validate_window
# ======================================================================


class TestValidateWindow:
    def test_valid_window(self):
        validate_window(NEXT_WEEK, _t("18:00"), _t("20:00"), OPEN, CLOSE, NOW)

    def test_yesterday_is_too_soon(self):
        with pytest.raises(TooSoon):
            validate_window(TODAY - datetime.timedelta(days=1), _t("18:00"), _t("20:00"), OPEN, CLOSE, NOW)

    def test_today_is_allowed(self):
        validate_window(TODAY, _t("18:00"), _t("20:00"), OPEN, CLOSE, NOW)

    def test_exactly_three_months_ahead_is_allowed(self):
        validate_window(datetime.date(2026, 6, 2), _t("18:00"), _t("20:00"), OPEN, CLOSE, NOW)

    def test_beyond_three_months_is_too_far(self):
        with pytest.raises(TooFarAhead) as exc_info:
            validate_window(datetime.date(2026, 6, 3), _t("18:00"), _t("20:00"), OPEN, CLOSE, NOW)
        assert "2026-06-02" in exc_info.value.detail

    @pytest.mark.parametrize("start, end", [("20:00", "18:00"), ("18:00", "18:00")])
    def test_inverted_or_empty_range(self, start, end):
        with pytest.raises(InvertedRange):
            validate_window(NEXT_WEEK, _t(start), _t(end), OPEN, CLOSE, NOW)

    def test_twenty_nine_minutes_is_too_short(self):
        with pytest.raises(TooShort):
            validate_window(NEXT_WEEK, _t("18:00"), _t("18:29"), OPEN, CLOSE, NOW)

    def test_thirty_minutes_is_enough(self):
        validate_window(NEXT_WEEK, _t("18:00"), _t("18:30"), OPEN, CLOSE, NOW)

    def test_configured_minimum(self):
        config = SchedulingConfig(min_duration_minutes=60)
        with pytest.raises(TooShort) as exc_info:
            validate_window(NEXT_WEEK, _t("18:00"), _t("18:45"), OPEN, CLOSE, NOW, config)
        assert "60 minutes" in exc_info.value.detail

    def test_configured_maximum(self):
        config = SchedulingConfig(max_duration_minutes=120)
        validate_window(NEXT_WEEK, _t("10:00"), _t("12:00"), OPEN, CLOSE, NOW, config)
        with pytest.raises(TooLong):
            validate_window(NEXT_WEEK, _t("10:00"), _t("12:01"), OPEN, CLOSE, NOW, config)

    def test_end_past_closing_is_outside_hours(self):
        """Venue 08:00-22:00 rejects 21:45-22:30."""
        with pytest.raises(OutsideVenueHours):
            validate_window(NEXT_WEEK, _t("21:45"), _t("22:30"), OPEN, CLOSE, NOW)

    def test_start_before_opening_is_outside_hours(self):
        with pytest.raises(OutsideVenueHours):
            validate_window(NEXT_WEEK, _t("07:30"), _t("09:00"), OPEN, CLOSE, NOW)

    def test_window_matching_opening_hours_exactly(self):
        validate_window(NEXT_WEEK, OPEN, CLOSE, OPEN, CLOSE, NOW)

    def test_midnight_close_means_end_of_day(self):
        validate_window(NEXT_WEEK, _t("22:00"), _t("23:59"), OPEN, datetime.time(0, 0), NOW)

    def test_venue_hours_skipped_when_unknown(self):
        validate_window(NEXT_WEEK, _t("05:00"), _t("06:00"), None, None, NOW)

    def test_rules_apply_in_order(self):
        """A window that is both in the past and inverted reports the date first."""
        with pytest.raises(TooSoon):
            validate_window(TODAY - datetime.timedelta(days=1), _t("20:00"), _t("18:00"), OPEN, CLOSE, NOW)


# ======================================================================
# validate_against_operating_ranges
# ======================================================================


class TestValidateAgainstOperatingRanges:
    def test_accepts_window_inside_weekday_range(self):
        ranges = [_range("monday")]
        chosen = validate_against_operating_ranges(NEXT_WEEK, _t("18:00"), _t("20:00"), ranges, NOW)
        assert chosen.day == "monday"

    def test_split_day_accepts_either_range(self):
        ranges = [_range("monday", "08:00", "12:00"), _range("monday", "16:00", "22:00")]
        chosen = validate_against_operating_ranges(NEXT_WEEK, _t("17:00"), _t("19:00"), ranges, NOW)
        assert chosen.open_time == _t("16:00")

    def test_split_day_rejects_window_spanning_the_gap(self):
        ranges = [_range("monday", "08:00", "12:00"), _range("monday", "16:00", "22:00")]
        with pytest.raises(OutsideVenueHours):
            validate_against_operating_ranges(NEXT_WEEK, _t("11:00"), _t("17:00"), ranges, NOW)

    def test_day_without_range_is_closed(self):
        ranges = [_range("tuesday")]
        with pytest.raises(OutsideVenueHours) as exc_info:
            validate_against_operating_ranges(NEXT_WEEK, _t("18:00"), _t("20:00"), ranges, NOW)
        assert "closed" in exc_info.value.detail

    def test_closed_day_still_reports_earlier_rules_first(self):
        with pytest.raises(TooShort):
            validate_against_operating_ranges(NEXT_WEEK, _t("18:00"), _t("18:10"), [], NOW)

    def test_dated_closure_overrides_weekday(self):
        ranges = [_range("monday"), _range(NEXT_WEEK.isoformat(), None, None, is_open=False)]
        with pytest.raises(OutsideVenueHours):
            validate_against_operating_ranges(NEXT_WEEK, _t("18:00"), _t("20:00"), ranges, NOW)

    def test_dated_opening_overrides_weekday_hours(self):
        ranges = [_range("monday", "08:00", "12:00"), _range(NEXT_WEEK.isoformat(), "14:00", "23:00")]
        chosen = validate_against_operating_ranges(NEXT_WEEK, _t("21:00"), _t("23:00"), ranges, NOW)
        assert chosen.specific_date == NEXT_WEEK
