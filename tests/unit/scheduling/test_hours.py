"""Tests for operating-hours decoding and day lookup."""

import datetime

import pytest

from app.core.exceptions import InvalidVenue
from app.scheduling.hours import OperatingRange, decode_operating_ranges, ranges_for_day

MONDAY = datetime.date(2026, 3, 9)
TUESDAY = datetime.date(2026, 3, 10)


class TestOperatingRange:
    def test_day_is_normalised(self):
        r = OperatingRange(day=" Monday ", open_time="08:00", close_time="22:00")
        assert r.day == "monday"
        assert r.specific_date is None

    def test_iso_date_day(self):
        r = OperatingRange(day="2026-12-25", is_open=False)
        assert r.specific_date == datetime.date(2026, 12, 25)

    def test_unknown_day_rejected(self):
        with pytest.raises(ValueError):
            OperatingRange(day="funday", open_time="08:00", close_time="22:00")

    def test_open_day_requires_times(self):
        with pytest.raises(ValueError):
            OperatingRange(day="monday", open_time="08:00")

    def test_closed_day_needs_no_times(self):
        r = OperatingRange(day="sunday", is_open=False)
        assert r.open_time is None

    @pytest.mark.parametrize(
        "day, date, expected",
        [
            ("monday", MONDAY, True),
            ("monday", TUESDAY, False),
            ("2026-03-10", TUESDAY, True),
            ("2026-03-10", MONDAY, False),
        ],
    )
    def test_matches(self, day, date, expected):
        r = OperatingRange(day=day, open_time="08:00", close_time="22:00")
        assert r.matches(date) is expected


class TestDecodeOperatingRanges:
    def test_decodes_stored_blob(self):
        ranges = decode_operating_ranges([
            {"day": "monday", "is_open": True, "open_time": "08:00", "close_time": "22:00"},
            {"day": "2026-12-25", "is_open": False},
        ])
        assert len(ranges) == 2
        assert ranges[0].open_time == datetime.time(8, 0)
        assert ranges[1].is_open is False

    def test_none_and_empty_decode_to_no_ranges(self):
        assert decode_operating_ranges(None) == []
        assert decode_operating_ranges([]) == []

    def test_malformed_blob_is_invalid_venue(self):
        with pytest.raises(InvalidVenue):
            decode_operating_ranges([{"day": "monday", "open_time": "8 o'clock", "close_time": "22:00"}])


class TestRangesForDay:
    def test_weekday_ranges(self):
        ranges = decode_operating_ranges([
            {"day": "monday", "open_time": "08:00", "close_time": "12:00"},
            {"day": "monday", "open_time": "16:00", "close_time": "22:00"},
            {"day": "tuesday", "open_time": "08:00", "close_time": "22:00"},
        ])
        assert [r.open_time for r in ranges_for_day(ranges, MONDAY)] == [datetime.time(8, 0), datetime.time(16, 0)]

    def test_closed_entries_are_dropped(self):
        ranges = decode_operating_ranges([{"day": "monday", "is_open": False}])
        assert ranges_for_day(ranges, MONDAY) == []

    def test_dated_entries_take_precedence(self):
        ranges = decode_operating_ranges([
            {"day": "monday", "open_time": "08:00", "close_time": "22:00"},
            {"day": "2026-03-09", "open_time": "10:00", "close_time": "14:00"},
        ])
        covering = ranges_for_day(ranges, MONDAY)
        assert len(covering) == 1
        assert covering[0].open_time == datetime.time(10, 0)
