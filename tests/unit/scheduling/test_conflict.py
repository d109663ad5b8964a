"""Tests for court conflict detection."""

import datetime
import uuid

import pytest

from app.core.exceptions import CourtBooked
from app.models.enums import PlayerLevel, SessionStatus
from app.models.play_session import PlaySession
from app.scheduling.conflict import check_conflict, check_courts, windows_overlap

DAY = datetime.date(2026, 3, 9)
COURT = uuid.uuid4()


def _t(value: str) -> datetime.time:
    return datetime.time.fromisoformat(value)


def _dt(value: str) -> datetime.datetime:
    return datetime.datetime.combine(DAY, _t(value))


def _session(start: str, end: str, status: SessionStatus = SessionStatus.OPEN) -> PlaySession:
    return PlaySession(id=uuid.uuid4(), host_id=uuid.uuid4(), venue_id=uuid.uuid4(), title="Existing",
                       session_date=DAY, start_time=_t(start), end_time=_t(end),
                       player_level=PlayerLevel.BEGINNER, max_participants=4, status=status, )


# ======================================================================
# windows_overlap
# ======================================================================


class TestWindowsOverlap:
    @pytest.mark.parametrize(
        "a, b, expected",
        [
            (("10:00", "12:00"), ("11:00", "13:00"), True),
            (("10:00", "12:00"), ("10:30", "11:30"), True),
            (("10:00", "12:00"), ("10:00", "12:00"), True),
            (("10:00", "12:00"), ("12:00", "13:00"), False),
            (("10:00", "12:00"), ("08:00", "10:00"), False),
            (("10:00", "12:00"), ("13:00", "14:00"), False),
        ],
    )
    def test_overlap_is_symmetric(self, a, b, expected):
        a_start, a_end = _dt(a[0]), _dt(a[1])
        b_start, b_end = _dt(b[0]), _dt(b[1])
        assert windows_overlap(a_start, a_end, b_start, b_end) is expected
        assert windows_overlap(b_start, b_end, a_start, a_end) is expected


# ======================================================================
# check_conflict
# ======================================================================


class TestCheckConflict:
    def test_free_court(self):
        check_conflict(COURT, DAY, _t("10:00"), _t("12:00"), [])

    def test_overlap_reports_existing_window(self):
        with pytest.raises(CourtBooked) as exc_info:
            check_conflict(COURT, DAY, _t("11:00"), _t("13:00"), [_session("10:00", "12:00")])
        err = exc_info.value
        assert err.conflicting_start == _t("10:00")
        assert err.conflicting_end == _t("12:00")
        assert err.detail == "Court is already booked from 10:00 to 12:00"
        assert err.to_dict()["conflicting_start"] == "10:00"

    def test_touching_windows_do_not_conflict(self):
        existing = [_session("10:00", "12:00"), _session("14:00", "16:00")]
        check_conflict(COURT, DAY, _t("12:00"), _t("14:00"), existing)

    def test_cancelled_sessions_release_the_court(self):
        check_conflict(COURT, DAY, _t("10:00"), _t("12:00"), [_session("10:00", "12:00", SessionStatus.CANCELLED)])

    def test_completed_sessions_still_count(self):
        with pytest.raises(CourtBooked):
            check_conflict(COURT, DAY, _t("10:00"), _t("12:00"),
                           [_session("10:00", "12:00", SessionStatus.COMPLETED)])

    def test_excluded_session_ignores_itself(self):
        own = _session("10:00", "12:00")
        check_conflict(COURT, DAY, _t("10:00"), _t("12:00"), [own], exclude_session_id=own.id)


class TestCheckCourts:
    def test_any_conflicting_court_fails(self):
        free, busy = uuid.uuid4(), uuid.uuid4()
        with pytest.raises(CourtBooked) as exc_info:
            check_courts([free, busy], DAY, _t("10:00"), _t("12:00"), {busy: [_session("11:00", "12:00")]})
        assert exc_info.value.court_id == busy

    def test_all_courts_free(self):
        check_courts([uuid.uuid4(), uuid.uuid4()], DAY, _t("10:00"), _t("12:00"), {})
