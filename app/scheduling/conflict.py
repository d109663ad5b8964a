"""
Court conflict detection.

Two windows on the same court conflict iff they overlap as half-open
intervals ``[start, end)``: touching windows (one ends exactly when the
next starts) never conflict.  Cancelled sessions do not hold the court.
"""

from __future__ import annotations

import datetime
import uuid
from typing import Iterable, Mapping, Optional

from app.core.exceptions import CourtBooked
from app.models.enums import SessionStatus
from app.models.play_session import PlaySession
from app.scheduling.validator import combine


def windows_overlap(a_start: datetime.datetime, a_end: datetime.datetime, b_start: datetime.datetime,
                    b_end: datetime.datetime, ) -> bool:
    """Half-open interval overlap; symmetric in its two windows."""
    return a_start < b_end and b_start < a_end


def check_conflict(court_id: uuid.UUID, session_date: datetime.date, start: datetime.time, end: datetime.time,
                   existing_sessions: Iterable[PlaySession], exclude_session_id: Optional[uuid.UUID] = None, ) -> None:
    """Raise :class:`CourtBooked` if the proposed window overlaps an
    active session already on *court_id*.

    *exclude_session_id* lets a session being updated ignore itself.
    """
    proposed_start = combine(session_date, start)
    proposed_end = combine(session_date, end)

    for existing in existing_sessions:
        if existing.status == SessionStatus.CANCELLED:
            continue
        if exclude_session_id is not None and existing.id == exclude_session_id:
            continue
        existing_start = combine(existing.session_date, existing.start_time)
        existing_end = combine(existing.session_date, existing.end_time)
        if windows_overlap(proposed_start, proposed_end, existing_start, existing_end):
            raise CourtBooked(court_id, existing.start_time, existing.end_time)


def check_courts(court_ids: Iterable[uuid.UUID], session_date: datetime.date, start: datetime.time,
                 end: datetime.time, sessions_by_court: Mapping[uuid.UUID, Iterable[PlaySession]],
                 exclude_session_id: Optional[uuid.UUID] = None, ) -> None:
    """Run :func:`check_conflict` independently for every court.

    Any single conflicting court fails the whole request.
    """
    for court_id in court_ids:
        check_conflict(court_id, session_date, start, end, sessions_by_court.get(court_id, ()),
                       exclude_session_id=exclude_session_id)
