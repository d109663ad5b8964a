"""
Participant roster helpers.

Read-side view over a loaded participant list.  The list is small
(bounded by ``max_participants`` plus the waitlist), so every helper is
a linear scan.
"""

from __future__ import annotations

import uuid
from typing import Optional, Sequence

from app.models.enums import ParticipantStatus
from app.models.play_session import SessionParticipant


def count_by_status(participants: Sequence[SessionParticipant]) -> tuple[int, int]:
    """Return ``(confirmed, pending)`` counts."""
    confirmed = 0
    pending = 0
    for p in participants:
        if p.status == ParticipantStatus.CONFIRMED:
            confirmed += 1
        elif p.status == ParticipantStatus.PENDING:
            pending += 1
    return confirmed, pending


def find(participants: Sequence[SessionParticipant], user_id: uuid.UUID, ) -> tuple[bool, Optional[ParticipantStatus]]:
    """Return ``(found, status)`` for *user_id*."""
    for p in participants:
        if p.user_id == user_id:
            return True, p.status
    return False, None


def first_pending(participants: Sequence[SessionParticipant]) -> Optional[SessionParticipant]:
    """Earliest-joined pending participant, or ``None``.

    Ties on ``joined_at`` resolve to list order, so the result is stable
    FIFO as long as participants are listed in insertion order.
    """
    pending = [p for p in participants if p.status == ParticipantStatus.PENDING]
    if not pending:
        return None
    return min(pending, key=lambda p: p.joined_at)


def active(participants: Sequence[SessionParticipant]) -> list[SessionParticipant]:
    """Participants whose membership is not cancelled."""
    return [p for p in participants if p.status != ParticipantStatus.CANCELLED]
