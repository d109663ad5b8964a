"""
Play session database models.

A play session is a host-organised match at one or more courts of a
venue.  Participants (including the host) hold a confirmed / pending /
cancelled membership row.  ``version`` is bumped by every write to the
session row and acts as the compare-and-swap token that serialises
capacity changes.
"""

import datetime
import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.enums import ParticipantStatus, PlayerLevel, SessionStatus, enum_column


class PlaySession(SQLModel, table=True):
    """A scheduled group match."""

    __tablename__ = "play_sessions"
    __table_args__ = (
        CheckConstraint("max_participants >= 2", name="ck_play_sessions_max_participants"),
        CheckConstraint("start_time < end_time", name="ck_play_sessions_time_range"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    host_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    venue_id: uuid.UUID = Field(foreign_key="venues.id", nullable=False, index=True)

    title: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None, max_length=2000)

    # Local wall-clock schedule
    session_date: datetime.date = Field(nullable=False, index=True)
    start_time: datetime.time = Field(nullable=False)
    end_time: datetime.time = Field(nullable=False)

    player_level: PlayerLevel = Field(sa_column=enum_column(PlayerLevel, "session_player_level", nullable=False))
    max_participants: int = Field(nullable=False, ge=2)
    cost_per_person: float = Field(default=0.0, nullable=False, ge=0)

    # Cancellation policy for participants
    allow_cancellation: bool = Field(default=False, nullable=False)
    cancellation_deadline_hours: Optional[int] = Field(default=None, ge=0)

    status: SessionStatus = Field(default=SessionStatus.OPEN,
                                  sa_column=enum_column(SessionStatus, "session_status", nullable=False, index=True))
    version: int = Field(default=1, nullable=False)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.now)

    @property
    def starts_at(self) -> datetime.datetime:
        return datetime.datetime.combine(self.session_date, self.start_time)

    @property
    def ends_at(self) -> datetime.datetime:
        return datetime.datetime.combine(self.session_date, self.end_time)


class SessionCourt(SQLModel, table=True):
    """Association between a session and a court it occupies."""

    __tablename__ = "session_courts"
    __table_args__ = (UniqueConstraint("session_id", "court_id", name="uq_session_court"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    session_id: uuid.UUID = Field(foreign_key="play_sessions.id", nullable=False, index=True)
    court_id: uuid.UUID = Field(foreign_key="courts.id", nullable=False, index=True)
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)


class SessionParticipant(SQLModel, table=True):
    """A user's membership in a session.

    One row per (session, user): a user who cancelled keeps the cancelled
    row and cannot join again.
    """

    __tablename__ = "session_participants"
    __table_args__ = (UniqueConstraint("session_id", "user_id", name="uq_participant_session_user"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    session_id: uuid.UUID = Field(foreign_key="play_sessions.id", nullable=False, index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    status: ParticipantStatus = Field(sa_column=enum_column(ParticipantStatus, "participant_status", nullable=False))
    joined_at: datetime.datetime = Field(nullable=False)
    cancelled_at: Optional[datetime.datetime] = Field(default=None)


class SessionRule(SQLModel, table=True):
    """Free-text house rule attached to a session."""

    __tablename__ = "session_rules"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    session_id: uuid.UUID = Field(foreign_key="play_sessions.id", nullable=False, index=True)
    rule_text: str = Field(max_length=500, nullable=False)
    position: int = Field(default=0, nullable=False)
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)
