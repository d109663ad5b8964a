"""
Play session repository.

Handles database operations for :class:`PlaySession` and its courts,
participants and rules.

Methods only ``flush``; the calling service owns the transaction and
commits once per lifecycle operation, so a failed operation leaves no
partial writes.  Session writes go through :meth:`update`, a
compare-and-swap on ``version``.
"""

import datetime
import uuid
from typing import Optional

from sqlalchemy import and_, delete, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.exceptions import ConcurrencyConflict, NotFound
from app.models.enums import ParticipantStatus, PlayerLevel, SessionStatus
from app.models.play_session import PlaySession, SessionCourt, SessionParticipant, SessionRule
from app.models.venue import Venue


class PlaySessionRepository:
    """Repository for PlaySession database operations."""

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def get_by_id(self, session_id: uuid.UUID, for_update: bool = False) -> Optional[PlaySession]:
        """Get a session by id.

        With *for_update* the row is locked (``SELECT ... FOR UPDATE``)
        and re-read from the database even if already loaded.
        """
        statement = select(PlaySession).where(PlaySession.id == session_id)
        if for_update:
            statement = statement.with_for_update().execution_options(populate_existing=True)
        return self.session.exec(statement).first()

    def list_by_court_and_date(self, court_id: uuid.UUID, session_date: datetime.date) -> list[PlaySession]:
        """All sessions on *court_id* that date, any status."""
        statement = (select(PlaySession).join(SessionCourt, SessionCourt.session_id == PlaySession.id).where(
            SessionCourt.court_id == court_id, PlaySession.session_date == session_date, ).order_by(
            PlaySession.start_time))
        return list(self.session.exec(statement).all())

    def create(self, play_session: PlaySession, court_ids: list[uuid.UUID]) -> PlaySession:
        self.session.add(play_session)
        self.session.flush()
        for court_id in court_ids:
            self.session.add(SessionCourt(session_id=play_session.id, court_id=court_id))
        self.session.flush()
        return play_session

    def update(self, play_session: PlaySession, expected_version: int) -> PlaySession:
        """Write *play_session* if nobody else wrote it since it was read.

        Raises :class:`ConcurrencyConflict` when the stored ``version`` no
        longer equals *expected_version*.
        """
        self.session.add(play_session)
        self.session.flush()
        statement = (update(PlaySession).where(PlaySession.id == play_session.id,
                                               PlaySession.version == expected_version, ).values(
            version=expected_version + 1))
        result = self.session.exec(statement)
        if result.rowcount != 1:
            raise ConcurrencyConflict()
        return play_session

    def search(self, session_date: Optional[datetime.date] = None, venue_id: Optional[uuid.UUID] = None,
               location: Optional[str] = None, player_level: Optional[PlayerLevel] = None,
               status: Optional[SessionStatus] = None, skip: int = 0,
               limit: int = 20, ) -> tuple[list[PlaySession], int]:
        """Filtered, paginated listing ordered by date then start time.

        Returns ``(page, total)``.
        """
        conditions = []
        if session_date is not None:
            conditions.append(PlaySession.session_date == session_date)
        if venue_id is not None:
            conditions.append(PlaySession.venue_id == venue_id)
        if location:
            conditions.append(Venue.location == location)
        if player_level is not None:
            conditions.append(PlaySession.player_level == player_level)
        if status is not None:
            conditions.append(PlaySession.status == status)

        statement = (select(PlaySession).join(Venue, Venue.id == PlaySession.venue_id).where(*conditions).order_by(
            PlaySession.session_date, PlaySession.start_time).offset(skip).limit(limit))
        count_statement = (select(func.count()).select_from(PlaySession).join(Venue,
                                                                              Venue.id == PlaySession.venue_id).where(
            *conditions))
        sessions = list(self.session.exec(statement).all())
        total = self.session.exec(count_statement).one()
        return sessions, total

    def get_user_sessions(self, user_id: uuid.UUID, include_history: bool, today: datetime.date, ) -> list[PlaySession]:
        """Sessions the user hosts or has a participant row in, newest first."""
        joined = select(SessionParticipant.session_id).where(SessionParticipant.user_id == user_id)
        statement = select(PlaySession).where(or_(PlaySession.host_id == user_id, PlaySession.id.in_(joined)))
        if not include_history:
            statement = statement.where(PlaySession.session_date >= today)
        statement = statement.order_by(PlaySession.session_date.desc(), PlaySession.start_time.desc())
        return list(self.session.exec(statement).all())

    def list_finished(self, now: datetime.datetime) -> list[PlaySession]:
        """Open or full sessions whose end instant is not after *now*."""
        today = now.date()
        statement = (select(PlaySession).where(PlaySession.status.in_([SessionStatus.OPEN, SessionStatus.FULL]),
                                               or_(PlaySession.session_date < today,
                                                   and_(PlaySession.session_date == today,
                                                        PlaySession.end_time <= now.time()), ), ).order_by(
            PlaySession.session_date, PlaySession.start_time))
        return list(self.session.exec(statement).all())

    # ------------------------------------------------------------------
    # Courts
    # ------------------------------------------------------------------

    def get_court_ids(self, session_id: uuid.UUID) -> list[uuid.UUID]:
        statement = (select(SessionCourt.court_id).where(SessionCourt.session_id == session_id).order_by(
            SessionCourt.created_at))
        return list(self.session.exec(statement).all())

    def replace_courts(self, session_id: uuid.UUID, court_ids: list[uuid.UUID]) -> None:
        self.session.exec(delete(SessionCourt).where(SessionCourt.session_id == session_id))
        for court_id in court_ids:
            self.session.add(SessionCourt(session_id=session_id, court_id=court_id))
        self.session.flush()

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    def get_participants(self, session_id: uuid.UUID) -> list[SessionParticipant]:
        """Participants in join order."""
        statement = (select(SessionParticipant).where(SessionParticipant.session_id == session_id).order_by(
            SessionParticipant.joined_at))
        return list(self.session.exec(statement).all())

    def add_participant(self, participant: SessionParticipant) -> SessionParticipant:
        """Insert a participant row.

        The (session, user) unique constraint turns a racing duplicate
        insert into :class:`ConcurrencyConflict`.
        """
        self.session.add(participant)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConcurrencyConflict("A participant row for this user was written concurrently") from e
        return participant

    def update_participant_status(self, session_id: uuid.UUID, user_id: uuid.UUID, status: ParticipantStatus,
                                  now: datetime.datetime, ) -> SessionParticipant:
        statement = select(SessionParticipant).where(SessionParticipant.session_id == session_id,
                                                     SessionParticipant.user_id == user_id, )
        participant = self.session.exec(statement).first()
        if participant is None:
            raise NotFound("Participant not found")
        participant.status = status
        if status == ParticipantStatus.CANCELLED:
            participant.cancelled_at = now
        self.session.add(participant)
        self.session.flush()
        return participant

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def get_rules(self, session_id: uuid.UUID) -> list[SessionRule]:
        statement = select(SessionRule).where(SessionRule.session_id == session_id).order_by(SessionRule.position)
        return list(self.session.exec(statement).all())

    def add_rule(self, session_id: uuid.UUID, rule_text: str) -> SessionRule:
        statement = select(func.count()).select_from(SessionRule).where(SessionRule.session_id == session_id)
        position = self.session.exec(statement).one()
        rule = SessionRule(session_id=session_id, rule_text=rule_text, position=position)
        self.session.add(rule)
        self.session.flush()
        return rule

    def replace_rules(self, session_id: uuid.UUID, rules: list[str]) -> None:
        self.session.exec(delete(SessionRule).where(SessionRule.session_id == session_id))
        for position, rule_text in enumerate(rules):
            self.session.add(SessionRule(session_id=session_id, rule_text=rule_text, position=position))
        self.session.flush()
