"""
Play session service.

Orchestrates the session lifecycle: create, update, join, leave, cancel
and complete.  Each public operation is one unit of work: the service
runs the checks, issues repository writes and commits once, or rolls the
whole operation back.

**Capacity**::

    join:   confirmed < max  -> confirmed, else pending (waitlist)
    leave:  confirmed leaver -> earliest pending is promoted
    status: full iff confirmed >= max, otherwise open

Join and leave lock the session row and write it back through a
version compare-and-swap, so two concurrent joiners cannot both take the
last confirmed slot.  A lost race is retried with a fresh read
(``CONCURRENCY_RETRIES`` times) before :class:`ConcurrencyConflict` is
surfaced to the caller.
"""

import datetime
import logging
import uuid
from typing import Callable, Optional, TypeVar

from redis import Redis
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.config import settings
from app.core.exceptions import (AlreadyJoined, AlreadyTerminal, CancellationNotAllowed, ConcurrencyConflict,
                                 DeadlinePassed, HostCannotLeave, InvalidCourt, InvalidTransition, InvalidVenue,
                                 NotParticipating, ParticipantLimitViolation, PersistenceError, PreviouslyCancelled,
                                 SchedulingError, SessionAlreadyStarted, SessionNotFound, SessionNotJoinable,
                                 Unauthorized, ValidationError, )
from app.db.repositories.play_session import PlaySessionRepository
from app.db.repositories.user import UserRepository
from app.db.repositories.venue import VenueRepository
from app.models.enums import ParticipantStatus, SessionStatus, VenueStatus
from app.models.play_session import PlaySession, SessionParticipant
from app.scheduling import roster
from app.scheduling.conflict import check_courts
from app.scheduling.status import JOINABLE_STATUSES, capacity_status, is_terminal, transition
from app.scheduling.validator import SchedulingConfig, combine, validate_against_operating_ranges
from app.schemas.play_session import (CourtSummary, ParticipantResponse, SessionCreate, SessionFilters,
                                      SessionListResponse, SessionResponse, SessionUpdate, )
from app.services.venue_directory import VenueDirectory

logger = logging.getLogger(__name__)

T = TypeVar("T")


def config_from_settings() -> SchedulingConfig:
    return SchedulingConfig(min_duration_minutes=settings.MIN_SESSION_MINUTES,
                            max_advance_months=settings.MAX_ADVANCE_MONTHS, )


def _require_distinct(court_ids: list[uuid.UUID]) -> None:
    if len(set(court_ids)) != len(court_ids):
        raise ValidationError("court_ids must not contain duplicates")


class SessionService:
    """Service for the play session lifecycle."""

    def __init__(self, session: Session, clock: Callable[[], datetime.datetime] = datetime.datetime.now,
                 venue_cache: Optional[Redis] = None, config: Optional[SchedulingConfig] = None,
                 retries: Optional[int] = None, ):
        self.repository = PlaySessionRepository(session)
        self.venue_repo = VenueRepository(session)
        self.user_repo = UserRepository(session)
        self.venues = VenueDirectory(session, cache=venue_cache)
        self.clock = clock
        self.config = config or config_from_settings()
        self.retries = settings.CONCURRENCY_RETRIES if retries is None else retries

    # ------------------------------------------------------------------
    # Create / Update
    # ------------------------------------------------------------------

    def create_session(self, host_id: uuid.UUID, data: SessionCreate) -> SessionResponse:
        """Create a session with the host as its first confirmed participant."""

        def op() -> uuid.UUID:
            now = self.clock()
            venue = self.venues.load_venue(data.venue_id, for_update=True)
            if venue.status != VenueStatus.ACTIVE:
                raise InvalidVenue(f"Venue '{venue.name}' is not active")

            validate_against_operating_ranges(data.session_date, data.start_time, data.end_time,
                                              venue.operating_ranges, now, self.config, )
            self._check_courts(data.venue_id, data.court_ids, data.session_date, data.start_time, data.end_time)

            play_session = PlaySession(host_id=host_id, venue_id=data.venue_id, title=data.title,
                                       description=data.description, session_date=data.session_date,
                                       start_time=data.start_time, end_time=data.end_time,
                                       player_level=data.player_level, max_participants=data.max_participants,
                                       cost_per_person=data.cost_per_person,
                                       allow_cancellation=data.allow_cancellation,
                                       cancellation_deadline_hours=data.cancellation_deadline_hours,
                                       status=SessionStatus.OPEN, created_at=now, updated_at=now, )
            play_session = self.repository.create(play_session, data.court_ids)
            self.repository.add_participant(
                SessionParticipant(session_id=play_session.id, user_id=host_id, status=ParticipantStatus.CONFIRMED,
                                   joined_at=now, ))
            if data.rules:
                self.repository.replace_rules(play_session.id, data.rules)

            logger.info(f"Session {play_session.id} created by {host_id} on {data.session_date} "
                        f"{data.start_time:%H:%M}-{data.end_time:%H:%M}")
            return play_session.id

        session_id = self._in_transaction("create_session", op)
        return self.get_session(session_id)

    def update_session(self, session_id: uuid.UUID, host_id: uuid.UUID, data: SessionUpdate) -> SessionResponse:
        """Host-only partial update of a session that has not started."""

        def op() -> None:
            now = self.clock()
            play_session = self._get_for_update(session_id)
            if play_session.host_id != host_id:
                raise Unauthorized("Only the host can update this session")
            if is_terminal(play_session.status):
                raise AlreadyTerminal(f"Cannot update a {play_session.status.value} session")
            if now > play_session.starts_at:
                raise SessionAlreadyStarted("Cannot update a session that has already started")

            expected_version = play_session.version
            participants = self.repository.get_participants(session_id)
            confirmed, _ = roster.count_by_status(participants)

            if data.title is not None:
                play_session.title = data.title
            if data.description is not None:
                play_session.description = data.description
            if data.player_level is not None:
                play_session.player_level = data.player_level
            if data.cost_per_person is not None:
                play_session.cost_per_person = data.cost_per_person
            if data.allow_cancellation is not None:
                play_session.allow_cancellation = data.allow_cancellation
            if data.cancellation_deadline_hours is not None:
                play_session.cancellation_deadline_hours = data.cancellation_deadline_hours
            if data.max_participants is not None:
                if confirmed > data.max_participants:
                    raise ParticipantLimitViolation(f"{confirmed} confirmed participants exceed the new maximum of "
                                                    f"{data.max_participants}")
                play_session.max_participants = data.max_participants

            if data.court_ids is not None:
                _require_distinct(data.court_ids)
                current = self.repository.get_court_ids(session_id)
                if set(data.court_ids) != set(current):
                    self._check_courts(play_session.venue_id, data.court_ids, play_session.session_date,
                                       play_session.start_time, play_session.end_time,
                                       exclude_session_id=session_id, )
                    self.repository.replace_courts(session_id, data.court_ids)

            if data.rules is not None:
                self.repository.replace_rules(session_id, data.rules)

            self._fill_open_slots(play_session, participants, now)
            self._write(play_session, participants, expected_version, now)
            logger.info(f"Session {session_id} updated by host {host_id}")

        self._in_transaction("update_session", op)
        return self.get_session(session_id)

    # ------------------------------------------------------------------
    # Participation
    # ------------------------------------------------------------------

    def join_session(self, session_id: uuid.UUID, user_id: uuid.UUID) -> SessionResponse:
        """Join as confirmed while there is room, otherwise onto the waitlist."""

        def op() -> None:
            now = self.clock()
            play_session = self._get_for_update(session_id)
            if play_session.status not in JOINABLE_STATUSES:
                raise SessionNotJoinable(f"Session is {play_session.status.value} and cannot be joined")
            if now > play_session.starts_at:
                raise SessionAlreadyStarted("Cannot join a session that has already started")

            expected_version = play_session.version
            participants = self.repository.get_participants(session_id)
            found, current_status = roster.find(participants, user_id)
            if found:
                if current_status == ParticipantStatus.CANCELLED:
                    raise PreviouslyCancelled()
                raise AlreadyJoined()

            confirmed, _ = roster.count_by_status(participants)
            if confirmed < play_session.max_participants:
                status = ParticipantStatus.CONFIRMED
            else:
                status = ParticipantStatus.PENDING
            participant = self.repository.add_participant(
                SessionParticipant(session_id=session_id, user_id=user_id, status=status, joined_at=now))
            participants.append(participant)

            self._write(play_session, participants, expected_version, now)
            logger.info(f"User {user_id} joined session {session_id} as {status.value}")

        self._in_transaction("join_session", op, retry=True)
        return self.get_session(session_id)

    def leave_session(self, session_id: uuid.UUID, user_id: uuid.UUID) -> SessionResponse:
        """Cancel the caller's participation, promoting the waitlist if a
        confirmed slot frees up."""

        def op() -> None:
            now = self.clock()
            play_session = self._get_for_update(session_id)
            if play_session.host_id == user_id:
                raise HostCannotLeave()
            if is_terminal(play_session.status):
                raise AlreadyTerminal(f"Session is already {play_session.status.value}")
            if not play_session.allow_cancellation:
                raise CancellationNotAllowed()
            if play_session.cancellation_deadline_hours is not None:
                deadline = combine(play_session.session_date, datetime.time.min) - datetime.timedelta(
                    hours=play_session.cancellation_deadline_hours)
                if now >= deadline:
                    raise DeadlinePassed(f"Cancellation deadline passed at {deadline:%Y-%m-%d %H:%M}")

            expected_version = play_session.version
            participants = self.repository.get_participants(session_id)
            found, current_status = roster.find(participants, user_id)
            if not found or current_status == ParticipantStatus.CANCELLED:
                raise NotParticipating()

            self.repository.update_participant_status(session_id, user_id, ParticipantStatus.CANCELLED, now)
            if current_status == ParticipantStatus.CONFIRMED:
                self._fill_open_slots(play_session, participants, now)

            self._write(play_session, participants, expected_version, now)
            logger.info(f"User {user_id} left session {session_id} ({current_status.value})")

        self._in_transaction("leave_session", op, retry=True)
        return self.get_session(session_id)

    def add_rule(self, session_id: uuid.UUID, host_id: uuid.UUID, rule_text: str) -> SessionResponse:
        def op() -> None:
            now = self.clock()
            play_session = self._get_for_update(session_id)
            if play_session.host_id != host_id:
                raise Unauthorized("Only the host can add rules")
            if is_terminal(play_session.status):
                raise AlreadyTerminal(f"Cannot add rules to a {play_session.status.value} session")

            expected_version = play_session.version
            self.repository.add_rule(session_id, rule_text)
            play_session.updated_at = now
            self.repository.update(play_session, expected_version)

        self._in_transaction("add_rule", op)
        return self.get_session(session_id)

    # ------------------------------------------------------------------
    # Terminal transitions
    # ------------------------------------------------------------------

    def cancel_session(self, session_id: uuid.UUID, host_id: uuid.UUID) -> SessionResponse:
        """Host cancels the session; every remaining participant is cancelled.

        Nobody is promoted.
        """

        def op() -> None:
            now = self.clock()
            play_session = self._get_for_update(session_id)
            if play_session.host_id != host_id:
                raise Unauthorized("Only the host can cancel this session")

            expected_version = play_session.version
            play_session.status = transition(play_session.status, SessionStatus.CANCELLED)
            for participant in roster.active(self.repository.get_participants(session_id)):
                self.repository.update_participant_status(session_id, participant.user_id, ParticipantStatus.CANCELLED,
                                                          now)
            play_session.updated_at = now
            self.repository.update(play_session, expected_version)
            logger.info(f"Session {session_id} cancelled by host {host_id}")

        self._in_transaction("cancel_session", op)
        return self.get_session(session_id)

    def complete_session(self, session_id: uuid.UUID) -> SessionResponse:
        """Mark a finished session completed."""

        def op() -> None:
            now = self.clock()
            play_session = self._get_for_update(session_id)
            if is_terminal(play_session.status):
                raise AlreadyTerminal(f"Session is already {play_session.status.value}")
            if now < play_session.ends_at:
                raise InvalidTransition("Session has not finished yet")

            expected_version = play_session.version
            play_session.status = transition(play_session.status, SessionStatus.COMPLETED)
            play_session.updated_at = now
            self.repository.update(play_session, expected_version)
            logger.info(f"Session {session_id} completed")

        self._in_transaction("complete_session", op)
        return self.get_session(session_id)

    def complete_finished_sessions(self) -> list[uuid.UUID]:
        """Complete every open or full session whose end time has passed.

        Sessions that became terminal or were modified between the scan
        and the write are skipped and picked up by the next run.
        """
        now = self.clock()
        try:
            candidates = [s.id for s in self.repository.list_finished(now)]
        except SQLAlchemyError as e:
            raise PersistenceError("list_finished failed") from e

        completed = []
        for session_id in candidates:
            try:
                self.complete_session(session_id)
            except (AlreadyTerminal, ConcurrencyConflict) as e:
                logger.warning(f"Skipping completion of session {session_id}: {e.detail}")
                continue
            completed.append(session_id)
        logger.info(f"Completed {len(completed)} of {len(candidates)} finished sessions")
        return completed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_session(self, session_id: uuid.UUID) -> SessionResponse:
        play_session = self.repository.get_by_id(session_id)
        if not play_session:
            raise SessionNotFound(f"Session {session_id} not found")
        return self._to_response(play_session)

    def list_sessions(self, filters: SessionFilters, skip: int = 0, limit: int = 20) -> SessionListResponse:
        sessions, total = self.repository.search(session_date=filters.session_date, venue_id=filters.venue_id,
                                                 location=filters.location, player_level=filters.player_level,
                                                 status=filters.status, skip=skip, limit=limit, )
        return SessionListResponse(sessions=[self._to_response(s) for s in sessions], total=total)

    def get_user_sessions(self, user_id: uuid.UUID, include_history: bool = False) -> list[SessionResponse]:
        today = self.clock().date()
        sessions = self.repository.get_user_sessions(user_id, include_history, today)
        return [self._to_response(s) for s in sessions]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _in_transaction(self, name: str, op: Callable[[], T], retry: bool = False) -> T:
        """Run *op* and commit, rolling back on any failure.

        With *retry* a :class:`ConcurrencyConflict` re-runs *op* from a
        fresh read.  Database errors are wrapped in
        :class:`PersistenceError` naming the operation.
        """
        attempts = 1 + (self.retries if retry else 0)
        for attempt in range(1, attempts + 1):
            try:
                result = op()
                self.repository.commit()
                return result
            except ConcurrencyConflict:
                self.repository.rollback()
                if attempt >= attempts:
                    raise
                logger.warning(f"{name}: concurrent modification, retrying ({attempt}/{attempts - 1})")
            except SchedulingError:
                self.repository.rollback()
                raise
            except SQLAlchemyError as e:
                self.repository.rollback()
                logger.error(f"{name} failed: {e}")
                raise PersistenceError(f"{name} failed: database error") from e
            except Exception:
                self.repository.rollback()
                raise

    def _get_for_update(self, session_id: uuid.UUID) -> PlaySession:
        play_session = self.repository.get_by_id(session_id, for_update=True)
        if not play_session:
            raise SessionNotFound(f"Session {session_id} not found")
        return play_session

    def _check_courts(self, venue_id: uuid.UUID, court_ids: list[uuid.UUID], session_date: datetime.date,
                      start_time: datetime.time, end_time: datetime.time,
                      exclude_session_id: Optional[uuid.UUID] = None, ) -> None:
        """Lock the requested courts, verify they belong to the venue and
        that none is already booked in the window."""
        _require_distinct(court_ids)
        courts = self.venue_repo.lock_courts(court_ids)
        owned = {c.id for c in courts if c.venue_id == venue_id}
        for court_id in court_ids:
            if court_id not in owned:
                raise InvalidCourt(f"Court {court_id} does not belong to venue {venue_id}")

        sessions_by_court = {court_id: self.repository.list_by_court_and_date(court_id, session_date) for court_id in
                             court_ids}
        check_courts(court_ids, session_date, start_time, end_time, sessions_by_court,
                     exclude_session_id=exclude_session_id)

    def _fill_open_slots(self, play_session: PlaySession, participants: list[SessionParticipant],
                         now: datetime.datetime, ) -> list[SessionParticipant]:
        """Promote pending participants, earliest first, while confirmed
        slots are free."""
        promoted = []
        confirmed, _ = roster.count_by_status(participants)
        while confirmed < play_session.max_participants:
            candidate = roster.first_pending(participants)
            if candidate is None:
                break
            self.repository.update_participant_status(play_session.id, candidate.user_id,
                                                      ParticipantStatus.CONFIRMED, now)
            candidate.status = ParticipantStatus.CONFIRMED
            confirmed += 1
            promoted.append(candidate)
            logger.info(f"User {candidate.user_id} promoted from waitlist in session {play_session.id}")
        return promoted

    def _write(self, play_session: PlaySession, participants: list[SessionParticipant], expected_version: int,
               now: datetime.datetime, ) -> None:
        """Set the capacity status from the roster and write the session."""
        confirmed, _ = roster.count_by_status(participants)
        previous = play_session.status
        play_session.status = capacity_status(previous, confirmed, play_session.max_participants)
        if play_session.status != previous:
            logger.info(f"Session {play_session.id} is now {play_session.status.value}")
        play_session.updated_at = now
        self.repository.update(play_session, expected_version)

    def _to_response(self, play_session: PlaySession) -> SessionResponse:
        venue = self.venues.get_venue(play_session.venue_id)
        participants = self.repository.get_participants(play_session.id)
        users = self.user_repo.get_many([play_session.host_id] + [p.user_id for p in participants])
        confirmed, pending = roster.count_by_status(participants)

        courts = []
        for court_id in self.repository.get_court_ids(play_session.id):
            court = venue.court(court_id)
            courts.append(CourtSummary(id=court_id, name=court.name if court else ""))

        def user_name(user_id: uuid.UUID) -> Optional[str]:
            user = users.get(user_id)
            return user.full_name if user else None

        return SessionResponse(id=play_session.id, title=play_session.title, description=play_session.description,
                               host_id=play_session.host_id, host_name=user_name(play_session.host_id),
                               venue_id=venue.id, venue_name=venue.name, venue_location=venue.location,
                               courts=courts, session_date=play_session.session_date,
                               start_time=play_session.start_time, end_time=play_session.end_time,
                               player_level=play_session.player_level,
                               max_participants=play_session.max_participants,
                               cost_per_person=play_session.cost_per_person, status=play_session.status,
                               allow_cancellation=play_session.allow_cancellation,
                               cancellation_deadline_hours=play_session.cancellation_deadline_hours,
                               confirmed_players=confirmed, pending_players=pending,
                               participants=[ParticipantResponse(id=p.id, user_id=p.user_id,
                                                                 user_name=user_name(p.user_id),
                                                                 status=p.status, joined_at=p.joined_at,
                                                                 cancelled_at=p.cancelled_at, )
                                             for p in participants],
                               rules=[r.rule_text for r in self.repository.get_rules(play_session.id)],
                               created_at=play_session.created_at, updated_at=play_session.updated_at, )
