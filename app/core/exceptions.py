"""
Domain exceptions for the session scheduling core.

Every rejection raised by the scheduling core or the session service is a
:class:`SchedulingError`.  The class carries the HTTP status the API layer
should answer with and a stable ``code`` for clients, so the pure core
never imports FastAPI.

Taxonomy::

    SchedulingError
    ├── ValidationError        422  malformed input
    ├── PolicyViolation        400  business-rule rejection
    ├── NotFound               404
    ├── Unauthorized           403  non-host attempting a host-only action
    ├── ConcurrencyConflict    409  lost a capacity race (retryable)
    └── PersistenceError       500  database failure, wrapped with context
"""

import datetime
from typing import Optional


class SchedulingError(Exception):
    """Base class for all scheduling errors."""

    status_code: int = 400
    code: str = "scheduling_error"
    retryable: bool = False
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {"detail": self.detail, "code": self.code}


# ======================================================================
# Validation
# ======================================================================


class ValidationError(SchedulingError):
    status_code = 422
    code = "validation_error"
    default_detail = "Invalid input"


# ======================================================================
# Policy violations
# ======================================================================


class PolicyViolation(SchedulingError):
    status_code = 400
    code = "policy_violation"


class TooSoon(PolicyViolation):
    code = "too_soon"
    default_detail = "Session date must be today or later"


class TooFarAhead(PolicyViolation):
    code = "too_far_ahead"
    default_detail = "Cannot create sessions that far in advance"


class InvertedRange(PolicyViolation):
    code = "inverted_range"
    default_detail = "Start time must be before end time"


class TooShort(PolicyViolation):
    code = "too_short"
    default_detail = "Session is too short"


class TooLong(PolicyViolation):
    code = "too_long"
    default_detail = "Session is too long"


class OutsideVenueHours(PolicyViolation):
    code = "outside_venue_hours"
    default_detail = "Session time must be within venue operating hours"


class CourtBooked(PolicyViolation):
    """Requested court already hosts an active session in that window."""

    code = "court_booked"

    def __init__(self, court_id, conflicting_start: datetime.time, conflicting_end: datetime.time):
        self.court_id = court_id
        self.conflicting_start = conflicting_start
        self.conflicting_end = conflicting_end
        super().__init__(f"Court is already booked from {conflicting_start:%H:%M} to {conflicting_end:%H:%M}")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["court_id"] = str(self.court_id)
        data["conflicting_start"] = f"{self.conflicting_start:%H:%M}"
        data["conflicting_end"] = f"{self.conflicting_end:%H:%M}"
        return data


class InvalidVenue(PolicyViolation):
    code = "invalid_venue"
    default_detail = "Venue is not active"


class InvalidCourt(PolicyViolation):
    code = "invalid_court"
    default_detail = "Court does not belong to this venue"


class SessionNotJoinable(PolicyViolation):
    code = "session_not_joinable"
    default_detail = "Session is not open for joining"


class SessionAlreadyStarted(PolicyViolation):
    code = "session_already_started"
    default_detail = "Session has already started"


class AlreadyJoined(PolicyViolation):
    code = "already_joined"
    default_detail = "You are already participating in this session"


class PreviouslyCancelled(PolicyViolation):
    code = "previously_cancelled"
    default_detail = "You have previously cancelled participation in this session"


class HostCannotLeave(PolicyViolation):
    code = "host_cannot_leave"
    default_detail = "Host cannot leave the session, cancel it instead"


class CancellationNotAllowed(PolicyViolation):
    code = "cancellation_not_allowed"
    default_detail = "Cancellation is not allowed for this session"


class DeadlinePassed(PolicyViolation):
    code = "deadline_passed"
    default_detail = "Cancellation deadline has passed"


class NotParticipating(PolicyViolation):
    code = "not_participating"
    default_detail = "User is not participating in this session"


class AlreadyTerminal(PolicyViolation):
    code = "already_terminal"
    default_detail = "Session is already cancelled or completed"


class ParticipantLimitViolation(PolicyViolation):
    code = "participant_limit_violation"
    default_detail = "Confirmed participants exceed the maximum allowed"


class InvalidTransition(PolicyViolation):
    code = "invalid_transition"
    default_detail = "Session status transition is not allowed"


# ======================================================================
# Lookup / authorization / concurrency
# ======================================================================


class NotFound(SchedulingError):
    status_code = 404
    code = "not_found"
    default_detail = "Resource not found"


class SessionNotFound(NotFound):
    code = "session_not_found"
    default_detail = "Session not found"


class VenueNotFound(NotFound):
    code = "venue_not_found"
    default_detail = "Venue not found"


class Unauthorized(SchedulingError):
    status_code = 403
    code = "unauthorized"
    default_detail = "Only the host can perform this action"


class ConcurrencyConflict(SchedulingError):
    status_code = 409
    code = "concurrency_conflict"
    retryable = True
    default_detail = "Session was modified concurrently, please retry"


class PersistenceError(SchedulingError):
    """A database call failed; ``detail`` names the operation."""

    status_code = 500
    code = "persistence_error"
    default_detail = "Database operation failed"
