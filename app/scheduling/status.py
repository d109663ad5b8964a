"""
Session status state machine.

::

    open <-> full          driven by confirmed count vs max_participants
    open | full -> cancelled   host cancels
    open | full -> completed   session finished (time-based)

``cancelled`` and ``completed`` are terminal.  Every status change goes
through :func:`transition`; nothing assigns a status directly.
"""

from __future__ import annotations

from app.core.exceptions import AlreadyTerminal, InvalidTransition
from app.models.enums import SessionStatus

_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.OPEN: frozenset({SessionStatus.FULL, SessionStatus.CANCELLED, SessionStatus.COMPLETED}),
    SessionStatus.FULL: frozenset({SessionStatus.OPEN, SessionStatus.CANCELLED, SessionStatus.COMPLETED}),
    SessionStatus.CANCELLED: frozenset(),
    SessionStatus.COMPLETED: frozenset(),
}

TERMINAL_STATUSES: frozenset[SessionStatus] = frozenset({SessionStatus.CANCELLED, SessionStatus.COMPLETED})
JOINABLE_STATUSES: frozenset[SessionStatus] = frozenset({SessionStatus.OPEN, SessionStatus.FULL})


def is_terminal(status: SessionStatus) -> bool:
    return status in TERMINAL_STATUSES


def transition(current: SessionStatus, target: SessionStatus) -> SessionStatus:
    """Return *target* if the move from *current* is allowed.

    Raises :class:`AlreadyTerminal` when *current* is terminal and
    :class:`InvalidTransition` for any other disallowed move.  Staying in
    the same non-terminal status is a no-op.
    """
    if is_terminal(current):
        raise AlreadyTerminal(f"Session is already {current.value}")
    if target == current:
        return current
    if target not in _TRANSITIONS[current]:
        raise InvalidTransition(f"Cannot move session from {current.value} to {target.value}")
    return target


def capacity_status(current: SessionStatus, confirmed: int, max_participants: int) -> SessionStatus:
    """Status implied by the confirmed head-count: full iff at capacity."""
    target = SessionStatus.FULL if confirmed >= max_participants else SessionStatus.OPEN
    return transition(current, target)
