"""SQLModel database models."""

from app.models.user import User
from app.models.venue import Court, Venue
from app.models.play_session import PlaySession, SessionCourt, SessionParticipant, SessionRule

__all__ = [
    "User",
    "Venue",
    "Court",
    "PlaySession",
    "SessionCourt",
    "SessionParticipant",
    "SessionRule",
]
