"""Database repositories."""

from app.db.repositories.user import UserRepository
from app.db.repositories.venue import VenueRepository
from app.db.repositories.play_session import PlaySessionRepository

__all__ = [
    "UserRepository",
    "VenueRepository",
    "PlaySessionRepository",
]
