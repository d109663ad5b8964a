"""Business logic services."""

from app.services.session_service import SessionService
from app.services.venue_directory import VenueDirectory

__all__ = [
    "SessionService",
    "VenueDirectory",
]
