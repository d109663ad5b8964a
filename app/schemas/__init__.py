"""Pydantic schemas for request/response validation."""

from app.schemas.play_session import (
    CourtSummary,
    ParticipantResponse,
    RuleCreate,
    SessionCreate,
    SessionFilters,
    SessionListResponse,
    SessionResponse,
    SessionUpdate,
)
from app.schemas.venue import CourtResponse, VenueResponse

__all__ = [
    "CourtSummary",
    "ParticipantResponse",
    "RuleCreate",
    "SessionCreate",
    "SessionFilters",
    "SessionListResponse",
    "SessionResponse",
    "SessionUpdate",
    "CourtResponse",
    "VenueResponse",
]
