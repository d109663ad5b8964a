"""
Play session API schemas.

Dates cross the API as ``YYYY-MM-DD`` and times of day as 24-hour
``HH:MM``.  Malformed values are rejected here, field by field, before
the service layer runs.
"""

import datetime
import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from app.models.enums import ParticipantStatus, PlayerLevel, SessionStatus


def _clean_rules(rules: Optional[list[str]]) -> Optional[list[str]]:
    if rules is None:
        return None
    cleaned = [r.strip() for r in rules]
    if any(not r for r in cleaned):
        raise ValueError("rules must not contain empty text")
    return cleaned


# Request schemas
class SessionCreate(BaseModel):
    """Schema for creating a play session."""

    venue_id: uuid.UUID
    court_ids: list[uuid.UUID] = Field(..., min_length=1, description="Courts the session occupies")
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    session_date: datetime.date = Field(..., description="Session date (YYYY-MM-DD)")
    start_time: datetime.time = Field(..., description="Start time (HH:MM, 24-hour)")
    end_time: datetime.time = Field(..., description="End time (HH:MM, 24-hour)")
    player_level: PlayerLevel
    max_participants: int = Field(..., ge=2, description="Capacity including the host")
    cost_per_person: float = Field(0.0, ge=0)
    allow_cancellation: bool = Field(False, description="Whether participants may leave")
    cancellation_deadline_hours: Optional[int] = Field(
        None, ge=0, description="Hours before the session date after which leaving is refused", )
    rules: list[str] = Field(default_factory=list, description="House rules, in display order")

    @field_validator("rules")
    @classmethod
    def check_rules(cls, value):
        return _clean_rules(value)


class SessionUpdate(BaseModel):
    """Schema for updating a play session (all fields optional)."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    court_ids: Optional[list[uuid.UUID]] = Field(None, min_length=1)
    player_level: Optional[PlayerLevel] = None
    max_participants: Optional[int] = Field(None, ge=2)
    cost_per_person: Optional[float] = Field(None, ge=0)
    allow_cancellation: Optional[bool] = None
    cancellation_deadline_hours: Optional[int] = Field(None, ge=0)
    rules: Optional[list[str]] = None

    @field_validator("rules")
    @classmethod
    def check_rules(cls, value):
        return _clean_rules(value)


class RuleCreate(BaseModel):
    """Schema for attaching a rule to a session."""

    rule_text: str = Field(..., min_length=1, max_length=500)

    @field_validator("rule_text")
    @classmethod
    def strip_rule_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("rule_text must not be blank")
        return value


class SessionFilters(BaseModel):
    """Optional filters for listing sessions."""

    session_date: Optional[datetime.date] = None
    venue_id: Optional[uuid.UUID] = None
    location: Optional[str] = None
    player_level: Optional[PlayerLevel] = None
    status: Optional[SessionStatus] = None


# Response schemas
class CourtSummary(BaseModel):
    id: uuid.UUID
    name: str


class ParticipantResponse(BaseModel):
    """A participant as shown on a session."""

    id: uuid.UUID
    user_id: uuid.UUID
    user_name: Optional[str]
    status: ParticipantStatus
    joined_at: datetime.datetime
    cancelled_at: Optional[datetime.datetime] = None


class SessionResponse(BaseModel):
    """Full session detail."""

    id: uuid.UUID
    title: str
    description: Optional[str]
    host_id: uuid.UUID
    host_name: Optional[str]
    venue_id: uuid.UUID
    venue_name: str
    venue_location: str
    courts: list[CourtSummary]
    session_date: datetime.date
    start_time: datetime.time
    end_time: datetime.time
    player_level: PlayerLevel
    max_participants: int
    cost_per_person: float
    status: SessionStatus
    allow_cancellation: bool
    cancellation_deadline_hours: Optional[int]
    confirmed_players: int
    pending_players: int
    participants: list[ParticipantResponse]
    rules: list[str]
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @field_serializer("start_time", "end_time")
    def format_time(self, value: datetime.time) -> str:
        return value.strftime("%H:%M")


class SessionListResponse(BaseModel):
    sessions: list[SessionResponse]
    total: int
