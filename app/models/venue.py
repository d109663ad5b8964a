"""
Venue and court database models.

A venue owns courts and declares its operating hours as a JSON list of
day ranges::

    [{"day": "monday", "is_open": true, "open_time": "08:00", "close_time": "22:00"},
     {"day": "2026-12-25", "is_open": false}]

The blob is decoded into typed :class:`~app.scheduling.hours.OperatingRange`
entries by the venue directory, never inside the scheduling rules.
"""

import datetime
import uuid
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from app.models.enums import CourtStatus, VenueStatus, enum_column


class Venue(SQLModel, table=True):
    """A sports facility hosting one or more courts."""

    __tablename__ = "venues"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None, max_length=2000)
    address: str = Field(default="", max_length=500)
    location: str = Field(default="", max_length=255, index=True)

    status: VenueStatus = Field(default=VenueStatus.ACTIVE,
                                sa_column=enum_column(VenueStatus, "venue_status", nullable=False))

    # Operating hours (list of day ranges, see module docstring)
    open_range: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False), )

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.now)


class Court(SQLModel, table=True):
    """A bookable court inside a venue."""

    __tablename__ = "courts"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    venue_id: uuid.UUID = Field(foreign_key="venues.id", nullable=False, index=True)
    name: str = Field(max_length=100, nullable=False)
    price_per_hour: float = Field(default=0.0, ge=0)

    status: CourtStatus = Field(default=CourtStatus.AVAILABLE,
                                sa_column=enum_column(CourtStatus, "court_status", nullable=False))

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.now)
