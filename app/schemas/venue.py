"""
Venue API schemas.

``VenueResponse`` doubles as the cached venue snapshot served by the
venue directory, with operating hours already decoded.
"""

import uuid
from typing import Optional

from pydantic import BaseModel

from app.models.enums import CourtStatus, VenueStatus
from app.scheduling.hours import OperatingRange


class CourtResponse(BaseModel):
    """Schema for a court in API responses."""

    id: uuid.UUID
    name: str
    price_per_hour: float
    status: CourtStatus


class VenueResponse(BaseModel):
    """Schema for venue data in API responses."""

    id: uuid.UUID
    name: str
    description: Optional[str]
    address: str
    location: str
    status: VenueStatus
    operating_ranges: list[OperatingRange]
    courts: list[CourtResponse]

    def court(self, court_id: uuid.UUID) -> Optional[CourtResponse]:
        for court in self.courts:
            if court.id == court_id:
                return court
        return None
