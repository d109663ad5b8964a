"""
Venue endpoints.

Read-only venue view with courts and operating hours.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.api.dependencies import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.venue import VenueResponse
from app.services.venue_directory import VenueDirectory

router = APIRouter()


@router.get("/{venue_id}", summary="Get venue with courts and operating hours.", response_model=VenueResponse, )
def get_venue(venue_id: uuid.UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return VenueDirectory(db).get_venue(venue_id)
