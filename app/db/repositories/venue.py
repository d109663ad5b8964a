"""
Venue repository.

Handles database operations for Venue and Court models.
"""

import uuid
from typing import Optional

from sqlmodel import Session, select

from app.models.venue import Court, Venue


class VenueRepository:
    """Repository for Venue database operations."""

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def create(self, venue: Venue) -> Venue:
        self.session.add(venue)
        self.session.commit()
        self.session.refresh(venue)
        return venue

    def add_court(self, court: Court) -> Court:
        self.session.add(court)
        self.session.commit()
        self.session.refresh(court)
        return court

    def get_by_id(self, venue_id: uuid.UUID, for_update: bool = False) -> Optional[Venue]:
        """
        Get venue by ID.

        Args:
            venue_id: Venue ID
            for_update: Lock the row and refresh it from the database

        Returns:
            Venue instance if found, None otherwise
        """
        if not for_update:
            return self.session.get(Venue, venue_id)
        statement = select(Venue).where(Venue.id == venue_id)
        statement = statement.with_for_update().execution_options(populate_existing=True)
        return self.session.exec(statement).first()

    def get_courts(self, venue_id: uuid.UUID) -> list[Court]:
        """
        Get all courts of a venue, ordered by name.

        Args:
            venue_id: Venue ID

        Returns:
            List of courts
        """
        statement = select(Court).where(Court.venue_id == venue_id).order_by(Court.name)
        return list(self.session.exec(statement).all())

    def lock_courts(self, court_ids: list[uuid.UUID]) -> list[Court]:
        """
        Lock court rows for the rest of the transaction.

        Two hosts booking the same court serialise on these row locks, so
        the conflict check and the insert cannot interleave.  Rows are
        locked in id order to keep lock acquisition deadlock-free.

        Args:
            court_ids: Courts to lock

        Returns:
            The locked courts that exist
        """
        statement = (select(Court).where(Court.id.in_(court_ids)).order_by(Court.id).with_for_update())
        return list(self.session.exec(statement).all())
