"""
User repository.

Handles database operations for User model.
"""

import uuid
from typing import Iterable, Optional

from sqlmodel import Session, select

from app.models.user import User


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def create(self, user: User) -> User:
        """
        Create a new user in the database.

        Args:
            user: User instance to create

        Returns:
            Created user with generated id
        """
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User instance if found, None otherwise
        """
        return self.session.get(User, user_id)

    def get_many(self, user_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, User]:
        """
        Load several users at once.

        Args:
            user_ids: User IDs, duplicates allowed

        Returns:
            Mapping of id to user for the ids that exist
        """
        ids = set(user_ids)
        if not ids:
            return {}
        statement = select(User).where(User.id.in_(ids))
        return {user.id: user for user in self.session.exec(statement).all()}
