"""
Shared API dependencies.

Reusable FastAPI dependencies for authentication and database access.
"""

import uuid

from fastapi import Depends, HTTPException, status
from sqlmodel import Session

from app.core.security import decode_access_token, oauth2_scheme
from app.db.repositories.user import UserRepository
from app.db.session import get_db
from app.models.user import User


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db), ) -> User:
    """Extract and validate the current user from the JWT token."""
    subject = decode_access_token(token)
    try:
        user_id = uuid.UUID(subject) if subject else None
    except ValueError:
        user_id = None
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token",
                            headers={ "WWW-Authenticate": "Bearer" }, )
    user = UserRepository(db).get_by_id(user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found",
                            headers={ "WWW-Authenticate": "Bearer" }, )
    return user
