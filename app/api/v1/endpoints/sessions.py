"""
Play session endpoints.

Session lifecycle: create, browse, update, join, leave, cancel.
"""

import datetime
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.api.dependencies import get_current_user
from app.db.session import get_db
from app.models.enums import PlayerLevel, SessionStatus
from app.models.user import User
from app.schemas.play_session import (RuleCreate, SessionCreate, SessionFilters, SessionListResponse, SessionResponse,
                                      SessionUpdate, )
from app.services.session_service import SessionService

router = APIRouter()


@router.post("", summary="Create a play session.", response_model=SessionResponse,
             status_code=status.HTTP_201_CREATED, )
def create_session(data: SessionCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = SessionService(db)
    return service.create_session(user.id, data)


@router.get("", summary="List play sessions with optional filters.", response_model=SessionListResponse, )
def list_sessions(date: Optional[datetime.date] = Query(None, description="Session date (YYYY-MM-DD)"),
                  venue_id: Optional[uuid.UUID] = Query(None), location: Optional[str] = Query(None),
                  player_level: Optional[PlayerLevel] = Query(None), status: Optional[SessionStatus] = Query(None),
                  skip: int = Query(0, ge=0, description="Records to skip"),
                  limit: int = Query(20, ge=1, le=100, description="Max records to return"),
                  db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = SessionService(db)
    filters = SessionFilters(session_date=date, venue_id=venue_id, location=location, player_level=player_level,
                             status=status, )
    return service.list_sessions(filters, skip=skip, limit=limit)


@router.get("/me", summary="Sessions the caller hosts or joined.", response_model=list[SessionResponse], )
def get_my_sessions(include_history: bool = Query(False, description="Include past sessions"),
                    db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = SessionService(db)
    return service.get_user_sessions(user.id, include_history=include_history)


@router.get("/{session_id}", summary="Get session detail.", response_model=SessionResponse, )
def get_session(session_id: uuid.UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = SessionService(db)
    return service.get_session(session_id)


@router.put("/{session_id}", summary="Update a session (host only).", response_model=SessionResponse, )
def update_session(session_id: uuid.UUID, data: SessionUpdate, db: Session = Depends(get_db),
                   user: User = Depends(get_current_user), ):
    service = SessionService(db)
    return service.update_session(session_id, user.id, data)


@router.post("/{session_id}/join", summary="Join a session or its waitlist.", response_model=SessionResponse, )
def join_session(session_id: uuid.UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = SessionService(db)
    return service.join_session(session_id, user.id)


@router.post("/{session_id}/leave", summary="Leave a session.", response_model=SessionResponse, )
def leave_session(session_id: uuid.UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = SessionService(db)
    return service.leave_session(session_id, user.id)


@router.post("/{session_id}/cancel", summary="Cancel a session (host only).", response_model=SessionResponse, )
def cancel_session(session_id: uuid.UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    service = SessionService(db)
    return service.cancel_session(session_id, user.id)


@router.post("/{session_id}/rules", summary="Add a house rule (host only).", response_model=SessionResponse,
             status_code=status.HTTP_201_CREATED, )
def add_rule(session_id: uuid.UUID, data: RuleCreate, db: Session = Depends(get_db),
             user: User = Depends(get_current_user), ):
    service = SessionService(db)
    return service.add_rule(session_id, user.id, data.rule_text)
