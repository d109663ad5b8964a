"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import sessions, venues

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    sessions.router, prefix="/sessions", tags=["Play sessions"]
)
api_router.include_router(
    venues.router, prefix="/venues", tags=["Venues"]
)
