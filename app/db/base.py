"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from app.models.user import User  # noqa: F401
from app.models.venue import Court, Venue  # noqa: F401
from app.models.play_session import PlaySession, SessionCourt, SessionParticipant, SessionRule  # noqa: F401
