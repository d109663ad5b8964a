"""
Database session management.

Provides SQLModel engine and session creation.
"""

from sqlmodel import create_engine, Session
from typing import Generator

from app.core.config import settings

DATABASE_URL: str = settings.database_url

if DATABASE_URL.startswith("sqlite"):
    # Local runs only; SQLite has no row locks, writers serialise on the file
    engine = create_engine(
        DATABASE_URL,
        echo=settings.DEBUG,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        DATABASE_URL,
        echo=settings.DEBUG,  # Log SQL queries in debug mode
        pool_pre_ping=True,   # Verify connections before using
        pool_size=5,          # Connection pool size
        max_overflow=10       # Max connections beyond pool_size
    )


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI endpoints to get database session.

    Yields:
        SQLModel Session instance
    """
    with Session(engine) as session:
        yield session
