"""
Database initialization.

Creates all tables straight from the SQLModel metadata.  Production
databases are managed with Alembic; this is for local and test setups.
"""

from sqlmodel import SQLModel

from app.db.session import engine


def init_db() -> None:
    """
    Initialize database schema.

    - Imports every table model
    - Creates the tables that do not exist yet
    """

    # Import all models so SQLModel.metadata has them
    import app.db.base  # noqa: F401

    print("Creating database tables...")
    SQLModel.metadata.create_all(engine)
    print("✓ Tables created successfully")

    print("Database initialization complete!")


if __name__ == "__main__":
    init_db()
