"""
User database model.

Players and hosts.  Credentials live with the identity service; this
table only carries what session responses display.
"""

import datetime
import uuid
from typing import Optional

from sqlmodel import Field, SQLModel

from app.models.enums import PlayerLevel, enum_column


class User(SQLModel, table=True):
    """A platform user (player or host)."""

    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255, nullable=False)

    # Profile
    first_name: str = Field(max_length=100, nullable=False)
    last_name: str = Field(default="", max_length=100, nullable=False)
    play_level: Optional[PlayerLevel] = Field(default=None,
                                              sa_column=enum_column(PlayerLevel, "player_level", nullable=True))
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
