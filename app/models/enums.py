"""
Enumerations shared by the table models and the scheduling core.

Enum columns are stored as their lowercase ``value`` in a plain VARCHAR
so the database reads the same as the API.
"""

from enum import Enum
from typing import Type

from sqlalchemy import Column
from sqlalchemy import Enum as SAEnum


class SessionStatus(str, Enum):
    OPEN = "open"
    FULL = "full"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class ParticipantStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class PlayerLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class VenueStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"


class CourtStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


def enum_column(enum_cls: Type[Enum], name: str, **kwargs) -> Column:
    """Build a VARCHAR column that round-trips *enum_cls* by value."""
    return Column(
        SAEnum(enum_cls, name=name, native_enum=False, length=20,
               values_callable=lambda members: [m.value for m in members], ),
        **kwargs,
    )
