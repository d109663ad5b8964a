"""Shared fixtures.

Settings are read at import time, so the required environment is seeded
before anything under ``app`` is imported.  Service tests run against an
in-memory SQLite database shared through a ``StaticPool``.
"""

import datetime
import os

os.environ.setdefault("DATABASE_PASSWORD", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.db.base  # noqa: F401
from app.db.repositories.user import UserRepository
from app.db.repositories.venue import VenueRepository
from app.models.enums import PlayerLevel, VenueStatus
from app.models.user import User
from app.models.venue import Court, Venue
from app.scheduling.hours import WEEKDAYS
from app.schemas.play_session import SessionCreate
from app.services.session_service import SessionService

# Monday morning; DEFAULT_DATE is the following Monday
NOW = datetime.datetime(2026, 3, 2, 10, 0)
DEFAULT_DATE = datetime.date(2026, 3, 9)


class FakeClock:
    """Deterministic stand-in for ``datetime.datetime.now``."""

    def __init__(self, now: datetime.datetime = NOW):
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs) -> datetime.datetime:
        self.now += datetime.timedelta(**kwargs)
        return self.now

    def set(self, now: datetime.datetime) -> None:
        self.now = now


class InMemoryCache:
    """Just enough of the Redis client API for the venue directory."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl

    def delete(self, key):
        self.store.pop(key, None)


def every_day(open_time: str = "08:00", close_time: str = "22:00") -> list[dict]:
    return [{"day": day, "is_open": True, "open_time": open_time, "close_time": close_time} for day in WEEKDAYS]


# ======================================================================
# Database
# ======================================================================


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool, )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


# ======================================================================
# Seed data
# ======================================================================


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(first_name: str = "Player", last_name: str = "") -> User:
        counter["n"] += 1
        user = User(email=f"{first_name.lower()}{counter['n']}@example.com", first_name=first_name,
                    last_name=last_name, play_level=PlayerLevel.INTERMEDIATE, )
        return UserRepository(db).create(user)

    return _make


@pytest.fixture
def host(make_user) -> User:
    return make_user("Hannah", "Host")


@pytest.fixture
def make_venue(db):
    def _make(open_range: list | None = None, status: VenueStatus = VenueStatus.ACTIVE, name: str = "Riverside Club",
              location: str = "Downtown", court_names: tuple[str, ...] = ("Court 1", "Court 2"), ) -> Venue:
        repo = VenueRepository(db)
        venue = repo.create(Venue(name=name, address="1 River Road", location=location, status=status,
                                  open_range=every_day() if open_range is None else open_range, ))
        for court_name in court_names:
            repo.add_court(Court(venue_id=venue.id, name=court_name, price_per_hour=20.0))
        return venue

    return _make


@pytest.fixture
def venue(make_venue) -> Venue:
    return make_venue()


@pytest.fixture
def courts(db, venue) -> list[Court]:
    return VenueRepository(db).get_courts(venue.id)


# ======================================================================
# Service
# ======================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def venue_cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def service(db, clock) -> SessionService:
    return SessionService(db, clock=clock)


@pytest.fixture
def session_payload(venue, courts):
    """Build a valid ``SessionCreate``; keyword overrides replace defaults."""

    def _make(**overrides) -> SessionCreate:
        data = {
            "venue_id": venue.id,
            "court_ids": [courts[0].id],
            "title": "Friday doubles",
            "session_date": DEFAULT_DATE,
            "start_time": datetime.time(18, 0),
            "end_time": datetime.time(20, 0),
            "player_level": PlayerLevel.INTERMEDIATE,
            "max_participants": 4,
            "cost_per_person": 5.0,
            "allow_cancellation": True,
        }
        data.update(overrides)
        return SessionCreate(**data)

    return _make
