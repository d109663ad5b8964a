"""Tests for cached venue lookups."""

import datetime
import uuid

import pytest
from redis import ConnectionError as RedisConnectionError

from app.core.exceptions import InvalidVenue, VenueNotFound
from app.db.repositories.venue import VenueRepository
from app.models.enums import VenueStatus
from app.services.venue_directory import VenueDirectory


class UnreachableCache:
    def get(self, key):
        raise RedisConnectionError("connection refused")

    def setex(self, key, ttl, value):
        raise RedisConnectionError("connection refused")

    def delete(self, key):
        raise RedisConnectionError("connection refused")


class TestVenueDirectory:
    def test_snapshot_has_courts_and_hours(self, db, venue):
        snapshot = VenueDirectory(db).get_venue(venue.id)
        assert snapshot.name == venue.name
        assert snapshot.status == VenueStatus.ACTIVE
        assert [c.name for c in snapshot.courts] == ["Court 1", "Court 2"]
        assert len(snapshot.operating_ranges) == 7
        assert snapshot.operating_ranges[0].open_time == datetime.time(8, 0)

    def test_unknown_venue(self, db):
        with pytest.raises(VenueNotFound):
            VenueDirectory(db).get_venue(uuid.uuid4())

    def test_malformed_hours(self, db, make_venue):
        broken = make_venue(open_range=[{"day": "someday", "open_time": "08:00", "close_time": "22:00"}])
        with pytest.raises(InvalidVenue):
            VenueDirectory(db).get_venue(broken.id)

    def test_snapshot_is_cached_with_ttl(self, db, venue, venue_cache):
        directory = VenueDirectory(db, cache=venue_cache, ttl_seconds=30)
        directory.get_venue(venue.id)
        assert venue_cache.ttls == {f"venue:{venue.id}": 30}

    def test_cached_snapshot_is_served_until_invalidated(self, db, venue, venue_cache):
        directory = VenueDirectory(db, cache=venue_cache)
        directory.get_venue(venue.id)

        venue.name = "Renamed Club"
        VenueRepository(db).create(venue)
        assert directory.get_venue(venue.id).name == "Riverside Club"

        directory.invalidate(venue.id)
        assert directory.get_venue(venue.id).name == "Renamed Club"

    def test_load_venue_skips_the_cache(self, db, venue, venue_cache):
        directory = VenueDirectory(db, cache=venue_cache)
        directory.get_venue(venue.id)

        venue.status = VenueStatus.INACTIVE
        VenueRepository(db).create(venue)
        assert directory.load_venue(venue.id).status == VenueStatus.INACTIVE
        assert directory.get_venue(venue.id).status == VenueStatus.ACTIVE

    @pytest.mark.parametrize("raw", ["{not json", '{"id": "not-a-uuid"}'])
    def test_unreadable_cache_entry_falls_back_to_database(self, db, venue, venue_cache, raw):
        key = f"venue:{venue.id}"
        venue_cache.store[key] = raw

        snapshot = VenueDirectory(db, cache=venue_cache).get_venue(venue.id)
        assert snapshot.name == venue.name
        assert venue_cache.store[key] != raw

    def test_unreachable_cache_falls_back_to_database(self, db, venue):
        directory = VenueDirectory(db, cache=UnreachableCache())
        assert directory.get_venue(venue.id).id == venue.id
        directory.invalidate(venue.id)
