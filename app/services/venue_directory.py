"""
Venue directory.

Read-side lookup of venues with their courts and decoded operating
hours.  Venue hours change rarely, so snapshots are cached in Redis for
``VENUE_CACHE_TTL_SECONDS``.  Redis is optional: with no ``REDIS_URL``,
or when Redis is unreachable, every lookup reads the database.

Only reads go through the cache.  Session writes use :meth:`load_venue`,
which always reads (and can lock) the authoritative venue row.
"""

import logging
import uuid
from typing import Optional

from pydantic import ValidationError
from redis import Redis, RedisError
from sqlmodel import Session

from app.core.config import settings
from app.core.exceptions import VenueNotFound
from app.db.repositories.venue import VenueRepository
from app.scheduling.hours import decode_operating_ranges
from app.schemas.venue import CourtResponse, VenueResponse

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "venue:"

# Shared client (created on first use)
_redis_client: Optional[Redis] = None


def get_redis_client() -> Optional[Redis]:
    """Return the shared Redis client, or ``None`` when caching is disabled."""
    global _redis_client

    if _redis_client is not None:
        return _redis_client
    if not settings.REDIS_URL:
        return None

    _redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True, socket_connect_timeout=2,
                                   socket_timeout=2, )
    logger.info("Venue cache enabled")
    return _redis_client


class VenueDirectory:
    """Cached venue lookups."""

    def __init__(self, session: Session, cache: Optional[Redis] = None, ttl_seconds: Optional[int] = None):
        self.repository = VenueRepository(session)
        self.cache = cache if cache is not None else get_redis_client()
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.VENUE_CACHE_TTL_SECONDS

    def get_venue(self, venue_id: uuid.UUID) -> VenueResponse:
        """Venue snapshot by id.

        Raises :class:`VenueNotFound` when the venue does not exist and
        :class:`InvalidVenue` when its stored hours are malformed.
        """
        cached = self._get_cached(venue_id)
        if cached is not None:
            return cached

        snapshot = self.load_venue(venue_id)
        self._set_cached(snapshot)
        return snapshot

    def load_venue(self, venue_id: uuid.UUID, for_update: bool = False) -> VenueResponse:
        """Venue snapshot read from the database, bypassing the cache.

        With *for_update* the venue row stays locked until the caller's
        transaction ends.
        """
        venue = self.repository.get_by_id(venue_id, for_update=for_update)
        if not venue:
            raise VenueNotFound(f"Venue {venue_id} not found")

        courts = self.repository.get_courts(venue_id)
        return VenueResponse(id=venue.id, name=venue.name, description=venue.description, address=venue.address,
                             location=venue.location, status=venue.status,
                             operating_ranges=decode_operating_ranges(venue.open_range),
                             courts=[CourtResponse(id=c.id, name=c.name, price_per_hour=c.price_per_hour,
                                                   status=c.status, ) for c in courts], )

    def invalidate(self, venue_id: uuid.UUID) -> None:
        if self.cache is None:
            return
        try:
            self.cache.delete(self._key(venue_id))
        except RedisError as e:
            logger.warning(f"Error invalidating venue {venue_id} in Redis: {e}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _key(venue_id: uuid.UUID) -> str:
        return f"{CACHE_KEY_PREFIX}{venue_id}"

    def _get_cached(self, venue_id: uuid.UUID) -> Optional[VenueResponse]:
        if self.cache is None:
            return None
        try:
            raw = self.cache.get(self._key(venue_id))
        except RedisError as e:
            logger.warning(f"Error reading venue {venue_id} from Redis: {e}")
            return None
        if raw is None:
            return None
        try:
            return VenueResponse.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable cache entry for venue {venue_id}: {e}")
            self.invalidate(venue_id)
            return None

    def _set_cached(self, snapshot: VenueResponse) -> None:
        if self.cache is None:
            return
        try:
            self.cache.setex(self._key(snapshot.id), self.ttl_seconds, snapshot.model_dump_json())
        except RedisError as e:
            logger.warning(f"Error caching venue {snapshot.id} in Redis: {e}")
