import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from qrlink_app.cache.background import schedule_cache_write
from qrlink_app.cache.strategies import CacheStrategy, NullCache, url_cache_key
from qrlink_app.repository.strategies import UrlRepository
from qrlink_app.services.clock import as_utc, utcnow

logger = logging.getLogger(__name__)


class ResolutionStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    GONE = "gone"  # existed, but expired


@dataclass(frozen=True)
class Resolution:
    status: ResolutionStatus
    long_url: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status is ResolutionStatus.FOUND


class ResolutionService:
    """
    Resolves short codes with the cache-aside pattern and records clicks.

    Known staleness trade-off: a cache hit is returned without looking at
    expires_at. Expiry is only enforced on a cache miss, so an expired link
    that is still cached keeps resolving until its cache entry is evicted.
    Expired links are never written to the cache.
    """

    def __init__(
        self,
        repository: UrlRepository,
        cache: Optional[CacheStrategy] = None,
        cache_ttl: int = 3600,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.cache = cache if cache is not None else NullCache()
        self.cache_ttl = cache_ttl
        self.clock = clock

    async def resolve(self, short_code: str) -> Resolution:
        """
        Flow:
        1. Check cache first, a hit is returned as-is
        2. On a miss, load the record from the repository
        3. Expired records are GONE and are not cached
        4. Otherwise warm the cache in the background and return the URL
        """
        cache_key = url_cache_key(short_code)

        cached_url = await self.cache.get(cache_key)
        if cached_url:
            return Resolution(ResolutionStatus.FOUND, cached_url)

        record = self.repository.find_by_code(short_code)
        if record is None:
            return Resolution(ResolutionStatus.NOT_FOUND)

        expires_at = as_utc(record.expires_at)
        if expires_at is not None and expires_at < self.clock():
            logger.debug("Short code %s expired at %s", short_code, expires_at.isoformat())
            return Resolution(ResolutionStatus.GONE)

        schedule_cache_write(self.cache, cache_key, record.long_url, self.cache_ttl)
        return Resolution(ResolutionStatus.FOUND, record.long_url)

    async def record_hit(self, short_code: str) -> None:
        """Increment the click counter; unknown or expired codes are not an error"""
        self.repository.increment_click(short_code)
