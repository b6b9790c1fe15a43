"""
Tests for ResolutionService: cache-aside lookups, expiry and click recording.
"""
import asyncio
from datetime import datetime, timedelta, timezone

from qrlink_app.cache.background import drain_pending_writes
from qrlink_app.schemas.link import ShortLinkRecord
from qrlink_app.services.resolution_service import Resolution, ResolutionService, ResolutionStatus
from qrlink_app.services.shortening_service import ShorteningService

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def resolve(service, code):
    """Run service.resolve and wait for its background cache write"""
    async def scenario():
        resolution = await service.resolve(code)
        await drain_pending_writes()
        return resolution
    return asyncio.run(scenario())


def store(repository, code, long_url="https://example.com/target", expires_at=None):
    return repository.create(ShortLinkRecord(short_code=code, long_url=long_url, expires_at=expires_at))


class TestResolve:

    def test_round_trip_after_create(self, memory_repository, fake_qr, memory_cache):
        shortener = ShorteningService(memory_repository, fake_qr, cache=memory_cache)
        resolver = ResolutionService(memory_repository, cache=memory_cache)

        async def scenario():
            record = await shortener.create(long_url="https://example.com/a/b")
            await drain_pending_writes()
            return await resolver.resolve(record.short_code)

        assert asyncio.run(scenario()) == Resolution(ResolutionStatus.FOUND, "https://example.com/a/b")

    def test_round_trip_without_cache(self, memory_repository, fake_qr):
        shortener = ShorteningService(memory_repository, fake_qr)
        resolver = ResolutionService(memory_repository)

        record = asyncio.run(shortener.create(long_url="https://example.com/a/b"))

        assert resolve(resolver, record.short_code).long_url == "https://example.com/a/b"

    def test_unknown_code(self, memory_repository, memory_cache):
        service = ResolutionService(memory_repository, cache=memory_cache)

        resolution = resolve(service, "nope123")

        assert resolution.status is ResolutionStatus.NOT_FOUND
        assert resolution.long_url is None
        assert "url:nope123" not in memory_cache

    def test_cache_miss_populates_cache(self, memory_repository, memory_cache):
        store(memory_repository, "abc2345")
        service = ResolutionService(memory_repository, cache=memory_cache, clock=lambda: NOW)

        resolution = resolve(service, "abc2345")

        assert resolution.found
        assert asyncio.run(memory_cache.get("url:abc2345")) == "https://example.com/target"

    def test_cache_hit_skips_repository(self, memory_repository, memory_cache):
        asyncio.run(memory_cache.set("url:cached1", "https://cached.example.com"))
        service = ResolutionService(memory_repository, cache=memory_cache)

        resolution = resolve(service, "cached1")

        assert resolution == Resolution(ResolutionStatus.FOUND, "https://cached.example.com")

    def test_not_yet_expired(self, memory_repository):
        store(memory_repository, "future1", expires_at=NOW + timedelta(seconds=1))
        service = ResolutionService(memory_repository, clock=lambda: NOW)

        assert resolve(service, "future1").found

    def test_expiring_exactly_now_still_resolves(self, memory_repository):
        store(memory_repository, "edge123", expires_at=NOW)
        service = ResolutionService(memory_repository, clock=lambda: NOW)

        assert resolve(service, "edge123").found

    def test_cache_unavailable_falls_through(self, memory_repository, exploding_cache):
        store(memory_repository, "abc2345")
        service = ResolutionService(memory_repository, cache=exploding_cache, clock=lambda: NOW)

        resolution = resolve(service, "abc2345")

        assert resolution.long_url == "https://example.com/target"
        assert exploding_cache.set_calls == 1


class TestExpiryAndCaching:
    """Expiry is enforced on cache misses only, cached entries stay valid"""

    def test_expired_on_cache_miss_is_gone(self, memory_repository, memory_cache):
        store(memory_repository, "old1234", expires_at=NOW - timedelta(minutes=1))
        service = ResolutionService(memory_repository, cache=memory_cache, clock=lambda: NOW)

        resolution = resolve(service, "old1234")

        assert resolution.status is ResolutionStatus.GONE
        assert resolution.long_url is None
        # Expired links are never cached
        assert "url:old1234" not in memory_cache

    def test_expired_but_cached_still_resolves(self, memory_repository, memory_cache):
        expires = NOW + timedelta(minutes=5)
        store(memory_repository, "old1234", expires_at=expires)
        service = ResolutionService(memory_repository, cache=memory_cache, clock=lambda: NOW)
        assert resolve(service, "old1234").found

        later = ResolutionService(
            memory_repository, cache=memory_cache, clock=lambda: expires + timedelta(days=1)
        )
        resolution = resolve(later, "old1234")

        assert resolution == Resolution(ResolutionStatus.FOUND, "https://example.com/target")

    def test_naive_expiry_from_storage_is_utc(self, memory_repository):
        store(memory_repository, "naive12", expires_at=datetime(2026, 6, 1, 11, 0))
        service = ResolutionService(memory_repository, clock=lambda: NOW)

        assert resolve(service, "naive12").status is ResolutionStatus.GONE


class TestRecordHit:

    def test_increments_counter(self, memory_repository):
        store(memory_repository, "abc2345")
        service = ResolutionService(memory_repository)

        asyncio.run(service.record_hit("abc2345"))
        asyncio.run(service.record_hit("abc2345"))

        assert memory_repository.find_by_code("abc2345").click_count == 2

    def test_unknown_code_is_not_an_error(self, memory_repository):
        service = ResolutionService(memory_repository)

        asyncio.run(service.record_hit("ghost12"))

        assert memory_repository.find_by_code("ghost12") is None
        assert len(memory_repository) == 0

    def test_expired_code_still_counts(self, memory_repository):
        store(memory_repository, "old1234", expires_at=NOW - timedelta(days=1))
        service = ResolutionService(memory_repository, clock=lambda: NOW)

        asyncio.run(service.record_hit("old1234"))

        assert memory_repository.find_by_code("old1234").click_count == 1
