"""
Test configuration and fixtures for the QR link shortener.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from main import app
from qrlink_app.cache.strategies import CacheStrategy, InMemoryCache
from qrlink_app.database.connection import Base, get_db
from qrlink_app.dependencies import get_cache, get_qr_client
from qrlink_app.qr.client import QrClient, QrRenderResult
from qrlink_app.repository.exceptions import DuplicateShortCodeError, RepositoryError
from qrlink_app.repository.strategies import InMemoryUrlRepository

# Test database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeQrClient:
    """Records render calls and returns a fixed result"""

    def __init__(self, result: QrRenderResult = None):
        self.result = result or QrRenderResult.failed()
        self.calls = []

    async def render(self, content_type, content, customization=None):
        self.calls.append((content_type, content, customization))
        return self.result


class CollidingRepository(InMemoryUrlRepository):
    """Reports a uniqueness violation for the first `collisions` creates"""

    def __init__(self, collisions: int):
        super().__init__()
        self.collisions = collisions
        self.create_calls = 0

    def create(self, record):
        self.create_calls += 1
        if self.create_calls <= self.collisions:
            raise DuplicateShortCodeError(record.short_code)
        return super().create(record)


class BrokenRepository(InMemoryUrlRepository):
    """Every create fails with a non-uniqueness persistence fault"""

    def __init__(self):
        super().__init__()
        self.create_calls = 0

    def create(self, record):
        self.create_calls += 1
        raise RepositoryError("database is unavailable")


class ExplodingCache(CacheStrategy):
    """Cache whose writes blow up, to check they never reach callers"""

    def __init__(self):
        self.set_calls = 0

    async def get(self, key):
        return None

    async def set(self, key, value, ttl=3600):
        self.set_calls += 1
        raise ConnectionError("cache is down")


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def memory_repository():
    return InMemoryUrlRepository()


@pytest.fixture
def memory_cache():
    return InMemoryCache()


@pytest.fixture
def fake_qr():
    return FakeQrClient()


@pytest.fixture
def ready_qr():
    return FakeQrClient(QrRenderResult.ready("https://qr.example.com/img/abc.png"))


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database, cache and QR client overridden.
    QR rendering is disabled, the cache is a fresh in-memory one.
    """
    def override_get_db():
        yield db_session

    cache = InMemoryCache()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_qr_client] = lambda: QrClient(base_url=None)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def colliding_repository():
    """Factory: colliding_repository(n) collides on the first n creates"""
    return CollidingRepository


@pytest.fixture
def broken_repository():
    return BrokenRepository()


@pytest.fixture
def exploding_cache():
    return ExplodingCache()
