"""
FastAPI dependencies for dependency injection.

This is the only module that reads settings: it builds the cache, QR client
and code generator once, and hands plain values to the services.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from qrlink_app.cache.factory import CacheFactory, CacheBackend
from qrlink_app.cache.strategies import CacheStrategy
from qrlink_app.config import settings
from qrlink_app.database.connection import get_db
from qrlink_app.qr.client import QrClient
from qrlink_app.repository.strategies import SQLAlchemyUrlRepository, UrlRepository
from qrlink_app.services.code_generator import CodeGenerator
from qrlink_app.services.resolution_service import ResolutionService
from qrlink_app.services.shortening_service import ShorteningService


@lru_cache()
def get_cache() -> CacheStrategy:
    """
    Get cache instance (singleton).

    Returns:
        CacheStrategy instance based on settings
    """
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend, redis_url=settings.redis_url)


@lru_cache()
def get_qr_client() -> QrClient:
    """QR client configured once from settings (disabled when qr_service_url is unset)"""
    return QrClient(base_url=settings.qr_service_url, timeout=settings.qr_timeout_seconds)


@lru_cache()
def get_code_generator() -> CodeGenerator:
    return CodeGenerator()


def get_public_base_url() -> str:
    return settings.public_base_url


def get_repository(db: Session = Depends(get_db)) -> UrlRepository:
    return SQLAlchemyUrlRepository(db)


def get_shortening_service(
    repository: UrlRepository = Depends(get_repository),
    qr_client: QrClient = Depends(get_qr_client),
    cache: CacheStrategy = Depends(get_cache),
    code_generator: CodeGenerator = Depends(get_code_generator),
) -> ShorteningService:
    return ShorteningService(
        repository=repository,
        qr_client=qr_client,
        cache=cache,
        code_generator=code_generator,
        code_length=settings.short_code_length,
        max_attempts=settings.max_create_attempts,
        cache_ttl=settings.cache_ttl,
    )


def get_resolution_service(
    repository: UrlRepository = Depends(get_repository),
    cache: CacheStrategy = Depends(get_cache),
) -> ResolutionService:
    return ResolutionService(repository=repository, cache=cache, cache_ttl=settings.cache_ttl)
