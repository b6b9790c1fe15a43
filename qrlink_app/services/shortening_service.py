import logging
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, List, Mapping, Optional, Union
from urllib.parse import urlsplit

import pydantic

from qrlink_app.cache.background import schedule_cache_write
from qrlink_app.cache.strategies import CacheStrategy, url_cache_key
from qrlink_app.qr.client import QrClient, QrRenderResult
from qrlink_app.qr.content import ContentType, QrContent, QrCustomization, UrlContent, build_content
from qrlink_app.repository.exceptions import DuplicateShortCodeError, RepositoryError
from qrlink_app.repository.strategies import UrlRepository
from qrlink_app.schemas.link import ShortLinkRecord
from qrlink_app.services.clock import as_utc
from qrlink_app.services.code_generator import CodeGenerator
from qrlink_app.services.exceptions import ConflictError, RetriesExhaustedError, ValidationError

logger = logging.getLogger(__name__)

ALIAS_MAX_LENGTH = 64
ALIAS_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
# Top-level paths served by the app itself, an alias there could never redirect
RESERVED_ALIASES = frozenset({"api", "docs", "redoc", "health"})


class AttemptOutcome(Enum):
    CREATED = "created"
    COLLISION = "collision"
    FAULT = "fault"


@dataclass(frozen=True)
class Attempt:
    """Result of one code-render-persist round"""
    number: int
    short_code: str
    outcome: AttemptOutcome
    record: Optional[ShortLinkRecord] = None
    error: Optional[Exception] = None


@dataclass(frozen=True)
class LinkDraft:
    """Everything about the new link except its short code and QR result"""
    long_url: str
    alias: Optional[str]
    expires_at: Optional[datetime]
    content_type: ContentType
    content: QrContent
    customization: Optional[QrCustomization]

    def to_record(self, short_code: str, qr: QrRenderResult) -> ShortLinkRecord:
        return ShortLinkRecord(
            short_code=short_code,
            long_url=self.long_url,
            alias=self.alias,
            expires_at=self.expires_at,
            content_type=self.content_type,
            qr_status=qr.status,
            qr_url=qr.qr_url,
            qr_config=self.customization.to_payload() if self.customization else None,
        )


def settle_attempts(attempts: List[Attempt], alias: Optional[str]) -> ShortLinkRecord:
    """
    Decide the outcome of a create call from its attempts.

    The last attempt is the deciding one: CREATED wins, FAULT is re-raised,
    and a trailing COLLISION is a conflict for aliases or exhaustion for
    generated codes.
    """
    last = attempts[-1]
    if last.outcome is AttemptOutcome.CREATED:
        return last.record
    if last.outcome is AttemptOutcome.FAULT:
        raise last.error
    if alias is not None:
        logger.info("Alias %r is already taken", alias)
        raise ConflictError(alias)
    logger.error(
        "Failed to generate a unique short code after %d attempts (last fault: %s)",
        len(attempts), last.error,
    )
    raise RetriesExhaustedError(len(attempts), last.error)


class ShorteningService:
    """
    Creates short links.

    For every attempt a code is chosen (the alias, or a fresh random code),
    the QR image is rendered and the record is persisted. A uniqueness
    violation on a generated code triggers another attempt with a new code;
    on an alias it ends the call with ConflictError. The QR outcome is
    stored as-is, so a QR backend outage only downgrades qr_status.
    """

    def __init__(
        self,
        repository: UrlRepository,
        qr_client: QrClient,
        cache: Optional[CacheStrategy] = None,
        code_generator: Optional[CodeGenerator] = None,
        code_length: int = 7,
        max_attempts: int = 3,
        cache_ttl: int = 3600,
    ):
        if code_length <= 0:
            raise ValueError("code_length must be positive")
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        self.repository = repository
        self.qr_client = qr_client
        self.cache = cache
        self.code_generator = code_generator or CodeGenerator()
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.cache_ttl = cache_ttl

    async def create(
        self,
        long_url: Optional[str],
        alias: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        content_type: Union[ContentType, str, None] = ContentType.URL,
        content_data: Optional[Mapping[str, Any]] = None,
        customization: Optional[QrCustomization] = None,
    ) -> ShortLinkRecord:
        """Create a short link and return the stored record

        Raises:
            ValidationError: long_url is missing/invalid, the alias is
                malformed or reserved, or the QR content lacks a required field
            ConflictError: the alias is already in use
            RetriesExhaustedError: every generated code collided
            RepositoryError: any other persistence fault
        """
        long_url = self._validate_long_url(long_url)
        content_type = self._parse_content_type(content_type)
        alias = self._normalize_alias(alias)

        draft = LinkDraft(
            long_url=long_url,
            alias=alias,
            expires_at=as_utc(expires_at),
            content_type=content_type,
            content=self._build_content(content_type, long_url, content_data),
            customization=customization,
        )

        attempts: List[Attempt] = []
        for number in range(1, self.max_attempts + 1):
            attempt = await self._attempt(number, draft)
            attempts.append(attempt)
            # Only a collision on a generated code is worth another round
            if attempt.outcome is not AttemptOutcome.COLLISION or alias is not None:
                break

        record = settle_attempts(attempts, alias)

        if self.cache is not None:
            schedule_cache_write(self.cache, url_cache_key(record.short_code), record.long_url, self.cache_ttl)
        return record

    async def _attempt(self, number: int, draft: LinkDraft) -> Attempt:
        short_code = draft.alias or self.code_generator.generate(self.code_length)

        # Rendered again on every attempt, results are never carried over
        qr = await self.qr_client.render(draft.content_type, draft.content, draft.customization)

        try:
            stored = self.repository.create(draft.to_record(short_code, qr))
        except DuplicateShortCodeError as e:
            if draft.alias is None:
                logger.warning(
                    "Short code collision on attempt %d/%d (%s)", number, self.max_attempts, short_code
                )
            return Attempt(number, short_code, AttemptOutcome.COLLISION, error=e)
        except RepositoryError as e:
            logger.error("Could not persist short link %s: %s", short_code, e)
            return Attempt(number, short_code, AttemptOutcome.FAULT, error=e)

        return Attempt(number, short_code, AttemptOutcome.CREATED, record=stored)

    @staticmethod
    def _validate_long_url(long_url: Optional[str]) -> str:
        if not isinstance(long_url, str) or not long_url.strip():
            raise ValidationError("long_url is required")
        try:
            parts = urlsplit(long_url)
            host = parts.hostname
        except ValueError:
            raise ValidationError("long_url is invalid")
        if not parts.scheme or not host:
            raise ValidationError("long_url is invalid")
        return long_url

    @staticmethod
    def _normalize_alias(alias: Optional[str]) -> Optional[str]:
        alias = alias.strip() if alias else None
        if not alias:
            return None
        if len(alias) > ALIAS_MAX_LENGTH:
            raise ValidationError(f"alias must be at most {ALIAS_MAX_LENGTH} characters")
        if not ALIAS_PATTERN.fullmatch(alias):
            raise ValidationError("alias may only contain letters, digits, '-' and '_'")
        if alias in RESERVED_ALIASES:
            raise ValidationError(f"alias is reserved: {alias}")
        return alias

    @staticmethod
    def _parse_content_type(content_type: Union[ContentType, str, None]) -> ContentType:
        if content_type is None:
            return ContentType.URL
        try:
            return ContentType(content_type)
        except ValueError:
            raise ValidationError(f"unknown content_type: {content_type!r}")

    @staticmethod
    def _build_content(
        content_type: ContentType,
        long_url: str,
        content_data: Optional[Mapping[str, Any]],
    ) -> QrContent:
        # For url links the long URL is authoritative, caller data is ignored
        if content_type is ContentType.URL:
            return UrlContent(url=long_url)
        try:
            return build_content(content_type, content_data)
        except pydantic.ValidationError as e:
            missing = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            raise ValidationError(
                f"qr_data for {content_type.value} content is missing or has invalid: {', '.join(missing)}"
            )

