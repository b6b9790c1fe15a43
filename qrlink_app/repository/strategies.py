"""
Short link repositories using Strategy Pattern.
Allows switching between the SQLAlchemy store and an in-process store.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from qrlink_app.models.short_link import ShortLink
from qrlink_app.schemas.link import ShortLinkRecord
from .exceptions import RepositoryError, DuplicateShortCodeError

logger = logging.getLogger(__name__)


class UrlRepository(ABC):
    """
    Durable store of short link records.

    Records are created once and never rewritten, except for the click
    counter. Uniqueness of short_code is enforced here, not by callers.
    """

    @abstractmethod
    def create(self, record: ShortLinkRecord) -> ShortLinkRecord:
        """
        Persist a new record.

        Returns:
            The stored record (with storage-assigned fields filled in)

        Raises:
            DuplicateShortCodeError: short_code is already taken
            RepositoryError: any other persistence fault
        """
        pass

    @abstractmethod
    def find_by_code(self, short_code: str) -> Optional[ShortLinkRecord]:
        """Return the record for short_code, or None"""
        pass

    @abstractmethod
    def increment_click(self, short_code: str) -> None:
        """Add one to the click counter; no-op for unknown codes"""
        pass


class SQLAlchemyUrlRepository(UrlRepository):
    """Repository backed by the SQLAlchemy session of the current request"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, record: ShortLinkRecord) -> ShortLinkRecord:
        row = ShortLink(
            short_code=record.short_code,
            long_url=record.long_url,
            alias=record.alias,
            expires_at=record.expires_at,
            content_type=record.content_type.value,
            qr_status=record.qr_status.value,
            qr_url=record.qr_url,
            qr_config=record.qr_config,
            click_count=record.click_count,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            # short_code is the only unique column, but NOT NULL violations
            # are IntegrityErrors too, so confirm before reporting a duplicate
            if self.find_by_code(record.short_code) is not None:
                raise DuplicateShortCodeError(record.short_code) from e
            raise RepositoryError(f"could not store short link: {e}") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"could not store short link: {e}") from e

        self.db.refresh(row)
        return ShortLinkRecord.model_validate(row)

    def find_by_code(self, short_code: str) -> Optional[ShortLinkRecord]:
        try:
            row = self.db.query(ShortLink).filter(ShortLink.short_code == short_code).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"could not load short link: {e}") from e
        return ShortLinkRecord.model_validate(row) if row else None

    def increment_click(self, short_code: str) -> None:
        try:
            # Single UPDATE, so concurrent hits never lose increments
            self.db.execute(
                update(ShortLink)
                .where(ShortLink.short_code == short_code)
                .values(click_count=ShortLink.click_count + 1)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"could not record click: {e}") from e


class InMemoryUrlRepository(UrlRepository):
    """
    In-memory repository using a Python dict.

    Used for development and tests. Not shared between processes and lost on
    restart.
    """

    def __init__(self):
        self._records: Dict[str, ShortLinkRecord] = {}

    def create(self, record: ShortLinkRecord) -> ShortLinkRecord:
        if record.short_code in self._records:
            raise DuplicateShortCodeError(record.short_code)
        self._records[record.short_code] = record.model_copy()
        return record.model_copy()

    def find_by_code(self, short_code: str) -> Optional[ShortLinkRecord]:
        record = self._records.get(short_code)
        return record.model_copy() if record else None

    def increment_click(self, short_code: str) -> None:
        record = self._records.get(short_code)
        if record is None:
            logger.debug("Click for unknown short code %s ignored", short_code)
            return
        self._records[short_code] = record.model_copy(update={"click_count": record.click_count + 1})

    def __len__(self) -> int:
        return len(self._records)
