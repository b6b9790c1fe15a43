"""
Repository module for short link records.
Implements Strategy Pattern for flexible persistence backends.
"""

from .strategies import UrlRepository, SQLAlchemyUrlRepository, InMemoryUrlRepository
from .exceptions import RepositoryError, DuplicateShortCodeError

__all__ = [
    "UrlRepository",
    "SQLAlchemyUrlRepository",
    "InMemoryUrlRepository",
    "RepositoryError",
    "DuplicateShortCodeError",
]
